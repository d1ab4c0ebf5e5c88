from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tocr.models.base import Base, utcnow


class TagType(str, Enum):
    GENERAL = "GENERAL"
    PERSON = "PERSON"
    EVENT = "EVENT"
    SERIES = "SERIES"
    COMPANY = "COMPANY"
    PLATFORM = "PLATFORM"


class Tag(Base):
    __tablename__ = "tags"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default=TagType.GENERAL.value)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
