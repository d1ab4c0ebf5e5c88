from __future__ import annotations

from datetime import date, datetime
from uuid import uuid4

from sqlalchemy import Boolean, Date, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tocr.models.base import Base, utcnow


class Magazine(Base):
    __tablename__ = "magazines"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))

    # Soft identity for imports: ISSN when present, otherwise the exact name.
    name: Mapped[str] = mapped_column(String(300), index=True, nullable=False)
    name_en: Mapped[str | None] = mapped_column(String(300), nullable=True)
    publisher: Mapped[str | None] = mapped_column(String(300), nullable=True)
    issn: Mapped[str | None] = mapped_column(String(20), unique=True, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    cover_image: Mapped[str | None] = mapped_column(String(2000), nullable=True)

    founded_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    ended_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    issues = relationship(
        "Issue",
        back_populates="magazine",
        cascade="all, delete-orphan",
        order_by="Issue.publish_date",
    )
