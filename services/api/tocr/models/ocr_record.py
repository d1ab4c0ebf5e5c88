from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import JSON, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tocr.models.base import Base, utcnow


class OcrRecord(Base):
    __tablename__ = "ocr_records"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))

    issue_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("issues.id", ondelete="SET NULL"), index=True, nullable=True
    )

    # Single URL, or the JSON array string sent as "imageUrls"
    image_url: Mapped[str] = mapped_column(Text, nullable=False, default="")
    provider: Mapped[str] = mapped_column(String(20), nullable=False)
    raw_result: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    # "PENDING" | "COMPLETED" | "FAILED"
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="PENDING")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
