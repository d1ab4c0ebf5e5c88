from __future__ import annotations

from datetime import date, datetime
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tocr.models.base import Base, utcnow


class Issue(Base):
    __tablename__ = "issues"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))

    magazine_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("magazines.id", ondelete="CASCADE"), index=True, nullable=False
    )

    issue_number: Mapped[str] = mapped_column(String(50), nullable=False)
    volume_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    title: Mapped[str | None] = mapped_column(String(300), nullable=True)
    publish_date: Mapped[date] = mapped_column(Date, nullable=False)

    cover_image: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    toc_images: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    page_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    price: Mapped[float | None] = mapped_column(Float, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    magazine = relationship("Magazine", back_populates="issues")
    articles = relationship(
        "Article",
        back_populates="issue",
        cascade="all, delete-orphan",
        order_by="Article.sort_order",
    )

    __table_args__ = (
        UniqueConstraint("magazine_id", "issue_number", name="uq_issues_magazine_issue_number"),
    )
