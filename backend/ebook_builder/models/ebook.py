from __future__ import annotations
"""Ebook ORM model: the document being authored."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ebook_builder.database import Base


class Ebook(Base):
    """An ebook: metadata, a theme, and an ordered list of pages."""

    __tablename__ = "ebooks"
    __table_args__ = {
        "mysql_charset": "utf8mb4",
        "mysql_collate": "utf8mb4_unicode_ci",
    }

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: uuid.uuid4().hex[:36],
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    theme_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("themes.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    theme = relationship("Theme", back_populates="ebooks", lazy="selectin")
    pages = relationship(
        "Page",
        back_populates="ebook",
        cascade="all, delete-orphan",
        order_by="Page.order",
        lazy="selectin",
    )
