from __future__ import annotations
"""Page ORM model: one page of an ebook, rendered through a layout template."""

import enum
import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, ForeignKey, Integer, String, Text, func
from sqlalchemy.dialects.mysql import LONGTEXT
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ebook_builder.database import Base


class PageTemplate(str, enum.Enum):
    """Layout templates a page can be rendered with."""

    # Content pages
    TEXT_ONLY = "text-only"
    IMAGE_TOP = "image-top"
    IMAGE_BOTTOM = "image-bottom"
    TWO_COLUMN = "two-column"
    BLOG_POST = "blog-post"
    IMAGE_LEFT = "image-left"
    IMAGE_RIGHT = "image-right"
    IMAGE_CENTER = "image-center"
    FULL_IMAGE = "full-image"

    # Cover designs
    COVER_PAGE = "cover-page"
    COVER_BOLD = "cover-bold"
    COVER_MINIMAL = "cover-minimal"
    COVER_SPLIT = "cover-split"
    COVER_GRADIENT = "cover-gradient"
    COVER_AUTHOR = "cover-author"
    COVER_MAGAZINE = "cover-magazine"
    COVER_3D = "cover-3d"

    @property
    def is_cover(self) -> bool:
        return self.value.startswith("cover-")


DEFAULT_PAGE_TITLE = "New Page"
DEFAULT_PAGE_CONTENT = "<p>Start writing...</p>"


class Page(Base):
    """A single ebook page with HTML content and optional style overrides."""

    __tablename__ = "pages"
    __table_args__ = {
        "mysql_charset": "utf8mb4",
        "mysql_collate": "utf8mb4_unicode_ci",
    }

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: uuid.uuid4().hex[:36],
    )
    ebook_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("ebooks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    order: Mapped[int] = mapped_column("order", Integer, nullable=False, default=0)

    # Content fields
    title: Mapped[str] = mapped_column(String(255), nullable=False, default=DEFAULT_PAGE_TITLE)
    content: Mapped[str] = mapped_column(
        Text().with_variant(LONGTEXT, "mysql"),
        nullable=False,
        default=DEFAULT_PAGE_CONTENT,
    )
    template: Mapped[str] = mapped_column(
        String(50), nullable=False, default=PageTemplate.TEXT_ONLY.value
    )
    image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    custom_styles: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)

    # Timestamps
    created_at: Mapped[Optional[datetime]] = mapped_column(
        nullable=True, server_default=func.now()
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        nullable=True, server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    ebook = relationship("Ebook", back_populates="pages")
