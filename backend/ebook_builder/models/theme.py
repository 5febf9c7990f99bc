from __future__ import annotations
"""Theme ORM model: a named palette, font pairing and heading scale."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ebook_builder.database import Base

# Values used for any field a new theme leaves unset
THEME_DEFAULTS: dict[str, str] = {
    "primary_color": "#000000",
    "secondary_color": "#666666",
    "accent_color": "#0066ff",
    "background_color": "#ffffff",
    "text_color": "#000000",
    "heading_font": "Inter",
    "body_font": "Inter",
    "h1_size": "2.5rem",
    "h2_size": "2rem",
    "h3_size": "1.5rem",
    "body_size": "1rem",
}


class Theme(Base):
    """Visual theme shared by every page of an ebook."""

    __tablename__ = "themes"
    __table_args__ = {
        "mysql_charset": "utf8mb4",
        "mysql_collate": "utf8mb4_unicode_ci",
    }

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: uuid.uuid4().hex[:36],
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    # Colors
    primary_color: Mapped[str] = mapped_column(String(20), nullable=False, default=THEME_DEFAULTS["primary_color"])
    secondary_color: Mapped[str] = mapped_column(String(20), nullable=False, default=THEME_DEFAULTS["secondary_color"])
    accent_color: Mapped[str] = mapped_column(String(20), nullable=False, default=THEME_DEFAULTS["accent_color"])
    background_color: Mapped[str] = mapped_column(String(20), nullable=False, default=THEME_DEFAULTS["background_color"])
    text_color: Mapped[str] = mapped_column(String(20), nullable=False, default=THEME_DEFAULTS["text_color"])

    # Typography
    heading_font: Mapped[str] = mapped_column(String(100), nullable=False, default=THEME_DEFAULTS["heading_font"])
    body_font: Mapped[str] = mapped_column(String(100), nullable=False, default=THEME_DEFAULTS["body_font"])
    h1_size: Mapped[str] = mapped_column(String(20), nullable=False, default=THEME_DEFAULTS["h1_size"])
    h2_size: Mapped[str] = mapped_column(String(20), nullable=False, default=THEME_DEFAULTS["h2_size"])
    h3_size: Mapped[str] = mapped_column(String(20), nullable=False, default=THEME_DEFAULTS["h3_size"])
    body_size: Mapped[str] = mapped_column(String(20), nullable=False, default=THEME_DEFAULTS["body_size"])

    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now()
    )

    ebooks = relationship("Ebook", back_populates="theme")
