from __future__ import annotations
"""Pydantic v2 schemas for Page model and its style overrides.

PageStyles is stored as JSON on the page in camelCase, the shape the
editor front-end reads and writes.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ebook_builder.models.page import PageTemplate


class _StyleModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HeadingAccent(_StyleModel):
    enabled: bool = False
    position: Literal["left", "right", "top", "bottom"] = "left"
    thickness: int = Field(4, ge=0, le=64)
    color: str | None = None


class ImageStyle(_StyleModel):
    border_enabled: bool = False
    border_width: int = Field(2, ge=0, le=64)
    border_color: str | None = None
    border_radius: int = Field(16, ge=0)
    shape: Literal["square", "rounded", "circle"] = "square"


class FooterStyle(_StyleModel):
    enabled: bool = False
    style: Literal["line", "double-line", "gradient", "none"] = "line"
    thickness: int = Field(1, ge=0, le=64)
    color: str | None = None
    margin: int = Field(40, ge=0)
    show_page_number: bool = False
    page_number_format: Literal["number", "page-x", "x-of-y"] = "number"
    page_number_color: str | None = None
    start_from: int = Field(1, ge=1)


class Branding(_StyleModel):
    enabled: bool = False
    type: Literal["logo", "text", "both"] = "text"
    text: str = ""
    logo_url: str = ""
    position: Literal["bottom-left", "bottom-right", "bottom-center"] = "bottom-left"
    font_size: int = Field(10, ge=1, le=200)
    color: str | None = None


class CoverSettings(_StyleModel):
    use_theme_colors: bool = True
    use_theme_fonts: bool = True
    custom_primary_color: str | None = None
    custom_accent_color: str | None = None
    custom_background_color: str | None = None
    custom_text_color: str | None = None
    custom_heading_font: str | None = None
    custom_body_font: str | None = None
    overlay_enabled: bool = True
    overlay_darkness: int = Field(50, ge=0, le=100)
    author_label: str | None = None
    author_name: str | None = None
    tag_line: str | None = None
    edition: str | None = None


class PageStyles(_StyleModel):
    """Per-page customization: heading accents, image frames, footer, branding, cover."""

    heading_accent: HeadingAccent | None = None
    image_style: ImageStyle | None = None
    footer: FooterStyle | None = None
    branding: Branding | None = None
    cover_settings: CoverSettings | None = None

    def to_storage(self) -> dict[str, Any]:
        """Serialize for the JSON column (camelCase, unset sections omitted)."""
        return self.model_dump(by_alias=True, exclude_none=True)


class PageCreate(BaseModel):
    """Schema for creating a page. All fields optional; defaults fill the rest."""

    title: str | None = Field(None, max_length=255)
    content: str | None = None
    template: PageTemplate | None = None


class PageUpdate(BaseModel):
    """Schema for updating a page's content, layout or styles."""

    title: str | None = Field(None, max_length=255)
    content: str | None = None
    template: PageTemplate | None = None
    image_url: str | None = Field(None, max_length=1024)
    custom_styles: PageStyles | None = None


class PageReorder(BaseModel):
    """Page IDs of one ebook in their desired order."""

    page_ids: list[str] = Field(..., min_length=1)


class PageRead(BaseModel):
    """Schema for reading a page."""

    id: str
    ebook_id: str
    order: int
    title: str
    content: str
    template: str
    image_url: str | None = None
    custom_styles: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
