from __future__ import annotations
"""Pydantic v2 schemas for Ebook model."""

from datetime import datetime

from pydantic import BaseModel, Field

from ebook_builder.schemas.page import PageRead
from ebook_builder.schemas.theme import ThemeRead


class EbookUpdate(BaseModel):
    """Schema for updating an ebook's metadata."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None


class EbookThemeUpdate(BaseModel):
    """Schema for switching the theme of an ebook."""

    theme_id: str = Field(..., min_length=1)


class EbookRead(BaseModel):
    """Schema for reading an ebook with its theme and ordered pages."""

    id: str
    title: str
    description: str | None = None
    theme_id: str | None = None
    theme: ThemeRead | None = None
    pages: list[PageRead] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
