from __future__ import annotations
"""Pydantic v2 schemas for Theme model."""

from datetime import datetime

from pydantic import BaseModel, Field


class ThemeCreate(BaseModel):
    """Schema for creating a theme. Unset fields fall back to THEME_DEFAULTS."""

    name: str = Field(..., min_length=1, max_length=100)
    primary_color: str | None = Field(None, max_length=20)
    secondary_color: str | None = Field(None, max_length=20)
    accent_color: str | None = Field(None, max_length=20)
    background_color: str | None = Field(None, max_length=20)
    text_color: str | None = Field(None, max_length=20)
    heading_font: str | None = Field(None, max_length=100)
    body_font: str | None = Field(None, max_length=100)
    h1_size: str | None = Field(None, max_length=20)
    h2_size: str | None = Field(None, max_length=20)
    h3_size: str | None = Field(None, max_length=20)
    body_size: str | None = Field(None, max_length=20)


class ThemeUpdate(BaseModel):
    """Schema for partially updating a theme."""

    name: str | None = Field(None, min_length=1, max_length=100)
    primary_color: str | None = Field(None, max_length=20)
    secondary_color: str | None = Field(None, max_length=20)
    accent_color: str | None = Field(None, max_length=20)
    background_color: str | None = Field(None, max_length=20)
    text_color: str | None = Field(None, max_length=20)
    heading_font: str | None = Field(None, max_length=100)
    body_font: str | None = Field(None, max_length=100)
    h1_size: str | None = Field(None, max_length=20)
    h2_size: str | None = Field(None, max_length=20)
    h3_size: str | None = Field(None, max_length=20)
    body_size: str | None = Field(None, max_length=20)


class ThemeRead(BaseModel):
    """Schema for reading a theme."""

    id: str
    name: str
    primary_color: str
    secondary_color: str
    accent_color: str
    background_color: str
    text_color: str
    heading_font: str
    body_font: str
    h1_size: str
    h2_size: str
    h3_size: str
    body_size: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
