from __future__ import annotations
"""Pydantic v2 schemas for runtime system settings."""

from pydantic import BaseModel, Field


class SettingsUpdate(BaseModel):
    """Generation settings that can be changed without a restart. Unknown keys are ignored."""

    story_model: str | None = Field(None, min_length=1, max_length=100)
    image_model: str | None = Field(None, min_length=1, max_length=100)
    outline_temperature: float | None = Field(None, ge=0, le=2)
    content_temperature: float | None = Field(None, ge=0, le=2)
    use_mock_api: bool | None = None
