from __future__ import annotations
"""Wire schemas of the AI generation endpoints.

These travel as camelCase JSON (``ebookId``, ``sectionTitle`` ...), the
format the generation dialog and the orchestrator client speak.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ebook_builder.schemas.page import PageRead


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OutlineRequest(_WireModel):
    """Ask for an outline of section titles for one ebook."""

    description: str = Field(..., min_length=1)
    ebook_id: str = Field(..., min_length=1)


class OutlineResponse(_WireModel):
    outline: list[str]


class SectionContentRequest(_WireModel):
    """Ask for one section to be written and persisted as a page."""

    ebook_id: str = Field(..., min_length=1)
    section_title: str = Field(..., min_length=1)
    section_index: int = Field(..., ge=0)
    total_sections: int = Field(..., ge=1)
    description: str = ""


class SectionContentResponse(_WireModel):
    success: bool = True
    page: PageRead


class ImageRequest(_WireModel):
    prompt: str = Field(..., min_length=1)


class ImageResponse(_WireModel):
    image_url: str
