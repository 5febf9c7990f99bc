"""Pydantic v2 schemas package."""

from ebook_builder.schemas.theme import ThemeCreate, ThemeRead, ThemeUpdate
from ebook_builder.schemas.page import (
    PageCreate,
    PageRead,
    PageReorder,
    PageStyles,
    PageUpdate,
)
from ebook_builder.schemas.ebook import EbookRead, EbookThemeUpdate, EbookUpdate
from ebook_builder.schemas.system import SettingsUpdate
from ebook_builder.schemas.generation import (
    ImageRequest,
    ImageResponse,
    OutlineRequest,
    OutlineResponse,
    SectionContentRequest,
    SectionContentResponse,
)

__all__ = [
    "ThemeCreate",
    "ThemeRead",
    "ThemeUpdate",
    "PageCreate",
    "PageRead",
    "PageReorder",
    "PageStyles",
    "PageUpdate",
    "EbookRead",
    "EbookThemeUpdate",
    "EbookUpdate",
    "ImageRequest",
    "ImageResponse",
    "OutlineRequest",
    "OutlineResponse",
    "SectionContentRequest",
    "SectionContentResponse",
    "SettingsUpdate",
]
