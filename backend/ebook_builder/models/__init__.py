"""ORM model package: registers all models with Base.metadata."""

from ebook_builder.models.theme import Theme, THEME_DEFAULTS
from ebook_builder.models.ebook import Ebook
from ebook_builder.models.page import Page, PageTemplate

__all__ = [
    "Theme",
    "THEME_DEFAULTS",
    "Ebook",
    "Page",
    "PageTemplate",
]
