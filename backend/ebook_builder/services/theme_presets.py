"""Built-in theme presets and the seeding/upsert logic around them."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ebook_builder.models.theme import Theme

logger = logging.getLogger(__name__)

DEFAULT_THEME_NAME = "Modern"


def _preset(
    name: str,
    colors: tuple[str, str, str, str, str],
    fonts: tuple[str, str],
    sizes: tuple[str, str, str, str],
) -> dict[str, Any]:
    primary, secondary, accent, background, text = colors
    heading_font, body_font = fonts
    h1, h2, h3, body = sizes
    return {
        "name": name,
        "primary_color": primary,
        "secondary_color": secondary,
        "accent_color": accent,
        "background_color": background,
        "text_color": text,
        "heading_font": heading_font,
        "body_font": body_font,
        "h1_size": h1,
        "h2_size": h2,
        "h3_size": h3,
        "body_size": body,
    }


# colors: primary, secondary, accent, background, text
THEME_PRESETS: list[dict[str, Any]] = [
    _preset("Modern", ("#0F172A", "#64748B", "#3B82F6", "#FFFFFF", "#1E293B"),
            ("Inter", "Inter"), ("2.5rem", "2rem", "1.5rem", "1rem")),
    _preset("Elegant", ("#1C1C1C", "#6B7280", "#D4AF37", "#FAFAFA", "#2D2D2D"),
            ("Playfair Display", "Lora"), ("3rem", "2.25rem", "1.75rem", "1.125rem")),
    _preset("Ocean Blue", ("#0C4A6E", "#0891B2", "#06B6D4", "#F0F9FF", "#164E63"),
            ("Montserrat", "Open Sans"), ("2.75rem", "2.125rem", "1.625rem", "1rem")),
    _preset("Sunset", ("#7C2D12", "#C2410C", "#F97316", "#FFF7ED", "#431407"),
            ("Poppins", "Roboto"), ("2.5rem", "2rem", "1.5rem", "1rem")),
    _preset("Forest Green", ("#14532D", "#16A34A", "#22C55E", "#F0FDF4", "#052E16"),
            ("Merriweather", "Source Sans Pro"), ("2.625rem", "2.125rem", "1.625rem", "1.0625rem")),
    _preset("Royal Purple", ("#581C87", "#7C3AED", "#A855F7", "#FAF5FF", "#3B0764"),
            ("Raleway", "Nunito"), ("2.75rem", "2.25rem", "1.75rem", "1.0625rem")),
    _preset("Minimalist", ("#000000", "#525252", "#737373", "#FFFFFF", "#171717"),
            ("Helvetica", "Arial"), ("3rem", "2.25rem", "1.5rem", "1rem")),
    _preset("Warm Beige", ("#78350F", "#92400E", "#B45309", "#FEF3C7", "#451A03"),
            ("Georgia", "Garamond"), ("2.875rem", "2.25rem", "1.75rem", "1.125rem")),
    # Dark themes
    _preset("Dark Modern", ("#60A5FA", "#94A3B8", "#3B82F6", "#0F172A", "#E2E8F0"),
            ("Inter", "Inter"), ("2.5rem", "2rem", "1.5rem", "1rem")),
    _preset("Dark Elegant", ("#F5D782", "#9CA3AF", "#D4AF37", "#1C1C1C", "#F5F5F5"),
            ("Playfair Display", "Lora"), ("3rem", "2.25rem", "1.75rem", "1.125rem")),
    _preset("Midnight Blue", ("#38BDF8", "#7DD3FC", "#0EA5E9", "#0C1222", "#CBD5E1"),
            ("Montserrat", "Open Sans"), ("2.75rem", "2.125rem", "1.625rem", "1rem")),
    _preset("Dark Purple", ("#C084FC", "#A78BFA", "#8B5CF6", "#1E1033", "#E9D5FF"),
            ("Raleway", "Nunito"), ("2.75rem", "2.25rem", "1.75rem", "1.0625rem")),
    _preset("Charcoal", ("#F9FAFB", "#D1D5DB", "#9CA3AF", "#18181B", "#E4E4E7"),
            ("Helvetica", "Arial"), ("3rem", "2.25rem", "1.5rem", "1rem")),
    _preset("Dark Forest", ("#4ADE80", "#86EFAC", "#22C55E", "#0A1F0D", "#DCFCE7"),
            ("Merriweather", "Source Sans Pro"), ("2.625rem", "2.125rem", "1.625rem", "1.0625rem")),
]

_PRESETS_BY_NAME = {p["name"]: p for p in THEME_PRESETS}


async def _upsert(db: AsyncSession, data: dict[str, Any], *, overwrite: bool) -> Theme:
    result = await db.execute(select(Theme).where(Theme.name == data["name"]))
    theme = result.scalars().first()
    if theme is None:
        theme = Theme(**data)
        db.add(theme)
    elif overwrite:
        for key, value in data.items():
            setattr(theme, key, value)
    return theme


async def seed_themes(db: AsyncSession) -> list[Theme]:
    """Insert every preset, restoring the defaults of presets that already exist."""
    themes = [await _upsert(db, data, overwrite=True) for data in THEME_PRESETS]
    await db.flush()
    logger.info("Seeded %d theme presets", len(themes))
    return themes


async def ensure_default_theme(db: AsyncSession) -> Theme:
    """Return the default preset, creating it if missing. Never overwrites user edits."""
    theme = await _upsert(db, _PRESETS_BY_NAME[DEFAULT_THEME_NAME], overwrite=False)
    await db.flush()
    return theme
