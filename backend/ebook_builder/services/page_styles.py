"""Page style resolution: maps a page, its style overrides and the ebook theme
to the concrete CSS values and labels the preview renders.

Pure functions; no I/O. Missing override sections fall back to the theme.
"""

from __future__ import annotations

from typing import Any, Protocol

from pydantic import ValidationError

from ebook_builder.models.page import PageTemplate
from ebook_builder.schemas.page import (
    Branding,
    CoverSettings,
    FooterStyle,
    HeadingAccent,
    ImageStyle,
    PageStyles,
)

PLACEHOLDER_CONTENT = (
    "<h2>Your content here</h2><p>Start typing in the editor to see your content "
    "appear here. This is placeholder text to show the layout structure.</p>"
    "<p>Lorem ipsum dolor sit amet, consectetur adipiscing elit. Sed do eiusmod "
    "tempor incididunt ut labore et dolore magna aliqua.</p>"
)

# A4 at 96 dpi
PAGE_WIDTH_PX = 794
PAGE_HEIGHT_PX = 1123

COVER_TEXT_DEFAULTS = {
    "author_label": "Written by",
    "author_name": "Your Name Here",
    "tag_line": "EXCLUSIVE",
    "edition": "2024 EDITION",
}


class ThemeLike(Protocol):
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


def load_styles(raw: dict[str, Any] | None) -> PageStyles:
    """Parse a stored custom_styles document; invalid or empty yields no overrides."""
    if not raw:
        return PageStyles()
    try:
        return PageStyles.model_validate(raw)
    except ValidationError:
        return PageStyles()


def has_content(content: str | None) -> bool:
    return bool(content) and content != "<p></p>"


def format_page_number(
    footer: FooterStyle | None, page_index: int, total_pages: int,
) -> str | None:
    """Page number label per the footer's format, or None when hidden."""
    if footer is None or not footer.show_page_number:
        return None
    number = page_index + footer.start_from
    if footer.page_number_format == "page-x":
        return f"Page {number}"
    if footer.page_number_format == "x-of-y":
        return f"{number} of {total_pages + footer.start_from - 1}"
    return str(number)


def heading_accent_css(accent: HeadingAccent | None, theme: ThemeLike) -> dict[str, str]:
    """Border + padding declarations for an accent bar beside page headings."""
    if accent is None or not accent.enabled:
        return {}
    color = accent.color or theme.accent_color
    side = accent.position
    # Horizontal bars get wider padding than vertical ones
    gap = 12 if side in ("left", "right") else 8
    return {
        f"padding-{side}": f"{accent.thickness + gap}px",
        f"border-{side}": f"{accent.thickness}px solid {color}",
    }


def image_frame_css(image_style: ImageStyle | None, theme: ThemeLike) -> dict[str, str]:
    """Shape and border declarations for page images."""
    if image_style is None:
        return {}
    css: dict[str, str] = {}
    if image_style.shape == "circle":
        css["border-radius"] = "50%"
    elif image_style.shape == "rounded":
        css["border-radius"] = f"{image_style.border_radius or 16}px"
    else:
        css["border-radius"] = "0px"
    if image_style.border_enabled:
        color = image_style.border_color or theme.primary_color
        css["border"] = f"{image_style.border_width}px solid {color}"
    return css


def footer_lines(footer: FooterStyle | None, theme: ThemeLike) -> list[dict[str, Any]]:
    """Rule segments drawn above the footer margin, top to bottom."""
    if footer is None or not footer.enabled or footer.style == "none":
        return []
    color = footer.color or theme.accent_color
    if footer.style == "double-line":
        return [
            {"height": footer.thickness, "color": color, "opacity": 1.0},
            {"height": max(1, footer.thickness - 1), "color": color, "opacity": 0.5},
        ]
    if footer.style == "gradient":
        return [{
            "height": footer.thickness,
            "background": f"linear-gradient(to right, transparent, {color}, transparent)",
        }]
    return [{"height": footer.thickness, "color": color, "opacity": 1.0}]


def resolve_branding(branding: Branding | None, theme: ThemeLike) -> dict[str, Any] | None:
    if branding is None or not branding.enabled:
        return None
    show_logo = branding.type in ("logo", "both") and bool(branding.logo_url)
    show_text = branding.type in ("text", "both") and bool(branding.text)
    return {
        "position": branding.position,
        "font_size": branding.font_size,
        "color": branding.color or theme.secondary_color,
        "font_family": theme.body_font,
        "text": branding.text if show_text else None,
        "logo_url": branding.logo_url if show_logo else None,
    }


def resolve_cover_colors(theme: ThemeLike, cover: CoverSettings | None) -> dict[str, str]:
    """Cover palette: the theme's, or the custom overrides when theme colors are off."""
    cover = cover or CoverSettings()
    if cover.use_theme_colors:
        return {
            "primary_color": theme.primary_color,
            "accent_color": theme.accent_color,
            "background_color": theme.background_color,
            "text_color": theme.text_color,
            "secondary_color": theme.secondary_color,
        }
    return {
        "primary_color": cover.custom_primary_color or theme.primary_color,
        "accent_color": cover.custom_accent_color or theme.accent_color,
        "background_color": cover.custom_background_color or theme.background_color,
        "text_color": cover.custom_text_color or "#ffffff",
        "secondary_color": theme.secondary_color,
    }


def resolve_cover_fonts(theme: ThemeLike, cover: CoverSettings | None) -> dict[str, str]:
    cover = cover or CoverSettings()
    if cover.use_theme_fonts:
        return {"heading_font": theme.heading_font, "body_font": theme.body_font}
    return {
        "heading_font": cover.custom_heading_font or theme.heading_font,
        "body_font": cover.custom_body_font or theme.body_font,
    }


def overlay_opacity(cover: CoverSettings | None) -> float:
    """Image overlay opacity in [0, 1]; 0 when the overlay is disabled."""
    cover = cover or CoverSettings()
    if not cover.overlay_enabled:
        return 0.0
    return cover.overlay_darkness / 100


def cover_text(cover: CoverSettings | None) -> dict[str, str]:
    cover = cover or CoverSettings()
    return {
        key: getattr(cover, key) or default
        for key, default in COVER_TEXT_DEFAULTS.items()
    }


def _declarations(css: dict[str, str]) -> str:
    return "".join(f" {prop}: {value};" for prop, value in css.items())


def content_stylesheet(theme: ThemeLike, accent: HeadingAccent | None = None) -> str:
    """CSS for headings and paragraphs inside ``.preview-content``."""
    accent_css = _declarations(heading_accent_css(accent, theme))
    rules = []
    for tag, size, weight, line_height, margins in (
        ("h1", theme.h1_size, 700, 1.2, ("1.5em", "0.75em")),
        ("h2", theme.h2_size, 600, 1.3, ("1.25em", "0.5em")),
        ("h3", theme.h3_size, 600, 1.4, ("1em", "0.5em")),
    ):
        rules.append(
            f".preview-content {tag} {{ font-family: {theme.heading_font};"
            f" font-size: {size}; color: {theme.text_color}; font-weight: {weight};"
            f" line-height: {line_height}; margin-top: {margins[0]};"
            f" margin-bottom: {margins[1]};{accent_css} }}"
        )
    rules.append(
        f".preview-content p {{ font-family: {theme.body_font};"
        f" font-size: {theme.body_size}; color: {theme.text_color};"
        " line-height: 1.6; margin-bottom: 1em; }"
    )
    return "\n".join(rules)


def build_preview(
    *,
    title: str,
    content: str | None,
    template: str,
    image_url: str | None,
    custom_styles: dict[str, Any] | None,
    theme: ThemeLike,
    page_index: int,
    total_pages: int,
) -> dict[str, Any]:
    """Everything the preview needs to draw one page, resolved against the theme."""
    styles = load_styles(custom_styles)
    try:
        is_cover = PageTemplate(template).is_cover
    except ValueError:
        is_cover = False

    preview: dict[str, Any] = {
        "title": title,
        "template": template,
        "is_cover": is_cover,
        "content": content if has_content(content) else PLACEHOLDER_CONTENT,
        "has_image": image_url is not None,
        "image_url": image_url,
        "width": PAGE_WIDTH_PX,
        "height": PAGE_HEIGHT_PX,
        "background_color": theme.background_color,
        "text_color": theme.text_color,
        "stylesheet": content_stylesheet(theme, styles.heading_accent),
        "title_css": heading_accent_css(styles.heading_accent, theme),
        "image_css": image_frame_css(styles.image_style, theme),
        "footer": {
            "margin": styles.footer.margin if styles.footer else None,
            "lines": footer_lines(styles.footer, theme),
        },
        "page_number": format_page_number(styles.footer, page_index, total_pages),
        "page_number_color": (
            (styles.footer.page_number_color if styles.footer else None) or theme.text_color
        ),
        "branding": resolve_branding(styles.branding, theme),
    }
    if is_cover:
        preview["cover"] = {
            "colors": resolve_cover_colors(theme, styles.cover_settings),
            "fonts": resolve_cover_fonts(theme, styles.cover_settings),
            "overlay_opacity": overlay_opacity(styles.cover_settings),
            "text": cover_text(styles.cover_settings),
        }
    return preview
