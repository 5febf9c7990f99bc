"""Section content generation: writes one outline section and persists it as a page."""

from __future__ import annotations

import html
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ebook_builder.config import get_settings
from ebook_builder.models.page import Page, PageTemplate
from ebook_builder.prompts.manager import PromptManager
from ebook_builder.services.llm_client import llm_call

logger = logging.getLogger(__name__)
settings = get_settings()


def choose_template(section_index: int) -> PageTemplate:
    """Layout for a generated section: cover first, an image page every 4th."""
    if section_index == 0:
        return PageTemplate.COVER_PAGE
    if section_index % 4 == 0:
        return PageTemplate.IMAGE_TOP
    return PageTemplate.TEXT_ONLY


async def generate_section_html(
    section_title: str,
    section_index: int,
    total_sections: int,
    description: str,
) -> str:
    """Ask the model for 250-400 words of HTML for one section."""
    if settings.USE_MOCK_API:
        return _mock_section_html(section_title, section_index, total_sections)

    user_prompt = (
        f"Ebook topic: {description}\n\n"
        f'Section {section_index + 1} of {total_sections}: "{section_title}"\n\n'
        "Write comprehensive content for this section."
    )
    return await llm_call(
        PromptManager.get_prompt("content"),
        user_prompt,
        temperature=settings.CONTENT_TEMPERATURE,
        caller=f"content#{section_index}",
    )


async def create_section_page(
    db: AsyncSession,
    *,
    ebook_id: str,
    section_title: str,
    section_index: int,
    total_sections: int,
    description: str,
) -> Page:
    """Generate a section and store it as the page at ``order = section_index``."""
    content = await generate_section_html(
        section_title, section_index, total_sections, description,
    )
    template = choose_template(section_index)

    page = Page(
        ebook_id=ebook_id,
        title=section_title,
        content=content,
        template=template.value,
        order=section_index,
    )
    db.add(page)
    await db.flush()
    await db.refresh(page)
    logger.info(
        "Created page %s for section %d/%d (%s)",
        page.id, section_index + 1, total_sections, template.value,
    )
    return page


def _mock_section_html(section_title: str, section_index: int, total_sections: int) -> str:
    title = html.escape(section_title)
    return (
        f"<h2>{title}</h2>"
        f"<p>This is section {section_index + 1} of {total_sections}. "
        "Placeholder content generated in mock mode.</p>"
        "<h3>Key Points</h3>"
        "<p>Replace this text with your own writing, or disable mock mode "
        "to let the model draft it.</p>"
    )
