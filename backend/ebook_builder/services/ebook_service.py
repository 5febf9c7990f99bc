"""Ebook and page persistence helpers shared by the CRUD and generation routes."""

from __future__ import annotations

import logging

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ebook_builder.models.ebook import Ebook
from ebook_builder.models.page import Page, PageTemplate
from ebook_builder.services.theme_presets import ensure_default_theme

logger = logging.getLogger(__name__)

DEFAULT_EBOOK_TITLE = "My Ebook"
DEFAULT_EBOOK_DESCRIPTION = "Created with Ebook AI Builder"
DEFAULT_COVER_CONTENT = (
    '<p>Start creating your amazing <span style="color: #EB5757">ebook</span></p>'
)


async def load_ebook(db: AsyncSession, ebook_id: str) -> Ebook | None:
    """Fetch an ebook with its theme and ordered pages."""
    result = await db.execute(select(Ebook).where(Ebook.id == ebook_id))
    return result.scalars().first()


async def get_or_create_current_ebook(db: AsyncSession) -> Ebook:
    """Return the working ebook, creating it (default theme + cover page) if none exists."""
    result = await db.execute(select(Ebook).order_by(Ebook.created_at).limit(1))
    ebook = result.scalars().first()
    if ebook:
        return ebook

    theme = await ensure_default_theme(db)
    ebook = Ebook(
        title=DEFAULT_EBOOK_TITLE,
        description=DEFAULT_EBOOK_DESCRIPTION,
        theme_id=theme.id,
    )
    db.add(ebook)
    await db.flush()
    db.add(Page(
        ebook_id=ebook.id,
        title="Cover Page",
        content=DEFAULT_COVER_CONTENT,
        template=PageTemplate.COVER_PAGE.value,
        order=0,
    ))
    await db.flush()
    logger.info("Created default ebook %s with theme %s", ebook.id, theme.name)

    # Reload server defaults and the eager theme/pages relationships
    await db.refresh(ebook)
    return ebook


async def next_page_order(db: AsyncSession, ebook_id: str) -> int:
    """Order value for a page appended at the end of an ebook."""
    result = await db.execute(
        select(func.max(Page.order)).where(Page.ebook_id == ebook_id)
    )
    last = result.scalar()
    return 0 if last is None else last + 1


async def delete_all_pages(db: AsyncSession, ebook_id: str) -> int:
    """Delete every page of an ebook. Returns the number removed."""
    result = await db.execute(delete(Page).where(Page.ebook_id == ebook_id))
    await db.flush()
    logger.info("Deleted %d page(s) of ebook %s", result.rowcount, ebook_id)
    return result.rowcount


async def reorder_pages(db: AsyncSession, ebook_id: str, page_ids: list[str]) -> list[Page]:
    """Assign ``order`` by position in ``page_ids`` and return the ordered pages."""
    for i, page_id in enumerate(page_ids):
        await db.execute(
            update(Page)
            .where(Page.id == page_id, Page.ebook_id == ebook_id)
            .values(order=i)
        )
    await db.flush()

    result = await db.execute(
        select(Page)
        .where(Page.ebook_id == ebook_id)
        .order_by(Page.order)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())
