from __future__ import annotations
"""Page management API endpoints."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ebook_builder.database import get_db
from ebook_builder.models.ebook import Ebook
from ebook_builder.models.page import (
    DEFAULT_PAGE_CONTENT,
    DEFAULT_PAGE_TITLE,
    Page,
    PageTemplate,
)
from ebook_builder.schemas.page import PageCreate, PageRead, PageReorder, PageUpdate
from ebook_builder.services import page_styles
from ebook_builder.services.ebook_service import (
    delete_all_pages,
    load_ebook,
    next_page_order,
    reorder_pages,
)

router = APIRouter()


async def _get_page(db: AsyncSession, ebook_id: str, page_id: str) -> Page:
    page = await db.get(Page, page_id)
    if not page or page.ebook_id != ebook_id:
        raise HTTPException(status_code=404, detail="Page not found")
    return page


@router.get("/", response_model=list[PageRead])
async def list_pages(ebook_id: str, db: AsyncSession = Depends(get_db)):
    """List all pages of an ebook, ordered."""
    result = await db.execute(
        select(Page).where(Page.ebook_id == ebook_id).order_by(Page.order)
    )
    return result.scalars().all()


@router.post("/", response_model=PageRead, status_code=201)
async def create_page(
    ebook_id: str,
    data: PageCreate | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Append a new page at the end of the ebook."""
    ebook = await db.get(Ebook, ebook_id)
    if not ebook:
        raise HTTPException(status_code=404, detail="Ebook not found")

    data = data or PageCreate()
    page = Page(
        ebook_id=ebook_id,
        order=await next_page_order(db, ebook_id),
        title=data.title or DEFAULT_PAGE_TITLE,
        content=data.content if data.content is not None else DEFAULT_PAGE_CONTENT,
        template=(data.template or PageTemplate.TEXT_ONLY).value,
    )
    db.add(page)
    await db.flush()
    await db.refresh(page)
    return page


@router.post("/reorder", response_model=list[PageRead])
async def reorder(
    ebook_id: str, data: PageReorder, db: AsyncSession = Depends(get_db)
):
    """Reorder pages by providing the page IDs in desired order."""
    return await reorder_pages(db, ebook_id, data.page_ids)


@router.delete("/", status_code=204)
async def delete_pages(ebook_id: str, db: AsyncSession = Depends(get_db)):
    """Delete every page of the ebook."""
    await delete_all_pages(db, ebook_id)


@router.get("/{page_id}", response_model=PageRead)
async def get_page(ebook_id: str, page_id: str, db: AsyncSession = Depends(get_db)):
    """Get a page by ID."""
    return await _get_page(db, ebook_id, page_id)


@router.patch("/{page_id}", response_model=PageRead)
async def update_page(
    ebook_id: str,
    page_id: str,
    data: PageUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a page's content, template, image or style overrides."""
    page = await _get_page(db, ebook_id, page_id)

    update_data = data.model_dump(exclude_unset=True, exclude={"custom_styles", "template"})
    for key, value in update_data.items():
        # title/content are NOT NULL; an explicit null leaves them unchanged
        if value is None and key in ("title", "content"):
            continue
        setattr(page, key, value)
    if "template" in data.model_fields_set and data.template is not None:
        page.template = data.template.value
    if "custom_styles" in data.model_fields_set:
        page.custom_styles = data.custom_styles.to_storage() if data.custom_styles else None

    await db.flush()
    await db.refresh(page)
    return page


@router.delete("/{page_id}", status_code=204)
async def delete_page(ebook_id: str, page_id: str, db: AsyncSession = Depends(get_db)):
    """Delete a page."""
    page = await _get_page(db, ebook_id, page_id)
    await db.delete(page)


@router.get("/{page_id}/preview")
async def preview_page(
    ebook_id: str, page_id: str, db: AsyncSession = Depends(get_db)
) -> dict[str, Any]:
    """Resolved layout, CSS and labels for rendering one page against the ebook theme."""
    ebook = await load_ebook(db, ebook_id)
    if not ebook:
        raise HTTPException(status_code=404, detail="Ebook not found")
    if ebook.theme is None:
        raise HTTPException(status_code=400, detail="Ebook has no theme")

    ids = [p.id for p in ebook.pages]
    if page_id not in ids:
        raise HTTPException(status_code=404, detail="Page not found")
    page = ebook.pages[ids.index(page_id)]

    return page_styles.build_preview(
        title=page.title,
        content=page.content,
        template=page.template,
        image_url=page.image_url,
        custom_styles=page.custom_styles,
        theme=ebook.theme,
        page_index=ids.index(page_id),
        total_pages=len(ids),
    )
