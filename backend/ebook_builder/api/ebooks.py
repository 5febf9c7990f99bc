from __future__ import annotations
"""Ebook API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ebook_builder.database import get_db
from ebook_builder.models.theme import Theme
from ebook_builder.schemas.ebook import EbookRead, EbookThemeUpdate, EbookUpdate
from ebook_builder.services.ebook_service import get_or_create_current_ebook, load_ebook

router = APIRouter()


@router.get("/current", response_model=EbookRead)
async def get_current_ebook(db: AsyncSession = Depends(get_db)):
    """Get the working ebook, creating a default one on first use."""
    return await get_or_create_current_ebook(db)


@router.get("/{ebook_id}", response_model=EbookRead)
async def get_ebook(ebook_id: str, db: AsyncSession = Depends(get_db)):
    """Get an ebook with its theme and ordered pages."""
    ebook = await load_ebook(db, ebook_id)
    if not ebook:
        raise HTTPException(status_code=404, detail="Ebook not found")
    return ebook


@router.patch("/{ebook_id}", response_model=EbookRead)
async def update_ebook(
    ebook_id: str, data: EbookUpdate, db: AsyncSession = Depends(get_db)
):
    """Update an ebook's title or description."""
    ebook = await load_ebook(db, ebook_id)
    if not ebook:
        raise HTTPException(status_code=404, detail="Ebook not found")

    update_data = data.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(ebook, key, value)

    await db.flush()
    await db.refresh(ebook)
    return ebook


@router.put("/{ebook_id}/theme", response_model=EbookRead)
async def update_ebook_theme(
    ebook_id: str, data: EbookThemeUpdate, db: AsyncSession = Depends(get_db)
):
    """Switch the ebook to another theme."""
    ebook = await load_ebook(db, ebook_id)
    if not ebook:
        raise HTTPException(status_code=404, detail="Ebook not found")
    theme = await db.get(Theme, data.theme_id)
    if not theme:
        raise HTTPException(status_code=404, detail="Theme not found")

    ebook.theme_id = theme.id
    await db.flush()
    await db.refresh(ebook)
    return ebook
