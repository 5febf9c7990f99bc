from __future__ import annotations
"""Theme API endpoints: presets and custom themes."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ebook_builder.database import get_db
from ebook_builder.models.theme import THEME_DEFAULTS, Theme
from ebook_builder.schemas.theme import ThemeCreate, ThemeRead, ThemeUpdate
from ebook_builder.services.theme_presets import seed_themes

router = APIRouter()


async def _name_taken(db: AsyncSession, name: str, exclude_id: str | None = None) -> bool:
    stmt = select(Theme.id).where(Theme.name == name)
    if exclude_id:
        stmt = stmt.where(Theme.id != exclude_id)
    result = await db.execute(stmt)
    return result.first() is not None


@router.get("/", response_model=list[ThemeRead])
async def list_themes(db: AsyncSession = Depends(get_db)):
    """List all themes, oldest first."""
    result = await db.execute(select(Theme).order_by(Theme.created_at, Theme.name))
    return result.scalars().all()


@router.post("/", response_model=ThemeRead, status_code=201)
async def create_theme(data: ThemeCreate, db: AsyncSession = Depends(get_db)):
    """Create a custom theme; unset colors, fonts and sizes use the defaults."""
    if await _name_taken(db, data.name):
        raise HTTPException(status_code=400, detail=f"Theme '{data.name}' already exists")

    values = {
        key: value if value is not None else THEME_DEFAULTS[key]
        for key, value in data.model_dump(exclude={"name"}).items()
    }
    theme = Theme(name=data.name, **values)
    db.add(theme)
    await db.flush()
    await db.refresh(theme)
    return theme


@router.post("/seed", response_model=list[ThemeRead])
async def seed(db: AsyncSession = Depends(get_db)):
    """Insert the built-in presets, restoring their original values."""
    themes = await seed_themes(db)
    for theme in themes:
        await db.refresh(theme)
    return themes


@router.get("/{theme_id}", response_model=ThemeRead)
async def get_theme(theme_id: str, db: AsyncSession = Depends(get_db)):
    """Get a theme by ID."""
    theme = await db.get(Theme, theme_id)
    if not theme:
        raise HTTPException(status_code=404, detail="Theme not found")
    return theme


@router.patch("/{theme_id}", response_model=ThemeRead)
async def update_theme(
    theme_id: str, data: ThemeUpdate, db: AsyncSession = Depends(get_db)
):
    """Update a theme's colors, fonts or sizes."""
    theme = await db.get(Theme, theme_id)
    if not theme:
        raise HTTPException(status_code=404, detail="Theme not found")

    update_data = {
        key: value
        for key, value in data.model_dump(exclude_unset=True).items()
        if value is not None
    }
    if "name" in update_data and await _name_taken(db, update_data["name"], theme.id):
        raise HTTPException(status_code=400, detail=f"Theme '{update_data['name']}' already exists")

    for key, value in update_data.items():
        setattr(theme, key, value)

    await db.flush()
    await db.refresh(theme)
    return theme
