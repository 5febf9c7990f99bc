from __future__ import annotations
"""AI generation endpoints.

POST /api/generate-outline   description -> ordered section titles (clears existing pages)
POST /api/generate-content   one section -> one persisted page
POST /api/generate-image     prompt -> stored image URL

Request and response bodies are camelCase JSON. Failures of the model
call come back as HTTP 500 with ``{"error": message}``.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ebook_builder.config import get_settings
from ebook_builder.database import get_db
from ebook_builder.models.ebook import Ebook
from ebook_builder.schemas.generation import (
    ImageRequest,
    ImageResponse,
    OutlineRequest,
    OutlineResponse,
    SectionContentRequest,
    SectionContentResponse,
)
from ebook_builder.schemas.page import PageRead
from ebook_builder.services import content_service, image_gen, outline_service
from ebook_builder.services.ebook_service import delete_all_pages
from ebook_builder.services.llm_client import LLMError, is_configured

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter()


def _error(message: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _provider_ready() -> bool:
    return settings.USE_MOCK_API or is_configured()


async def _require_ebook(db: AsyncSession, ebook_id: str) -> Ebook:
    ebook = await db.get(Ebook, ebook_id)
    if not ebook:
        raise HTTPException(status_code=404, detail="Ebook not found")
    return ebook


@router.post("/generate-outline", response_model=OutlineResponse)
async def generate_outline(req: OutlineRequest, db: AsyncSession = Depends(get_db)):
    """Replace the ebook's pages with a fresh outline to be expanded section by section."""
    if not req.description.strip():
        raise HTTPException(status_code=400, detail="Description and ebookId are required")
    if not _provider_ready():
        return _error("OpenAI API key not configured")

    await _require_ebook(db, req.ebook_id)
    await delete_all_pages(db, req.ebook_id)

    try:
        outline = await outline_service.generate_outline(req.description)
    except (LLMError, outline_service.OutlineFormatError) as e:
        logger.exception("Error generating outline for ebook %s", req.ebook_id)
        return _error(str(e) or "Failed to generate outline")

    return OutlineResponse(outline=outline)


@router.post("/generate-content", response_model=SectionContentResponse)
async def generate_content(req: SectionContentRequest, db: AsyncSession = Depends(get_db)):
    """Write one outline section and store it as the page at ``order = sectionIndex``."""
    if req.section_index >= req.total_sections:
        raise HTTPException(
            status_code=400,
            detail=f"sectionIndex must be below totalSections (got {req.section_index}/{req.total_sections})",
        )
    if not _provider_ready():
        return _error("OpenAI API key not configured")

    await _require_ebook(db, req.ebook_id)

    try:
        page = await content_service.create_section_page(
            db,
            ebook_id=req.ebook_id,
            section_title=req.section_title,
            section_index=req.section_index,
            total_sections=req.total_sections,
            description=req.description,
        )
    except LLMError as e:
        logger.exception(
            "Error generating content for ebook %s section %d",
            req.ebook_id, req.section_index,
        )
        return _error(str(e) or "Failed to generate content")

    return SectionContentResponse(success=True, page=PageRead.model_validate(page))


@router.post("/generate-image", response_model=ImageResponse)
async def generate_image(req: ImageRequest):
    """Generate an illustration and store it in the media volume."""
    if not req.prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt is required")

    try:
        image_url = await image_gen.generate_image(req.prompt)
    except Exception as e:
        logger.exception("Image generation error")
        return _error(str(e) or "Failed to generate image")

    return ImageResponse(image_url=image_url)
