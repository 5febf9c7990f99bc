"""System status endpoint: database and model provider health, runtime settings."""

from __future__ import annotations

import time
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from ebook_builder.config import get_settings
from ebook_builder.database import get_db
from ebook_builder.prompts.manager import PromptManager
from ebook_builder.schemas.system import SettingsUpdate

router = APIRouter()
settings = get_settings()


@router.get("/check-llm")
async def check_llm():
    """Pre-check the model API key before starting a generation."""
    from ebook_builder.services.llm_client import check_llm_health
    return await check_llm_health()


async def _check_database(db: AsyncSession) -> dict[str, Any]:
    t0 = time.time()
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        return {"status": "error", "error": str(e)}
    return {"status": "ok", "latency_ms": round((time.time() - t0) * 1000, 1)}


@router.get("/status")
async def system_status(db: AsyncSession = Depends(get_db)):
    """Database connectivity plus the generation provider configuration."""
    db_status = await _check_database(db)
    return {
        "overall": "ok" if db_status["status"] == "ok" else "degraded",
        "services": {"database": db_status},
        "settings": {
            "story_model": settings.STORY_MODEL,
            "image_model": settings.IMAGE_MODEL,
            "use_mock_api": settings.USE_MOCK_API,
            "api_key_configured": bool(settings.OPENAI_API_KEY),
        },
        "prompt_templates": PromptManager.list_templates(),
    }


# ---------------------------------------------------------------------------
# System Settings: runtime provider configuration
# ---------------------------------------------------------------------------

@router.get("/settings")
async def get_settings_api():
    """Get current generation settings."""
    return {
        "story_model": settings.STORY_MODEL,
        "image_model": settings.IMAGE_MODEL,
        "outline_temperature": settings.OUTLINE_TEMPERATURE,
        "content_temperature": settings.CONTENT_TEMPERATURE,
        "use_mock_api": settings.USE_MOCK_API,
    }


@router.put("/settings")
async def update_settings_api(data: SettingsUpdate):
    """Update generation settings at runtime (no restart needed).

    Supported fields: story_model, image_model, outline_temperature,
    content_temperature, use_mock_api. Invalid values are rejected with 422.
    """
    updated = {
        key: value
        for key, value in data.model_dump(exclude_unset=True).items()
        if value is not None
    }

    for key, value in updated.items():
        # Mutate the cached singleton directly
        object.__setattr__(settings, key.upper(), value)

    if not updated:
        return {"status": "no_change", "message": "No valid fields provided"}

    return {"status": "ok", "updated": updated}


@router.post("/reload-prompts")
async def reload_prompts():
    """Reload prompt template cache (admin use)."""
    PromptManager.reload()
    return {"status": "reloaded"}
