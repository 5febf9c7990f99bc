from __future__ import annotations
"""Master API router: mounts all sub-routers."""

from fastapi import APIRouter

from ebook_builder.api.ebooks import router as ebooks_router
from ebook_builder.api.pages import router as pages_router
from ebook_builder.api.themes import router as themes_router
from ebook_builder.api.generation import router as generation_router
from ebook_builder.api.system import router as system_router

api_router = APIRouter(prefix="/api", redirect_slashes=False)

api_router.include_router(ebooks_router, prefix="/ebooks", tags=["Ebooks"])
api_router.include_router(pages_router, prefix="/ebooks/{ebook_id}/pages", tags=["Pages"])
api_router.include_router(themes_router, prefix="/themes", tags=["Themes"])
api_router.include_router(generation_router, tags=["AI Generation"])
api_router.include_router(system_router, prefix="/system", tags=["System"])
