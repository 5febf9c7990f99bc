from __future__ import annotations
"""Ebook Builder - FastAPI application entry point.

Mounts all API routes, configures CORS, serves generated media,
and optionally creates the database tables on startup.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from ebook_builder.api.router import api_router
from ebook_builder.config import get_settings
from ebook_builder.database import close_db, init_db
from ebook_builder.services import image_gen, llm_client

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: init DB on startup, close clients on shutdown."""
    logger.info("%s starting up...", settings.APP_NAME)
    logger.info("USE_MOCK_API: %s", settings.USE_MOCK_API)
    if not settings.DB_URL:
        logger.info("Database: %s@%s/%s", settings.DB_USER, settings.DB_HOST, settings.DB_NAME)

    os.makedirs(settings.MEDIA_VOLUME, exist_ok=True)

    if settings.DB_AUTO_CREATE:
        await init_db()
    else:
        logger.info("Skipping init_db (tables assumed to exist)")

    yield

    await llm_client.close_client()
    await image_gen.close_client()
    await close_db()
    logger.info("%s shut down", settings.APP_NAME)


app = FastAPI(
    title="Ebook Builder API",
    description="AI-assisted ebook authoring: outline, section drafting, themes and page styling",
    version="0.1.0",
    lifespan=lifespan,
    redirect_slashes=False,
)

# CORS: allow the editor frontend (configurable via CORS_ORIGINS env)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount API routes
app.include_router(api_router)

# Mount media static files
os.makedirs(settings.MEDIA_VOLUME, exist_ok=True)
app.mount("/media", StaticFiles(directory=settings.MEDIA_VOLUME), name="media")


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "service": settings.APP_NAME,
        "status": "running",
        "mock_mode": settings.USE_MOCK_API,
    }


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "database": "custom" if settings.DB_URL else settings.DB_HOST,
        "mock_mode": settings.USE_MOCK_API,
    }
