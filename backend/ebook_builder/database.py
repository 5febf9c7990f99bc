from __future__ import annotations
"""SQLAlchemy 2.0 async database engine and session management.

MySQL 8.0+ is the production target (utf8mb4, pool health settings);
SQLite through aiosqlite is accepted via DB_URL for local runs and tests.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool, StaticPool

from ebook_builder.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


def _engine_options(url: str) -> dict[str, Any]:
    """Dialect-specific engine keyword arguments."""
    if url.startswith("sqlite"):
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {
        "pool_recycle": 3600,
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
        "connect_args": {"connect_timeout": 30},
    }


def migration_options(url: str) -> dict[str, Any]:
    """Pool class and alembic context flags for a one-shot migration run.

    An in-memory SQLite database lives only as long as its connection, so it
    keeps a single static one; everything else connects without pooling.
    SQLite has no ALTER for most column changes and needs batch mode.
    """
    is_sqlite = url.startswith("sqlite")
    in_memory = is_sqlite and (url.rstrip("/").endswith(":") or ":memory:" in url)
    return {
        "poolclass": StaticPool if in_memory else NullPool,
        "render_as_batch": is_sqlite,
    }


def build_engine(url: str, *, echo: bool = False) -> AsyncEngine:
    """Create an async engine with the options appropriate for its dialect."""
    return create_async_engine(url, echo=echo, **_engine_options(url))


engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all ORM models.

    Forces utf8mb4 charset to prevent Emoji crashes in MySQL.
    """

    __table_args__ = {
        "mysql_charset": "utf8mb4",
        "mysql_collate": "utf8mb4_unicode_ci",
    }


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields an async database session.

    The session is committed on success and rolled back on error.
    Always closed after use.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db(bind: AsyncEngine | None = None) -> None:
    """Create all tables defined by Base metadata (best-effort).

    Called at application startup when DB_AUTO_CREATE is enabled.
    """
    import ebook_builder.models  # noqa: F401  registers models on Base.metadata

    target = bind or engine
    try:
        async with target.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception as e:
        logger.warning("Could not run create_all (tables may already exist): %s", e)


async def close_db() -> None:
    """Dispose of the engine connection pool.

    Called at application shutdown.
    """
    await engine.dispose()
