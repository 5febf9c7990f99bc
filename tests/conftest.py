"""Pytest configuration helpers.

Puts ``backend/`` on `sys.path` so tests can import the `ebook_builder`
package however pytest is invoked, and points the app at an in-memory
SQLite database with the mock model provider before anything imports
the settings.
"""
import os
import sys
import tempfile

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "backend"))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

os.environ["DB_URL"] = "sqlite+aiosqlite://"
os.environ["DB_AUTO_CREATE"] = "false"
os.environ["DEBUG"] = "false"
os.environ["USE_MOCK_API"] = "true"
os.environ["OPENAI_API_KEY"] = ""
os.environ["MEDIA_VOLUME"] = tempfile.mkdtemp(prefix="ebook-media-")

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402

import ebook_builder.models  # noqa: E402,F401
from ebook_builder.config import get_settings  # noqa: E402
from ebook_builder.database import Base, build_engine, get_db  # noqa: E402


@pytest.fixture
def settings():
    return get_settings()


@pytest_asyncio.fixture
async def engine():
    eng = build_engine("sqlite+aiosqlite://")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def app(session_factory):
    from ebook_builder.main import app as fastapi_app

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def ebook(client):
    """The working ebook as created by GET /api/ebooks/current."""
    response = await client.get("/api/ebooks/current")
    assert response.status_code == 200
    return response.json()
