"""Test configuration and fixtures"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base
from app.main import app
from app.models.task import NIL_PROJECT_ID, Task
from app.search.tantivy_index import TantivySearchIndex
from app.store.sql import SqlMetricsStore
from tests.factories import RecordingPublisher, make_metadata


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def session_factory():
    """Create test database"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def store(session_factory):
    return SqlMetricsStore(session_factory)


@pytest.fixture
def search_index():
    """In-memory search index"""
    index = TantivySearchIndex(path=None, heap_size=15_000_000)
    yield index
    index.close()


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
async def test_task(store) -> Task:
    """Create a processing task for the default project"""
    return await store.create_task(make_metadata(), NIL_PROJECT_ID)


@pytest.fixture
async def client(store, search_index, publisher):
    """Create test client over the application with test collaborators"""
    app.state.store = store
    app.state.search_index = search_index
    app.state.publisher = publisher

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    for name in ("store", "search_index", "publisher"):
        delattr(app.state, name)
