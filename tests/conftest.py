"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from library_api.core.cache import MemoryCacheBackend, TagAwareCache, get_cache
from library_api.core.config import get_settings
from library_api.core.database import Base, create_engine, get_db
from library_api.core.security import ROLE_ADMIN
from library_api.main import app
from library_api.models import Author, Book

# Use an in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_TOKEN = "admin-token"
USER_TOKEN = "user-token"


@pytest.fixture(autouse=True)
def api_tokens(monkeypatch):
    """Configure one admin token and one plain user token."""
    monkeypatch.setattr(
        get_settings(),
        "api_tokens",
        {ADMIN_TOKEN: [ROLE_ADMIN, "ROLE_USER"], USER_TOKEN: ["ROLE_USER"]},
    )


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def user_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {USER_TOKEN}"}


@pytest.fixture
async def test_engine():
    """Create a test database engine."""
    engine = create_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with async_session() as session:
        yield session


@pytest.fixture
async def override_get_db(test_session: AsyncSession):
    """Override the get_db dependency for testing."""

    async def _override_get_db():
        yield test_session

    return _override_get_db


@pytest.fixture
def cache() -> TagAwareCache:
    """A fresh response cache per test."""
    return TagAwareCache(MemoryCacheBackend())


@pytest.fixture
async def client(override_get_db, cache) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def sample_author(test_session: AsyncSession) -> Author:
    """Create a sample author for testing."""
    author = Author(first_name="Frank", last_name="Herbert")
    test_session.add(author)
    await test_session.flush()
    return author


@pytest.fixture
async def sample_book(test_session: AsyncSession, sample_author: Author) -> Book:
    """Create a sample book written by the sample author."""
    book = Book(
        title="Dune",
        cover_text="A desert planet and the spice that rules it.",
        comment="First of the series",
        author=sample_author,
    )
    test_session.add(book)
    await test_session.flush()
    return book


@pytest.fixture
async def five_books(test_session: AsyncSession, sample_author: Author) -> list[Book]:
    """Create five books in insertion order."""
    books = [
        Book(title=f"Book {n}", cover_text=f"Cover {n}", author=sample_author)
        for n in range(1, 6)
    ]
    test_session.add_all(books)
    await test_session.flush()
    return books
