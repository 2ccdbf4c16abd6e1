"""Database engine, session factory and declarative base."""

from collections.abc import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from library_api.core.config import get_settings


# Largest value SQLite (and most stores) can bind as an INTEGER
MAX_INTEGER = 2**63 - 1


class Base(DeclarativeBase):
    """Declarative base for all models."""


def fits_integer_column(value: int) -> bool:
    """Whether ``value`` can be bound to a 64-bit signed INTEGER column."""
    return -MAX_INTEGER - 1 <= value <= MAX_INTEGER


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(url: str, **kwargs) -> AsyncEngine:
    """Create an async engine, enabling foreign key enforcement on SQLite."""
    engine = create_async_engine(url, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


engine = create_engine(get_settings().database_url, echo=False)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides a database session per request."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create all tables."""
    # Import models so they are registered on the metadata
    import library_api.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
