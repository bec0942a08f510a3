"""Relational store with async SQLAlchemy.

Handles:
- One engine + session factory per division (men / women)
- Database session management
- Connection pooling

Both divisions share the same schema (Base.metadata) but never share rows.
"""

from collections.abc import AsyncGenerator, Mapping
from contextlib import asynccontextmanager
import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from courtside.schemas.common import Gender
from courtside.settings import get_settings

logger = logging.getLogger("uvicorn.error")


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

    pass


# Engines and session factories per division (initialized on startup)
_engines: dict[Gender, AsyncEngine] = {}
_session_factories: dict[Gender, async_sessionmaker[AsyncSession]] = {}


def _engine_kwargs(url: str, debug: bool) -> dict[str, object]:
    kwargs: dict[str, object] = {"echo": debug, "pool_pre_ping": True}
    # SQLite (local dev / tests) does not take pool sizing arguments.
    if not url.startswith("sqlite"):
        kwargs.update(pool_size=5, max_overflow=10)
    return kwargs


async def init_db(database_urls: Mapping[Gender, str] | None = None) -> None:
    """Initialize connection pools for every division.

    Args:
        database_urls: Optional override of the per-division URLs
            (defaults to DATABASE_URL_MEN / DATABASE_URL_WOMEN).
    """
    settings = get_settings()
    if database_urls is None:
        database_urls = {gender: settings.database_url_for(gender) for gender in Gender}

    for gender, url in database_urls.items():
        engine = create_async_engine(url, **_engine_kwargs(url, settings.debug))
        _engines[gender] = engine
        _session_factories[gender] = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )


async def close_db() -> None:
    """Close all database connection pools."""
    for engine in _engines.values():
        await engine.dispose()
    _engines.clear()
    _session_factories.clear()


async def ping_db() -> None:
    """Run a trivial query against every configured division."""
    for gender, engine in _engines.items():
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info(f"Database for {gender.value} division connected")


@asynccontextmanager
async def get_session(gender: Gender) -> AsyncGenerator[AsyncSession, None]:
    """Get a database session for a division.

    Usage:
        async with get_session(Gender.MEN) as session:
            result = await session.execute(query)
    """
    factory = _session_factories.get(gender)
    if factory is None:
        raise RuntimeError(f"Database for {gender.value} not initialized. Call init_db() first.")

    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables() -> None:
    """Create all tables in every division (for development/testing only)."""
    if not _engines:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    for engine in _engines.values():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)


async def drop_tables() -> None:
    """Drop all tables in every division (for testing only)."""
    if not _engines:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    for engine in _engines.values():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
