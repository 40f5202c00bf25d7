"""Async database access for requirement groups and evaluations."""

from __future__ import annotations

import threading
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from iterative_canvas.config import Settings, get_settings

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None
_lock = threading.RLock()


def _create_engine(settings: Settings) -> AsyncEngine:
    return create_async_engine(
        settings.async_database_url,
        echo=settings.is_development and settings.db_echo,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
    )


def get_engine() -> AsyncEngine:
    """Return the process-wide engine, creating it on first use.

    Raises:
        ValueError: If ``DATABASE_URL`` is not configured.
    """
    global _engine
    if _engine is None:
        with _lock:
            if _engine is None:
                _engine = _create_engine(get_settings())
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        with _lock:
            if _session_factory is None:
                _session_factory = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _session_factory


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session bound to one transaction.

    The transaction commits when the consumer finishes and rolls back if it
    raises.
    """
    async with get_session_factory()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        await session.commit()


async def dispose_engine() -> None:
    """Close pooled connections and forget the engine and session factory."""
    global _engine, _session_factory
    with _lock:
        engine, _engine, _session_factory = _engine, None, None
    if engine is not None:
        await engine.dispose()
