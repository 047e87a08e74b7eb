"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

The engine and session factory are created lazily on first use so that
importing this module does not trigger settings validation. Tests point
WARDEN_DATABASE_URL at sqlite+aiosqlite and call configure_engine().
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from warden.core.config import get_settings
from warden.domain.exceptions import DatabaseNotConfiguredException

logger = logging.getLogger(__name__)

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: AsyncEngine | None = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def configure_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    """Create the engine and session factory for database_url (replacing any previous)."""
    global engine, AsyncSessionLocal
    settings = get_settings()
    kwargs: dict[str, Any] = {"echo": echo, "pool_pre_ping": True}
    if not database_url.startswith("sqlite"):
        kwargs["pool_size"] = settings.db_pool_size if settings.db_pool_size is not None else 10
        kwargs["max_overflow"] = (
            settings.db_max_overflow if settings.db_max_overflow is not None else 20
        )
        kwargs["pool_recycle"] = 3600
    engine = create_async_engine(database_url, **kwargs)
    AsyncSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    return engine


def _ensure_engine() -> None:
    """Create engine and AsyncSessionLocal on first use from settings.

    Raises DatabaseNotConfiguredException when database_url is empty.
    """
    if AsyncSessionLocal is not None:
        return
    settings = get_settings()
    if not settings.database_url:
        raise DatabaseNotConfiguredException()
    configure_engine(settings.database_url, echo=settings.database_echo)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the process-wide session factory, creating the engine if needed."""
    _ensure_engine()
    if AsyncSessionLocal is None:
        raise DatabaseNotConfiguredException()
    return AsyncSessionLocal


async def dispose_engine() -> None:
    """Dispose the engine (shutdown) and reset the lazy factory."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
        logger.info("Database engine disposed")
    engine = None
    AsyncSessionLocal = None
