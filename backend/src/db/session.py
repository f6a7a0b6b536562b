"""Async SQLAlchemy engine and session factory for the hosted PostgreSQL database."""
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import get_settings


class _EngineState:
    """Container for the lazily created engine and session factory."""

    engine: AsyncEngine | None = None
    session_factory: async_sessionmaker[AsyncSession] | None = None


_state = _EngineState()


def get_engine() -> AsyncEngine:
    """Create the engine on first use so importing this module never connects."""
    if _state.engine is None:
        settings = get_settings()
        _state.engine = create_async_engine(
            settings.database_url,
            echo=False,
            pool_pre_ping=True,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
        )
    return _state.engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the session factory for scripts and code running outside a request."""
    if _state.session_factory is None:
        _state.session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _state.session_factory


async def dispose_engine() -> None:
    """Close all pooled connections (app shutdown)."""
    if _state.engine is not None:
        await _state.engine.dispose()
    _state.engine = None
    _state.session_factory = None


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """
    Yield an async database session.

    Services use flush(); commit happens once here at request end, so a
    failing request rolls back everything it wrote.
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
