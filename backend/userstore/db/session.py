"""
Async SQLAlchemy engine and session factories for SQLite targets.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from userstore.core.config import settings
from userstore.db.target import StorageTarget


def open_engine(target: StorageTarget) -> AsyncEngine:
    """
    Build an async engine for ``target``.

    Nothing is opened until the first connection is checked out.  An
    in-memory target gets a single shared connection (StaticPool), so the
    database lives exactly as long as the engine is not disposed.
    """
    if target.is_transient:
        return create_async_engine(target.url, echo=settings.DB_ECHO, poolclass=StaticPool)
    return create_async_engine(target.url, echo=settings.DB_ECHO)


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to ``engine``."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
