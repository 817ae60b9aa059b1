"""
Async SQLAlchemy engine and session factory construction.
"""

from __future__ import annotations

from typing import Any, Dict

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from database.models import Base


def build_engine(
    database_url: str,
    *,
    pool_size: int = 20,
    max_overflow: int = 0,
    pool_recycle: int = 3600,
    echo: bool = False,
) -> AsyncEngine:
    """Create the async engine; pool sizing only applies to server databases."""
    kwargs: Dict[str, Any] = {"echo": echo}
    if make_url(database_url).get_backend_name() != "sqlite":
        kwargs.update(
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_recycle=pool_recycle,
            pool_pre_ping=True,
        )
    return create_async_engine(database_url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """Create the ``users`` table and its case-insensitive unique indexes."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
