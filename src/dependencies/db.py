"""Database session dependency using SQLAlchemy async engine.

This sets up an AsyncSession factory bound to the configured DATABASE_URL.
The engine isn't connected until first use, so importing this module
won't fail if the database isn't reachable yet.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import get_settings


def _normalize_async_url(url: str) -> str:
    """Coerce sync driver URLs to their async equivalents.

    asyncpg requires 'ssl=require' instead of 'sslmode=require'.
    """
    if url.startswith("sqlite:///"):
        return "sqlite+aiosqlite:///" + url[len("sqlite:///") :]
    if url.startswith("postgres://"):
        url = "postgresql+asyncpg://" + url[len("postgres://") :]
    elif url.startswith("postgresql://"):
        url = "postgresql+asyncpg://" + url[len("postgresql://") :]
    elif url.startswith("postgresql+psycopg2://") or url.startswith(
        "postgresql+psycopg://"
    ):
        url = "postgresql+asyncpg://" + url.split("://", 1)[1]

    for mode in ("require", "verify-full", "verify-ca", "prefer", "disable"):
        url = url.replace(f"sslmode={mode}", f"ssl={mode}")
    return url


DATABASE_URL = _normalize_async_url(get_settings().DATABASE_URL)
engine: AsyncEngine = create_async_engine(DATABASE_URL, future=True, echo=False)
AsyncSessionLocal = async_sessionmaker(
    engine,
    expire_on_commit=False,
    class_=AsyncSession,
)


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency that provides an AsyncSession and ensures proper cleanup."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


DbSession = Annotated[AsyncSession, Depends(get_db)]
