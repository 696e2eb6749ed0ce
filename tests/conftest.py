"""Shared test fixtures for pytest.

Environment defaults are set before any application import so settings are
built for the test environment and the app's engine points at an in-memory
database.
"""

import os
from collections.abc import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool


os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from dependencies.ai import get_email_orchestrator
from dependencies.db import get_db
from main import app
from models import Base
from services.ai.orchestrator import EmailGenerationOrchestrator
from tests.fixtures.ai_fixtures import FakeTextGenerator


pytest_plugins = ("tests.fixtures.ai_fixtures",)


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Async client over the app with the database swapped for in-memory SQLite."""

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def use_generator() -> Callable[..., FakeTextGenerator]:
    """Route the AI endpoints through a scripted generator.

    Usage: ``use_generator(FakeTextGenerator(...), timeout_seconds=0.05)``.
    """

    def _install(
        generator: FakeTextGenerator, timeout_seconds: float = 5.0
    ) -> FakeTextGenerator:
        orchestrator = EmailGenerationOrchestrator(
            generator, timeout_seconds=timeout_seconds
        )
        app.dependency_overrides[get_email_orchestrator] = lambda: orchestrator
        return generator

    return _install
