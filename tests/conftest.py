"""
Top-level pytest configuration.

Provides:
  - A test SQLite database (aiosqlite) with all tables created fresh per test.
  - A db_session fixture that rolls back each test in a transaction.
  - An async_client fixture wired to the FastAPI app.
  - Object storage redirected to a per-test temporary directory.
  - Seeded candidate/admin profiles with matching auth header fixtures.
"""

from __future__ import annotations

import os
from typing import AsyncGenerator

# ---------------------------------------------------------------------------
# Environment must be set BEFORE any onboarding module is imported so that
# pydantic-settings picks up the test values.
# ---------------------------------------------------------------------------
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-long-enough-32c")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import JSON
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from factories import ApplicationFactory, ProfileFactory

TEST_DATABASE_URL = os.getenv(
    "TEST_DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)

DEFAULT_PASSWORD = "Password123"


def _patch_postgres_types_for_sqlite(metadata) -> None:
    """
    Replace PostgreSQL-specific column types that SQLite cannot compile.

    UUID(as_uuid=True) renders fine on SQLite, JSONB does not. Walk the
    metadata before DDL generation and swap any JSONB column for plain JSON.
    """
    from sqlalchemy.dialects.postgresql import JSONB

    for table in metadata.tables.values():
        for col in table.columns:
            if isinstance(col.type, JSONB):
                col.type = JSON()


# ---------------------------------------------------------------------------
# Per-test engine (SQLite in-memory, shared via StaticPool so every
# connection of one test sees the same data). A fresh engine per test keeps
# the engine and the test on the same event loop.
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine():
    """Create the SQLite test engine and all tables."""
    from onboarding.core.database import Base
    import onboarding.models  # noqa: F401

    # Swap JSONB -> JSON so SQLite can render the DDL
    _patch_postgres_types_for_sqlite(Base.metadata)

    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


# ---------------------------------------------------------------------------
# Per-test DB session that rolls back after each test for isolation.
#
# Endpoint code calls session.commit(); the session below turns that into a
# flush so every write stays inside the outer transaction, which is rolled
# back at teardown.
# ---------------------------------------------------------------------------
class _NonCommittingSession(AsyncSession):
    """AsyncSession subclass where commit() becomes flush()."""

    async def commit(self) -> None:  # type: ignore[override]
        await self.flush()


@pytest_asyncio.fixture
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a per-test database session that is fully rolled back on teardown."""
    async with engine.connect() as conn:
        await conn.begin()

        session = _NonCommittingSession(
            bind=conn,
            expire_on_commit=False,
        )

        try:
            yield session
        finally:
            await session.close()
            await conn.rollback()


# ---------------------------------------------------------------------------
# Object storage lives under a temporary directory per test.
# ---------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def storage_root(tmp_path, monkeypatch):
    """Point STORAGE_ROOT at tmp_path so uploads never touch the working tree."""
    from onboarding.core.config import settings

    root = tmp_path / "storage"
    monkeypatch.setattr(settings, "storage_root", str(root))
    return root


# ---------------------------------------------------------------------------
# Override FastAPI database dependency to use the test session.
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Provide an httpx AsyncClient backed by the FastAPI app.

    The app's get_db dependency is overridden to yield the test session so all
    requests in a test share the same transactional session and thus see any
    data seeded in that test.
    """
    from onboarding.core.database import get_db
    from onboarding.main import app

    async def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as client:
        yield client

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Seeded fixtures
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def candidate(db_session: AsyncSession):
    """Persisted candidate profile."""
    return await ProfileFactory.create_async(
        db_session,
        email="candidate@example.com",
        full_name="Asha Verma",
    )


@pytest_asyncio.fixture
async def other_candidate(db_session: AsyncSession):
    """A second candidate, used for ownership checks."""
    return await ProfileFactory.create_async(
        db_session,
        email="other@example.com",
        full_name="Ravi Kumar",
    )


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession):
    """Persisted admin profile."""
    from onboarding.models.profile import ProfileRole

    return await ProfileFactory.create_async(
        db_session,
        email="hr@example.com",
        full_name="HR Desk",
        role=ProfileRole.ADMIN,
    )


@pytest_asyncio.fixture
async def draft_application(db_session: AsyncSession, candidate):
    """A complete, submittable draft owned by ``candidate``."""
    return await ApplicationFactory.create_async(db_session, user_id=candidate.id)


@pytest_asyncio.fixture
async def submitted_application(db_session: AsyncSession, candidate):
    """An application owned by ``candidate`` awaiting review."""
    from onboarding.utils.timeutils import utcnow

    return await ApplicationFactory.create_async(
        db_session,
        user_id=candidate.id,
        status="submitted",
        submitted_at=utcnow(),
    )


def _headers_for(profile) -> dict[str, str]:
    from onboarding.core.security import create_access_token

    token = create_access_token(data={"sub": str(profile.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def candidate_headers(candidate) -> dict[str, str]:
    """Authorization headers for the candidate."""
    return _headers_for(candidate)


@pytest.fixture
def other_candidate_headers(other_candidate) -> dict[str, str]:
    return _headers_for(other_candidate)


@pytest.fixture
def admin_headers(admin) -> dict[str, str]:
    """Authorization headers for the admin."""
    return _headers_for(admin)
