"""
Tourenplan Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (real in-memory DB, API client,
       temp photo directory, auth header).
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped, created fresh for each test):
    ├── db_engine:       in-memory SQLite (aiosqlite), schema created, FKs on
    ├── session_factory: async_sessionmaker bound to db_engine
    ├── db_session:      one AsyncSession for service-level tests
    ├── temp_storage:    temporary photo directory
    ├── file_service:    FileService rooted in temp_storage
    ├── auth_headers:    {"Authorization": "Bearer <valid token>"}
    └── test_client:     HTTPX AsyncClient, get_db_session overridden

SQLite runs in memory with StaticPool: every session in a test shares one
connection, so data committed by one request is visible to the next.
"""

import os
import tempfile
from datetime import date
from typing import AsyncGenerator

# Override settings for testing BEFORE any application imports:
# settings, the module engine and the file_service singleton read them once
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="tourenplan_db_"), "health.db"
)
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="tourenplan_uploads_")
os.environ["JWT_SECRET"] = "test-secret-key-for-the-tourenplan-suite-0123456789"
os.environ["AUTH_USERNAME"] = "disponent"
os.environ["AUTH_PASSWORD"] = "test-password"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tourenplan.database import Base, enable_sqlite_foreign_keys, get_db_session
from tourenplan import models  # noqa: F401  (registers tables on Base.metadata)
from tourenplan.services.auth_service import auth_service
from tourenplan.services.file_service import FileService
from tourenplan.schemas.tour import StopCreate, TourCreate
from tourenplan.services.stop_service import stop_service
from tourenplan.services.tour_service import tour_service


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite engine with the full schema and FK enforcement."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """
    A session for calling services directly.

    Services only flush; tests that need a clean transaction boundary call
    commit() themselves.
    """
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def sample_tour(db_session):
    """
    Driver "Fahrer Eins" with a tour on 2024-03-05 and three stops,
    inserted with sequence indices 2, 1, 3 (out of order on purpose).

    Returns:
        (driver, tour, stops as inserted)
    """
    driver = await tour_service.create_driver(db_session, "Fahrer Eins")
    tour, _ = await tour_service.create_tour(
        db_session,
        TourCreate(fahrer_id=driver.id, datum=date(2024, 3, 5)),
    )
    stops = []
    for reihenfolge, kunde in ((2, "Müller"), (1, "Bäckerei Schmidt"), (3, None)):
        stops.append(
            await stop_service.create_stop(
                db_session,
                tour.id,
                StopCreate(adresse=f"Straße {reihenfolge}", reihenfolge=reihenfolge, kunde=kunde),
            )
        )
    await db_session.commit()
    return driver, tour, stops


# ══════════════════════════════════════════════════════════════════════════
# Files & Auth
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def temp_storage(tmp_path):
    """A fresh photo directory for each test (cleaned up by pytest)."""
    storage_dir = tmp_path / "uploads"
    storage_dir.mkdir()
    return str(storage_dir)


@pytest.fixture
def file_service(temp_storage):
    return FileService(storage_root=temp_storage)


@pytest.fixture
def sample_image_bytes():
    """
    Minimal JPEG bytes: SOI marker + JFIF header + EOI marker.

    Not a real photograph; content is never decoded, only stored.
    """
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def auth_headers():
    token = auth_service.create_token(subject="disponent", role="disponent")
    return {"Authorization": f"Bearer {token}"}


# ══════════════════════════════════════════════════════════════════════════
# API Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient wired to the FastAPI app via ASGITransport.

    get_db_session is replaced by one that draws sessions from the test
    engine, with the same commit-on-success/rollback-on-error behavior.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from tourenplan.main import app

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
