"""
Pytest configuration and fixtures.

- mock_db: AsyncSession mock per i test unitari dei service
- db_session: database SQLite in memoria (aiosqlite) per i test round-trip
- set_timestamps: timestamp fissi per i test di ordinamento
- api_client: client httpx sull'app FastAPI con get_db sostituita
"""

import os
import uuid
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

# Configurazione di test prima di importare l'applicazione
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from goldsmith.core.database import get_db
from goldsmith.main import app
from goldsmith.models import Base, Client


# ============================================================
# Fixtures per AsyncSession Mock
# ============================================================


@pytest.fixture
def mock_db():
    """Crea un mock di AsyncSession."""
    db = AsyncMock(spec=AsyncSession)
    db.execute = AsyncMock()
    db.add = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.flush = AsyncMock()
    db.refresh = AsyncMock()
    db.delete = AsyncMock()
    return db


@pytest.fixture
def make_result():
    """Factory per il mock del risultato di db.execute()."""

    def _make(value=None, values=None):
        result = MagicMock()
        result.scalar_one_or_none.return_value = value
        result.scalars.return_value.all.return_value = values or []
        return result

    return _make


@pytest.fixture
def sample_client():
    """Crea un Client non persistito con dati base."""
    return Client(
        id=uuid.uuid4(),
        shop_name="Gold Palace",
        client_name="John Smith",
        phone_number="555-0101",
        address="12 Market Street",
    )


# ============================================================
# Fixtures per database SQLite in memoria
# ============================================================


@pytest.fixture
async def engine():
    """Engine aiosqlite in memoria condiviso tra le sessioni del test."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Sessione reale su SQLite in memoria."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def set_timestamps(db_session):
    """
    Forza created_at/updated_at di un record con un UPDATE diretto.

    Il listener before_flush non interviene: i valori restano quelli passati.
    """

    async def _set(obj, **values):
        model = type(obj)
        await db_session.execute(update(model).where(model.id == obj.id).values(**values))

    return _set


@pytest.fixture
async def api_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Client HTTP sull'app con una sessione SQLite per ogni richiesta."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
