"""Configuración y fixtures de pruebas."""
import os
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Antes de importar la app: Settings se construye al importar app.core.config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET_KEY"] = "clave-de-pruebas"
os.environ["EMAIL_RELAY_URL"] = "http://relay.test/sendPaymentReminder"

from app.core.config import settings
from app.core.database import Base, get_db
from app.core.security import create_access_token
from app.main import app
from app.models import Candidate, Sponsor
from app.services.candidate_service import CandidateRegistry
from app.services.sponsor_service import SponsorRegistry

test_engine = create_async_engine(
    "sqlite+aiosqlite://",
    poolclass=StaticPool,
    connect_args={"check_same_thread": False},
)
TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Base en memoria nueva para cada prueba."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    # Cada prueba corre en su propio event loop
    await test_engine.dispose()


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Cliente HTTP contra la app con la sesión de pruebas."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict:
    token = create_access_token(subject="admin-uid", extra={"email": "admin@escolamaosunidas.com"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def storage_dir(tmp_path, monkeypatch):
    """Archivos subidos en un directorio temporal."""
    monkeypatch.setattr(settings, "storage_dir", str(tmp_path / "storage"))
    return tmp_path / "storage"


@pytest.fixture
def sponsor_data() -> dict:
    return {
        "first_name": "Maria",
        "last_name": "Gonzalez",
        "email": "maria@example.com",
        "phone": "+34 600 000 000",
        "address": "Calle Mayor 1",
        "city": "Madrid",
        "country": "España",
    }


@pytest.fixture
async def sponsor(db_session: AsyncSession, sponsor_data: dict) -> Sponsor:
    padrino = await SponsorRegistry(db_session).create(sponsor_data)
    await db_session.commit()
    return padrino


@pytest.fixture
async def candidate(db_session: AsyncSession) -> Candidate:
    candidato = await CandidateRegistry(db_session).create(
        {
            "document_id": "DOC-001",
            "first_name": "Ana",
            "last_name": "Silva",
            "level": "3ª Clase",
            "period": "2026",
            "guardian": {"name": "Rosa Silva", "relationship": "madre", "phone": "841234567"},
            "household": {"members": 5},
        }
    )
    await db_session.commit()
    return candidato
