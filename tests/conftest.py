import os

# settings are read at import time; point them at throwaway resources first
os.environ["ENV"] = "local"
os.environ["POSTGRES_DSN"] = "sqlite+aiosqlite:///:memory:"
os.environ["DB_MANAGE"] = "create_all"
os.environ["BACKUP_SCHEDULE_ENABLED"] = "false"

import uuid
from typing import AsyncGenerator

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from nephrolite.main import app
from nephrolite.core.base import Base
from nephrolite.core.config import settings
from nephrolite.core.db import get_session, import_models
from nephrolite.core.security import get_principal, Principal
from nephrolite.modules.users.models import User
from nephrolite.platform.adapters.storage_local import LocalFilesystemStorage
from nephrolite.platform.provider_registry import registry

TEST_DATABASE_URL = "sqlite+aiosqlite://"

ORG_ID = uuid.UUID(settings.DEFAULT_ORG_ID)
LOCAL_USER_ID = uuid.UUID(settings.LOCAL_USER_ID)


@pytest.fixture(scope="function")
async def test_engine():
    """In-memory database with the full schema."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    import_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(scope="function")
async def test_db(test_engine) -> AsyncGenerator[AsyncSession, None]:
    TestingSessionLocal = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture(scope="function")
def storage(tmp_path):
    """Backups land in a per-test directory."""
    adapter = LocalFilesystemStorage(str(tmp_path / "storage"))
    registry.use_object_storage(adapter)
    yield adapter
    registry.use_object_storage(None)


@pytest.fixture(scope="function")
async def client(test_db) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_session():
        yield test_db

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def as_role(test_db):
    """Switch the calling principal to a new user holding the given role for the rest of the test."""
    async def _set(role: str, scopes: tuple[str, ...] = ("*",)):
        user = User(org_id=ORG_ID, email=f"{uuid.uuid4().hex[:8]}@clinic.in", display_name=role.title(), role=role)
        test_db.add(user)
        await test_db.commit()
        principal = Principal(user_id=user.id, org_id=ORG_ID, scopes=list(scopes))
        app.dependency_overrides[get_principal] = lambda: principal
        return principal
    return _set


def patient_payload(**overrides) -> dict:
    data = {
        "nephroId": "NL-001",
        "firstName": "Asha",
        "lastName": "Verma",
        "dob": "1980-04-12",
        "gender": "Female",
        "contact": "+91 98765 43210",
        "address": {"city": "Pune", "state": "MH"},
        "clinicalProfile": {"primaryDiagnosis": "CKD stage 4", "bloodGroup": "B+"},
    }
    data.update(overrides)
    return data


@pytest.fixture
async def patient(client) -> dict:
    resp = await client.post(f"{settings.API_PREFIX}/patients", json=patient_payload())
    assert resp.status_code == 201, resp.text
    return resp.json()
