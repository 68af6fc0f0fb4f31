from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from memory_backend.boundary.db.connection import get_async_db
from memory_backend.configs import Settings
from memory_backend.configs.memory import MemorySettings
from memory_backend.api.deps import get_settings_dependency


def _override_db(app, db):
    async def _db():
        yield db

    app.dependency_overrides[get_async_db] = _db


@pytest.fixture
def sql_settings(app) -> Settings:
    settings = Settings(memory=MemorySettings(embedding_dimension=4, store_backend="sql"))
    app.dependency_overrides[get_settings_dependency] = lambda: settings
    return settings


def test_health_check(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Server Healthy"}


def test_health_check_db_in_memory(app, client):
    _override_db(app, AsyncMock(spec=AsyncSession))

    response = client.get("/api/v1/health/db")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "In-memory record store"}


def test_health_check_db(app, client, sql_settings):
    db = AsyncMock(spec=AsyncSession)
    _override_db(app, db)

    response = client.get("/api/v1/health/db")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Database connection OK"}
    db.execute.assert_awaited_once()


def test_health_check_db_unreachable(app, client, sql_settings):
    db = AsyncMock(spec=AsyncSession)
    db.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))
    _override_db(app, db)

    response = client.get("/api/v1/health/db")

    assert response.status_code == 503


def test_correlation_id_echoed(client):
    response = client.get("/api/v1/health", headers={"X-Correlation-ID": "req-123"})
    assert response.headers["X-Correlation-ID"] == "req-123"


def test_correlation_id_generated(client):
    response = client.get("/api/v1/health")
    assert len(response.headers["X-Correlation-ID"]) == 36
