"""
API test fixtures.

Builds the app with the record store and settings overridden so routes run
against an in-memory store with a small embedding dimension.
"""

import pytest
from fastapi.testclient import TestClient

from memory_backend.api.deps import get_settings_dependency, get_store
from memory_backend.api.main import create_app
from memory_backend.boundary.memory_store import InMemoryRecordStore
from memory_backend.configs import Settings


@pytest.fixture
def api_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def api_settings(memory_settings) -> Settings:
    return Settings(memory=memory_settings)


@pytest.fixture
def app(api_store, api_settings):
    app = create_app()
    app.dependency_overrides[get_store] = lambda: api_store
    app.dependency_overrides[get_settings_dependency] = lambda: api_settings
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def user_id(client) -> int:
    response = client.post(
        "/api/v1/users",
        json={"email": "api@example.com", "credential_hash": "hash"},
    )
    return response.json()["id"]
