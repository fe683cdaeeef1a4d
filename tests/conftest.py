from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from spendwise.core.clock import get_clock
from spendwise.db.store import MemoryStore, get_store
from spendwise.main import app
from spendwise.utils.money_coach import get_llm_client

FIXED_NOW = datetime(2025, 11, 20, 12, 0, 0)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_clock] = lambda: (lambda: FIXED_NOW)
    app.dependency_overrides[get_llm_client] = lambda: None
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    payload = {"name": "asha", "password": "secret12", "confirm_password": "secret12"}
    assert client.post("/api/auth/register", json=payload).status_code == 201
    response = client.post("/api/auth/login", json={"name": "asha", "password": "secret12"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
