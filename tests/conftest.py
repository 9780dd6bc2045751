import os

# Settings are read at import time; pin them before the package is imported
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("AUTH_SECRET_KEY", "test-secret-key-for-jwt-signing-0123456789")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from metabolic_health.db.memory_store import MemoryStorage
from metabolic_health.db.seed import seed_content
from metabolic_health.main import create_app


class TickingClock:
    """Wall clock shifted by `offset`; successive calls never return the same instant."""

    def __init__(self):
        self.offset = timedelta(0)
        self._calls = 0

    def __call__(self) -> datetime:
        self._calls += 1
        return datetime.now(timezone.utc) + self.offset + timedelta(microseconds=self._calls)


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def storage(clock):
    store = MemoryStorage(clock=clock)
    seed_content(store)
    return store


@pytest.fixture
def client(storage):
    app = create_app(storage=storage)
    with TestClient(app) as c:
        yield c


def _register(client, email="ann@example.com", password="secret12", **extra):
    body = {"email": email, "password": password, "firstName": "Ann", "lastName": "Lee"}
    body.update(extra)
    resp = client.post("/api/auth/register", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def register_user(client):
    def _make(email="ann@example.com", password="secret12", **extra):
        return _register(client, email=email, password=password, **extra)

    return _make


@pytest.fixture
def auth_headers(client):
    data = _register(client)
    return {"Authorization": f"Bearer {data['token']}"}
