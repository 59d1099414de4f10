"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncIterator, Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.core import db_client
from src.core.config import settings
from src.domain.user import RequestContext
from src.main import app
from tests.unit.mocks import InMemoryDBClient


# In-memory store fixtures


@pytest.fixture
def in_memory_db():
    """Provides a fresh InMemoryDBClient for each test."""
    return InMemoryDBClient()


@pytest.fixture
def patched_db(monkeypatch, in_memory_db):
    """Patches src.core.db_client functions to use InMemoryDBClient."""
    monkeypatch.setattr("src.core.db_client.create_record", in_memory_db.create_record)
    monkeypatch.setattr("src.core.db_client.get_record", in_memory_db.get_record)
    monkeypatch.setattr("src.core.db_client.update_record", in_memory_db.update_record)
    monkeypatch.setattr("src.core.db_client.delete_record", in_memory_db.delete_record)
    monkeypatch.setattr("src.core.db_client.list_records", in_memory_db.list_records)
    monkeypatch.setattr("src.core.db_client.get_first_record", in_memory_db.get_first_record)

    return in_memory_db


@pytest.fixture
def alice_ctx() -> RequestContext:
    return RequestContext(user_id="user_alice", email="alice@example.com")


@pytest.fixture
def bob_ctx() -> RequestContext:
    return RequestContext(user_id="user_bob", email="bob@example.com")


@pytest.fixture
def client(patched_db) -> TestClient:
    """FastAPI test client backed by the in-memory store (lifespan not run)."""
    return TestClient(app)


def _signup(client: TestClient, *, name: str, email: str, password: str = "secret123") -> dict:
    response = client.post("/api/auth/signup", json={"name": name, "email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()["data"]


def auth_headers(client: TestClient, *, name: str, email: str, password: str = "secret123") -> dict[str, str]:
    """Sign up a user and return the Authorization header for their token."""
    data = _signup(client, name=name, email=email, password=password)
    return {"Authorization": f"Bearer {data['token']}"}


@pytest.fixture
def alice(client: TestClient) -> dict:
    """Signed-up user with ``id``, ``name``, ``email``, ``token`` and ready ``headers``."""
    data = _signup(client, name="Alice", email="alice@example.com")
    return {**data, "headers": {"Authorization": f"Bearer {data['token']}"}}


@pytest.fixture
def bob(client: TestClient) -> dict:
    data = _signup(client, name="Bob", email="bob@example.com")
    return {**data, "headers": {"Authorization": f"Bearer {data['token']}"}}


@pytest.fixture
def task_factory(client: TestClient):
    """Factory creating tasks through the API.

    Usage:
        task = task_factory(alice, title="Buy milk", priority="high")
    """

    def _create_task(user: dict, **fields) -> dict:
        body = {"title": "Task", **fields}
        response = client.post("/api/tasks", json=body, headers=user["headers"])
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create_task


# SQLite store fixtures


@pytest.fixture
def sqlite_path(tmp_path: Path, monkeypatch) -> str:
    """Point the store at a throwaway SQLite file."""
    path = str(tmp_path / "tasklist_test.db")
    monkeypatch.setattr(settings, "sqlite_db_path", path)
    return path


@pytest.fixture
async def sqlite_db(sqlite_path: str) -> AsyncIterator[str]:
    """Initialized SQLite store for the current event loop, closed after the test."""
    await db_client.init_db()
    yield sqlite_path
    await db_client.close_connection()


@pytest.fixture
def live_client(sqlite_path: str) -> Iterator[TestClient]:
    """Test client with the full lifespan running against a temporary SQLite file."""
    with TestClient(app) as client:
        yield client
