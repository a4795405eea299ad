"""
Test fixtures: the FastAPI app wired to a throwaway SQLite database.
"""
import os

os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SSE_SEND_WORK_PING", "true")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import NullPool

from achievement_api.database import get_db
from achievement_api.database.base_class import Base
from achievement_api.database.session import get_async_session
from achievement_api.main import app


@pytest.fixture
def client(tmp_path):
    db_path = tmp_path / "test.db"

    sync_engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()

    session_maker = get_async_session(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)

    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def category(client):
    response = client.post("/categories", json={"key": "beginner", "name": {"en": "Beginner", "ru": "Начинающий"}})
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def make_achievement(client, category):
    """Factory creating achievements in the `category` fixture."""

    def _make(target=5, **overrides):
        body = {
            "title": {"en": "First steps", "ru": "Первые шаги"},
            "description": "Complete your first task",
            "categoryId": category["id"],
            "target": target,
        }
        body.update(overrides)
        response = client.post("/achievements", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def live_clients(client):
    return client.app.state.live_clients
