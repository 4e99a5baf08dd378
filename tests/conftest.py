import os
import uuid

import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient

# Настройки читаются при импорте приложения
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./docvault-test.db")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from docvault.core.config import reload_settings  # noqa: E402
from docvault.core.db import Base, dispose_engine, get_engine, get_sessionmaker  # noqa: E402
import docvault.db.models  # noqa: E402,F401
from docvault.main import create_app  # noqa: E402


@pytest.fixture
async def database(tmp_path, monkeypatch):
    """Чистая SQLite база на каждый тест"""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'docvault.db'}")
    await dispose_engine()
    settings = reload_settings()

    engine = get_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield settings

    await dispose_engine()
    monkeypatch.undo()
    reload_settings()


@pytest.fixture
def reconfigure(database, monkeypatch):
    """Переопределение переменных окружения поверх уже созданной базы"""
    async def _reconfigure(**env):
        await dispose_engine()
        for key, value in env.items():
            monkeypatch.setenv(key, str(value))
        return reload_settings()

    return _reconfigure


@pytest.fixture
def session_factory(database):
    return get_sessionmaker()


@pytest.fixture
async def client(database):
    app = create_app(database)
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as test_client:
            yield test_client


@pytest.fixture
def create_user(client):
    async def _create_user(email=None, display_name="Test User"):
        email = email or f"user-{uuid.uuid4().hex[:8]}@example.com"
        response = await client.post("/users", json={"email": email, "displayName": display_name})
        assert response.status_code == 201, response.text
        return response.json()["user"]

    return _create_user


def auth_headers(user_id) -> dict:
    return {"X-User-Id": str(user_id)}


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def create_document(client):
    async def _create_document(user_id, title="Notes", content="v1"):
        response = await client.post(
            "/documents",
            json={"title": title, "content": content},
            headers=auth_headers(user_id),
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create_document
