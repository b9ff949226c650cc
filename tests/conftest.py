"""
Shared fixtures.

Every test gets its own SQLite file under tmp_path. Engines use NullPool so
no connection outlives the event loop that opened it: service tests drive
coroutines with asyncio.run, and TestClient runs each request on its own
loop.
"""
import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from app.core.database import get_db, init_models, make_session_maker
from app.main import app


@pytest.fixture
def engine(tmp_path):
    """Async engine over a fresh database with all tables created."""
    db_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'radio.db'}",
        poolclass=NullPool,
    )
    asyncio.run(init_models(db_engine))
    yield db_engine
    asyncio.run(db_engine.dispose())


@pytest.fixture
def session_maker(engine):
    return make_session_maker(engine)


@pytest.fixture
def client(session_maker):
    """Test client whose requests use the per-test database."""

    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def resolve_song(client):
    """Create (or look up) a song through the API and return its id."""

    def _resolve(artist="Test Artist", title="Test Song", album="Test Album"):
        response = client.post(
            "/api/songs/vote-info",
            json={"artist": artist, "title": title, "album": album},
        )
        assert response.status_code == 200
        return response.json()["songId"]

    return _resolve
