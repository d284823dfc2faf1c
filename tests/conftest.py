"""Shared test fixtures."""

import itertools

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from mentormatch.db.base import Base
# Import all models to register with Base.metadata
import mentormatch.db.models  # noqa: F401
from mentormatch.events.connection_registry import ConnectionRegistry

_counter = itertools.count(1)


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Create a test database session."""
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def registry():
    return ConnectionRegistry(queue_size=10)


@pytest.fixture
def app(db_engine, registry):
    """Create a test application instance with in-memory DB."""
    from mentormatch.main import create_app

    _app = create_app()
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    _app.state.db_engine = db_engine
    _app.state.db_session_factory = session_factory
    _app.state.connection_registry = registry
    return _app


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def auth(user: dict) -> dict:
    return {"Authorization": f"Bearer {user['token']}"}


async def _register(client, payload: dict) -> dict:
    response = await client.post("/api/v1/auth/register", json=payload)
    assert response.status_code == 201, response.text
    body = response.json()
    return {**body["user"], "token": body["access_token"]}


@pytest.fixture
def make_student(client):
    """Register a student and return its profile plus bearer token."""

    async def _make(**overrides) -> dict:
        n = next(_counter)
        payload = {
            "role": "student",
            "email": f"student{n}@example.edu",
            "password": "secret123",
            "name": f"Student {n}",
            "usn": f"1XX21CS{n:03d}",
            "domain": "Computer Science",
        }
        payload.update(overrides)
        return await _register(client, payload)

    return _make


@pytest.fixture
def make_mentor(client):
    """Register a mentor and return its profile plus bearer token."""

    async def _make(**overrides) -> dict:
        n = next(_counter)
        payload = {
            "role": "mentor",
            "email": f"mentor{n}@example.edu",
            "password": "secret123",
            "name": f"Mentor {n}",
            "expertise": ["Python", "Machine Learning"],
            "summary": "Guides student research projects.",
        }
        payload.update(overrides)
        return await _register(client, payload)

    return _make


@pytest.fixture
def make_project(client):
    """Create a project as ``student`` and return the response body."""

    async def _make(student: dict, **overrides) -> dict:
        payload = {
            "title": "Crop disease detection",
            "idea": "Detect plant diseases from leaf photos using deep learning",
            "guidance_needed": "Model selection and deployment",
            "keywords": ["python", "vision"],
        }
        payload.update(overrides)
        response = await client.post("/api/v1/projects", json=payload, headers=auth(student))
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def approved_project(client, make_project):
    """Create a project, request ``mentor`` and have the mentor approve it."""

    async def _make(student: dict, mentor: dict, **overrides) -> dict:
        project = await make_project(student, mentor_id=mentor["user_id"], **overrides)
        response = await client.post(
            "/api/v1/projects/mentor/respond",
            json={"project_id": project["project_id"], "status": "approved"},
            headers=auth(mentor),
        )
        assert response.status_code == 200, response.text
        return response.json()

    return _make
