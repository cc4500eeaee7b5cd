"""Test fixtures — a fresh in-memory database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Env vars are set BEFORE anything imports teamdesk, so the settings
   singleton (and the engine built from it) point at in-memory SQLite.
2. Each test creates the schema, and disposing the engine afterwards
   throws the whole database away (StaticPool holds its only connection).
3. httpx talks to the app in-process through ASGITransport. Lifespan
   doesn't run, so Redis is never initialized and rate limiting is off.

Two client flavors, as in the auth tests:
- client: get_current_user overridden with a seeded identity — quick CRUD tests
- unauthenticated_client: the real bearer-token pipeline
"""

import os

os.environ["TEAMDESK_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["TEAMDESK_BCRYPT_ROUNDS"] = "4"
os.environ["TEAMDESK_AUTO_CREATE_SCHEMA"] = "false"
os.environ["TEAMDESK_ENVIRONMENT"] = "development"

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from teamdesk.auth.dependencies import CurrentIdentity, get_current_user  # noqa: E402
from teamdesk.auth.password import hash_password  # noqa: E402
from teamdesk.db.engine import async_session_factory, create_schema, engine  # noqa: E402
from teamdesk.db.models import Team, User  # noqa: E402
from teamdesk.main import app  # noqa: E402


@pytest_asyncio.fixture()
async def schema():
    """Create all tables; drop the in-memory database after the test."""
    await create_schema()
    yield
    app.dependency_overrides.clear()
    await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(schema):
    """A plain session for service-level tests."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def _seed_user(email: str, name: str, team_name: str) -> CurrentIdentity:
    async with async_session_factory() as s:
        team = Team(name=team_name)
        user = User(
            email=email,
            name=name,
            password_hash=hash_password("password_123"),
            team=team,
        )
        s.add(user)
        await s.commit()
        return CurrentIdentity(
            user_id=str(user.id),
            email=user.email,
            name=user.name,
            role=user.role,
            team_name=team.name,
            team_id=team.id,
        )


@pytest_asyncio.fixture()
async def identity(schema) -> CurrentIdentity:
    """A seeded user in 'Test Team'."""
    return await _seed_user("tester@example.com", "Tester", "Test Team")


@pytest_asyncio.fixture()
async def other_identity(schema) -> CurrentIdentity:
    """A seeded user in a different team."""
    return await _seed_user("rival@example.com", "Rival", "Rival Team")


@pytest_asyncio.fixture()
async def client(identity):
    """HTTP client with get_current_user overridden to the seeded identity.

    Learn: Tests don't need to register+login before each case.
    """
    app.dependency_overrides[get_current_user] = lambda: identity

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.pop(get_current_user, None)


@pytest_asyncio.fixture()
async def no_team_client(schema):
    """HTTP client whose identity carries no team claim."""
    app.dependency_overrides[get_current_user] = lambda: CurrentIdentity(
        user_id="00000000-0000-0000-0000-000000000001",
        email="drifter@example.com",
        name="Drifter",
    )

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.pop(get_current_user, None)


@pytest_asyncio.fixture()
async def unauthenticated_client(schema):
    """HTTP client WITHOUT auth override — for testing real token flows."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture()
async def register_user(unauthenticated_client):
    """Register through the real API.

    Returns an async helper giving the response body plus ready-made
    auth headers under "headers".
    """

    async def _register(email: str, team_name: str = None, **extra) -> dict:
        body = {"email": email, "password": "pw123456", **extra}
        if team_name is not None:
            body["teamName"] = team_name
        r = await unauthenticated_client.post("/api/auth/register", json=body)
        assert r.status_code == 201, r.text
        data = r.json()
        data["headers"] = {"Authorization": f"Bearer {data['token']}"}
        return data

    return _register
