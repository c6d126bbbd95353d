"""Shared test fixtures - each test gets its own throwaway SQLite database."""

import pytest
from httpx import ASGITransport, AsyncClient

from player_api.api.deps import DELETE_PLAYER_CLAIM
from player_api.config import Settings
from player_api.db.database import create_tables
from player_api.main import create_app
from player_api.services.identity_service import IdentityOptions, IdentityService

PASSWORD = "Passw0rd!"
TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        JWT_SECRET_KEY=TEST_SECRET,
        LOCKOUT_MAX_FAILED_ATTEMPTS=3,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
async def app(settings):
    """App with tables created; httpx's transport doesn't run the lifespan."""
    app = create_app(settings)
    await create_tables(app.state.ctx.engine)
    yield app
    await app.state.ctx.dispose()


@pytest.fixture
def ctx(app):
    return app.state.ctx


@pytest.fixture
async def db(ctx):
    """Direct async DB session for repository/service-level tests."""
    async with ctx.session() as session:
        yield session


@pytest.fixture
async def client(app):
    """Async HTTP test client bound to the test app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def register(client, email, password=PASSWORD):
    return await client.post(
        "/registration",
        json={"email": email, "password": password, "confirmPassword": password},
    )


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def auth_headers(client):
    """Headers for a freshly registered user with no extra claims."""
    resp = await register(client, "user@example.com")
    assert resp.status_code == 200
    return bearer(resp.json()["accessToken"])


@pytest.fixture
async def admin_headers(client, ctx):
    """Headers for a user holding the delete-player claim."""
    email = "admin@example.com"
    resp = await register(client, email)
    assert resp.status_code == 200

    async with ctx.session() as session:
        identity = IdentityService(session, IdentityOptions.from_settings(ctx.settings))
        result = await identity.add_claim(email, DELETE_PLAYER_CLAIM)
        assert result.succeeded

    # Claims are baked into the token, so sign in again to pick it up
    resp = await client.post("/login", json={"email": email, "password": PASSWORD})
    assert resp.status_code == 200
    return bearer(resp.json()["accessToken"])
