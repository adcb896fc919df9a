"""Test fixtures — a fresh app on an in-memory SQLite database per test.

Testing pattern for async SQLAlchemy + FastAPI:

1. Each test builds its own app via create_app(Settings(...)) pointed at
   sqlite+aiosqlite:// (one shared connection, see create_engine_for).
2. Tables are created up front; the database vanishes with the engine.
3. Clients log in through the real POST /login route, so every test
   exercises the cookie → session store → identity pipeline. Each
   logged-in user gets its own AsyncClient (its own cookie jar).
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from coursehub.auth.policy import Role
from coursehub.config import Settings
from coursehub.db.engine import init_models
from coursehub.main import create_app
from coursehub.services.user_service import UserService

PASSWORD = "correct-horse-battery"
COOKIE = "coursehub.sid"


def make_settings(**overrides) -> Settings:
    values = {
        "database_url": "sqlite+aiosqlite://",
        "session_secret": "test-secret",
        "bcrypt_rounds": 4,  # bcrypt's minimum; keeps the suite fast
        "environment": "development",
    }
    values.update(overrides)
    return Settings(**values)


@pytest_asyncio.fixture()
async def app():
    app = create_app(make_settings())
    await init_models(app.state.engine)
    yield app
    await app.state.engine.dispose()


@pytest_asyncio.fixture()
async def make_client(app):
    """Factory for extra clients, each with an empty cookie jar."""
    clients = []

    def _make() -> AsyncClient:
        transport = ASGITransport(app=app)
        ac = AsyncClient(transport=transport, base_url="http://test")
        clients.append(ac)
        return ac

    yield _make

    for ac in clients:
        await ac.aclose()


@pytest_asyncio.fixture()
async def client(make_client):
    """Anonymous client."""
    return make_client()


@pytest.fixture
def create_account(app):
    """Create an account directly through the service layer."""

    async def _create(name: str, email: str, role: Role = Role.LEARNER, password: str = PASSWORD):
        async with app.state.session_factory() as session:
            svc = UserService(session, app.state.settings)
            return await svc.create_account(name=name, email=email, password=password, role=role)

    return _create


@pytest.fixture
def login_as(make_client):
    """Log in through POST /login and return the client holding the cookie."""

    async def _login(email: str, password: str = PASSWORD) -> AsyncClient:
        ac = make_client()
        r = await ac.post("/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        return ac

    return _login


# ─── Standard cast ──────────────────────────────────────


@pytest_asyncio.fixture()
async def admin(create_account):
    return await create_account("Ada Admin", "admin@example.com", Role.ADMIN)


@pytest_asyncio.fixture()
async def alice(create_account):
    return await create_account("Alice", "alice@example.com", Role.TEACHER)


@pytest_asyncio.fixture()
async def bob(create_account):
    return await create_account("Bob", "bob@example.com", Role.LEARNER)


@pytest_asyncio.fixture()
async def admin_client(admin, login_as):
    return await login_as(admin.email)


@pytest_asyncio.fixture()
async def alice_client(alice, login_as):
    return await login_as(alice.email)


@pytest_asyncio.fixture()
async def bob_client(bob, login_as):
    return await login_as(bob.email)
