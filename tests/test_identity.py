"""Identity resolver: failures degrade to anonymous, never to errors."""

import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from coursehub.auth.cookies import sign_session_id
from coursehub.auth.dependencies import Identity, get_identity_optional, get_web_session
from coursehub.db.engine import get_db
from coursehub.sessions import SessionRecord


def _record(user_id):
    return SessionRecord(
        sid="sid",
        user_id=user_id,
        expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
    )


@pytest.mark.asyncio
async def test_no_session_is_anonymous():
    db = AsyncMock()
    assert await get_identity_optional(web_session=None, db=db) is None
    db.get.assert_not_awaited()


@pytest.mark.asyncio
async def test_session_without_claim_is_anonymous():
    db = AsyncMock()
    assert await get_identity_optional(web_session=_record(None), db=db) is None
    db.get.assert_not_awaited()


@pytest.mark.asyncio
async def test_malformed_claim_is_anonymous():
    db = AsyncMock()
    assert await get_identity_optional(web_session=_record("not-a-uuid"), db=db) is None


@pytest.mark.asyncio
async def test_lookup_error_is_anonymous():
    db = AsyncMock()
    db.get.side_effect = OperationalError("SELECT", {}, Exception("db down"))
    identity = await get_identity_optional(web_session=_record(str(uuid.uuid4())), db=db)
    assert identity is None
    db.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_resolves_identity_without_password(app, create_account):
    user = await create_account("Carol", "carol@example.com")
    async with app.state.session_factory() as session:
        identity = await get_identity_optional(web_session=_record(str(user.id)), db=session)
    assert identity == Identity(id=user.id, name="Carol", email="carol@example.com", role="learner")
    assert not hasattr(identity, "password")


@pytest.mark.asyncio
async def test_driver_error_is_anonymous():
    db = AsyncMock()
    db.get.side_effect = ConnectionRefusedError("db unreachable")
    identity = await get_identity_optional(web_session=_record(str(uuid.uuid4())), db=db)
    assert identity is None
    db.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_session_store_error_is_no_session(app):
    settings = app.state.settings
    cookie = sign_session_id("some-sid", settings.session_secret)
    request = SimpleNamespace(cookies={settings.session_cookie_name: cookie})
    store = AsyncMock()
    store.load.side_effect = OSError("connection reset")

    assert await get_web_session(request=request, store=store, settings=settings) is None
    store.load.assert_awaited_once_with("some-sid")


@pytest.mark.asyncio
async def test_dashboard_redirects_when_database_unreachable(app, alice_client):
    broken = AsyncMock()
    broken.get.side_effect = ConnectionRefusedError("db unreachable")

    async def _broken_db():
        yield broken

    app.dependency_overrides[get_db] = _broken_db
    try:
        r = await alice_client.get("/dashboard")
    finally:
        app.dependency_overrides.clear()

    assert r.status_code == 302
    assert r.headers["location"] == "/login"
