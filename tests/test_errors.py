"""Unexpected errors: generic 500, details stay in the logs."""

import pytest
from httpx import ASGITransport, AsyncClient

from coursehub.errors import is_api_path


@pytest.fixture
def exploding_app(app):
    async def boom():
        raise RuntimeError("connection string with password=hunter2")

    app.add_api_route("/api/boom", boom)
    app.add_api_route("/boom", boom)
    return app


@pytest.mark.asyncio
async def test_api_500_is_generic_json(exploding_app):
    transport = ASGITransport(app=exploding_app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        r = await ac.get("/api/boom")
    assert r.status_code == 500
    assert r.json() == {"detail": "Internal Server Error"}
    assert "hunter2" not in r.text


@pytest.mark.asyncio
async def test_page_500_is_plain_text(exploding_app):
    transport = ASGITransport(app=exploding_app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        r = await ac.get("/boom")
    assert r.status_code == 500
    assert r.text == "Internal Server Error"


def test_is_api_path():
    assert is_api_path("/api", "/api")
    assert is_api_path("/api/courses", "/api")
    assert is_api_path("/api/courses", "/api/")
    assert not is_api_path("/apiary", "/api")
    assert not is_api_path("/dashboard", "/api")
