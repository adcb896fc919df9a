"""CLI commands against a throwaway SQLite file."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from click.testing import CliRunner
from sqlalchemy import select

from coursehub.cli.main import cli
from coursehub.config import Settings
from coursehub.db.engine import create_engine_for, create_session_factory, init_models
from coursehub.db.models import User, WebSession


@pytest.fixture
def db_url(tmp_path, monkeypatch):
    url = f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setenv("COURSEHUB_DATABASE_URL", url)
    monkeypatch.setenv("COURSEHUB_BCRYPT_ROUNDS", "4")
    return url


def _query(url, fn):
    async def _go():
        engine = create_engine_for(Settings(database_url=url))
        try:
            await init_models(engine)
            async with create_session_factory(engine)() as session:
                return await fn(session)
        finally:
            await engine.dispose()

    return asyncio.run(_go())


def test_init_db(db_url):
    result = CliRunner().invoke(cli, ["init-db"])
    assert result.exit_code == 0, result.output
    assert "Database ready" in result.output


def test_create_admin(db_url):
    result = CliRunner().invoke(
        cli,
        ["create-user", "--name", "Ada", "--email", "Ada@Example.com",
         "--password", "pw", "--role", "admin"],
    )
    assert result.exit_code == 0, result.output
    assert "Created admin ada@example.com" in result.output

    async def _fetch(session):
        return (await session.execute(select(User))).scalars().one()

    user = _query(db_url, _fetch)
    assert user.role == "admin"
    assert user.password.startswith("$2")


def test_create_user_duplicate(db_url):
    args = ["create-user", "--name", "Ada", "--email", "ada@example.com", "--password", "pw"]
    assert CliRunner().invoke(cli, args).exit_code == 0
    result = CliRunner().invoke(cli, args)
    assert result.exit_code == 1


def test_create_user_rejects_unknown_role(db_url):
    result = CliRunner().invoke(
        cli,
        ["create-user", "--name", "X", "--email", "x@example.com",
         "--password", "pw", "--role", "root"],
    )
    assert result.exit_code == 2


def test_purge_sessions(db_url):
    now = datetime.now(timezone.utc)

    async def _seed(session):
        session.add_all(
            [
                WebSession(sid="a", user_id="u", expires_at=now - timedelta(hours=1)),
                WebSession(sid="b", user_id="u", expires_at=now + timedelta(hours=1)),
            ]
        )
        await session.commit()

    _query(db_url, _seed)

    result = CliRunner().invoke(cli, ["purge-sessions"])
    assert result.exit_code == 0, result.output
    assert "Removed 1 expired session(s)." in result.output
