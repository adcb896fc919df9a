"""CourseHub CLI — run the server and look after the database.

Usage:
    coursehub serve                                  # Run the web app (uvicorn)
    coursehub init-db                                # Create missing tables
    coursehub create-user --name Ada --email ada@example.com --role admin
    coursehub purge-sessions                         # Drop expired sessions

All commands read the same COURSEHUB_* environment as the server.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import sys

import click

from coursehub.auth.policy import Role
from coursehub.config import Settings
from coursehub.db.engine import create_engine_for, create_session_factory, init_models
from coursehub.errors import Conflict
from coursehub.services.user_service import UserService
from coursehub.sessions.store import DatabaseSessionStore


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Handles nested event loops (e.g. when invoked via CliRunner inside an
    existing async context) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


async def _with_db(settings: Settings, fn):
    """Create tables if needed, then run fn(session) and dispose the engine."""
    engine = create_engine_for(settings)
    try:
        await init_models(engine)
        async with create_session_factory(engine)() as session:
            return await fn(session)
    finally:
        await engine.dispose()


@click.group()
def cli():
    """CourseHub — course management backend."""


@cli.command()
@click.option("--host", default=None, help="Bind address (default: COURSEHUB_HOST)")
@click.option("--port", default=None, type=int, help="Port (default: COURSEHUB_PORT)")
@click.option("--reload", is_flag=True, help="Reload on code changes (development)")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the web application."""
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "coursehub.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@cli.command("init-db")
def init_db():
    """Create any missing tables."""
    settings = Settings()

    async def _noop(session):
        return None

    _run(_with_db(settings, _noop))
    click.secho("Database ready.", fg="green")


@cli.command("create-user")
@click.option("--name", required=True)
@click.option("--email", required=True)
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Prompted for when omitted",
)
@click.option(
    "--role",
    type=click.Choice([r.value for r in Role]),
    default=Role.USER.value,
    show_default=True,
)
def create_user(name: str, email: str, password: str, role: str):
    """Create an account, e.g. the first admin."""
    settings = Settings()

    async def _create(session):
        return await UserService(session, settings).create_account(
            name=name, email=email, password=password, role=Role(role)
        )

    try:
        user = _run(_with_db(settings, _create))
    except Conflict as e:
        click.secho(f"Error: {e.detail}", fg="red", err=True)
        sys.exit(1)
    click.echo(f"Created {user.role} {user.email} ({user.id})")


@cli.command("purge-sessions")
def purge_sessions():
    """Delete expired sessions from the database session store."""
    settings = Settings()
    if settings.session_backend != "database":
        click.echo("Session backend is Redis; expiry is handled there.")
        return

    async def _purge(session):
        return await DatabaseSessionStore(session, settings.session_ttl_seconds).purge_expired()

    removed = _run(_with_db(settings, _purge))
    click.echo(f"Removed {removed} expired session(s).")


if __name__ == "__main__":
    cli()
