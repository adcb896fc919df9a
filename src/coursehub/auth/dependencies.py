"""FastAPI auth dependencies.

Used as Depends() in route handlers:
- get_session_store: the configured backend for this request
- get_web_session: decodes the cookie and loads the server-side session
- get_identity_optional: the identity resolver; never fails the request
- get_current_identity: the access guard; raises Unauthorized
"""

import uuid
from dataclasses import dataclass
from typing import Optional

import structlog
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from coursehub.auth.cookies import unsign_session_id
from coursehub.config import Settings, get_settings
from coursehub.db.engine import get_db
from coursehub.db.models import User
from coursehub.errors import Unauthorized
from coursehub.redis_pool import get_redis
from coursehub.sessions.store import (
    DatabaseSessionStore,
    RedisSessionStore,
    SessionRecord,
    SessionStore,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class Identity:
    """The authenticated user attached to a request, minus the credential."""

    id: uuid.UUID
    name: str
    email: str
    role: str

    @classmethod
    def from_user(cls, user: User) -> "Identity":
        return cls(id=user.id, name=user.name, email=user.email, role=user.role)


def get_session_store(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> SessionStore:
    if settings.session_backend == "redis":
        return RedisSessionStore(get_redis(), settings.session_ttl_seconds)
    return DatabaseSessionStore(db, settings.session_ttl_seconds)


async def get_web_session(
    request: Request,
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings),
) -> Optional[SessionRecord]:
    """Load the session named by the request's cookie, if any."""
    sid = unsign_session_id(
        request.cookies.get(settings.session_cookie_name), settings.session_secret
    )
    if sid is None:
        return None
    try:
        return await store.load(sid)
    except Exception as e:
        logger.warning("session.load_failed", error=str(e))
        return None


async def get_identity_optional(
    web_session: Optional[SessionRecord] = Depends(get_web_session),
    db: AsyncSession = Depends(get_db),
) -> Optional[Identity]:
    """Resolve the session's user_id claim to an Identity.

    A missing claim, an unknown or malformed id, or any failure while
    reaching the database leaves the request anonymous. Guards downstream decide what that means.
    """
    if web_session is None or not web_session.user_id:
        return None
    try:
        user_id = uuid.UUID(web_session.user_id)
    except ValueError:
        logger.warning("identity.bad_claim", user_id=web_session.user_id)
        return None

    try:
        user = await db.get(User, user_id)
    except Exception as e:
        logger.warning("identity.lookup_failed", user_id=str(user_id), error=str(e))
        await db.rollback()
        return None

    if user is None:
        return None
    return Identity.from_user(user)


async def get_current_identity(
    identity: Optional[Identity] = Depends(get_identity_optional),
) -> Identity:
    """Require an identity (401 for API paths, login redirect for pages)."""
    if identity is None:
        raise Unauthorized()
    return identity
