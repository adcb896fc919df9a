"""Session store backends."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import redis.asyncio as aioredis
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from coursehub.auth.cookies import new_session_id
from coursehub.db.models import WebSession


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass
class SessionRecord:
    sid: str
    user_id: Optional[str]
    expires_at: datetime

    @property
    def expired(self) -> bool:
        return self.expires_at <= _utcnow()


class SessionStore:
    """Interface shared by the backends."""

    def __init__(self, ttl_seconds: int):
        self.ttl_seconds = ttl_seconds

    async def load(self, sid: str) -> Optional[SessionRecord]:
        """Return the live session for sid, or None if unknown or expired."""
        raise NotImplementedError

    async def create(self, user_id: str) -> SessionRecord:
        """Issue a new session carrying a user_id claim."""
        raise NotImplementedError

    async def destroy(self, sid: str) -> None:
        raise NotImplementedError

    def _expiry(self) -> datetime:
        return _utcnow() + timedelta(seconds=self.ttl_seconds)


class DatabaseSessionStore(SessionStore):
    """Sessions in the web_sessions table. Expired rows are ignored on
    load and removed by purge_expired()."""

    def __init__(self, db: AsyncSession, ttl_seconds: int):
        super().__init__(ttl_seconds)
        self.db = db

    async def load(self, sid: str) -> Optional[SessionRecord]:
        row = await self.db.get(WebSession, sid)
        if row is None:
            return None
        record = SessionRecord(
            sid=row.sid, user_id=row.user_id, expires_at=_aware(row.expires_at)
        )
        if record.expired:
            await self.destroy(sid)
            return None
        return record

    async def create(self, user_id: str) -> SessionRecord:
        row = WebSession(sid=new_session_id(), user_id=user_id, expires_at=self._expiry())
        self.db.add(row)
        await self.db.commit()
        return SessionRecord(sid=row.sid, user_id=row.user_id, expires_at=row.expires_at)

    async def destroy(self, sid: str) -> None:
        await self.db.execute(delete(WebSession).where(WebSession.sid == sid))
        await self.db.commit()

    async def purge_expired(self) -> int:
        """Delete every expired session row. Returns how many were removed."""
        result = await self.db.execute(
            select(WebSession.sid).where(WebSession.expires_at <= _utcnow())
        )
        sids = list(result.scalars().all())
        if sids:
            await self.db.execute(delete(WebSession).where(WebSession.sid.in_(sids)))
            await self.db.commit()
        return len(sids)


class RedisSessionStore(SessionStore):
    """Sessions as Redis string keys holding the user_id claim."""

    def __init__(self, redis: aioredis.Redis, ttl_seconds: int, prefix: str = "coursehub:sess:"):
        super().__init__(ttl_seconds)
        self.redis = redis
        self.prefix = prefix

    def _key(self, sid: str) -> str:
        return f"{self.prefix}{sid}"

    async def load(self, sid: str) -> Optional[SessionRecord]:
        key = self._key(sid)
        user_id = await self.redis.get(key)
        if user_id is None:
            return None
        remaining = await self.redis.ttl(key)
        if remaining is None or remaining <= 0:
            # expired between the two calls, or somehow lost its TTL
            return None
        if isinstance(user_id, bytes):
            user_id = user_id.decode("utf-8")
        return SessionRecord(
            sid=sid,
            user_id=user_id or None,
            expires_at=_utcnow() + timedelta(seconds=remaining),
        )

    async def create(self, user_id: str) -> SessionRecord:
        sid = new_session_id()
        await self.redis.set(self._key(sid), user_id, ex=self.ttl_seconds)
        return SessionRecord(sid=sid, user_id=user_id, expires_at=self._expiry())

    async def destroy(self, sid: str) -> None:
        await self.redis.delete(self._key(sid))
