"""Server-side session storage.

A session maps an opaque id (carried in the signed cookie) to a user_id
claim with a fixed lifetime. Two interchangeable backends:
- DatabaseSessionStore: a table next to the application data (default)
- RedisSessionStore: one key per session, expiry handled by Redis TTL
"""

from coursehub.sessions.store import (
    DatabaseSessionStore,
    RedisSessionStore,
    SessionRecord,
    SessionStore,
)

__all__ = [
    "DatabaseSessionStore",
    "RedisSessionStore",
    "SessionRecord",
    "SessionStore",
]
