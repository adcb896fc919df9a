"""Session cookie signing.

The cookie value is "<sid>.<signature>", where the signature is an
HMAC-SHA256 of the session id keyed with the session secret. The id
itself is opaque; all state lives in the session store.
"""

import base64
import hashlib
import hmac
import secrets
from typing import Optional

from starlette.responses import Response

from coursehub.config import Settings


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


def _signature(sid: str, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), sid.encode("utf-8"), hashlib.sha256).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def sign_session_id(sid: str, secret: str) -> str:
    return f"{sid}.{_signature(sid, secret)}"


def unsign_session_id(value: Optional[str], secret: str) -> Optional[str]:
    """Return the session id from a cookie value, or None if it was tampered with."""
    if not value:
        return None
    sid, sep, signature = value.rpartition(".")
    if not sep or not sid:
        return None
    if not hmac.compare_digest(signature, _signature(sid, secret)):
        return None
    return sid


def set_session_cookie(response: Response, sid: str, settings: Settings) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        sign_session_id(sid, settings.session_secret),
        max_age=settings.session_ttl_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
        path="/",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(settings.session_cookie_name, path="/")
