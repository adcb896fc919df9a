"""Password hashing utilities.

Uses bcrypt for password hashing. bcrypt salts automatically and
produces hashes starting with "$2b$". Passwords are truncated to
72 bytes (bcrypt's limit).

Accounts created before hashing was introduced still hold their
password as plaintext. check_credential() recognises those, and the
caller re-hashes the password on the first successful login.
"""

import enum
import secrets
from typing import Optional

import bcrypt

DEFAULT_ROUNDS = 12


class CredentialCheck(enum.Enum):
    HASHED = "hashed"  # matched the stored bcrypt hash
    LEGACY = "legacy"  # matched a stored plaintext value; must be migrated
    FAILED = "failed"


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with bcrypt."""
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def _checkpw(password: str, stored: str) -> Optional[bool]:
    """bcrypt.checkpw, or None when stored is not a well-formed bcrypt hash."""
    try:
        pw_bytes = password.encode("utf-8")[:72]
        hash_bytes = stored.encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError):
        return None


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against a bcrypt hash.

    Anything that is not a usable hash (including legacy plaintext)
    simply fails verification.
    """
    return bool(_checkpw(password, password_hash))


def matches_legacy(password: str, stored: str) -> bool:
    """Byte-for-byte comparison against a stored plaintext password."""
    return secrets.compare_digest(password.encode("utf-8"), stored.encode("utf-8"))


def check_credential(password: str, stored: str | None) -> CredentialCheck:
    """Hashed verification first, the legacy plaintext comparison second.

    The plaintext comparison only runs when bcrypt cannot parse the
    stored value. A real hash that does not match is a failure, otherwise
    the hash string itself would work as a password.
    """
    if not stored:
        return CredentialCheck.FAILED
    hashed = _checkpw(password, stored)
    if hashed:
        return CredentialCheck.HASHED
    if hashed is None and matches_legacy(password, stored):
        return CredentialCheck.LEGACY
    return CredentialCheck.FAILED
