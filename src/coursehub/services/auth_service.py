"""Auth service — registration and login.

Login walks a short state machine per attempt:

    verify hashed ──match──▶ success
         │ mismatch / error
         ▼
    verify legacy ──match──▶ migrate (re-hash, persist) ──▶ success
         │ mismatch
         ▼
       fail

The legacy step covers accounts whose password was stored before
hashing was introduced. It is only reached after bcrypt verification
has failed, and never for a stored value that is already a hash.
"""

import asyncio

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from coursehub.auth.password import CredentialCheck, check_credential
from coursehub.auth.policy import parse_registration_role
from coursehub.config import Settings
from coursehub.db.models import User
from coursehub.errors import InvalidCredentials
from coursehub.schemas.user import RegisterRequest
from coursehub.services.user_service import UserService

logger = structlog.get_logger()


class AuthService:
    """Registration and credential checks."""

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.users = UserService(db, settings)

    async def register(self, body: RegisterRequest) -> User:
        """Create a self-service account. Raises Conflict for a known email."""
        return await self.users.create_account(
            name=body.name,
            email=body.email,
            password=body.password,
            role=parse_registration_role(body.role),
        )

    async def authenticate(self, email: str, password: str) -> User:
        """Return the user for a correct email/password pair.

        Raises InvalidCredentials for an unknown email and a wrong
        password alike.
        """
        user = await self.users.get_by_email(email)
        if user is None:
            logger.info("auth.login_failed")
            raise InvalidCredentials()

        outcome = await asyncio.to_thread(check_credential, password, user.password)
        if outcome is CredentialCheck.FAILED:
            logger.info("auth.login_failed", user_id=str(user.id))
            raise InvalidCredentials()

        if outcome is CredentialCheck.LEGACY:
            user.password = await self.users.hash(password)
            await self.db.commit()
            logger.info("auth.password_migrated", user_id=str(user.id))

        logger.info("auth.login_succeeded", user_id=str(user.id))
        return user
