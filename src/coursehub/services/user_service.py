"""User service — account lifecycle and the admin/self rules around it.

Routes call services, services call the database. Every public method
that acts on behalf of a request takes the caller's Identity and
applies the policy itself, so the rules hold for any caller.

Ordering for single-user routes: the ownership check runs against the
requested id before the lookup. A non-admin asking about someone else
always gets 403, whether or not that account exists; only admins and
the account itself can see a 404.
"""

import asyncio
import uuid
from typing import Optional

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from coursehub.auth.dependencies import Identity
from coursehub.auth.password import hash_password
from coursehub.auth.policy import DEFAULT_API_ROLE, Role, is_admin, is_owner_or_admin
from coursehub.config import Settings
from coursehub.db.models import Course, User
from coursehub.errors import Conflict, Forbidden, NotFound
from coursehub.schemas.user import UserCreate, UserUpdate

logger = structlog.get_logger()


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class UserService:
    """Business logic for user accounts."""

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings

    async def hash(self, password: str) -> str:
        """bcrypt off the event loop."""
        return await asyncio.to_thread(hash_password, password, self.settings.bcrypt_rounds)

    # ─── Lookups ────────────────────────────────────────

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalars().first()

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return await self.db.get(User, user_id)

    # ─── Creation ───────────────────────────────────────

    async def create_account(
        self, name: str, email: str, password: str, role: Role
    ) -> User:
        """Create an account with a hashed password. No authorization check;
        callers decide who may reach this."""
        email = normalize_email(email)
        if await self.get_by_email(email):
            raise Conflict("User already exists")

        user = User(
            name=name,
            email=email,
            password=await self.hash(password),
            role=role.value,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # lost a race with another request registering the same email
            await self.db.rollback()
            raise Conflict("User already exists")
        logger.info("users.created", user_id=str(user.id), role=user.role)
        return user

    async def create_user(self, identity: Identity, body: UserCreate) -> User:
        """Admin-initiated account creation."""
        if not is_admin(identity):
            raise Forbidden()
        try:
            return await self.create_account(
                name=body.name,
                email=body.email,
                password=body.password or self.settings.default_user_password,
                role=body.role or DEFAULT_API_ROLE,
            )
        except Conflict:
            raise Conflict("Email already in use")

    # ─── Reads ──────────────────────────────────────────

    async def list_users(self, identity: Identity) -> list[User]:
        if not is_admin(identity):
            raise Forbidden()
        result = await self.db.execute(select(User).order_by(User.created_at))
        return list(result.scalars().all())

    async def get_user(self, identity: Identity, user_id: uuid.UUID) -> User:
        if not is_owner_or_admin(identity, user_id):
            raise Forbidden()
        user = await self.get_by_id(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    # ─── Updates ────────────────────────────────────────

    async def update_user(
        self, identity: Identity, user_id: uuid.UUID, body: UserUpdate
    ) -> User:
        """Partial update. A role change from a non-admin is dropped, not refused."""
        if not is_owner_or_admin(identity, user_id):
            raise Forbidden()
        user = await self.get_by_id(user_id)
        if user is None:
            raise NotFound("User not found")

        if body.name:
            user.name = body.name
        if body.email:
            email = normalize_email(body.email)
            if email != user.email:
                other = await self.get_by_email(email)
                if other is not None:
                    raise Conflict("Email already in use")
                user.email = email
        if body.password:
            user.password = await self.hash(body.password)
        if body.role is not None:
            if is_admin(identity):
                user.role = body.role.value
            else:
                logger.info(
                    "users.role_change_ignored",
                    user_id=str(user_id),
                    requested_by=str(identity.id),
                )

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict("Email already in use")
        return user

    # ─── Deletion ───────────────────────────────────────

    async def delete_user(self, identity: Identity, user_id: uuid.UUID) -> int:
        """Delete an account and every course it owns.

        Both deletes run in one transaction, so a failure part-way leaves
        the account and its courses in place. Returns the number of
        courses removed.
        """
        if not is_owner_or_admin(identity, user_id):
            raise Forbidden()
        if await self.get_by_id(user_id) is None:
            raise NotFound("User not found")

        result = await self.db.execute(delete(Course).where(Course.owner_id == user_id))
        await self.db.execute(delete(User).where(User.id == user_id))
        await self.db.commit()

        courses_deleted = result.rowcount or 0
        logger.info(
            "users.deleted_with_courses",
            user_id=str(user_id),
            deleted_by=str(identity.id),
            courses_deleted=courses_deleted,
        )
        return courses_deleted
