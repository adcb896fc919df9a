"""User API routes.

- GET    /users        → admin only, all accounts
- GET    /users/{id}   → admin or self
- POST   /users        → admin only, create an account
- PUT    /users/{id}   → admin or self, partial update
- DELETE /users/{id}   → admin or self, also deletes the user's courses
- GET    /me           → the caller's own account
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from coursehub.auth.cookies import clear_session_cookie
from coursehub.auth.dependencies import (
    Identity,
    get_current_identity,
    get_session_store,
    get_web_session,
)
from coursehub.config import Settings, get_settings
from coursehub.db.engine import get_db
from coursehub.schemas.user import UserCreate, UserRead, UserUpdate
from coursehub.services.user_service import UserService
from coursehub.sessions.store import SessionRecord, SessionStore

router = APIRouter()


def _svc(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> UserService:
    return UserService(db, settings)


@router.get("/users", response_model=list[UserRead])
async def list_users(
    identity: Identity = Depends(get_current_identity),
    svc: UserService = Depends(_svc),
):
    return await svc.list_users(identity)


@router.get("/users/{user_id}", response_model=UserRead)
async def get_user(
    user_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    svc: UserService = Depends(_svc),
):
    return await svc.get_user(identity, user_id)


@router.post("/users", response_model=UserRead, status_code=201)
async def create_user(
    body: UserCreate,
    identity: Identity = Depends(get_current_identity),
    svc: UserService = Depends(_svc),
):
    return await svc.create_user(identity, body)


@router.put("/users/{user_id}", response_model=UserRead)
async def update_user(
    user_id: uuid.UUID,
    body: UserUpdate,
    identity: Identity = Depends(get_current_identity),
    svc: UserService = Depends(_svc),
):
    return await svc.update_user(identity, user_id, body)


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: uuid.UUID,
    response: Response,
    identity: Identity = Depends(get_current_identity),
    web_session: Optional[SessionRecord] = Depends(get_web_session),
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings),
    svc: UserService = Depends(_svc),
):
    """Delete an account. Deleting your own also ends your session."""
    await svc.delete_user(identity, user_id)
    if identity.id == user_id and web_session is not None:
        await store.destroy(web_session.sid)
        clear_session_cookie(response, settings)
    return {"ok": True}


@router.get("/me", response_model=UserRead)
async def get_me(identity: Identity = Depends(get_current_identity)):
    """The caller's own account, as resolved from the session."""
    return identity
