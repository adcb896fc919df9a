"""Auth routes — registration, login, logout.

Mounted at the root, outside the API prefix, next to the pages that
post to them:
- POST /register → create a self-service account (teacher or learner)
- POST /login → email/password → session cookie
- GET /logout → end the session, clear the cookie, back to /

Register and login take either a JSON body or a plain form post.
"""

from typing import Optional, TypeVar

import structlog
from fastapi import APIRouter, Depends, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, ValidationError
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from coursehub.auth.cookies import clear_session_cookie, set_session_cookie, unsign_session_id
from coursehub.auth.dependencies import get_session_store, get_web_session
from coursehub.config import Settings, get_settings
from coursehub.db.engine import get_db
from coursehub.schemas.user import LoginRequest, LoginResponse, RegisterRequest, UserRead
from coursehub.services.auth_service import AuthService
from coursehub.sessions.store import SessionRecord, SessionStore

logger = structlog.get_logger()

router = APIRouter()

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

ModelT = TypeVar("ModelT", bound=BaseModel)


def _is_form(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower() in FORM_CONTENT_TYPES


async def _read_body(request: Request, model: type[ModelT]) -> ModelT:
    """Parse a JSON body or a plain HTML form post into model.

    Bad input surfaces as FastAPI's usual 422.
    """
    if _is_form(request):
        data = dict(await request.form())
    else:
        try:
            data = await request.json()
        except ValueError:
            raise RequestValidationError(
                [{"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "input": {}}]
            )
    try:
        return model.model_validate(data)
    except ValidationError as e:
        errors = [{**err, "loc": ("body", *err["loc"])} for err in e.errors(include_url=False)]
        raise RequestValidationError(errors, body=data)


def _body_docs(model: type[BaseModel]) -> dict:
    schema = model.model_json_schema()
    return {
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": schema},
                "application/x-www-form-urlencoded": {"schema": schema},
            },
        }
    }


def _svc(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(db, settings)


@router.post(
    "/register",
    response_model=UserRead,
    status_code=201,
    openapi_extra=_body_docs(RegisterRequest),
)
async def register(request: Request, svc: AuthService = Depends(_svc)):
    """Create an account. Unknown or privileged roles fall back to learner.

    A JSON caller gets the new account back; a form post is sent on to
    the login page.
    """
    user = await svc.register(await _read_body(request, RegisterRequest))
    if _is_form(request):
        return RedirectResponse("/login", status_code=303)
    return user


@router.post("/login", response_model=LoginResponse, openapi_extra=_body_docs(LoginRequest))
async def login(
    request: Request,
    response: Response,
    svc: AuthService = Depends(_svc),
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings),
):
    """Check credentials and start a fresh session.

    JSON callers get the identity and a redirect hint; a form post is
    redirected there directly.
    """
    body = await _read_body(request, LoginRequest)
    user = await svc.authenticate(body.email, body.password)

    # never reuse a session id issued before authentication
    previous = unsign_session_id(
        request.cookies.get(settings.session_cookie_name), settings.session_secret
    )
    if previous:
        await store.destroy(previous)

    record = await store.create(str(user.id))
    redirect = f"/user?id={user.id}"

    if _is_form(request):
        response = RedirectResponse(redirect, status_code=303)
        set_session_cookie(response, record.sid, settings)
        return response

    set_session_cookie(response, record.sid, settings)
    return LoginResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        redirect=redirect,
    )


@router.get("/logout")
async def logout(
    web_session: Optional[SessionRecord] = Depends(get_web_session),
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings),
):
    response = RedirectResponse("/", status_code=302)
    if web_session is not None:
        try:
            await store.destroy(web_session.sid)
        except (SQLAlchemyError, RedisError) as e:
            logger.error("auth.logout_destroy_failed", error=str(e))
    clear_session_cookie(response, settings)
    return response
