"""Error taxonomy and the handlers that render it.

Services and auth dependencies raise CourseHubError subclasses; the
handlers installed by install_error_handlers() turn them into responses.

Unauthorized is the one error whose rendering depends on the path: a
JSON 401 under the API prefix, a redirect to the login page elsewhere.
The other domain errors are always JSON ({"detail": ...}). Unexpected
exceptions are logged in full and answered with a generic 500.
"""

import structlog
from fastapi import FastAPI
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, RedirectResponse, Response

logger = structlog.get_logger()

LOGIN_PAGE = "/login"


class CourseHubError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 500
    default_detail = "Internal Server Error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthorized(CourseHubError):
    """No identity on a protected route."""

    status_code = 401
    default_detail = "Unauthorized"


class InvalidCredentials(CourseHubError):
    """Failed login. Deliberately says nothing about which part was wrong."""

    status_code = 401
    default_detail = "Invalid email or password"


class Forbidden(CourseHubError):
    status_code = 403
    default_detail = "Forbidden"


class NotFound(CourseHubError):
    status_code = 404
    default_detail = "Not found"


class Conflict(CourseHubError):
    """Duplicate data, e.g. an email that is already registered."""

    status_code = 400
    default_detail = "Conflict"


def is_api_path(path: str, api_prefix: str) -> bool:
    prefix = api_prefix.rstrip("/")
    return path == prefix or path.startswith(prefix + "/")


def _on_api_path(request: Request) -> bool:
    return is_api_path(request.url.path, request.app.state.settings.api_prefix)


async def handle_coursehub_error(request: Request, exc: CourseHubError) -> Response:
    if isinstance(exc, Unauthorized) and not _on_api_path(request):
        return RedirectResponse(LOGIN_PAGE, status_code=302)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def handle_unexpected_error(request: Request, exc: Exception) -> Response:
    logger.exception("request.unhandled_error", path=request.url.path, method=request.method)
    if _on_api_path(request):
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})
    return PlainTextResponse("Internal Server Error", status_code=500)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CourseHubError, handle_coursehub_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
