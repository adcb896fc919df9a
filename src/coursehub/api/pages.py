"""HTML pages.

Static files shipped with the package. The dashboard is the only
page behind the access guard; without a session it redirects to /login.
"""

from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from coursehub.auth.dependencies import get_current_identity

PAGES_DIR = Path(__file__).resolve().parent.parent / "pages"

router = APIRouter()


def _page(name: str) -> FileResponse:
    return FileResponse(PAGES_DIR / name, media_type="text/html")


@router.get("/", include_in_schema=False)
async def home():
    return _page("index.html")


@router.get("/register", include_in_schema=False)
async def register_page():
    return _page("register.html")


@router.get("/login", include_in_schema=False)
async def login_page():
    return _page("login.html")


@router.get("/user", include_in_schema=False)
async def user_page():
    return _page("user.html")


@router.get("/dashboard", include_in_schema=False, dependencies=[Depends(get_current_identity)])
async def dashboard_page():
    return _page("dashboard.html")
