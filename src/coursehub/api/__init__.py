"""API route aggregation.

Everything here is mounted under the API prefix (default /api) by
create_app(). Auth is applied at the include_router level with the
dependencies parameter, so every route in a protected router requires
an identity without each handler repeating it. Health is open.
"""

from fastapi import APIRouter, Depends

from coursehub.api.courses import router as courses_router
from coursehub.api.health import router as health_router
from coursehub.api.users import router as users_router
from coursehub.auth.dependencies import get_current_identity

# All protected routers require an authenticated identity
_auth = [Depends(get_current_identity)]

api_router = APIRouter()

# Open routes
api_router.include_router(health_router, tags=["health"])

# Protected routes
api_router.include_router(users_router, tags=["users"], dependencies=_auth)
api_router.include_router(courses_router, tags=["courses"], dependencies=_auth)
