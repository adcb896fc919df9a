"""Health check endpoint.

Reports whether the server is up and its dependencies (database,
Redis) are reachable. Redis only counts towards the overall status
when it backs the session store.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from starlette.requests import Request

from coursehub import __version__
from coursehub.config import Settings, get_settings
from coursehub.redis_pool import get_redis

router = APIRouter()


@router.get("/health")
async def health_check(request: Request, settings: Settings = Depends(get_settings)):
    """Check server health and dependency connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        async with request.app.state.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"error: {e}"

    try:
        await get_redis().ping()
        checks["redis"] = "ok"
    except Exception as e:
        checks["redis"] = f"error: {e}"

    required = ["server", "database"]
    if settings.session_backend == "redis":
        required.append("redis")
    status = "healthy" if all(checks[k] == "ok" for k in required) else "degraded"

    return {"status": status, **checks}
