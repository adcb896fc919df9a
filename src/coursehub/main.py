"""FastAPI application factory.

create_app() takes the Settings to run with and returns a configured
FastAPI instance. Lifespan manages startup/shutdown (tables, Redis,
engine disposal). Middleware, error handlers and routers are all
registered here.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from coursehub import __version__
from coursehub.api import api_router
from coursehub.api.auth import router as auth_router
from coursehub.api.pages import router as pages_router
from coursehub.config import Settings
from coursehub.db.engine import create_engine_for, create_session_factory, init_models
from coursehub.errors import install_error_handlers
from coursehub.middleware.rate_limit import RateLimitMiddleware
from coursehub.middleware.request_id import RequestIdMiddleware
from coursehub.middleware.security import SecurityHeadersMiddleware
from coursehub.redis_pool import close_redis, init_redis

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Anything before `yield` runs at startup, after `yield` at shutdown.
    """
    settings: Settings = app.state.settings
    logger.info(
        "coursehub.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
        session_backend=settings.session_backend,
    )

    await init_models(app.state.engine)

    try:
        await init_redis(settings.redis_url)
        logger.info("coursehub.redis_connected", url=settings.redis_url)
    except Exception as e:
        if settings.session_backend == "redis":
            logger.error("coursehub.redis_required", error=str(e))
            raise
        # Redis only backs rate limiting here; run without it
        await close_redis()
        logger.warning("coursehub.redis_unavailable", error=str(e))

    yield

    logger.info("coursehub.shutdown")
    await close_redis()
    await app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or Settings()

    app = FastAPI(
        title="CourseHub",
        description="Session-authenticated course management",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = create_engine_for(settings)
    app.state.session_factory = create_session_factory(app.state.engine)

    install_error_handlers(app)

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RateLimit → Security → RequestId → handler
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        default_rpm=settings.rate_limit_rpm,
        auth_rpm=settings.rate_limit_auth_rpm,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(pages_router)
    app.include_router(auth_router, tags=["auth"])
    app.include_router(api_router, prefix=settings.api_prefix)

    return app


# Default app instance (used by uvicorn: coursehub.main:app)
app = create_app()
