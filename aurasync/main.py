"""AuraSync API: FastAPI application entry point.

Run locally:
    uvicorn aurasync.main:app --reload --port 3000
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aurasync.config import Settings, get_settings
from aurasync.middleware.auth import JWTAuthMiddleware
from aurasync.middleware.rate_limit import RateLimitMiddleware
from aurasync.middleware.security import SecurityHeadersMiddleware
from aurasync.routers import auth, cycle, fitness, habits, health, journal, timeline
from aurasync.services.database import Database

logger = logging.getLogger("aurasync")


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


# ---------- Lifespan ----------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup / shutdown hooks."""
    settings = get_settings()
    logger.info(
        "Starting AuraSync API v%s [%s]",
        settings.app_version,
        settings.environment,
    )
    app.state.db = await Database.connect(settings)
    yield
    await app.state.db.close()
    app.state.db = None
    logger.info("AuraSync API shut down")


# ---------- App factory ----------

def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="AuraSync API",
        description=(
            "Personal wellness tracking: cycle prediction, habit streaks, "
            "health timeline, and a private journal."
        ),
        version=settings.app_version,
        debug=settings.debug,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ---------- Middleware (last added is outermost) ----------

    # JWT authentication runs closest to the routes
    app.add_middleware(JWTAuthMiddleware, settings=settings)

    # Rate limiting counts requests before they reach auth
    app.add_middleware(RateLimitMiddleware, settings=settings)

    # Security headers on every response, including 401 and 429
    app.add_middleware(SecurityHeadersMiddleware, settings=settings)

    # CORS is outermost so it answers preflight before anything else
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-RateLimit-Limit", "X-RateLimit-Remaining", "Retry-After"],
    )

    # ---------- Health check (outside the v1 prefix, always at /health) ----------
    app.include_router(health.router)

    # ---------- API v1 routes ----------
    v1_prefix = "/api/v1"

    app.include_router(auth.router, prefix=v1_prefix)
    app.include_router(cycle.router, prefix=v1_prefix)
    app.include_router(habits.router, prefix=v1_prefix)
    app.include_router(fitness.router, prefix=v1_prefix)
    app.include_router(timeline.router, prefix=v1_prefix)
    app.include_router(journal.router, prefix=v1_prefix)

    return app


app = create_app()
