"""Health check endpoint. Public, no auth required."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from aurasync.config import get_settings

router = APIRouter(tags=["system"])
logger = logging.getLogger("aurasync.health")


@router.get("/health")
async def health_check(request: Request) -> dict:
    """Liveness check. Returns 200 if the API process is up.

    Also performs a lightweight DB connectivity check.
    """
    settings = get_settings()
    db_ok = False
    db = getattr(request.app.state, "db", None)
    if db is not None:
        try:
            await db.fetchval("SELECT 1")
            db_ok = True
        except Exception as exc:
            logger.warning("Health check DB query failed: %s", exc)

    return {
        "status": "ok" if db_ok else "degraded",
        "version": settings.app_version,
        "environment": settings.environment,
        "database": "connected" if db_ok else "unreachable",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
