"""JWT verification middleware for FastAPI.

Validates the Bearer access token on every request (except public routes)
and sets ``request.state.auth`` with the :class:`AuthContext` that route
handlers consume via ``get_current_user``.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from aurasync.config import Settings, get_settings
from aurasync.dependencies import AuthContext
from aurasync.services.security import ACCESS, TokenError, decode_token

logger = logging.getLogger("aurasync.auth")

# Paths that do not require authentication
PUBLIC_PATHS: set[str] = {
    "/health",
    "/docs",
    "/openapi.json",
    "/redoc",
    "/api/v1/auth/register",
    "/api/v1/auth/login",
    "/api/v1/auth/refresh",
}


def _is_public(path: str) -> bool:
    return path in PUBLIC_PATHS or path.startswith("/docs") or path.startswith("/redoc")


def _unauthorized(detail: str) -> Response:
    return Response(
        content=f'{{"detail":"{detail}"}}',
        status_code=401,
        media_type="application/json",
    )


class JWTAuthMiddleware(BaseHTTPMiddleware):
    """Verify AuraSync access tokens and populate request.state.auth."""

    def __init__(self, app: Any, settings: Settings | None = None) -> None:
        super().__init__(app)
        self._settings = settings or get_settings()

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if _is_public(request.url.path):
            return await call_next(request)

        # OPTIONS requests pass through (CORS preflight)
        if request.method == "OPTIONS":
            return await call_next(request)

        auth_header = request.headers.get("Authorization")
        if not auth_header or not auth_header.startswith("Bearer "):
            return _unauthorized("Missing or invalid Authorization header")

        token = auth_header.removeprefix("Bearer ").strip()
        try:
            claims = decode_token(token, ACCESS, self._settings)
        except TokenError as exc:
            logger.warning("JWT validation failed on %s: %s", request.url.path, exc)
            return _unauthorized(str(exc))

        request.state.auth = AuthContext(user_id=claims["sub"], email=claims.get("email"))
        return await call_next(request)
