"""In-memory fixed-budget sliding-window rate limiter for ``/api/`` routes.

Counts are per client IP and per process, so each worker enforces its own
budget.
"""

from __future__ import annotations

import time
from collections import defaultdict, deque
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from aurasync.config import Settings, get_settings

LIMITED_PREFIX = "/api/"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-IP sliding window rate limiter."""

    def __init__(self, app: Any, settings: Settings | None = None) -> None:
        super().__init__(app)
        s = settings or get_settings()
        self._max_requests = s.rate_limit_requests
        self._window_seconds = s.rate_limit_window_seconds
        # ip -> request timestamps, oldest first
        self._hits: dict[str, deque[float]] = defaultdict(deque)

    def _client_ip(self, request: Request) -> str:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    def _expire(self, hits: deque[float], now: float) -> None:
        cutoff = now - self._window_seconds
        while hits and hits[0] <= cutoff:
            hits.popleft()

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not request.url.path.startswith(LIMITED_PREFIX):
            return await call_next(request)

        hits = self._hits[self._client_ip(request)]
        now = time.monotonic()
        self._expire(hits, now)

        if len(hits) >= self._max_requests:
            retry_after = int(self._window_seconds - (now - hits[0]))
            return Response(
                content='{"detail":"Too many requests, please try again later"}',
                status_code=429,
                media_type="application/json",
                headers={"Retry-After": str(max(retry_after, 1))},
            )

        hits.append(now)
        response = await call_next(request)

        response.headers["X-RateLimit-Limit"] = str(self._max_requests)
        response.headers["X-RateLimit-Remaining"] = str(max(self._max_requests - len(hits), 0))
        return response
