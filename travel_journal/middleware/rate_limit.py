"""
Travel Journal Backend — Rate Limiting Middleware
===================================================

What:  Per-IP sliding window rate limiter.
How:   Each client IP owns a deque of request timestamps, oldest on the left.
       Expired timestamps are popped from the left on every request; a request
       arriving while the deque is full gets 429 with Retry-After.

Single-process only: counters live in this worker's memory. Multi-worker
deployments need a shared store (e.g. Redis) instead.
"""

import logging
import time
from collections import deque
from typing import Deque, Dict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from travel_journal.config import settings
from travel_journal.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)

# Sweep idle clients once this many distinct IPs are tracked
SWEEP_THRESHOLD = 1000


def client_key(request: Request) -> str:
    # Behind a proxy this is the proxy's address
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter.

    Configuration (read per request from settings, so changes apply at once):
        rate_limit_requests: Max requests per window
        rate_limit_window: Window duration in seconds

    Health checks and API docs are never limited.
    """

    EXCLUDED_PATHS = {"/api/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(self, app, **kwargs):
        super().__init__(app, **kwargs)
        self._windows: Dict[str, Deque[float]] = {}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        key = client_key(request)
        now = time.time()
        window = self._windows.setdefault(key, deque())

        horizon = now - settings.rate_limit_window
        while window and window[0] <= horizon:
            window.popleft()

        if len(window) >= settings.rate_limit_requests:
            retry_after = int(window[0] + settings.rate_limit_window - now) + 1
            return self._reject(key, len(window), retry_after)

        window.append(now)
        if len(self._windows) > SWEEP_THRESHOLD:
            self._sweep(horizon)

        return await call_next(request)

    def _reject(self, key: str, used: int, retry_after: int) -> JSONResponse:
        exc = RateLimitExceededError(retry_after=retry_after)
        logger.warning(
            "Rate limit exceeded for %s: %d requests in %ds window",
            key, used, settings.rate_limit_window,
        )
        return JSONResponse(
            status_code=429,
            content={"error": exc.message, "code": exc.code, "details": exc.context},
            headers={"Retry-After": str(retry_after)},
        )

    def _sweep(self, horizon: float) -> None:
        """Forget clients whose newest request is already outside the window."""
        idle = [key for key, window in self._windows.items() if not window or window[-1] <= horizon]
        for key in idle:
            del self._windows[key]
        if idle:
            logger.debug("Dropped rate limit state for %d idle clients", len(idle))
