"""
Tourist Spot API — Rate Limiting Middleware
============================================

What:  Per-IP fixed window rate limiter (100 requests per 15 minutes).
How:   Tracks, per client IP, when its current window started and how many
       requests it has made in it. Requests over the limit are answered with
       429 and the uniform error envelope; the route is never reached.
When:  First in the middleware chain.

Algorithm: Fixed Window Counter
    1. First request from an IP opens a window [start, start + window)
    2. Each request inside the window increments the counter
    3. Counter already at the limit → 429, Retry-After = seconds left
    4. First request after the window elapsed opens a fresh window

    State is per process. Several uvicorn workers each keep their own counts.
"""

import logging
import time
from typing import Dict, Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from tourist_spot.config import settings
from tourist_spot.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory fixed window rate limiter.

    Configuration (from settings unless passed explicitly):
        max_requests:   requests allowed per window (default: 100)
        window_seconds: window length (default: 900 = 15 minutes)

    Excluded paths:
        - /health: Health checks should never be rate-limited
    """

    EXCLUDED_PATHS = {"/health"}

    def __init__(
        self,
        app,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(app, **kwargs)
        self.max_requests = max_requests or settings.rate_limit_requests
        self.window_seconds = window_seconds or settings.rate_limit_window
        # IP → (window start, requests counted in the window)
        self._windows: Dict[str, Tuple[float, int]] = {}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = (
            getattr(request.client, "host", "unknown")
            if request.client
            else "unknown"
        )
        now = time.time()

        window_start, count = self._windows.get(client_ip, (now, 0))
        if now - window_start >= self.window_seconds:
            window_start, count = now, 0

        if count >= self.max_requests:
            retry_after = int(window_start + self.window_seconds - now) + 1
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                count,
                self.window_seconds,
            )
            exc = RateLimitExceededError(retry_after=retry_after)
            return JSONResponse(
                status_code=exc.status_code,
                content={"success": False, "message": exc.message},
                headers={"Retry-After": str(retry_after)},
            )

        self._windows[client_ip] = (window_start, count + 1)

        if len(self._windows) % 1000 == 0:
            self._cleanup_expired_windows(now)

        return await call_next(request)

    def _cleanup_expired_windows(self, now: float) -> None:
        """Drop IPs whose window has already elapsed."""
        expired = [
            ip for ip, (start, _) in self._windows.items()
            if now - start >= self.window_seconds
        ]
        for ip in expired:
            del self._windows[ip]

        if expired:
            logger.debug("Cleaned up %d expired rate limit windows", len(expired))
