"""Fixed-window request ceiling applied uniformly to all traffic.

Each client address gets ``max_requests`` per window of ``window_seconds``.
Counters live in process memory, so the ceiling is per worker.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from app.core.exception_handlers import error_response
from app.core.exceptions import RateLimitError
from app.core.request_logging import client_address
from app.core.settings import get_settings

logger = logging.getLogger(__name__)


@dataclass
class _Window:
    started_at: float
    count: int = 0


class FixedWindowCounter:
    """Counts hits per key inside fixed, non-overlapping windows."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}

    def hit(self, key: str) -> int | None:
        """Record a request for ``key``.

        Returns None when the request is allowed, otherwise the number of
        seconds until the current window resets.
        """
        now = self._clock()
        window = self._windows.get(key)
        if window is None or now - window.started_at >= self.window_seconds:
            self._prune(now)
            window = _Window(started_at=now)
            self._windows[key] = window

        if window.count >= self.max_requests:
            remaining = self.window_seconds - (now - window.started_at)
            return max(1, math.ceil(remaining))

        window.count += 1
        return None

    def _prune(self, now: float) -> None:
        expired = [
            key
            for key, window in self._windows.items()
            if now - window.started_at >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, counter: FixedWindowCounter) -> None:
        super().__init__(app)
        self.counter = counter

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        key = client_address(request) or "unknown"
        retry_after = self.counter.hit(key)
        if retry_after is not None:
            logger.warning(
                "Request ceiling reached for %s",
                key,
                extra={"client_ip": key, "path": request.url.path},
            )
            return error_response(
                RateLimitError(
                    "Too many requests from this address, please try again later",
                    retry_after=retry_after,
                )
            )
        return await call_next(request)


def add_rate_limit_middleware(app: FastAPI) -> None:
    """Attach the request ceiling unless RATE_LIMIT_MAX_REQUESTS is 0."""
    settings = get_settings()
    if settings.rate_limit_max_requests <= 0:
        return
    app.add_middleware(
        RateLimitMiddleware,
        counter=FixedWindowCounter(
            max_requests=settings.rate_limit_max_requests,
            window_seconds=settings.rate_limit_window_seconds,
        ),
    )
