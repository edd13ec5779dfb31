"""Fixed-window, per-caller rate limiting for the business API prefix.

Responses on limited paths carry the standard RateLimit-* headers
(limit, remaining, reset, policy); the legacy X-RateLimit-* family is
never emitted. Rejected requests get a 429 with Retry-After and a
retryAfter hint in the JSON body.
"""

from __future__ import annotations

import asyncio
import math
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog
from starlette.datastructures import MutableHeaders
from starlette.responses import JSONResponse

from task_manager_api.infrastructure.observability.logging.request_logging_middleware import (
    extract_client_ip,
)
from task_manager_api.infrastructure.observability.metrics_service import RATE_LIMITED_TOTAL

logger = structlog.get_logger(context_component="rate_limiter")

RATE_LIMIT_MESSAGE = "Too many requests, please try again later."


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_after: int


@dataclass
class _Window:
    started_at: float
    hits: int = 0


class FixedWindowRateLimiter:
    """
    Counts hits per key inside a fixed window that starts at the key's first hit.
    hit() increments and compares under a single asyncio.Lock, so concurrent
    requests from one caller can never both take the last slot.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = asyncio.Lock()
        self._last_prune = clock()

    async def hit(self, key: str) -> RateLimitDecision:
        async with self._lock:
            now = self._clock()
            self._prune_expired(now)
            window = self._windows.get(key)
            if window is None or self._expired(window, now):
                window = _Window(started_at=now)
                self._windows[key] = window
            window.hits += 1
            reset_after = max(0, math.ceil(window.started_at + self.window_seconds - now))
            return RateLimitDecision(
                allowed=window.hits <= self.max_requests,
                limit=self.max_requests,
                remaining=max(0, self.max_requests - window.hits),
                reset_after=reset_after,
            )

    def tracked_keys(self) -> int:
        return len(self._windows)

    def _expired(self, window: _Window, now: float) -> bool:
        return now - window.started_at >= self.window_seconds

    def _prune_expired(self, now: float) -> None:
        if now - self._last_prune < self.window_seconds:
            return
        self._last_prune = now
        for key in [k for k, w in self._windows.items() if self._expired(w, now)]:
            del self._windows[key]


class RateLimitMiddleware:
    """ASGI middleware applying a FixedWindowRateLimiter to paths under path_prefix."""

    def __init__(self, app: Any, limiter: FixedWindowRateLimiter, path_prefix: str = "/api") -> None:
        self.app = app
        self.limiter = limiter
        self.path_prefix = path_prefix.rstrip("/")

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        if scope["type"] != "http" or not self._is_limited(str(scope.get("path", ""))):
            await self.app(scope, receive, send)
            return

        client_ip = extract_client_ip(scope)
        decision = await self.limiter.hit(client_ip)
        headers = self._rate_limit_headers(decision)

        if not decision.allowed:
            RATE_LIMITED_TOTAL.inc()
            await logger.awarning(
                "Rate limit exceeded",
                http_client_ip=client_ip,
                retry_after=decision.reset_after,
            )
            response = JSONResponse(
                status_code=429,
                content={"error": RATE_LIMIT_MESSAGE, "retryAfter": decision.reset_after},
                headers={**headers, "Retry-After": str(decision.reset_after)},
            )
            await response(scope, receive, send)
            return

        async def _send_with_headers(message: dict[str, Any]) -> None:
            if message.get("type") == "http.response.start":
                response_headers = MutableHeaders(scope=message)
                for name, value in headers.items():
                    response_headers[name] = value
            await send(message)

        await self.app(scope, receive, _send_with_headers)

    def _is_limited(self, path: str) -> bool:
        return path == self.path_prefix or path.startswith(self.path_prefix + "/")

    def _rate_limit_headers(self, decision: RateLimitDecision) -> dict[str, str]:
        return {
            "RateLimit-Policy": f"{decision.limit};w={math.ceil(self.limiter.window_seconds)}",
            "RateLimit-Limit": str(decision.limit),
            "RateLimit-Remaining": str(decision.remaining),
            "RateLimit-Reset": str(decision.reset_after),
        }
