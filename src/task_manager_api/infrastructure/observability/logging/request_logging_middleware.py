"""Pure ASGI middleware for structured request logging via structlog contextvars.

Binds correlation_id and the request fields into structlog context for every
HTTP request, logs the request before the handler runs, and logs completion
with status and duration afterwards. The request itself is never modified.
"""

from __future__ import annotations

import time
from typing import Any
from uuid import uuid4

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars

from task_manager_api.infrastructure.observability.metrics_service import (
    HTTP_REQUEST_DURATION_SECONDS,
)

logger = structlog.get_logger(context_component="request_logging")


class RequestLoggingMiddleware:
    """ASGI middleware that logs every HTTP request with caller details."""

    def __init__(self, app: Any) -> None:
        self.app = app

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        await self._handle_request(scope, receive, send)

    async def _handle_request(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        clear_contextvars()
        self._bind_request_context(scope)
        await logger.ainfo(
            "Incoming request",
            http_client_ip=extract_client_ip(scope),
            http_user_agent=_extract_header(scope, b"user-agent"),
        )
        http_status = 500
        start = time.perf_counter()
        try:
            http_status = await self._dispatch_and_capture_status(scope, receive, send)
        finally:
            await self._log_request_completion(scope, http_status, start)

    @staticmethod
    def _bind_request_context(scope: dict[str, Any]) -> None:
        """Bind correlation id, method and path into structlog contextvars."""
        correlation_id = _extract_header(scope, b"x-correlation-id") or str(uuid4())
        bind_contextvars(
            correlation_id=correlation_id,
            http_method=_extract_method(scope),
            http_path=_extract_path(scope),
        )

    async def _dispatch_and_capture_status(
        self, scope: dict[str, Any], receive: Any, send: Any
    ) -> int:
        """Dispatch the ASGI app and capture the HTTP response status code."""
        http_status = 500

        async def _capture_status(message: dict[str, Any]) -> None:
            nonlocal http_status
            if message.get("type") == "http.response.start":
                http_status = message.get("status", 500)
            await send(message)

        await self.app(scope, receive, _capture_status)
        return http_status

    @staticmethod
    async def _log_request_completion(
        scope: dict[str, Any], http_status: int, start: float
    ) -> None:
        """Log request duration and outcome after the response is sent."""
        elapsed = time.perf_counter() - start
        HTTP_REQUEST_DURATION_SECONDS.labels(
            method=_extract_method(scope), status_class=f"{http_status // 100}xx"
        ).observe(elapsed)
        await logger.ainfo(
            "Request processed",
            http_status=http_status,
            http_duration_ms=round(elapsed * 1000, 2),
        )


def extract_client_ip(scope: dict[str, Any]) -> str:
    """Extract the caller address from ASGI scope."""
    client = scope.get("client")
    if not client:
        return "unknown"
    return str(client[0])


def _extract_header(scope: dict[str, Any], name: bytes) -> str | None:
    """Extract a header value from ASGI scope (case-insensitive)."""
    headers: list[tuple[bytes, bytes]] = scope.get("headers", [])
    lower_name = name.lower()
    for key, value in headers:
        if key.lower() == lower_name:
            return value.decode("latin-1")
    return None


def _extract_path(scope: dict[str, Any]) -> str:
    """Extract request path from ASGI scope."""
    return str(scope.get("path", "/"))


def _extract_method(scope: dict[str, Any]) -> str:
    """Extract HTTP method from ASGI scope."""
    return str(scope.get("method", "UNKNOWN"))
