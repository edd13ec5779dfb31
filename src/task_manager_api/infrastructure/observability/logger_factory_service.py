"""Process-wide structlog setup for the task service.

Every record, whether emitted through structlog or through a stdlib logger
(uvicorn, pymongo), passes the same processor chain and ends in one stdout
handler, so the service log schema applies uniformly.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from task_manager_api.infrastructure.observability.logging.log_schema_processor import (
    log_schema_processor,
)

JSON_ENVIRONMENTS = frozenset({"qa", "staging", "prod", "production"})

# Request logging middleware already records every request.
_QUIETED_LOGGERS = {"uvicorn.access": logging.WARNING, "pymongo": logging.WARNING}

_configured = False


def configure_logging(
    log_level: str = "INFO",
    log_format: str | None = None,
    app_env: str = "local",
) -> None:
    """Installs the structlog chain and the stdlib bridge; later calls are no-ops."""
    global _configured  # noqa: PLW0603
    if _configured:
        return
    _configured = True

    renderer = select_renderer(log_format, app_env)
    chain = _schema_chain()

    structlog.configure(
        processors=[*chain, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *chain,
                renderer,
            ],
        )
    )
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(log_level.upper())
    for name, level in _QUIETED_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def select_renderer(log_format: str | None, app_env: str = "local") -> Any:
    """json/console when given explicitly, otherwise JSON for deployed environments."""
    fmt = (log_format or "").lower()
    if fmt not in ("json", "console"):
        fmt = "json" if app_env.lower() in JSON_ENVIRONMENTS else "console"
    if fmt == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def _schema_chain() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        log_schema_processor,
    ]
