import time
from datetime import datetime, timezone
from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from task_manager_api.core.application.ports.task_repository_port import TaskRepositoryPort
from task_manager_api.infrastructure.entrypoints.api.dependencies import get_task_repository

logger = structlog.get_logger(context_component="health_router")
router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    request: Request,
    repository: TaskRepositoryPort = Depends(get_task_repository),
) -> JSONResponse:
    """Liveness/readiness probe; pings the store and never touches task data."""
    report: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - request.app.state.started_at, 3),
    }
    try:
        await repository.ping()
    except Exception as exc:
        logger.warning(
            "Health probe failed",
            error_type=type(exc).__name__,
            error_details=str(exc),
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "unhealthy",
                **report,
                "database": "disconnected",
                "error": str(exc),
            },
        )
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={"status": "healthy", **report, "database": "connected"},
    )
