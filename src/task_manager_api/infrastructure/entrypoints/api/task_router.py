import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from task_manager_api.core.application.ports.task_repository_port import TaskRepositoryPort
from task_manager_api.core.exceptions import (
    TaskManagerError,
    TaskNotFoundError,
    TaskStoreError,
    TaskValidationError,
)
from task_manager_api.infrastructure.entrypoints.api.dependencies import get_task_repository
from task_manager_api.infrastructure.entrypoints.api.dtos.task_dto import (
    CreateTaskRequest,
    ErrorResponse,
    MessageResponse,
    TaskResponse,
)
from task_manager_api.infrastructure.entrypoints.api.mappers.task_mapper import TaskMapper
from task_manager_api.infrastructure.observability.metrics_service import TASK_OPERATIONS_TOTAL

logger = structlog.get_logger(context_component="task_router")
router = APIRouter(prefix="/tasks", tags=["tasks"])

TASK_DELETED_MESSAGE = "Task deleted successfully"

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
}


@router.get(
    "",
    response_model=list[TaskResponse],
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}},
)
async def list_tasks(
    repository: TaskRepositoryPort = Depends(get_task_repository),
) -> list[TaskResponse] | JSONResponse:
    try:
        tasks = await repository.find_all_sorted()
    except TaskManagerError as exc:
        return _failure("list", exc, status.HTTP_500_INTERNAL_SERVER_ERROR)
    _record("list", "success")
    return TaskMapper.to_responses(tasks)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=TaskResponse,
    responses=_ERROR_RESPONSES,
)
async def create_task(
    payload: CreateTaskRequest,
    repository: TaskRepositoryPort = Depends(get_task_repository),
) -> TaskResponse | JSONResponse:
    try:
        task = await repository.insert(payload.text)
    except TaskManagerError as exc:
        return _failure("create", exc, status.HTTP_400_BAD_REQUEST)
    logger.info("Task created", context_task_id=task.id)
    _record("create", "success")
    return TaskMapper.to_response(task)


@router.put("/{task_id}/toggle", response_model=TaskResponse, responses=_ERROR_RESPONSES)
async def toggle_task(
    task_id: str,
    repository: TaskRepositoryPort = Depends(get_task_repository),
) -> TaskResponse | JSONResponse:
    # Read, flip, write: concurrent toggles on one task resolve as last write wins.
    try:
        task = await repository.find_by_id(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        updated = await repository.update(task.toggle())
        if updated is None:
            raise TaskNotFoundError(task_id)
    except TaskManagerError as exc:
        return _failure("toggle", exc, status.HTTP_400_BAD_REQUEST, task_id)
    logger.info("Task toggled", context_task_id=task_id, completed=updated.completed)
    _record("toggle", "success")
    return TaskMapper.to_response(updated)


@router.delete("/{task_id}", response_model=MessageResponse, responses=_ERROR_RESPONSES)
async def delete_task(
    task_id: str,
    repository: TaskRepositoryPort = Depends(get_task_repository),
) -> MessageResponse | JSONResponse:
    try:
        deleted = await repository.delete_by_id(task_id)
        if deleted is None:
            raise TaskNotFoundError(task_id)
    except TaskManagerError as exc:
        return _failure("delete", exc, status.HTTP_400_BAD_REQUEST, task_id)
    logger.info("Task deleted", context_task_id=task_id)
    _record("delete", "success")
    return MessageResponse(message=TASK_DELETED_MESSAGE)


def _failure(
    operation: str, exc: TaskManagerError, store_status: int, task_id: str | None = None
) -> JSONResponse:
    """Maps a task error to its JSON response; store_status applies to store failures."""
    if isinstance(exc, TaskNotFoundError):
        _record(operation, "not_found")
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": exc.message})

    if isinstance(exc, TaskValidationError):
        _record(operation, "invalid")
        logger.warning(
            "Task request rejected",
            context_task_id=task_id,
            error_type=type(exc).__name__,
            error_details=str(exc),
        )
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})

    _record(operation, "error")
    logger.error(
        "Task operation failed",
        context_task_id=task_id,
        error_type=type(exc).__name__,
        error_details=str(exc),
        error_operation=exc.operation if isinstance(exc, TaskStoreError) else operation,
    )
    return JSONResponse(status_code=store_status, content={"error": str(exc)})


def _record(operation: str, outcome: str) -> None:
    TASK_OPERATIONS_TOTAL.labels(operation=operation, outcome=outcome).inc()
