from __future__ import annotations

from task_manager_api.core.exceptions.task_manager_error import TaskManagerError


class TaskStoreError(TaskManagerError):
    """
    Raised when the underlying store is unreachable or an operation fails.
    Wraps the driver exception so callers never depend on driver types.
    """

    def __init__(self, message: str, operation: str | None = None) -> None:
        super().__init__(message)
        self.operation = operation
