from __future__ import annotations

from task_manager_api.core.exceptions.task_manager_error import TaskManagerError


class TaskNotFoundError(TaskManagerError):
    message = "Task not found"

    def __init__(self, task_id: str | None = None) -> None:
        super().__init__(self.message)
        self.task_id = task_id
