from task_manager_api.core.exceptions.task_manager_error import TaskManagerError


class TaskValidationError(TaskManagerError):
    """Raised when a task payload or identifier is not acceptable."""
