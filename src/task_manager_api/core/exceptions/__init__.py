from task_manager_api.core.exceptions.task_manager_error import TaskManagerError
from task_manager_api.core.exceptions.task_not_found_error import TaskNotFoundError
from task_manager_api.core.exceptions.task_store_error import TaskStoreError
from task_manager_api.core.exceptions.task_validation_error import TaskValidationError

__all__ = [
    "TaskManagerError",
    "TaskNotFoundError",
    "TaskStoreError",
    "TaskValidationError",
]
