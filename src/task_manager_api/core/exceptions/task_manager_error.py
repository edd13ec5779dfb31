class TaskManagerError(Exception):
    """Base class for all task manager errors."""
