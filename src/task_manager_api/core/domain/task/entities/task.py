from dataclasses import dataclass
from datetime import datetime

from task_manager_api.core.exceptions.task_validation_error import TaskValidationError


@dataclass
class Task:
    id: str
    text: str
    created_at: datetime
    completed: bool = False

    @staticmethod
    def validate_text(text: object) -> str:
        """Returns the text unchanged if it can name a new task."""
        if not isinstance(text, str):
            raise TaskValidationError("Task text must be a string")
        if not text.strip():
            raise TaskValidationError("Task text is required")
        return text

    def toggle(self) -> "Task":
        """Flips the completion flag in place and returns the same task."""
        self.completed = not self.completed
        return self
