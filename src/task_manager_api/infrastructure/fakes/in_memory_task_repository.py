from dataclasses import replace
from datetime import datetime, timezone

from bson import ObjectId

from task_manager_api.core.application.ports.task_repository_port import TaskRepositoryPort
from task_manager_api.core.domain.task import Task
from task_manager_api.core.exceptions import TaskValidationError


class InMemoryTaskRepository(TaskRepositoryPort):
    """
    Fake implementation for testing/local development.
    Satisfies the TaskRepositoryPort interface; state lives only in the process.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}

    async def find_all_sorted(self) -> list[Task]:
        ordered = sorted(
            self._tasks.values(), key=lambda task: (task.created_at, task.id), reverse=True
        )
        return [replace(task) for task in ordered]

    async def insert(self, text: str) -> Task:
        task = Task(
            id=str(ObjectId()),
            text=Task.validate_text(text),
            completed=False,
            created_at=datetime.now(timezone.utc),
        )
        self._tasks[task.id] = task
        return replace(task)

    async def find_by_id(self, task_id: str) -> Task | None:
        task = self._tasks.get(_check_id(task_id))
        return replace(task) if task else None

    async def update(self, task: Task) -> Task | None:
        stored = self._tasks.get(_check_id(task.id))
        if stored is None:
            return None
        stored.completed = task.completed
        return replace(stored)

    async def delete_by_id(self, task_id: str) -> Task | None:
        return self._tasks.pop(_check_id(task_id), None)

    async def ping(self) -> None:
        return None


def _check_id(task_id: str) -> str:
    if not ObjectId.is_valid(task_id):
        raise TaskValidationError(f'Invalid task id "{task_id}"')
    return task_id
