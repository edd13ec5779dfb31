from abc import ABC, abstractmethod

from task_manager_api.core.domain.task import Task


class TaskRepositoryPort(ABC):
    """
    Typed access to the task store.
    Adapters raise TaskStoreError for store failures and TaskValidationError
    for identifiers the store cannot address.
    """

    @abstractmethod
    async def find_all_sorted(self) -> list[Task]:
        """Returns every task, newest first."""
        pass

    @abstractmethod
    async def insert(self, text: str) -> Task:
        """Persists a new, not completed task and returns it with id and created_at set."""
        pass

    @abstractmethod
    async def find_by_id(self, task_id: str) -> Task | None:
        pass

    @abstractmethod
    async def update(self, task: Task) -> Task | None:
        """Persists the mutable fields of the task. Returns None if it no longer exists."""
        pass

    @abstractmethod
    async def delete_by_id(self, task_id: str) -> Task | None:
        """Removes the task and returns it, or None if it did not exist."""
        pass

    @abstractmethod
    async def ping(self) -> None:
        """Lightweight connectivity probe. Raises TaskStoreError on failure."""
        pass

    async def close(self) -> None:
        """Releases store resources. Default is a no-op."""
        return None
