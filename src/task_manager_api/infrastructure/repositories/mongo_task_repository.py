from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

import structlog
from bson import ObjectId
from bson.errors import BSONError
from pymongo import DESCENDING, AsyncMongoClient, ReturnDocument
from pymongo.errors import PyMongoError

from task_manager_api.core.application.ports.task_repository_port import TaskRepositoryPort
from task_manager_api.core.domain.task import Task
from task_manager_api.core.exceptions import TaskStoreError, TaskValidationError
from task_manager_api.infrastructure.configuration.main_settings import Settings

logger = structlog.get_logger(context_component="mongo_task_repository")

TASKS_COLLECTION = "tasks"


class MongoTaskRepository(TaskRepositoryPort):
    """
    Task repository over a MongoDB collection.
    Documents are stored as {_id, text, completed, createdAt}; createdAt is
    assigned here, _id by the server on insert.
    """

    def __init__(self, client: AsyncMongoClient, database_name: str | None = None):
        self._client = client
        database = (
            client[database_name] if database_name else client.get_default_database()
        )
        self._collection = database[TASKS_COLLECTION]

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoTaskRepository":
        client: AsyncMongoClient = AsyncMongoClient(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=settings.mongo_server_selection_timeout_ms,
            tz_aware=True,
        )
        database = client.get_default_database(default=settings.mongo_default_database)
        return cls(client, database.name)

    async def find_all_sorted(self) -> list[Task]:
        with _store_errors("find_all_sorted"):
            cursor = self._collection.find().sort(
                [("createdAt", DESCENDING), ("_id", DESCENDING)]
            )
            documents = await cursor.to_list()
        return [_to_domain(doc) for doc in documents]

    async def insert(self, text: str) -> Task:
        document = {
            "text": Task.validate_text(text),
            "completed": False,
            "createdAt": _now_millis(),
        }
        with _store_errors("insert"):
            result = await self._collection.insert_one(document)
        document["_id"] = result.inserted_id
        return _to_domain(document)

    async def find_by_id(self, task_id: str) -> Task | None:
        object_id = _to_object_id(task_id)
        with _store_errors("find_by_id"):
            document = await self._collection.find_one({"_id": object_id})
        return _to_domain(document) if document else None

    async def update(self, task: Task) -> Task | None:
        # Only completed is mutable; last write wins between concurrent toggles.
        object_id = _to_object_id(task.id)
        with _store_errors("update"):
            document = await self._collection.find_one_and_update(
                {"_id": object_id},
                {"$set": {"completed": task.completed}},
                return_document=ReturnDocument.AFTER,
            )
        return _to_domain(document) if document else None

    async def delete_by_id(self, task_id: str) -> Task | None:
        object_id = _to_object_id(task_id)
        with _store_errors("delete_by_id"):
            document = await self._collection.find_one_and_delete({"_id": object_id})
        return _to_domain(document) if document else None

    async def ping(self) -> None:
        with _store_errors("ping"):
            await self._client.admin.command("ping")

    async def close(self) -> None:
        await self._client.close()


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    """Translate driver and BSON encoding errors into TaskStoreError."""
    try:
        yield
    except (PyMongoError, BSONError) as exc:
        logger.error(
            "Task store operation failed",
            error_type=type(exc).__name__,
            error_details=str(exc),
            error_operation=operation,
        )
        raise TaskStoreError(str(exc), operation=operation) from exc


def _to_object_id(task_id: str) -> ObjectId:
    if not ObjectId.is_valid(task_id):
        raise TaskValidationError(f'Invalid task id "{task_id}"')
    return ObjectId(task_id)


def _now_millis() -> datetime:
    # BSON dates carry millisecond precision
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def _to_domain(document: dict[str, Any]) -> Task:
    created_at: datetime = document["createdAt"]
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return Task(
        id=str(document["_id"]),
        text=document["text"],
        completed=bool(document.get("completed", False)),
        created_at=created_at,
    )
