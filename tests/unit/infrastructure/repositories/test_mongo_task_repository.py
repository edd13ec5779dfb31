from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DocumentTooLarge, ServerSelectionTimeoutError

from task_manager_api.core.exceptions import TaskStoreError, TaskValidationError
from task_manager_api.infrastructure.repositories.mongo_task_repository import (
    MongoTaskRepository,
)

CREATED_AT = datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)


@pytest.fixture
def collection():
    return MagicMock()


@pytest.fixture
def client(collection):
    mock_client = MagicMock()
    mock_client.__getitem__.return_value.__getitem__.return_value = collection
    mock_client.admin.command = AsyncMock(return_value={"ok": 1})
    mock_client.close = AsyncMock()
    return mock_client


@pytest.fixture
def repository(client):
    return MongoTaskRepository(client, "taskmanager")


def _document(object_id=None, completed=False, text="buy milk"):
    return {
        "_id": object_id or ObjectId(),
        "text": text,
        "completed": completed,
        "createdAt": CREATED_AT,
    }


def test_uses_tasks_collection_of_named_database(client):
    MongoTaskRepository(client, "taskmanager")

    client.__getitem__.assert_called_with("taskmanager")
    client.__getitem__.return_value.__getitem__.assert_called_with("tasks")


@pytest.mark.asyncio
async def test_find_all_sorted_orders_by_created_at_descending(repository, collection):
    docs = [_document(text="newer"), _document(text="older")]
    cursor = collection.find.return_value.sort.return_value
    cursor.to_list = AsyncMock(return_value=docs)

    tasks = await repository.find_all_sorted()

    collection.find.return_value.sort.assert_called_once_with(
        [("createdAt", DESCENDING), ("_id", DESCENDING)]
    )
    assert [t.text for t in tasks] == ["newer", "older"]
    assert tasks[0].id == str(docs[0]["_id"])


@pytest.mark.asyncio
async def test_insert_assigns_created_at_and_defaults(repository, collection):
    inserted_id = ObjectId()
    collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=inserted_id))

    task = await repository.insert("buy milk")

    stored = collection.insert_one.call_args.args[0]
    assert stored["text"] == "buy milk"
    assert stored["completed"] is False
    assert stored["createdAt"].tzinfo is not None
    assert stored["createdAt"].microsecond % 1000 == 0
    assert task.id == str(inserted_id)
    assert task.completed is False


@pytest.mark.asyncio
async def test_insert_rejects_blank_text_without_touching_store(repository, collection):
    collection.insert_one = AsyncMock()

    with pytest.raises(TaskValidationError):
        await repository.insert("  ")

    collection.insert_one.assert_not_called()


@pytest.mark.asyncio
async def test_find_by_id_returns_none_when_missing(repository, collection):
    collection.find_one = AsyncMock(return_value=None)
    task_id = str(ObjectId())

    assert await repository.find_by_id(task_id) is None
    collection.find_one.assert_awaited_once_with({"_id": ObjectId(task_id)})


@pytest.mark.asyncio
async def test_find_by_id_treats_naive_dates_as_utc(repository, collection):
    document = _document()
    document["createdAt"] = datetime(2024, 3, 1, 12, 30)
    collection.find_one = AsyncMock(return_value=document)

    task = await repository.find_by_id(str(document["_id"]))

    assert task.created_at == CREATED_AT


@pytest.mark.asyncio
async def test_update_sets_only_completed(repository, collection):
    object_id = ObjectId()
    collection.find_one_and_update = AsyncMock(
        return_value=_document(object_id, completed=True)
    )
    collection.find_one = AsyncMock(return_value=_document(object_id))
    task = await repository.find_by_id(str(object_id))

    updated = await repository.update(task.toggle())

    collection.find_one_and_update.assert_awaited_once_with(
        {"_id": object_id},
        {"$set": {"completed": True}},
        return_document=ReturnDocument.AFTER,
    )
    assert updated.completed is True


@pytest.mark.asyncio
async def test_delete_by_id_returns_deleted_task(repository, collection):
    document = _document()
    collection.find_one_and_delete = AsyncMock(return_value=document)

    deleted = await repository.delete_by_id(str(document["_id"]))

    assert deleted.id == str(document["_id"])


@pytest.mark.asyncio
async def test_malformed_id_never_reaches_store(repository, collection):
    collection.find_one_and_delete = AsyncMock()

    with pytest.raises(TaskValidationError):
        await repository.delete_by_id("123")

    collection.find_one_and_delete.assert_not_called()


@pytest.mark.asyncio
async def test_driver_errors_become_store_errors(repository, collection):
    collection.find_one = AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))

    with pytest.raises(TaskStoreError) as exc_info:
        await repository.find_by_id(str(ObjectId()))

    assert exc_info.value.operation == "find_by_id"
    assert "no servers" in str(exc_info.value)



@pytest.mark.asyncio
async def test_rejected_document_becomes_store_error(repository, collection):
    collection.insert_one = AsyncMock(side_effect=DocumentTooLarge("document too large"))

    with pytest.raises(TaskStoreError) as exc_info:
        await repository.insert("buy milk")

    assert exc_info.value.operation == "insert"
    assert isinstance(exc_info.value.__cause__, DocumentTooLarge)


@pytest.mark.asyncio
async def test_ping_runs_admin_ping(repository, client):
    await repository.ping()

    client.admin.command.assert_awaited_once_with("ping")


@pytest.mark.asyncio
async def test_ping_failure_raises_store_error(repository, client):
    client.admin.command.side_effect = ServerSelectionTimeoutError("connection refused")

    with pytest.raises(TaskStoreError, match="connection refused"):
        await repository.ping()


@pytest.mark.asyncio
async def test_close_closes_client(repository, client):
    await repository.close()

    client.close.assert_awaited_once()
