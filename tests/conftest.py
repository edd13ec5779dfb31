import pytest
from fastapi.testclient import TestClient

from task_manager_api.infrastructure.configuration.main_settings import Settings, TaskStoreBackend
from task_manager_api.infrastructure.entrypoints.api.app_factory import create_app
from task_manager_api.infrastructure.fakes.in_memory_task_repository import InMemoryTaskRepository


@pytest.fixture
def settings():
    return Settings(
        app_name="Task Manager API",
        app_env="test",
        log_format="console",
        task_store_backend=TaskStoreBackend.MEMORY,
        api_prefix="/api",
        rate_limit_window_seconds=900,
        rate_limit_max_requests=100,
    )


@pytest.fixture
def repository():
    return InMemoryTaskRepository()


@pytest.fixture
def app(settings, repository):
    return create_app(settings, task_repository=repository)


@pytest.fixture
def client(app):
    return TestClient(app)
