import structlog

from task_manager_api.core.application.ports.task_repository_port import TaskRepositoryPort
from task_manager_api.infrastructure.configuration.main_settings import Settings, TaskStoreBackend
from task_manager_api.infrastructure.fakes.in_memory_task_repository import InMemoryTaskRepository
from task_manager_api.infrastructure.repositories.mongo_task_repository import MongoTaskRepository

logger = structlog.get_logger(context_component="container")


def build_task_repository(settings: Settings) -> TaskRepositoryPort:
    """Assembles the task repository selected by TASK_STORE_BACKEND."""
    if settings.task_store_backend is TaskStoreBackend.MEMORY:
        logger.warning("Using in-memory task store; tasks are lost on restart")
        return InMemoryTaskRepository()
    return MongoTaskRepository.from_settings(settings)


async def connect_task_repository(repository: TaskRepositoryPort) -> bool:
    """
    Probes the store once at startup.
    A failure is logged and swallowed so the process keeps serving; requests
    will fail with store errors until the store becomes reachable.
    """
    try:
        await repository.ping()
    except Exception as exc:
        logger.error(
            "Task store connection error",
            error_type=type(exc).__name__,
            error_details=str(exc),
        )
        return False
    logger.info("Connected to task store")
    return True
