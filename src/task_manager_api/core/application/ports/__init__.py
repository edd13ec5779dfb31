from task_manager_api.core.application.ports.task_repository_port import TaskRepositoryPort

__all__ = ["TaskRepositoryPort"]
