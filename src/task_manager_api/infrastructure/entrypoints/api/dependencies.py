from fastapi import Request

from task_manager_api.core.application.ports.task_repository_port import TaskRepositoryPort
from task_manager_api.infrastructure.configuration.main_settings import Settings


def get_task_repository(request: Request) -> TaskRepositoryPort:
    return request.app.state.task_repository


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
