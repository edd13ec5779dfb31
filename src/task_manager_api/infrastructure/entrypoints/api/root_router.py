from fastapi import APIRouter, Depends

from task_manager_api.infrastructure.configuration.main_settings import Settings
from task_manager_api.infrastructure.entrypoints.api.dependencies import get_settings

router = APIRouter(tags=["info"])


@router.get("/")
def api_info(settings: Settings = Depends(get_settings)) -> dict:
    prefix = settings.api_prefix.rstrip("/")
    return {
        "message": f"{settings.app_name} is running",
        "endpoints": {
            "GET /health": "Service health",
            f"GET {prefix}/tasks": "Get all tasks",
            f"POST {prefix}/tasks": "Create a task",
            f"PUT {prefix}/tasks/:id/toggle": "Toggle task completion",
            f"DELETE {prefix}/tasks/:id": "Delete a task",
        },
    }
