from .app_factory import create_app
from .health_router import router as health_router
from .task_router import router as task_router

__all__ = ["create_app", "health_router", "task_router"]
