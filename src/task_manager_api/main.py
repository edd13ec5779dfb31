import uvicorn

from task_manager_api.infrastructure.configuration.main_settings import Settings
from task_manager_api.infrastructure.entrypoints.api.app_factory import create_app


def run():
    """Serve the API on the configured host and port."""
    settings = Settings()
    uvicorn.run(
        "task_manager_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        # uvicorn loggers propagate to the root handler configured by structlog
        log_config=None,
    )


def dev():
    """Run the development server with autoreload."""
    settings = Settings()
    uvicorn.run(
        "task_manager_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


# Instantiate global app for ASGI
settings = Settings()
app = create_app(settings)
