import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from task_manager_api.core.application.ports.task_repository_port import TaskRepositoryPort
from task_manager_api.infrastructure.configuration.main_settings import Settings
from task_manager_api.infrastructure.entrypoints.api.error_handlers import (
    register_exception_handlers,
)
from task_manager_api.infrastructure.entrypoints.api.health_router import (
    router as health_router,
)
from task_manager_api.infrastructure.entrypoints.api.metrics_router import (
    router as metrics_router,
)
from task_manager_api.infrastructure.entrypoints.api.middleware import (
    FixedWindowRateLimiter,
    RateLimitMiddleware,
    SecurityHeadersMiddleware,
)
from task_manager_api.infrastructure.entrypoints.api.root_router import router as root_router
from task_manager_api.infrastructure.entrypoints.api.task_router import router as task_router
from task_manager_api.infrastructure.observability.logger_factory_service import (
    configure_logging,
)
from task_manager_api.infrastructure.observability.logging import RequestLoggingMiddleware
from task_manager_api.infrastructure.resolution.container import (
    build_task_repository,
    connect_task_repository,
)

logger = structlog.get_logger(context_component="app_factory")


def create_app(
    settings: Settings | None = None,
    task_repository: TaskRepositoryPort | None = None,
) -> FastAPI:
    """
    Builds the API. When task_repository is None the store named by settings is
    assembled and probed on startup, and closed on shutdown.
    """
    settings = settings or Settings()
    configure_logging(settings.log_level, settings.log_format, settings.app_env)

    logger.info("--- BOOT DIAGNOSTICS ---")
    logger.info(f"App Name: {settings.app_name}")
    logger.info(f"Env: {settings.app_env}")
    logger.info(f"Task store: {settings.task_store_backend.value}")
    logger.info(
        f"Rate limit: {settings.rate_limit_max_requests} requests / "
        f"{settings.rate_limit_window_seconds}s on {settings.api_prefix}"
    )
    logger.info("------------------------")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owns_repository = app.state.task_repository is None
        if owns_repository:
            app.state.task_repository = build_task_repository(settings)
        await connect_task_repository(app.state.task_repository)
        logger.info(f"Server running on port {settings.port}")
        try:
            yield
        finally:
            if owns_repository:
                await app.state.task_repository.close()
                app.state.task_repository = None

    app = FastAPI(title=settings.app_name, lifespan=lifespan, docs_url=None, redoc_url=None)
    app.state.settings = settings
    app.state.started_at = time.monotonic()
    app.state.task_repository = task_repository
    app.state.rate_limiter = FixedWindowRateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )

    register_exception_handlers(app)

    app.include_router(root_router)
    app.include_router(health_router)
    app.include_router(metrics_router)
    app.include_router(task_router, prefix=settings.api_prefix.rstrip("/"))

    # Starlette runs the last added middleware first, so this is the pipeline reversed:
    # CORS -> security headers -> request logging -> rate limiting -> route.
    app.add_middleware(
        RateLimitMiddleware,
        limiter=app.state.rate_limiter,
        path_prefix=settings.api_prefix,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app
