from task_manager_api.infrastructure.observability.logging.log_schema_processor import (
    log_schema_processor,
)
from task_manager_api.infrastructure.observability.logging.request_logging_middleware import (
    RequestLoggingMiddleware,
)

__all__ = [
    "RequestLoggingMiddleware",
    "log_schema_processor",
]
