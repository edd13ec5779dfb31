from task_manager_api.infrastructure.entrypoints.api.middleware.rate_limit_middleware import (
    FixedWindowRateLimiter,
    RateLimitMiddleware,
)
from task_manager_api.infrastructure.entrypoints.api.middleware.security_headers_middleware import (
    SecurityHeadersMiddleware,
)

__all__ = ["FixedWindowRateLimiter", "RateLimitMiddleware", "SecurityHeadersMiddleware"]
