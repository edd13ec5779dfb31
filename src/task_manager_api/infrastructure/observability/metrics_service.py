"""Prometheus metrics declarations for the task manager API.

All metrics are declared statically at module level.
Labels use ONLY static enumerations, never task ids or caller addresses.
"""

from prometheus_client import Counter, Histogram

# ── Task operation metrics ─────────────────────────────────────────

TASK_OPERATIONS_TOTAL = Counter(
    "task_manager_task_operations_total",
    "Total task operations handled by the API",
    ["operation", "outcome"],
)

# ── HTTP pipeline metrics ──────────────────────────────────────────

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "task_manager_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "status_class"],
)

RATE_LIMITED_TOTAL = Counter(
    "task_manager_rate_limited_total",
    "Requests rejected by the API rate limiter",
)
