from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TaskStoreBackend(str, Enum):
    MONGO = "mongo"
    MEMORY = "memory"


class Settings(BaseSettings):
    """
    Service configuration. Each field is read from the environment variable of
    the same name in upper case (PORT, MONGODB_URI, ...) or from a .env file.
    """
    # App Config
    app_name: str = "Task Manager API"
    app_env: str = "local"
    log_level: str = "INFO"
    log_format: str | None = None

    # Server
    host: str = "0.0.0.0"
    port: int = 3001
    api_prefix: str = "/api"
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Store
    task_store_backend: TaskStoreBackend = TaskStoreBackend.MONGO
    mongodb_uri: str = "mongodb://mongo:27017/taskmanager"
    mongo_default_database: str = "taskmanager"
    mongo_server_selection_timeout_ms: int = 5000

    # Rate limiting (applies to api_prefix only)
    rate_limit_window_seconds: int = 15 * 60
    rate_limit_max_requests: int = 100

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
