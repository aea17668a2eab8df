from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings, loaded from environment variables.

    Services read them once at creation and never modify them afterwards.
    """

    # API root
    API_BASE_URL: str = "http://localhost:8000/api"

    # Only used when a service opens its own httpx client
    HTTP_TIMEOUT: float = 30.0

    LOG_LEVEL: str = "info"

    # Log file output and rotation
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: str = "logs/client.log"
    LOG_ROTATION_POLICY: str = "time"  # one of: "time", "size"
    LOG_ROTATION_WHEN: str = "D"  # for TimedRotatingFileHandler
    LOG_ROTATION_INTERVAL: int = 1
    LOG_BACKUP_COUNT: int = 7
    LOG_MAX_BYTES: int = 10 * 1024 * 1024  # for size-based rotation

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)


settings = Settings()
