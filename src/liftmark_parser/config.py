"""Configuration settings for the LiftMark parser."""
import logging
import os
from typing import List, Literal


EnvironmentType = Literal["development", "staging", "production"]


class Settings:
    """Application settings."""

    # Environment
    ENVIRONMENT: EnvironmentType = "development"
    LOG_LEVEL: str = "INFO"

    # Limits
    MAX_MARKDOWN_LENGTH: int = 50000
    MAX_FILE_SIZE_BYTES: int = 1_000_000

    # HTTP
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:3001"]

    def __init__(self):
        # Environment
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env in ("development", "staging", "production"):
            self.ENVIRONMENT = env  # type: ignore
        else:
            self.ENVIRONMENT = "development"

        level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.LOG_LEVEL = level if isinstance(logging.getLevelName(level), int) else "INFO"

        # Limits
        self.MAX_MARKDOWN_LENGTH = _int_env("MAX_MARKDOWN_LENGTH", 50000)
        self.MAX_FILE_SIZE_BYTES = _int_env("MAX_FILE_SIZE_BYTES", 1_000_000)

        # HTTP
        origins = os.getenv("CORS_ORIGINS")
        if origins:
            self.CORS_ORIGINS = [o.strip() for o in origins.split(",") if o.strip()]
        else:
            self.CORS_ORIGINS = ["http://localhost:3000", "http://localhost:3001"]


def _int_env(name: str, default: int) -> int:
    try:
        value = int(os.getenv(name, default))
    except ValueError:
        return default
    return value if value > 0 else default


settings = Settings()
