"""Application configuration loading via Pydantic settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_GREETING = "Hello From Node.js app Test"


class Settings(BaseSettings):
    """Runtime configuration sourced from environment variables."""

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT", ge=1, le=65535)
    metrics_port: int | None = Field(default=None, alias="METRICS_PORT", ge=1, le=65535)
    app_label: str = Field(default="flask_system_app", alias="APP_LABEL")
    greeting: str = Field(default=DEFAULT_GREETING, alias="GREETING")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def default_labels(self) -> dict[str, str]:
        """Labels attached to every exported sample."""

        return {"app": self.app_label}


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()
