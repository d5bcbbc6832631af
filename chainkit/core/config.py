"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from chainkit.application.dto import MiddlewareSpec


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via ``CHAINKIT_``-prefixed
    environment variables or a .env file. ``middlewares`` is a JSON
    list of ``{"type", "name", "config"}`` records built at startup.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHAINKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "chainkit"
    app_version: str = "0.1.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Request identification
    request_id_header: str = "X-Request-ID"
    request_id_length: int = 24

    # Declarative middleware stack, built through the builder registry
    middlewares: list[MiddlewareSpec] = Field(default_factory=list)

    # Metrics
    metrics_enabled: bool = True

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
