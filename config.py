"""Configuration management for URL shortener."""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Config(BaseSettings):
    """Application configuration."""

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to"
    )

    port: int = Field(
        default=3000,
        description="Port to listen on"
    )

    workers: int = Field(
        default=1,
        ge=1,
        description="Number of uvicorn worker processes. Each process has its own registry."
    )

    environment: str = Field(
        default="development",
        description="'development' exposes internal error messages in 500 responses"
    )

    # URL shortener settings
    base_url: str = Field(
        default="http://localhost:3000",
        description="Fallback base URL for short links when the request has no host"
    )

    path_prefix: str = Field(
        default="",
        description="Path prefix for short URLs (e.g., '/s' for /s/abc123)"
    )

    short_code_length: int = Field(
        default=6,
        ge=3,
        le=20,
        description="Length of generated short codes"
    )

    max_generation_attempts: int = Field(
        default=10,
        ge=1,
        description="Attempts at a free random code before failing the request"
    )

    default_validity_minutes: int = Field(
        default=30,
        ge=1,
        le=525600,
        description="Validity used when a request omits it"
    )

    cleanup_interval_seconds: float = Field(
        default=3600,
        gt=0,
        description="Seconds between expired-URL sweeps"
    )

    # Remote logging settings
    remote_log_url: Optional[str] = Field(
        default=None,
        description="Collector URL for remote log events (disabled if not set)"
    )

    remote_log_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout for each remote log delivery"
    )

    remote_log_queue_size: int = Field(
        default=1000,
        ge=1,
        description="Pending remote log events kept before dropping"
    )

    # Geolocation settings
    geoip_database_path: Optional[str] = Field(
        default=None,
        description="Path to a MaxMind City .mmdb file (lookups disabled if not set)"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
