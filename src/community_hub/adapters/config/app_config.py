"""12-factor configuration adapter using environment variables."""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Host to bind the server to")
    port: int = Field(default=8000, description="Port to bind the server to")
    reload: bool = Field(default=False, description="Enable auto-reload for development")
    log_level: str = Field(default="INFO", description="Root log level")

    # Socket.IO configuration
    cors_allowed_origins: list[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        description="Origins allowed to open Socket.IO connections (JSON list in env)",
    )
    socketio_path: str = Field(
        default="socket.io",
        description="Mount path of the Socket.IO endpoint",
    )

    # Hub behaviour
    ring_timeout_seconds: float = Field(
        default=45,
        description="Seconds an unanswered call rings before it is ended (0 disables)",
    )
    stale_sweep_interval_seconds: float = Field(
        default=30,
        description="Interval between stale connection sweeps in seconds (0 disables)",
    )

    # HTTP API
    rate_limit_per_minute: int = Field(
        default=100,
        description="Maximum number of requests allowed per IP address per minute",
    )
    call_log_limit: int = Field(
        default=30, description="Maximum number of call log entries returned per user"
    )
    labour_posts_limit: int = Field(
        default=20, description="Maximum number of active labour posts returned"
    )
    feed_posts_limit: int = Field(default=50, description="Maximum number of feed posts returned")
    chat_history_limit: int = Field(
        default=100, description="Maximum number of chat messages returned as history"
    )
    loans_limit: int = Field(default=50, description="Maximum number of loans returned")
    transactions_limit: int = Field(
        default=50, description="Maximum number of transactions returned per user"
    )
    starting_balance: float = Field(
        default=10000, description="Wallet balance every member starts with"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError("log_level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return level

    @field_validator("ring_timeout_seconds", "stale_sweep_interval_seconds")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        """Validate intervals are not negative."""
        if v < 0:
            raise ValueError("timeouts and intervals must not be negative")
        return v

    @field_validator("socketio_path")
    @classmethod
    def validate_socketio_path(cls, v: str) -> str:
        """Strip slashes so the path can be mounted as-is."""
        path = v.strip("/")
        if not path:
            raise ValueError("socketio_path must not be empty")
        return path
