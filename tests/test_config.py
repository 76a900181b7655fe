"""Tests for configuration adapter."""

import pytest

from community_hub.adapters.config import AppConfig


def test_config_loads_defaults() -> None:
    """Given no environment variables, when loading config, then defaults are used."""
    config = AppConfig()

    assert config.host == "0.0.0.0"
    assert config.port == 8000
    assert config.reload is False
    assert config.log_level == "INFO"
    assert config.socketio_path == "socket.io"
    assert config.ring_timeout_seconds == 45
    assert config.stale_sweep_interval_seconds == 30
    assert config.rate_limit_per_minute == 100
    assert config.chat_history_limit == 100
    assert config.starting_balance == 10000
    assert "http://localhost:5173" in config.cors_allowed_origins
    assert "http://localhost:3000" in config.cors_allowed_origins


def test_config_loads_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Given environment variables, when loading config, then they are used."""
    monkeypatch.setenv("HOST", "127.0.0.1")
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("RING_TIMEOUT_SECONDS", "10")
    monkeypatch.setenv("CORS_ALLOWED_ORIGINS", '["https://hub.example.org"]')

    config = AppConfig()

    assert config.host == "127.0.0.1"
    assert config.port == 9000
    assert config.ring_timeout_seconds == 10
    assert config.cors_allowed_origins == ["https://hub.example.org"]


def test_config_normalizes_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    """Given a lowercase log level, when loading config, then it is upper-cased."""
    monkeypatch.setenv("LOG_LEVEL", "debug")

    assert AppConfig().log_level == "DEBUG"


def test_config_validates_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    """Given an unknown log level, when loading config, then validation error is raised."""
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    with pytest.raises(ValueError, match="log_level must be one of"):
        AppConfig()


def test_config_rejects_negative_ring_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    """Given a negative ring timeout, when loading config, then validation error is raised."""
    monkeypatch.setenv("RING_TIMEOUT_SECONDS", "-1")

    with pytest.raises(ValueError, match="must not be negative"):
        AppConfig()


def test_config_allows_zero_to_disable_sweeper(monkeypatch: pytest.MonkeyPatch) -> None:
    """Given a zero sweep interval, when loading config, then it is accepted."""
    monkeypatch.setenv("STALE_SWEEP_INTERVAL_SECONDS", "0")

    assert AppConfig().stale_sweep_interval_seconds == 0


def test_config_strips_slashes_from_socketio_path() -> None:
    """Given a path with slashes, when loading config, then they are stripped."""
    config = AppConfig(socketio_path="/realtime/")

    assert config.socketio_path == "realtime"


def test_config_rejects_empty_socketio_path() -> None:
    """Given a path made only of slashes, when loading config, then validation error is raised."""
    with pytest.raises(ValueError, match="socketio_path must not be empty"):
        AppConfig(socketio_path="/")
