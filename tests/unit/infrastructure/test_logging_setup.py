"""Tests for the structlog/stdlib logging configuration."""

from __future__ import annotations

from mirrorarr.infrastructure.config.schema import AppConfig
from mirrorarr.infrastructure.logging.setup import build_logging_config


class TestBuildLoggingConfig:
    def test_handlers_use_structlog_formatter(self) -> None:
        cfg = build_logging_config(AppConfig())
        assert cfg["handlers"]["default"]["formatter"] == "structlog"
        assert cfg["handlers"]["access"]["formatter"] == "structlog"
        assert "structlog" in cfg["formatters"]

    def test_level_applied_to_root_and_uvicorn(self) -> None:
        cfg = build_logging_config(AppConfig(logging={"level": "WARNING"}))
        assert cfg["root"]["level"] == "WARNING"
        assert cfg["loggers"]["uvicorn"]["level"] == "WARNING"
        assert cfg["loggers"]["uvicorn.access"]["level"] == "WARNING"

    def test_http_client_loggers_quiet_unless_debugging(self) -> None:
        cfg = build_logging_config(AppConfig())
        assert cfg["loggers"]["httpx"]["level"] == "WARNING"
        assert cfg["loggers"]["httpcore"]["level"] == "WARNING"

        debug = build_logging_config(AppConfig(logging={"level": "DEBUG"}))
        assert debug["loggers"]["httpx"]["level"] == "DEBUG"

    def test_each_call_builds_a_fresh_mapping(self) -> None:
        first = build_logging_config(AppConfig(logging={"level": "ERROR"}))
        second = build_logging_config(AppConfig())
        assert first["root"]["level"] == "ERROR"
        assert second["root"]["level"] == "INFO"
        assert first["loggers"] is not second["loggers"]
