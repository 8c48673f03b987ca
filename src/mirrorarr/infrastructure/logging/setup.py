"""structlog on top of stdlib logging.

Application loggers (``structlog.get_logger``) and foreign stdlib loggers
(uvicorn, httpx) end up in the same handlers and the same renderer: console
output in dev/test, JSON lines in prod.  ``configure_logging`` returns the
dictConfig so uvicorn can be started with the identical setup.
"""

from __future__ import annotations

import logging.config
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from mirrorarr.infrastructure.config.schema import AppConfig

log = structlog.get_logger(__name__)

# Chatty per-request loggers, held at WARNING unless running with DEBUG.
_QUIET_LOGGERS = ("httpx", "httpcore")


def _drop_color_message(
    _: WrappedLogger, __: str, event_dict: EventDict
) -> EventDict:
    # uvicorn duplicates the message as "color_message"
    event_dict.pop("color_message", None)
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        _drop_color_message,
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
    ]


def _renderer(config: AppConfig) -> Processor:
    if config.log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def _stream_handler(stream: str) -> dict[str, Any]:
    return {
        "class": "logging.StreamHandler",
        "formatter": "structlog",
        "stream": stream,
    }


def build_logging_config(config: AppConfig) -> dict[str, Any]:
    """Return a fresh ``logging.config.dictConfig`` mapping for *config*."""
    level = config.log_level
    quiet_level = level if level == "DEBUG" else "WARNING"

    loggers: dict[str, Any] = {
        "uvicorn": {"handlers": ["default"], "level": level, "propagate": False},
        "uvicorn.error": {"level": level},
        "uvicorn.access": {"handlers": ["access"], "level": level, "propagate": False},
    }
    for name in _QUIET_LOGGERS:
        loggers[name] = {"level": quiet_level}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structlog": {
                "()": structlog.stdlib.ProcessorFormatter,
                "foreign_pre_chain": _shared_processors(),
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    _renderer(config),
                ],
            },
        },
        "handlers": {
            "default": _stream_handler("ext://sys.stderr"),
            "access": _stream_handler("ext://sys.stdout"),
        },
        "loggers": loggers,
        "root": {"handlers": ["default"], "level": level},
    }


def configure_logging(config: AppConfig) -> dict[str, Any]:
    """Configure structlog and stdlib logging; returns the dictConfig used."""
    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    cfg = build_logging_config(config)
    logging.config.dictConfig(cfg)

    log.info(
        "logging_configured", log_format=config.log_format, log_level=config.log_level
    )
    return cfg
