from __future__ import annotations

from .load import load_config
from .schema import (
    AppConfig,
    EmbedOverride,
    EnvOverrides,
    HttpConfig,
    LoggingConfig,
    MirrorsConfig,
)

__all__ = [
    "AppConfig",
    "EmbedOverride",
    "EnvOverrides",
    "HttpConfig",
    "LoggingConfig",
    "MirrorsConfig",
    "load_config",
]
