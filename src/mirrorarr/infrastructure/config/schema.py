"""Pydantic configuration models.

``AppConfig`` mirrors the sectioned layout of ``config.yaml``::

    app_name: mirrorarr
    environment: dev
    http:    {timeout_seconds, follow_redirects, user_agent}
    logging: {level, format}
    mirrors: {bootstrap_url, proxy_url, title_similarity_threshold,
              progress_*, overrides: {<embed id>: {enabled, rank}}}

Environment variables are flat (``MIRRORARR_PROXY_URL``) and are read by
:class:`EnvOverrides`; ``load.py`` folds them into the sections.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


class HttpConfig(BaseModel):
    """Settings of the shared outgoing ``httpx.AsyncClient``."""

    timeout_seconds: float = Field(
        default=30.0, description="Timeout for every mirror request."
    )
    follow_redirects: bool = True
    user_agent: str = "Mirrorarr/0.1.0"

    @field_validator("timeout_seconds")
    @classmethod
    def _positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout_seconds must be > 0")
        return v


class LoggingConfig(BaseModel):
    level: LogLevel = "INFO"
    # None: console in dev/test, json in prod (resolved by AppConfig)
    format: Optional[LogFormat] = None


class EmbedOverride(BaseModel):
    """Per-embed entry of ``mirrors.overrides``."""

    enabled: Optional[bool] = None
    rank: Optional[int] = None


class MirrorsConfig(BaseModel):
    """Mirror pipeline settings (``mirrors`` section)."""

    bootstrap_url: str = Field(
        default="https://filmuworker.entertainmentfilmu.workers.dev/",
        description="Endpoint returning the percent-encoded session hash.",
    )
    proxy_url: str = Field(
        default="https://filmueproxy.vercel.app",
        description="m3u8 proxy that fetches manifests with the mirror headers.",
    )
    title_similarity_threshold: float = Field(
        default=0.9,
        description="Minimum rapidfuzz ratio (0.0-1.0) for two titles to match.",
    )

    progress_initial: int = 10
    progress_step: int = 5
    progress_ceiling: int = 90
    progress_interval_seconds: float = 0.1

    overrides: dict[str, EmbedOverride] = Field(default_factory=dict)

    @field_validator("title_similarity_threshold")
    @classmethod
    def _threshold_in_range(cls, v: float) -> float:
        if not 0.0 < v <= 1.0:
            raise ValueError("title_similarity_threshold must be in (0, 1]")
        return v

    @field_validator("progress_interval_seconds")
    @classmethod
    def _positive_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("progress_interval_seconds must be > 0")
        return v

    @field_validator("progress_step")
    @classmethod
    def _positive_step(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("progress_step must be > 0")
        return v

    @model_validator(mode="after")
    def _progress_below_done(self) -> "MirrorsConfig":
        if not 0 <= self.progress_initial <= self.progress_ceiling < 100:
            raise ValueError(
                "progress values must satisfy 0 <= initial <= ceiling < 100"
            )
        return self


class AppConfig(BaseModel):
    """Validated, final application configuration."""

    app_name: str = "mirrorarr"
    environment: Environment = "dev"

    http: HttpConfig = Field(default_factory=HttpConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    mirrors: MirrorsConfig = Field(default_factory=MirrorsConfig)

    @model_validator(mode="after")
    def _resolve_log_format(self) -> "AppConfig":
        if self.logging.format is None:
            self.logging.format = "json" if self.environment == "prod" else "console"
        return self

    @property
    def log_level(self) -> LogLevel:
        return self.logging.level

    @property
    def log_format(self) -> LogFormat:
        assert self.logging.format is not None
        return self.logging.format


class EnvOverrides(BaseSettings):
    """Flat ``MIRRORARR_*`` environment variables; every field is optional.

    Examples: ``MIRRORARR_ENVIRONMENT=prod``, ``MIRRORARR_LOG_LEVEL=DEBUG``,
    ``MIRRORARR_HTTP_TIMEOUT_SECONDS=10``, ``MIRRORARR_PROXY_URL=...``.
    """

    model_config = SettingsConfigDict(
        env_prefix="MIRRORARR_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    bootstrap_url: Optional[str] = None
    proxy_url: Optional[str] = None
    title_similarity_threshold: Optional[float] = None

    def to_update_dict(self) -> dict:
        """Only the variables that are actually set."""
        return self.model_dump(exclude_none=True)
