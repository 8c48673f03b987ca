"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from collections.abc import Iterable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from mirrorarr.application.use_cases.resolve_stream import ResolveStreamUseCase
from mirrorarr.infrastructure.config.schema import AppConfig
from mirrorarr.infrastructure.embeds import EmbedRegistry
from mirrorarr.infrastructure.http.fetcher import HttpxFetcher
from mirrorarr.infrastructure.mirrors import (
    DEFAULT_MIRROR_PROVIDERS,
    MirrorEmbed,
    MirrorProviderConfig,
    MirrorsSource,
)
from mirrorarr.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ResolutionStack:
    """The wired resolution components (shared by the API and the CLI)."""

    registry: EmbedRegistry
    source: MirrorsSource
    use_case: ResolveStreamUseCase


def create_http_client(config: AppConfig) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.http.timeout_seconds),
        headers={"User-Agent": config.http.user_agent},
        follow_redirects=config.http.follow_redirects,
    )


def build_resolution_stack(
    config: AppConfig,
    http_client: httpx.AsyncClient,
    providers: Iterable[MirrorProviderConfig] = DEFAULT_MIRROR_PROVIDERS,
) -> ResolutionStack:
    """Wire fetcher → embeds → registry → source → use case."""
    fetcher = HttpxFetcher(http_client)
    embeds = [MirrorEmbed(p, fetcher, config.mirrors) for p in providers]

    registry = EmbedRegistry(embeds)
    registry.apply_overrides(config.mirrors.overrides)

    source = MirrorsSource(embed_ids=[e.id for e in embeds])
    use_case = ResolveStreamUseCase(source=source, embeds=registry)
    log.info(
        "resolution_stack_initialized",
        embeds=[e.id for e in registry.list_enabled()],
    )
    return ResolutionStack(registry=registry, source=source, use_case=use_case)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the shared HTTP client and the resolution stack; close on shutdown."""
    state = cast(AppState, app.state)
    config = state.config

    state.http_client = create_http_client(config)
    log.info("http_client_initialized", timeout=config.http.timeout_seconds)

    stack = build_resolution_stack(config, state.http_client)
    state.embed_registry = stack.registry
    state.mirrors_source = stack.source
    state.resolve_stream_uc = stack.use_case

    log.info("app_startup_complete")

    try:
        yield
    finally:
        await state.http_client.aclose()
        log.info("app_shutdown_complete")
