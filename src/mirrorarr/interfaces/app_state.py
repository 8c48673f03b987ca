"""Typed application state shared between the composition root and routes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from mirrorarr.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from mirrorarr.application.use_cases.resolve_stream import ResolveStreamUseCase
    from mirrorarr.infrastructure.embeds import EmbedRegistry
    from mirrorarr.infrastructure.mirrors import MirrorsSource


class AppState(State):
    """Typed view of ``app.state``.

    ``config`` is set by :func:`~mirrorarr.interfaces.main.build_app`; the
    rest is created on startup by
    :func:`~mirrorarr.interfaces.composition.lifespan`.
    """

    config: AppConfig

    # Shared by every mirror embed; closed on shutdown
    http_client: httpx.AsyncClient

    embed_registry: EmbedRegistry
    mirrors_source: MirrorsSource
    resolve_stream_uc: ResolveStreamUseCase
