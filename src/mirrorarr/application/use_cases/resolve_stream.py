"""Stream resolution use case.

MediaQuery -> source -> embed requests -> embeds by rank -> first stream.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Protocol

import structlog

from mirrorarr.domain.entities.media import EmbedRequest, MediaQuery, StreamDescriptor
from mirrorarr.domain.errors import EmbedNotFoundError, NotFoundError, ProviderError
from mirrorarr.domain.ports.embed import EmbedPort, SourcePort

log = structlog.get_logger(__name__)

# Progress callback receiving the embed id alongside the percentage.
EmbedProgressSink = Callable[[str, int], None]


class _EmbedLookup(Protocol):
    """What this use case needs from the embed registry."""

    def get(self, embed_id: str) -> EmbedPort: ...


class ResolveStreamUseCase:
    """Tries the embeds a source proposes until one yields a stream.

    Embeds run one after another, highest rank first.  An embed reporting
    ``NotFoundError`` (or any other failure) is skipped; only when every
    embed failed does the use case raise ``NotFoundError`` itself.
    """

    def __init__(self, source: SourcePort, embeds: _EmbedLookup) -> None:
        self._source = source
        self._embeds = embeds

    async def execute(
        self,
        query: MediaQuery,
        progress: EmbedProgressSink | None = None,
    ) -> StreamDescriptor:
        if self._source.disabled:
            raise NotFoundError(f"source disabled: {self._source.id}")

        requests = await self._source.scrape(query)
        candidates = self._order(requests)
        log.info(
            "resolve_stream_start",
            source=self._source.id,
            title=query.title,
            media_type=query.media_type,
            embeds=[embed.id for embed, _ in candidates],
        )

        for embed, request in candidates:
            sink = functools.partial(progress, embed.id) if progress else None
            try:
                stream = await embed.scrape(request.payload, sink)
            except ProviderError as exc:
                log.info(
                    "resolve_stream_embed_failed",
                    embed=embed.id,
                    error_type=type(exc).__name__,
                    error=str(exc),
                )
                continue
            except Exception:
                log.exception("resolve_stream_embed_error", embed=embed.id)
                continue

            log.info("resolve_stream_success", embed=embed.id, title=query.title)
            return stream

        log.info("resolve_stream_exhausted", source=self._source.id, title=query.title)
        raise NotFoundError("No stream found")

    def _order(
        self, requests: list[EmbedRequest]
    ) -> list[tuple[EmbedPort, EmbedRequest]]:
        """Drop unknown/disabled embeds and sort by rank (stable, desc)."""
        pairs: list[tuple[EmbedPort, EmbedRequest]] = []
        for request in requests:
            try:
                embed = self._embeds.get(request.embed_id)
            except EmbedNotFoundError:
                log.warning("resolve_stream_unknown_embed", embed=request.embed_id)
                continue
            if embed.disabled:
                log.debug("resolve_stream_embed_disabled", embed=embed.id)
                continue
            pairs.append((embed, request))
        return sorted(pairs, key=lambda pair: pair[0].rank, reverse=True)
