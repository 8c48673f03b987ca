"""Registry holding every embed the aggregator may dispatch to."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Protocol

import structlog

from mirrorarr.domain.errors import DuplicateEmbedError, EmbedNotFoundError
from mirrorarr.domain.ports.embed import EmbedPort

log = structlog.get_logger(__name__)


class _EmbedOverride(Protocol):
    enabled: bool | None
    rank: int | None


class EmbedRegistry:
    """Embeds keyed by id, ordered by rank (highest first) on listing.

    Populated once at startup from the static provider table; per-embed
    overrides from config may re-rank or disable entries afterwards.
    """

    def __init__(self, embeds: Iterable[EmbedPort] | None = None) -> None:
        self._embeds: dict[str, EmbedPort] = {}
        for embed in embeds or []:
            self.register(embed)

    def register(self, embed: EmbedPort) -> None:
        if embed.id in self._embeds:
            raise DuplicateEmbedError(f"embed already registered: {embed.id}")
        self._embeds[embed.id] = embed
        log.debug("embed_registered", embed=embed.id, rank=embed.rank)

    def get(self, embed_id: str) -> EmbedPort:
        try:
            return self._embeds[embed_id]
        except KeyError:
            raise EmbedNotFoundError(f"unknown embed: {embed_id}") from None

    def __contains__(self, embed_id: object) -> bool:
        return embed_id in self._embeds

    def list_all(self) -> list[EmbedPort]:
        """All embeds, highest rank first (ties keep registration order)."""
        return sorted(self._embeds.values(), key=lambda e: e.rank, reverse=True)

    def list_enabled(self) -> list[EmbedPort]:
        return [e for e in self.list_all() if not e.disabled]

    def apply_overrides(self, overrides: Mapping[str, _EmbedOverride]) -> None:
        """Apply per-embed ``enabled``/``rank`` overrides; unknown ids are logged."""
        for embed_id, override in overrides.items():
            embed = self._embeds.get(embed_id)
            if embed is None:
                log.warning("embed_override_unknown", embed=embed_id)
                continue
            if override.enabled is not None:
                embed.disabled = not override.enabled  # type: ignore[misc]
            if override.rank is not None:
                embed.rank = override.rank  # type: ignore[misc]
            log.info(
                "embed_override_applied",
                embed=embed_id,
                enabled=not embed.disabled,
                rank=embed.rank,
            )
