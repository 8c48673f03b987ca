"""Source fanning a query out to every mirror embed."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from mirrorarr.domain.entities.media import EmbedRequest, MediaQuery

log = structlog.get_logger(__name__)


class MirrorsSource:
    """Emits one embed request per mirror, carrying the query as JSON payload.

    The source does no network I/O of its own; all work happens in the
    embeds it points at.
    """

    def __init__(
        self,
        embed_ids: Iterable[str],
        *,
        source_id: str = "whvxMirrors",
        name: str = "Netflix & Prime",
        rank: int = 550,
        disabled: bool = False,
    ) -> None:
        self._embed_ids = tuple(embed_ids)
        self._id = source_id
        self._name = name
        self.rank = rank
        self.disabled = disabled

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def embed_ids(self) -> tuple[str, ...]:
        return self._embed_ids

    async def scrape(self, query: MediaQuery) -> list[EmbedRequest]:
        payload = query.to_payload()
        requests = [EmbedRequest(embed_id=e, payload=payload) for e in self._embed_ids]
        log.debug(
            "mirrors_source_embeds",
            source=self._id,
            embeds=list(self._embed_ids),
            media_type=query.media_type,
        )
        return requests
