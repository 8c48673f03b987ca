"""Season/episode resolution for series.

The episode listing is paginated: the first request carries no page number,
follow-up requests use ``page=2, 3, …`` for as long as the previous page
reported ``nextPageShow == 1``.  Pages are concatenated in fetch order.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import structlog

from mirrorarr.domain.entities.media import EpisodeEntry, EpisodePage, MediaMeta
from mirrorarr.domain.errors import NotFoundError
from mirrorarr.domain.ports.fetcher import FetcherPort
from mirrorarr.infrastructure.mirrors.providers import MirrorProviderConfig
from mirrorarr.infrastructure.mirrors.search import to_int

log = structlog.get_logger(__name__)

# Fetches one episode page; ``None`` requests the first (unnumbered) page.
PageFetcher = Callable[[int | None], Awaitable[EpisodePage]]

_FIRST_FOLLOWUP_PAGE = 2


def parse_episode_page(raw: Mapping[str, Any]) -> EpisodePage:
    """Convert an ``episodes.php`` response into an :class:`EpisodePage`."""
    episodes = tuple(
        EpisodeEntry(
            id=str(row.get("id") or ""),
            season_label=str(row.get("s") or ""),
            episode_label=str(row.get("ep") or ""),
        )
        for row in raw.get("episodes") or []
        if isinstance(row, Mapping)
    )
    return EpisodePage(
        episodes=episodes,
        has_more=to_int(raw.get("nextPageShow")) == 1,
    )


def find_season_id(meta: MediaMeta, season: int) -> str:
    """Return the mirror id of *season*, or raise ``NotFoundError``."""
    for entry in meta.seasons:
        if to_int(entry.number) == season and entry.id:
            return entry.id
    raise NotFoundError("Season not available")


async def fetch_episode_page(
    fetcher: FetcherPort,
    provider: MirrorProviderConfig,
    season_id: str,
    series_id: str,
    page: int | None,
    headers: Mapping[str, str],
) -> EpisodePage:
    query = {"s": season_id, "series": series_id}
    if page is not None:
        query["page"] = str(page)
    raw = await fetcher.fetch_json(
        "/episodes.php",
        base_url=provider.api_base_url,
        query=query,
        headers=headers,
    )
    if not isinstance(raw, Mapping):
        return EpisodePage(episodes=(), has_more=False)
    return parse_episode_page(raw)


async def collect_episodes(fetch_page: PageFetcher) -> list[EpisodeEntry]:
    """Fetch every page of an episode listing and concatenate the rows.

    Terminates when a page clears the "more pages" flag; a listing that
    signals more pages K times costs exactly K+1 requests.
    """
    page = await fetch_page(None)
    episodes = list(page.episodes)
    fetched = 1
    page_number = _FIRST_FOLLOWUP_PAGE
    while page.has_more:
        page = await fetch_page(page_number)
        episodes.extend(page.episodes)
        fetched += 1
        page_number += 1

    log.debug("mirror_episodes_collected", pages=fetched, episodes=len(episodes))
    return episodes


def find_episode_id(episodes: list[EpisodeEntry], season: int, episode: int) -> str:
    """Return the id of ``S<season>``/``E<episode>``, or raise ``NotFoundError``."""
    season_label = f"S{season}"
    episode_label = f"E{episode}"
    for entry in episodes:
        if not entry.id:
            continue
        if entry.season_label == season_label and entry.episode_label == episode_label:
            return entry.id
    raise NotFoundError("Episode not available")
