"""Mirror embed: resolves a movie/episode to an HLS stream on one mirror.

Pipeline (strictly sequential, each step awaited before the next)::

    session hash → search → match → [season → episode pages → episode]
                 → playlist → proxied manifest URL

Any failure inside the pipeline surfaces as ``NotFoundError("Failed to
search")``; the original error kind is only visible in the logs.
"""

from __future__ import annotations

import functools
from collections.abc import Mapping
from typing import Protocol

import structlog

from mirrorarr.domain.entities.media import (
    EpisodePage,
    MediaMeta,
    MediaQuery,
    StreamDescriptor,
    StreamFlag,
)
from mirrorarr.domain.errors import NotFoundError
from mirrorarr.domain.ports.embed import CookieBuilder, ProgressSink, TitleComparator
from mirrorarr.domain.ports.fetcher import FetcherPort
from mirrorarr.infrastructure.common.cookies import make_cookie_header
from mirrorarr.infrastructure.matching.title_matcher import is_similar_title
from mirrorarr.infrastructure.mirrors.episodes import (
    collect_episodes,
    fetch_episode_page,
    find_episode_id,
    find_season_id,
)
from mirrorarr.infrastructure.mirrors.playlist import (
    build_proxy_url,
    fetch_playlist,
    select_source,
)
from mirrorarr.infrastructure.mirrors.progress import ProgressTicker
from mirrorarr.infrastructure.mirrors.providers import MirrorProviderConfig
from mirrorarr.infrastructure.mirrors.search import (
    fetch_media_meta,
    find_matching_candidate,
    search_candidates,
)
from mirrorarr.infrastructure.mirrors.session import fetch_session_token

log = structlog.get_logger(__name__)


class _MirrorSettings(Protocol):
    """Configuration values consumed by MirrorEmbed."""

    bootstrap_url: str
    proxy_url: str
    title_similarity_threshold: float
    progress_initial: int
    progress_step: int
    progress_ceiling: int
    progress_interval_seconds: float


class MirrorEmbed:
    """Resolves queries against a single mirror provider."""

    def __init__(
        self,
        provider: MirrorProviderConfig,
        fetcher: FetcherPort,
        settings: _MirrorSettings,
        *,
        compare: TitleComparator | None = None,
        cookie_builder: CookieBuilder = make_cookie_header,
    ) -> None:
        self._provider = provider
        self._fetcher = fetcher
        self._settings = settings
        self._compare = compare or functools.partial(
            is_similar_title, threshold=settings.title_similarity_threshold
        )
        self._cookie_builder = cookie_builder
        self.rank = provider.rank
        self.disabled = provider.disabled

    @property
    def id(self) -> str:
        return self._provider.id

    @property
    def name(self) -> str:
        return self._provider.name

    async def resolve(
        self, query: MediaQuery, progress: ProgressSink | None = None
    ) -> StreamDescriptor:
        """Resolve *query* to a stream descriptor or raise ``NotFoundError``."""
        return await self._run(query, progress)

    async def scrape(
        self, payload: str, progress: ProgressSink | None = None
    ) -> StreamDescriptor:
        """Resolve a JSON query payload emitted by a source."""
        return await self._run(payload, progress)

    async def _run(
        self, request: MediaQuery | str, progress: ProgressSink | None
    ) -> StreamDescriptor:
        bound = log.bind(embed=self.id)
        settings = self._settings
        try:
            async with ProgressTicker(
                progress,
                initial=settings.progress_initial,
                step=settings.progress_step,
                ceiling=settings.progress_ceiling,
                interval=settings.progress_interval_seconds,
            ):
                query = (
                    request
                    if isinstance(request, MediaQuery)
                    else MediaQuery.from_payload(request)
                )
                bound = bound.bind(title=query.title, media_type=query.media_type)
                descriptor = await self._resolve(query)
        except Exception as exc:
            bound.warning(
                "mirror_resolve_failed",
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise NotFoundError("Failed to search") from exc

        bound.info("mirror_resolve_success", manifest_url=descriptor.manifest_url)
        return descriptor

    async def _resolve(self, query: MediaQuery) -> StreamDescriptor:
        provider = self._provider
        token = await fetch_session_token(self._fetcher, self._settings.bootstrap_url)
        headers = {"cookie": self._cookie_builder({"t_hash_t": token, "hd": "on"})}

        candidates = await search_candidates(
            self._fetcher, provider, query.title, headers
        )

        async def _meta(item_id: str) -> MediaMeta:
            return await fetch_media_meta(self._fetcher, provider, item_id, headers)

        match = await find_matching_candidate(candidates, query, _meta, self._compare)
        item_id = match.id
        log.info(
            "mirror_item_matched", embed=provider.id, id=item_id, title=match.title
        )

        if query.media_type == "show":
            item_id = await self._resolve_episode(item_id, query, headers)

        entries = await fetch_playlist(self._fetcher, provider, item_id, headers)
        source = select_source(entries)
        log.debug(
            "mirror_source_selected", embed=provider.id, label=source.label
        )

        return StreamDescriptor(
            manifest_url=build_proxy_url(
                self._settings.proxy_url,
                provider.base_url,
                source.file,
                self._cookie_builder,
            ),
            flags=frozenset({StreamFlag.CORS_ALLOWED}),
        )

    async def _resolve_episode(
        self,
        series_id: str,
        query: MediaQuery,
        headers: Mapping[str, str],
    ) -> str:
        """Map a matched series id to the id of the requested episode."""
        assert query.season is not None and query.episode is not None
        provider = self._provider

        meta = await fetch_media_meta(self._fetcher, provider, series_id, headers)
        season_id = find_season_id(meta, query.season)

        async def _page(page: int | None) -> EpisodePage:
            episode_page = await fetch_episode_page(
                self._fetcher, provider, season_id, series_id, page, headers
            )
            log.debug(
                "mirror_episode_page",
                embed=provider.id,
                page=page or 1,
                count=len(episode_page.episodes),
                has_more=episode_page.has_more,
            )
            return episode_page

        episodes = await collect_episodes(_page)
        episode_id = find_episode_id(episodes, query.season, query.episode)
        log.info(
            "mirror_episode_matched",
            embed=provider.id,
            season=query.season,
            episode=query.episode,
            id=episode_id,
        )
        return episode_id
