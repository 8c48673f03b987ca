"""Mirror search and candidate matching.

The mirror search endpoint returns loosely ranked rows; the first row whose
title matches the query *and* whose year or type agrees with it wins.

Candidates are checked strictly in response order.  The metadata lookup a
candidate may need is awaited before the next candidate is considered, so
"first match" is deterministic and at most one metadata request is in
flight at any time.
"""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import structlog

from mirrorarr.domain.entities.media import (
    MediaMeta,
    MediaQuery,
    SearchCandidate,
    SeasonRef,
)
from mirrorarr.domain.errors import NotFoundError
from mirrorarr.domain.ports.embed import TitleComparator
from mirrorarr.domain.ports.fetcher import FetcherPort
from mirrorarr.infrastructure.mirrors.providers import MirrorProviderConfig

log = structlog.get_logger(__name__)

MetaFetcher = Callable[[str], Awaitable[MediaMeta]]

_DIGITS_RE = re.compile(r"\d+")


def to_int(value: Any) -> int | None:
    """Parse a numeric label (``"2021"``, ``2021``, ``2021.0``, ``"S2"``) or return None.

    Strings yield their first run of digits, so ``"2017-2020"`` reads as 2017.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    match = _DIGITS_RE.search(str(value))
    return int(match.group()) if match else None


def parse_search_candidates(rows: list[Mapping[str, Any]]) -> list[SearchCandidate]:
    """Convert raw ``searchResult`` rows into :class:`SearchCandidate` objects.

    Rows without an id are skipped; duplicate ids keep their first occurrence.
    """
    candidates: list[SearchCandidate] = []
    seen: set[str] = set()
    for row in rows:
        raw_id = row.get("id")
        if raw_id is None or raw_id == "":
            continue
        candidate_id = str(raw_id)
        if candidate_id in seen:
            continue
        seen.add(candidate_id)
        candidates.append(
            SearchCandidate(
                id=candidate_id,
                title=str(row.get("t") or ""),
                year=to_int(row.get("y")),
            )
        )
    return candidates


def parse_media_meta(raw: Mapping[str, Any]) -> MediaMeta:
    """Convert a ``post.php`` response into :class:`MediaMeta`."""
    seasons = tuple(
        SeasonRef(
            number=str(entry.get("s") or ""),
            id=str(entry.get("id") or ""),
            episode_label=str(entry.get("ep") or ""),
        )
        for entry in raw.get("season") or []
        if isinstance(entry, Mapping)
    )
    return MediaMeta(
        year=to_int(raw.get("year")),
        type_tag=str(raw.get("type") or ""),
        seasons=seasons,
    )


async def search_candidates(
    fetcher: FetcherPort,
    provider: MirrorProviderConfig,
    title: str,
    headers: Mapping[str, str],
) -> list[SearchCandidate]:
    """Query the mirror search endpoint for *title*.

    Raises ``NotFoundError`` with the provider's error text when the status
    check fails or no result list is present.
    """
    response = await fetcher.fetch_json(
        "/search.php",
        base_url=provider.api_base_url,
        query={"s": title},
        headers=headers,
    )
    if not isinstance(response, Mapping):
        raise NotFoundError("No search results found")

    rows = response.get("searchResult")
    if not provider.status_check(response) or not isinstance(rows, list):
        error = response.get("error") or "No search results found"
        log.info(
            "mirror_search_rejected",
            embed=provider.id,
            title=title,
            status=response.get("status"),
            error=error,
        )
        raise NotFoundError(str(error))

    candidates = parse_search_candidates(rows)
    log.info(
        "mirror_search_results",
        embed=provider.id,
        title=title,
        count=len(candidates),
    )
    return candidates


async def fetch_media_meta(
    fetcher: FetcherPort,
    provider: MirrorProviderConfig,
    item_id: str,
    headers: Mapping[str, str],
) -> MediaMeta:
    """Fetch detailed metadata for one search candidate."""
    raw = await fetcher.fetch_json(
        "/post.php",
        base_url=provider.api_base_url,
        query={"id": item_id},
        headers=headers,
    )
    if not isinstance(raw, Mapping):
        raise NotFoundError(f"No metadata for {item_id}")
    return parse_media_meta(raw)


async def find_matching_candidate(
    candidates: list[SearchCandidate],
    query: MediaQuery,
    fetch_meta: MetaFetcher,
    compare: TitleComparator,
) -> SearchCandidate:
    """Return the first candidate matching *query*.

    A candidate matches when its title is similar to the query title and
    either its release year (the row's own year, else the metadata year)
    equals ``query.release_year`` or the metadata type tag equals the
    requested type.  Metadata is only fetched when the row alone cannot
    decide.
    """
    for candidate in candidates:
        if not compare(candidate.title, query.title):
            log.debug(
                "mirror_candidate_title_mismatch",
                candidate=candidate.title,
                query=query.title,
            )
            continue

        if candidate.year is not None and candidate.year == query.release_year:
            log.debug("mirror_candidate_matched", id=candidate.id, by="year")
            return candidate

        meta = await fetch_meta(candidate.id)
        year = candidate.year if candidate.year is not None else meta.year
        if year == query.release_year:
            log.debug("mirror_candidate_matched", id=candidate.id, by="meta_year")
            return candidate
        if meta.type_tag == query.type_tag:
            log.debug("mirror_candidate_matched", id=candidate.id, by="type")
            return candidate

        log.debug(
            "mirror_candidate_rejected",
            id=candidate.id,
            year=year,
            type_tag=meta.type_tag,
        )

    raise NotFoundError("No watchable item found")
