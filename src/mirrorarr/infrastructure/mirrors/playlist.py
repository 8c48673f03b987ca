"""Playlist resolution: pick a rendition and wrap it behind the stream proxy."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import structlog

from mirrorarr.domain.entities.media import PlaylistEntry
from mirrorarr.domain.errors import ResolutionFailure
from mirrorarr.domain.ports.embed import CookieBuilder
from mirrorarr.domain.ports.fetcher import FetcherPort
from mirrorarr.infrastructure.common.cookies import make_cookie_header
from mirrorarr.infrastructure.mirrors.providers import MirrorProviderConfig

log = structlog.get_logger(__name__)

# Labels tried in order before falling back to the first entry.
PREFERRED_LABELS: tuple[str, ...] = ("Auto", "Full HD")

# Same reserved set as encodeURIComponent.
_URI_COMPONENT_SAFE = "!*'()"


def parse_playlist(raw: Any) -> list[PlaylistEntry]:
    """Extract the source list of the first playlist in a ``playlist.php`` response.

    Missing or malformed data yields an empty list.
    """
    if isinstance(raw, list):
        raw = raw[0] if raw else None
    if not isinstance(raw, Mapping):
        return []
    return [
        PlaylistEntry(
            file=str(source.get("file") or ""),
            label=str(source.get("label") or ""),
        )
        for source in raw.get("sources") or []
        if isinstance(source, Mapping)
    ]


def select_source(entries: list[PlaylistEntry]) -> PlaylistEntry:
    """Pick "Auto", else "Full HD", else the first entry.

    Raises ``ResolutionFailure`` when nothing usable is left: the item was
    found, but its playlist is empty.
    """
    selected: PlaylistEntry | None = None
    for label in PREFERRED_LABELS:
        selected = next(
            (e for e in entries if e.label == label and e.file), None
        )
        if selected is not None:
            break
    if selected is None and entries:
        selected = entries[0]

    if selected is None or not selected.file:
        raise ResolutionFailure("Failed to fetch playlist")
    return selected


def build_proxy_url(
    proxy_url: str,
    provider_base_url: str,
    file: str,
    cookie_builder: CookieBuilder = make_cookie_header,
) -> str:
    """Wrap a mirror manifest path behind the m3u8 streaming proxy.

    The proxy receives the absolute manifest URL and the headers it must
    send upstream (``referer`` and the quality cookie) as query parameters.
    """
    if file.startswith(("http://", "https://")):
        target = file
    else:
        target = f"{provider_base_url}{file}"
    headers = json.dumps(
        {
            "referer": provider_base_url,
            "cookie": cookie_builder({"hd": "on"}),
        },
        separators=(",", ":"),
    )
    return (
        f"{proxy_url.rstrip('/')}/m3u8-proxy"
        f"?url={quote(target, safe=_URI_COMPONENT_SAFE)}"
        f"&headers={quote(headers, safe=_URI_COMPONENT_SAFE)}"
    )


async def fetch_playlist(
    fetcher: FetcherPort,
    provider: MirrorProviderConfig,
    item_id: str,
    headers: Mapping[str, str],
) -> list[PlaylistEntry]:
    raw = await fetcher.fetch_json(
        "/playlist.php",
        base_url=provider.api_base_url,
        query={"id": item_id},
        headers=headers,
    )
    entries = parse_playlist(raw)
    log.debug(
        "mirror_playlist_fetched",
        embed=provider.id,
        id=item_id,
        labels=[e.label for e in entries],
    )
    return entries
