"""Domain entities for mirror stream resolution.

Pure value objects without framework dependencies or I/O.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

MediaType = Literal["movie", "show"]

# Type tags used by mirror metadata ("m" = movie, "t" = series)
MirrorTypeTag = Literal["m", "t"]


class StreamFlag(str, Enum):
    """Capability flags attached to a resolved stream."""

    CORS_ALLOWED = "cors-allowed"


@dataclass(frozen=True)
class MediaQuery:
    """A caller's resolution request.

    Created by the aggregator from a movie/show lookup and handed to every
    embed as a JSON payload (see :meth:`to_payload`).
    """

    title: str
    release_year: int
    media_type: MediaType
    season: int | None = None
    episode: int | None = None
    tmdb_id: str = ""
    imdb_id: str = ""

    def __post_init__(self) -> None:
        if self.media_type not in ("movie", "show"):
            raise ValueError(f"unknown media type: {self.media_type!r}")
        has_episode = self.season is not None and self.episode is not None
        if self.media_type == "show" and not has_episode:
            raise ValueError("show queries require season and episode")
        if self.media_type == "movie" and (
            self.season is not None or self.episode is not None
        ):
            raise ValueError("movie queries must not carry season/episode")

    @property
    def type_tag(self) -> MirrorTypeTag:
        """Mirror type tag expected for this query."""
        return "m" if self.media_type == "movie" else "t"

    def to_payload(self) -> str:
        """Serialise into the JSON payload passed from source to embed."""
        return json.dumps(
            {
                "title": self.title,
                "releaseYear": self.release_year,
                "tmdbId": self.tmdb_id,
                "imdbId": self.imdb_id,
                "type": self.media_type,
                "season": "" if self.season is None else str(self.season),
                "episode": "" if self.episode is None else str(self.episode),
            }
        )

    @classmethod
    def from_payload(cls, payload: str) -> MediaQuery:
        """Parse an embed payload produced by :meth:`to_payload`.

        Raises ``ValueError`` for malformed JSON or missing fields.
        """
        data: Any = json.loads(payload)
        if not isinstance(data, dict):
            raise ValueError("embed payload must be a JSON object")
        try:
            season = data.get("season") or None
            episode = data.get("episode") or None
            return cls(
                title=str(data["title"]),
                release_year=int(data["releaseYear"]),
                media_type=data["type"],
                season=int(season) if season is not None else None,
                episode=int(episode) if episode is not None else None,
                tmdb_id=str(data.get("tmdbId") or ""),
                imdb_id=str(data.get("imdbId") or ""),
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"invalid embed payload: {exc}") from exc


@dataclass(frozen=True)
class SearchCandidate:
    """One row of a mirror search response."""

    id: str
    title: str
    year: int | None = None


@dataclass(frozen=True)
class SeasonRef:
    """Season entry from mirror metadata."""

    number: str  # numeric label, e.g. "1"
    id: str
    episode_label: str = ""


@dataclass(frozen=True)
class MediaMeta:
    """Detailed metadata for a search candidate."""

    year: int | None
    type_tag: str  # "m" or "t"
    seasons: tuple[SeasonRef, ...] = ()


@dataclass(frozen=True)
class EpisodeEntry:
    """Single episode row from an episode listing page."""

    id: str
    season_label: str  # "S1"
    episode_label: str  # "E5"


@dataclass(frozen=True)
class EpisodePage:
    """One page of an episode listing."""

    episodes: tuple[EpisodeEntry, ...]
    has_more: bool


@dataclass(frozen=True)
class PlaylistEntry:
    """One streamable rendition from a playlist manifest."""

    file: str  # relative to the provider base URL
    label: str


@dataclass(frozen=True)
class Caption:
    """Subtitle track attached to a stream."""

    id: str
    url: str
    language: str
    type: str = "vtt"


@dataclass(frozen=True)
class StreamDescriptor:
    """Final, normalised output of a successful resolution."""

    manifest_url: str
    stream_id: str = "primary"
    protocol: Literal["hls"] = "hls"
    flags: frozenset[StreamFlag] = field(default_factory=frozenset)
    captions: tuple[Caption, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """JSON-serialisable representation used by the API and CLI."""
        return {
            "streamId": self.stream_id,
            "manifestUrl": self.manifest_url,
            "protocol": self.protocol,
            "flags": sorted(f.value for f in self.flags),
            "captions": [
                {"id": c.id, "url": c.url, "language": c.language, "type": c.type}
                for c in self.captions
            ],
        }


@dataclass(frozen=True)
class EmbedRequest:
    """An embed to try, as emitted by a source."""

    embed_id: str
    payload: str
