"""Ports for stream sources and embeds."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Protocol, runtime_checkable

from mirrorarr.domain.entities.media import EmbedRequest, MediaQuery, StreamDescriptor

# Caller-supplied progress callback (percent 0-100).
ProgressSink = Callable[[int], None]

# Builds a Cookie header value from key/value pairs.
CookieBuilder = Callable[[Mapping[str, str]], str]

# Decides whether two titles refer to the same item.
TitleComparator = Callable[[str, str], bool]


@runtime_checkable
class EmbedPort(Protocol):
    """Resolves a query to a single playable stream."""

    @property
    def id(self) -> str: ...

    @property
    def name(self) -> str: ...

    @property
    def rank(self) -> int:
        """Higher rank is tried first."""
        ...

    @property
    def disabled(self) -> bool: ...

    async def resolve(
        self, query: MediaQuery, progress: ProgressSink | None = None
    ) -> StreamDescriptor:
        """Resolve *query* or raise ``NotFoundError``."""
        ...

    async def scrape(
        self, payload: str, progress: ProgressSink | None = None
    ) -> StreamDescriptor:
        """Resolve a JSON-serialised query emitted by a source."""
        ...


@runtime_checkable
class SourcePort(Protocol):
    """Turns a query into a list of embeds worth trying."""

    @property
    def id(self) -> str: ...

    @property
    def name(self) -> str: ...

    @property
    def rank(self) -> int: ...

    @property
    def disabled(self) -> bool: ...

    async def scrape(self, query: MediaQuery) -> list[EmbedRequest]: ...
