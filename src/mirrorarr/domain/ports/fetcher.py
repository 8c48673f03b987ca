"""Port for the HTTP fetch capability used by mirror providers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class FetcherPort(Protocol):
    """Fetches a path relative to a base URL and returns the decoded body.

    An absolute ``path`` ignores ``base_url``.  Implementations raise on
    network failures and non-2xx responses; they never retry.
    """

    async def fetch_json(
        self,
        path: str,
        *,
        base_url: str | None = None,
        query: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Fetch and decode a JSON response."""
        ...

    async def fetch_text(
        self,
        path: str,
        *,
        base_url: str | None = None,
        query: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> str:
        """Fetch a response body as text."""
        ...
