"""Shared test fixtures for Mirrorarr test suite."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import pytest

from mirrorarr.domain.entities.media import MediaQuery
from mirrorarr.infrastructure.config.schema import MirrorsConfig
from mirrorarr.infrastructure.mirrors.providers import (
    MirrorProviderConfig,
    status_flag_check,
)

BOOTSTRAP_URL = "https://boot.test/"
PROXY_URL = "https://proxy.test"
MIRROR_BASE = "https://mirror.test"
MIRROR_API = "https://api.test/mirror"

# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def movie_query() -> MediaQuery:
    return MediaQuery(title="Inception", release_year=2010, media_type="movie")


@pytest.fixture()
def show_query() -> MediaQuery:
    return MediaQuery(
        title="Dark",
        release_year=2017,
        media_type="show",
        season=2,
        episode=3,
    )


# ---------------------------------------------------------------------------
# Configuration fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mirrors_settings() -> MirrorsConfig:
    """Mirror settings with a fast progress timer and test URLs."""
    return MirrorsConfig(
        bootstrap_url=BOOTSTRAP_URL,
        proxy_url=PROXY_URL,
        progress_interval_seconds=0.01,
    )


@pytest.fixture()
def provider() -> MirrorProviderConfig:
    return MirrorProviderConfig(
        id="netmirror",
        rank=300,
        base_url=MIRROR_BASE,
        api_base_url=MIRROR_API,
        status_check=status_flag_check,
    )


# ---------------------------------------------------------------------------
# Fake ports
# ---------------------------------------------------------------------------


@dataclass
class FetchCall:
    path: str
    base_url: str | None
    query: dict[str, str]
    headers: dict[str, str]


class FakeFetcher:
    """Scripted FetcherPort.

    ``respond(path, *responses)`` registers the responses returned for
    *path*, one per call; the last one repeats.  Exceptions are raised
    instead of returned.
    """

    def __init__(self) -> None:
        self._routes: dict[str, list[Any]] = {}
        self.calls: list[FetchCall] = []

    def respond(self, path: str, *responses: Any) -> FakeFetcher:
        self._routes[path] = list(responses)
        return self

    def _next(self, path: str) -> Any:
        queue = self._routes.get(path)
        if not queue:
            raise AssertionError(f"unexpected fetch: {path}")
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, BaseException):
            raise response
        return response

    def _record(
        self,
        path: str,
        base_url: str | None,
        query: Mapping[str, str] | None,
        headers: Mapping[str, str] | None,
    ) -> None:
        self.calls.append(
            FetchCall(path, base_url, dict(query or {}), dict(headers or {}))
        )

    async def fetch_json(
        self,
        path: str,
        *,
        base_url: str | None = None,
        query: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        self._record(path, base_url, query, headers)
        return self._next(path)

    async def fetch_text(
        self,
        path: str,
        *,
        base_url: str | None = None,
        query: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> str:
        self._record(path, base_url, query, headers)
        return self._next(path)

    def calls_to(self, path: str) -> list[FetchCall]:
        return [c for c in self.calls if c.path == path]


@pytest.fixture()
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()
