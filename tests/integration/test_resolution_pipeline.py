"""Integration test: source -> use case -> mirror embeds over mocked HTTP."""

from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

import httpx
import pytest
import respx

from mirrorarr.domain.entities.media import MediaQuery
from mirrorarr.domain.errors import NotFoundError
from mirrorarr.infrastructure.config.schema import AppConfig, MirrorsConfig
from mirrorarr.infrastructure.mirrors.providers import (
    MirrorProviderConfig,
    always_ok,
    status_flag_check,
)
from mirrorarr.interfaces.composition import build_resolution_stack

pytestmark = pytest.mark.integration

_NET_API = "https://api.test/net"
_PRIME_API = "https://api.test/net/pv"

_PROVIDERS = (
    MirrorProviderConfig(
        id="netmirror",
        rank=300,
        base_url="https://mirror.test",
        api_base_url=_NET_API,
        status_check=status_flag_check,
    ),
    MirrorProviderConfig(
        id="primemirror",
        rank=290,
        base_url="https://mirror.test",
        api_base_url=_PRIME_API,
        status_check=always_ok,
    ),
)


@pytest.fixture()
def config() -> AppConfig:
    return AppConfig(
        mirrors=MirrorsConfig(
            bootstrap_url="https://boot.test/",
            proxy_url="https://proxy.test",
            progress_interval_seconds=0.01,
        )
    )


class TestResolutionPipeline:
    @pytest.mark.asyncio()
    @respx.mock
    async def test_falls_back_to_second_mirror(self, config: AppConfig) -> None:
        respx.get("https://boot.test/").mock(
            return_value=httpx.Response(200, text="hash")
        )
        net_search = respx.get(f"{_NET_API}/search.php").mock(
            return_value=httpx.Response(200, json={"status": "n", "error": "Blocked"})
        )
        respx.get(f"{_PRIME_API}/search.php").mock(
            return_value=httpx.Response(
                200, json={"searchResult": [{"id": "p1", "t": "Dark"}]}
            )
        )
        respx.get(f"{_PRIME_API}/post.php").mock(
            return_value=httpx.Response(
                200,
                json={"year": "2017", "type": "t", "season": [{"s": "1", "id": "ps1"}]},
            )
        )
        respx.get(f"{_PRIME_API}/episodes.php").mock(
            return_value=httpx.Response(
                200,
                json={
                    "episodes": [{"id": "pe12", "s": "S1", "ep": "E2"}],
                    "nextPageShow": 0,
                },
            )
        )
        respx.get(f"{_PRIME_API}/playlist.php").mock(
            return_value=httpx.Response(
                200, json=[{"sources": [{"file": "/hls/pe12.m3u8", "label": "Auto"}]}]
            )
        )

        query = MediaQuery(
            title="Dark", release_year=2017, media_type="show", season=1, episode=2
        )
        progress: list[tuple[str, int]] = []

        async with httpx.AsyncClient() as client:
            stack = build_resolution_stack(config, client, providers=_PROVIDERS)
            stream = await stack.use_case.execute(
                query, progress=lambda eid, pct: progress.append((eid, pct))
            )

        assert net_search.called
        target = parse_qs(urlsplit(stream.manifest_url).query)["url"][0]
        assert target == "https://mirror.test/hls/pe12.m3u8"
        assert ("netmirror", 100) in progress
        assert progress[-1] == ("primemirror", 100)

    @pytest.mark.asyncio()
    @respx.mock
    async def test_every_mirror_failing(self, config: AppConfig) -> None:
        respx.get("https://boot.test/").mock(return_value=httpx.Response(200, text=""))

        query = MediaQuery(title="Inception", release_year=2010, media_type="movie")
        async with httpx.AsyncClient() as client:
            stack = build_resolution_stack(config, client, providers=_PROVIDERS)
            with pytest.raises(NotFoundError, match="No stream found"):
                await stack.use_case.execute(query)
