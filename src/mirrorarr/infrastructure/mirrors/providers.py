"""Static table of mirror providers.

Each entry describes one mirror front-end: where its API lives, how to read
its search status and how it ranks against other embeds.  The table is
process-wide, immutable configuration; the composition root turns each entry
into a :class:`~mirrorarr.infrastructure.mirrors.embed.MirrorEmbed`.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

# Decides whether a raw search response is usable.
StatusCheck = Callable[[Mapping[str, Any]], bool]


def status_flag_check(response: Mapping[str, Any]) -> bool:
    """Accept only responses carrying an explicit ``status: "y"``."""
    return response.get("status") == "y"


def always_ok(_: Mapping[str, Any]) -> bool:
    """Accept every non-error response."""
    return True


@dataclass(frozen=True)
class MirrorProviderConfig:
    """One mirror provider.

    ``base_url`` is the origin the manifest files live under (and the
    referer sent by the streaming proxy); ``api_base_url`` is where the
    search/metadata/episode/playlist endpoints are called.
    """

    id: str
    rank: int
    base_url: str
    api_base_url: str
    status_check: StatusCheck = always_ok
    disabled: bool = False

    @property
    def name(self) -> str:
        return self.id.upper()


DEFAULT_MIRROR_PROVIDERS: tuple[MirrorProviderConfig, ...] = (
    MirrorProviderConfig(
        id="netmirror",
        rank=300,
        base_url="https://iosmirror.cc",
        api_base_url="https://filmueproxy.vercel.app/iosmirror.cc:443",
        status_check=status_flag_check,
    ),
    MirrorProviderConfig(
        id="primemirror",
        rank=290,
        base_url="https://iosmirror.cc",
        api_base_url="https://filmueproxy.vercel.app/iosmirror.cc:443/pv",
        status_check=always_ok,
    ),
)
