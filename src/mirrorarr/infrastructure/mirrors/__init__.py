"""Mirror provider resolution pipeline."""

from __future__ import annotations

from .embed import MirrorEmbed
from .providers import DEFAULT_MIRROR_PROVIDERS, MirrorProviderConfig
from .source import MirrorsSource

__all__ = [
    "DEFAULT_MIRROR_PROVIDERS",
    "MirrorEmbed",
    "MirrorProviderConfig",
    "MirrorsSource",
]
