"""Registry of stream embeds."""

from __future__ import annotations

from .registry import EmbedRegistry

__all__ = ["EmbedRegistry"]
