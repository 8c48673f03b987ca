"""Provider error kinds."""

from __future__ import annotations


class ProviderError(Exception):
    """Base class for all provider-related errors."""


class NotFoundError(ProviderError):
    """Raised when content, or a sub-resource it needs, cannot be located.

    Callers are expected to move on to the next provider.
    """


class ResolutionFailure(ProviderError):
    """Raised when an item was located but no playable manifest could be derived."""


class EmbedNotFoundError(ProviderError):
    """Raised when an embed id is not known to the registry."""


class DuplicateEmbedError(ProviderError):
    """Raised when two embeds are registered under the same id."""
