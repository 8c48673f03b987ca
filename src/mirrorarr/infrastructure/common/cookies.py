"""Cookie header formatting."""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import quote

# Characters encodeURIComponent leaves untouched besides alphanumerics and "-_.~"
_COOKIE_SAFE = "!*'()"


def make_cookie_header(cookies: Mapping[str, str]) -> str:
    """Serialise *cookies* into a ``Cookie`` header value.

    Values are percent-encoded; pairs keep insertion order.

    >>> make_cookie_header({"t_hash_t": "a b", "hd": "on"})
    't_hash_t=a%20b; hd=on'
    """
    return "; ".join(
        f"{name}={quote(str(value), safe=_COOKIE_SAFE)}"
        for name, value in cookies.items()
    )
