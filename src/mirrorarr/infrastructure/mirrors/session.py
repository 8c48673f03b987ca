"""Session bootstrap: fetch the per-run mirror hash."""

from __future__ import annotations

from urllib.parse import unquote

import structlog

from mirrorarr.domain.errors import NotFoundError
from mirrorarr.domain.ports.fetcher import FetcherPort

log = structlog.get_logger(__name__)


async def fetch_session_token(fetcher: FetcherPort, bootstrap_url: str) -> str:
    """Fetch and percent-decode the session hash.

    The token is used once for a single resolution attempt and never stored.
    Raises ``NotFoundError`` when the decoded value is empty. Whitespace is
    part of the token and kept as is.
    """
    raw = await fetcher.fetch_text(bootstrap_url)
    token = unquote(raw)
    if not token:
        log.warning("mirror_session_token_empty", url=bootstrap_url)
        raise NotFoundError("No hash found")
    log.debug("mirror_session_token_fetched", length=len(token))
    return token
