"""httpx-backed implementation of :class:`FetcherPort`.

One shared ``httpx.AsyncClient`` is injected by the composition root; the
fetcher only joins URLs, attaches query/headers and decodes the body.
Failures are logged and re-raised unchanged.  There is no retry layer:
a single failed request ends the resolution attempt.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx
import structlog

log = structlog.get_logger(__name__)


def join_url(base_url: str | None, path: str) -> str:
    """Join *base_url* and *path*; absolute paths win.

    Unlike ``urljoin`` this keeps any path prefix on the base URL
    (``https://proxy/host:443/pv`` + ``/search.php``).

    >>> join_url("https://a.example/pv", "/search.php")
    'https://a.example/pv/search.php'
    """
    if path.startswith(("http://", "https://")) or not base_url:
        return path
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


class HttpxFetcher:
    """Fetches mirror endpoints through a shared httpx client."""

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    async def _get(
        self,
        path: str,
        *,
        base_url: str | None,
        query: Mapping[str, str] | None,
        headers: Mapping[str, str] | None,
    ) -> httpx.Response:
        url = join_url(base_url, path)
        log.debug("fetch_request", url=url, params=dict(query or {}))
        try:
            resp = await self._http.get(
                url,
                params=dict(query) if query else None,
                headers=dict(headers) if headers else None,
            )
            resp.raise_for_status()
        except httpx.TimeoutException:
            log.warning("fetch_timeout", url=url)
            raise
        except httpx.HTTPStatusError as exc:
            log.warning(
                "fetch_http_error",
                url=url,
                status=exc.response.status_code,
            )
            raise
        except httpx.HTTPError as exc:
            log.warning("fetch_request_failed", url=url, error=str(exc))
            raise
        return resp

    async def fetch_json(
        self,
        path: str,
        *,
        base_url: str | None = None,
        query: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        resp = await self._get(path, base_url=base_url, query=query, headers=headers)
        return resp.json()

    async def fetch_text(
        self,
        path: str,
        *,
        base_url: str | None = None,
        query: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> str:
        resp = await self._get(path, base_url=base_url, query=query, headers=headers)
        return resp.text
