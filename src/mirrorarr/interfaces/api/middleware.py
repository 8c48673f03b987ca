"""FastAPI middleware for request logging."""

from __future__ import annotations

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

log = structlog.get_logger(__name__)


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Logs one ``http_request`` event per request.

    A short request id is bound to the structlog context for the duration of
    the request, so every event logged while resolving carries it.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = uuid.uuid4().hex[:12]
        start = time.perf_counter()
        status_code = 500

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            try:
                response = await call_next(request)
                status_code = response.status_code
                response.headers["X-Request-ID"] = request_id
                return response
            finally:
                log.info(
                    "http_request",
                    method=request.method,
                    path=request.url.path,
                    query=str(request.url.query),
                    status_code=status_code,
                    duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
                    client_host=request.client.host if request.client else None,
                )
