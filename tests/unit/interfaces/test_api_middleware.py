"""Tests for the request logging middleware."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from mirrorarr.interfaces.api.middleware import RequestLogMiddleware


def _make_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestLogMiddleware)

    @app.get("/ping")
    async def ping() -> dict[str, str]:
        return {"pong": "ok"}

    return app


class TestRequestLogMiddleware:
    def test_passes_response_through(self) -> None:
        resp = TestClient(_make_app()).get("/ping")
        assert resp.status_code == 200
        assert resp.json() == {"pong": "ok"}

    def test_sets_request_id_header(self) -> None:
        client = TestClient(_make_app())
        first = client.get("/ping").headers["X-Request-ID"]
        second = client.get("/ping").headers["X-Request-ID"]
        assert len(first) == 12
        assert first != second

    def test_not_found_still_logged_and_returned(self) -> None:
        resp = TestClient(_make_app()).get("/missing")
        assert resp.status_code == 404
        assert "X-Request-ID" in resp.headers
