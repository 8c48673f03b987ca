"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from mirrorarr import __version__
from mirrorarr.infrastructure.config import AppConfig
from mirrorarr.interfaces.api.middleware import RequestLogMiddleware
from mirrorarr.interfaces.api.resolve.router import router as resolve_router
from mirrorarr.interfaces.app_state import AppState
from mirrorarr.interfaces.composition import lifespan


async def healthz() -> dict[str, str]:
    return {"status": "ok"}


def build_app(config: AppConfig) -> FastAPI:
    """Create the app with its config attached.

    No resources are created here; the HTTP client, embeds and use case are
    built by :func:`~mirrorarr.interfaces.composition.lifespan` on startup.
    """
    app = FastAPI(
        title="Mirrorarr",
        description="Resolves movies and episodes to HLS streams on mirror providers",
        version=__version__,
        lifespan=lifespan,
    )
    app.state = AppState()
    app.state.config = config

    app.add_middleware(RequestLogMiddleware)
    app.include_router(resolve_router)
    app.add_api_route("/healthz", healthz, methods=["GET"], tags=["health"])
    return app
