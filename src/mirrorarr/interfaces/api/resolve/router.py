"""Stream resolution API endpoints."""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from mirrorarr.domain.entities.media import MediaQuery
from mirrorarr.domain.errors import NotFoundError
from mirrorarr.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["resolve"])

_MEDIA_TYPES = ("movie", "show")


def _build_query(
    media_type: str,
    title: str,
    year: int,
    season: int | None,
    episode: int | None,
    tmdb_id: str,
    imdb_id: str,
) -> MediaQuery:
    """Build a MediaQuery from request parameters.

    Raises ``ValueError`` for unknown media types or season/episode
    combinations that do not fit the media type.
    """
    if media_type not in _MEDIA_TYPES:
        raise ValueError(f"unsupported media type: {media_type}")
    return MediaQuery(
        title=title,
        release_year=year,
        media_type=media_type,  # type: ignore[arg-type]
        season=season,
        episode=episode,
        tmdb_id=tmdb_id,
        imdb_id=imdb_id,
    )


@router.get("/embeds")
async def list_embeds(request: Request) -> JSONResponse:
    """List registered embeds, highest rank first."""
    state = cast(AppState, request.app.state)
    embeds = [
        {"id": e.id, "name": e.name, "rank": e.rank, "disabled": e.disabled}
        for e in state.embed_registry.list_all()
    ]
    return JSONResponse(content={"embeds": embeds})


@router.get("/resolve/{media_type}")
async def resolve_stream(
    request: Request,
    media_type: str,
    title: str = Query(..., min_length=1),
    year: int = Query(...),
    season: int | None = Query(default=None, ge=0),
    episode: int | None = Query(default=None, ge=0),
    tmdb_id: str = Query(default=""),
    imdb_id: str = Query(default=""),
) -> JSONResponse:
    """Resolve a movie or an episode to a single HLS stream."""
    state = cast(AppState, request.app.state)

    try:
        query = _build_query(
            media_type, title, year, season, episode, tmdb_id, imdb_id
        )
    except ValueError as exc:
        return JSONResponse(status_code=422, content={"error": str(exc)})

    try:
        stream = await state.resolve_stream_uc.execute(query)
    except NotFoundError as exc:
        log.info(
            "resolve_not_found",
            title=title,
            media_type=media_type,
            error=str(exc),
        )
        return JSONResponse(status_code=404, content={"error": str(exc)})

    return JSONResponse(content=stream.to_dict())
