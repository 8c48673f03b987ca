"""``mirrorarr`` command line.

``mirrorarr serve``    run the HTTP API under uvicorn
``mirrorarr resolve``  resolve one movie/episode and print the stream as JSON
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog
import uvicorn

from mirrorarr.domain.entities.media import MediaQuery, StreamDescriptor
from mirrorarr.domain.errors import NotFoundError
from mirrorarr.infrastructure.config import AppConfig, load_config
from mirrorarr.infrastructure.logging.setup import configure_logging
from mirrorarr.interfaces.composition import build_resolution_stack, create_http_client
from mirrorarr.interfaces.main import build_app

log = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_BAD_QUERY = 2

# argparse dest -> flat config key understood by load_config()
_CONFIG_FLAGS = {
    "log_level": "log_level",
    "log_format": "log_format",
    "proxy_url": "proxy_url",
}


def _config_parent() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    group = parent.add_argument_group("configuration")
    group.add_argument("--config", type=Path, help="Path to YAML config file.")
    group.add_argument("--dotenv", type=Path, help="Path to .env file.")
    group.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"]
    )
    group.add_argument("--log-format", choices=["json", "console"])
    group.add_argument("--proxy-url", help="Override the m3u8 proxy base URL.")
    return parent


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    config_parent = _config_parent()
    parser = argparse.ArgumentParser(prog="mirrorarr")
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser(
        "serve", parents=[config_parent], help="Run the HTTP API."
    )
    serve.add_argument("--host", help="Bind host (default: $HOST or 0.0.0.0).")
    serve.add_argument(
        "--port", type=int, help="Bind port (default: $PORT or 7979)."
    )

    resolve = commands.add_parser(
        "resolve",
        parents=[config_parent],
        help="Resolve one title and print the stream.",
    )
    resolve.add_argument(
        "--type", dest="media_type", choices=["movie", "show"], default="movie"
    )
    resolve.add_argument("--title", required=True)
    resolve.add_argument("--year", required=True, type=int)
    resolve.add_argument("--season", type=int)
    resolve.add_argument("--episode", type=int)
    resolve.add_argument("--tmdb-id", default="")
    resolve.add_argument("--imdb-id", default="")

    return parser.parse_args(None if argv is None else list(argv))


def _load(args: argparse.Namespace) -> AppConfig:
    overrides: dict[str, Any] = {
        key: getattr(args, dest)
        for dest, key in _CONFIG_FLAGS.items()
        if getattr(args, dest) is not None
    }
    return load_config(
        config_path=args.config,
        dotenv_path=args.dotenv,
        cli_overrides=overrides,
    )


async def resolve_once(config: AppConfig, query: MediaQuery) -> StreamDescriptor:
    """Resolve *query* with a short-lived HTTP client and resolution stack."""

    def _progress(embed_id: str, percent: int) -> None:
        log.debug("resolve_progress", embed=embed_id, percent=percent)

    async with create_http_client(config) as client:
        stack = build_resolution_stack(config, client)
        return await stack.use_case.execute(query, progress=_progress)


def _run_resolve(args: argparse.Namespace, config: AppConfig) -> int:
    try:
        query = MediaQuery(
            title=args.title,
            release_year=args.year,
            media_type=args.media_type,
            season=args.season,
            episode=args.episode,
            tmdb_id=args.tmdb_id,
            imdb_id=args.imdb_id,
        )
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_BAD_QUERY

    try:
        stream = asyncio.run(resolve_once(config, query))
    except NotFoundError as exc:
        print(f"not found: {exc}", file=sys.stderr)
        return EXIT_NOT_FOUND

    print(json.dumps(stream.to_dict(), indent=2))
    return EXIT_OK


def _run_serve(args: argparse.Namespace, config: AppConfig, log_config: dict) -> int:
    uvicorn.run(
        build_app(config),
        host=args.host or os.getenv("HOST", "0.0.0.0"),
        port=args.port or int(os.getenv("PORT", "7979")),
        log_config=log_config,
    )
    return EXIT_OK


def start(argv: Iterable[str] | None = None) -> int:
    """Process entrypoint: parse flags, load config once, dispatch."""
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    config = _load(args)
    log_config = configure_logging(config)

    if args.command == "resolve":
        return _run_resolve(args, config)
    return _run_serve(args, config, log_config)


if __name__ == "__main__":
    raise SystemExit(start())
