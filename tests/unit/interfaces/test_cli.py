"""Tests for the command-line entrypoint."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from mirrorarr.domain.entities.media import StreamDescriptor
from mirrorarr.domain.errors import NotFoundError
from mirrorarr.interfaces.cli import cli


class TestParseArgs:
    def test_serve(self) -> None:
        args = cli._parse_args(["serve", "--port", "8080", "--log-level", "DEBUG"])
        assert args.command == "serve"
        assert args.port == 8080
        assert args.host is None
        assert args.log_level == "DEBUG"

    def test_resolve_show(self) -> None:
        args = cli._parse_args(
            [
                "resolve",
                "--type",
                "show",
                "--title",
                "Dark",
                "--year",
                "2017",
                "--season",
                "1",
                "--episode",
                "2",
            ]
        )
        assert args.command == "resolve"
        assert args.media_type == "show"
        assert (args.season, args.episode) == (1, 2)
        assert args.tmdb_id == ""

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            cli._parse_args([])

    def test_resolve_requires_title(self) -> None:
        with pytest.raises(SystemExit):
            cli._parse_args(["resolve", "--year", "2010"])


class TestLoad:
    def test_cli_flags_override_config(self) -> None:
        args = cli._parse_args(["serve", "--log-level", "ERROR", "--log-format", "json"])
        config = cli._load(args)
        assert config.log_level == "ERROR"
        assert config.log_format == "json"


class TestRunResolve:
    def test_prints_stream(self, capsys: pytest.CaptureFixture[str]) -> None:
        args = cli._parse_args(["resolve", "--title", "Inception", "--year", "2010"])
        config = cli._load(args)
        stream = StreamDescriptor(manifest_url="https://proxy.test/x.m3u8")

        with patch.object(cli, "resolve_once", AsyncMock(return_value=stream)):
            code = cli._run_resolve(args, config)

        assert code == 0
        out = json.loads(capsys.readouterr().out)
        assert out["manifestUrl"] == "https://proxy.test/x.m3u8"

    def test_not_found_exit_code(self, capsys: pytest.CaptureFixture[str]) -> None:
        args = cli._parse_args(["resolve", "--title", "Nothing", "--year", "1900"])
        config = cli._load(args)

        with patch.object(
            cli,
            "resolve_once",
            AsyncMock(side_effect=NotFoundError("No stream found")),
        ):
            code = cli._run_resolve(args, config)

        assert code == 1
        assert "No stream found" in capsys.readouterr().err

    def test_invalid_query_exit_code(self, capsys: pytest.CaptureFixture[str]) -> None:
        args = cli._parse_args(
            ["resolve", "--type", "show", "--title", "Dark", "--year", "2017"]
        )
        config = cli._load(args)

        with patch.object(cli, "resolve_once", AsyncMock()) as resolve_once:
            code = cli._run_resolve(args, config)

        assert code == 2
        resolve_once.assert_not_called()
        assert "season and episode" in capsys.readouterr().err


class TestConfigFlags:
    def test_proxy_url_flag(self) -> None:
        args = cli._parse_args(
            ["resolve", "--title", "x", "--year", "2000", "--proxy-url", "https://p.test"]
        )
        assert cli._load(args).mirrors.proxy_url == "https://p.test"

    def test_config_path_is_a_path(self, tmp_path: Path) -> None:
        path = tmp_path / "c.yaml"
        path.write_text("app_name: from-yaml\n", encoding="utf-8")
        args = cli._parse_args(["serve", "--config", str(path)])
        assert cli._load(args).app_name == "from-yaml"
