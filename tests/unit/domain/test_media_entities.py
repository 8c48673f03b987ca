"""Tests for mirror domain entities."""

from __future__ import annotations

import json

import pytest

from mirrorarr.domain.entities.media import (
    Caption,
    MediaQuery,
    StreamDescriptor,
    StreamFlag,
)


class TestMediaQuery:
    def test_movie_without_episode(self) -> None:
        q = MediaQuery(title="Inception", release_year=2010, media_type="movie")
        assert q.season is None
        assert q.episode is None
        assert q.type_tag == "m"

    def test_show_requires_season_and_episode(self) -> None:
        with pytest.raises(ValueError, match="season and episode"):
            MediaQuery(title="Dark", release_year=2017, media_type="show", season=1)

    def test_movie_rejects_season(self) -> None:
        with pytest.raises(ValueError, match="must not carry"):
            MediaQuery(
                title="Inception",
                release_year=2010,
                media_type="movie",
                season=1,
                episode=1,
            )

    def test_unknown_media_type(self) -> None:
        with pytest.raises(ValueError, match="unknown media type"):
            MediaQuery(title="x", release_year=2000, media_type="anime")  # type: ignore[arg-type]

    def test_show_type_tag(self) -> None:
        q = MediaQuery(
            title="Dark", release_year=2017, media_type="show", season=1, episode=2
        )
        assert q.type_tag == "t"

    def test_payload_uses_wire_field_names(self) -> None:
        q = MediaQuery(
            title="Dark",
            release_year=2017,
            media_type="show",
            season=2,
            episode=3,
            tmdb_id="70523",
            imdb_id="tt5753856",
        )
        data = json.loads(q.to_payload())
        assert data == {
            "title": "Dark",
            "releaseYear": 2017,
            "tmdbId": "70523",
            "imdbId": "tt5753856",
            "type": "show",
            "season": "2",
            "episode": "3",
        }

    def test_movie_payload_has_empty_season(self) -> None:
        q = MediaQuery(title="Inception", release_year=2010, media_type="movie")
        data = json.loads(q.to_payload())
        assert data["season"] == ""
        assert data["episode"] == ""

    def test_from_payload_accepts_string_numbers(self) -> None:
        payload = json.dumps(
            {
                "title": "Dark",
                "releaseYear": "2017",
                "type": "show",
                "season": "1",
                "episode": "8",
            }
        )
        q = MediaQuery.from_payload(payload)
        assert q.release_year == 2017
        assert q.season == 1
        assert q.episode == 8
        assert q.tmdb_id == ""

    def test_from_payload_inverts_to_payload(self) -> None:
        q = MediaQuery(title="Inception", release_year=2010, media_type="movie")
        assert MediaQuery.from_payload(q.to_payload()) == q

    def test_from_payload_rejects_garbage(self) -> None:
        with pytest.raises(ValueError):
            MediaQuery.from_payload("not json")

    def test_from_payload_rejects_non_object(self) -> None:
        with pytest.raises(ValueError, match="JSON object"):
            MediaQuery.from_payload("[1, 2]")

    def test_from_payload_rejects_missing_title(self) -> None:
        with pytest.raises(ValueError, match="invalid embed payload"):
            MediaQuery.from_payload('{"releaseYear": 2010, "type": "movie"}')


class TestStreamDescriptor:
    def test_defaults(self) -> None:
        d = StreamDescriptor(manifest_url="https://proxy.test/m3u8-proxy?url=x")
        assert d.stream_id == "primary"
        assert d.protocol == "hls"
        assert d.flags == frozenset()
        assert d.captions == ()

    def test_to_dict(self) -> None:
        d = StreamDescriptor(
            manifest_url="https://proxy.test/m.m3u8",
            flags=frozenset({StreamFlag.CORS_ALLOWED}),
            captions=(Caption(id="en", url="https://c.test/en.vtt", language="en"),),
        )
        assert d.to_dict() == {
            "streamId": "primary",
            "manifestUrl": "https://proxy.test/m.m3u8",
            "protocol": "hls",
            "flags": ["cors-allowed"],
            "captions": [
                {
                    "id": "en",
                    "url": "https://c.test/en.vtt",
                    "language": "en",
                    "type": "vtt",
                }
            ],
        }
