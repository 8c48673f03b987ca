"""Tests for title similarity."""

from __future__ import annotations

import pytest

from mirrorarr.infrastructure.matching.title_matcher import (
    is_similar_title,
    normalize_title,
    title_similarity,
)


class TestNormalizeTitle:
    def test_lowercases_and_strips_punctuation(self) -> None:
        assert normalize_title("Spider-Man: No Way Home") == "spider man no way home"

    def test_transliterates_unicode(self) -> None:
        assert normalize_title("Amélie") == "amelie"

    def test_drops_apostrophes(self) -> None:
        assert normalize_title("Ocean's Eleven") == "oceans eleven"

    def test_collapses_whitespace(self) -> None:
        assert normalize_title("  The   Office ") == "the office"

    def test_empty(self) -> None:
        assert normalize_title("") == ""


class TestTitleSimilarity:
    def test_identical_after_normalisation(self) -> None:
        assert title_similarity("THE OFFICE", "the office") == 1.0

    def test_empty_title_scores_zero(self) -> None:
        assert title_similarity("", "Dune") == 0.0

    def test_unrelated_titles_score_low(self) -> None:
        assert title_similarity("Inception", "The Crown") < 0.5


class TestIsSimilarTitle:
    @pytest.mark.parametrize(
        ("a", "b"),
        [
            ("Inception", "inception"),
            ("Spider-Man: Far From Home", "Spider Man Far From Home"),
            ("Amélie", "Amelie"),
            ("Money Heist", "Money Heist."),
        ],
    )
    def test_matches(self, a: str, b: str) -> None:
        assert is_similar_title(a, b)

    def test_rejects_sequel(self) -> None:
        assert not is_similar_title("Iron Man", "Iron Man 2")

    def test_rejects_unrelated(self) -> None:
        assert not is_similar_title("Dark", "Dark Matter")

    def test_threshold_is_configurable(self) -> None:
        assert is_similar_title("Iron Man", "Iron Man 2", threshold=0.8)
