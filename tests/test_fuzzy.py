"""Tests for fuzzy matching."""

import pytest

from endpoint_stubs.config import FuzzyOptions
from endpoint_stubs.fuzzy import jaro, jaro_winkler, match, normalize


def test_jaro_identical_strings():
    """Identical strings score 1.0."""
    assert jaro("show", "show") == 1.0


def test_jaro_nothing_in_common():
    """Strings without common characters score 0.0."""
    assert jaro("abc", "xyz") == 0.0
    assert jaro("", "abc") == 0.0


def test_jaro_known_value():
    """MARTHA/MARHTA is the textbook example."""
    assert jaro("martha", "marhta") == pytest.approx(0.9444, abs=1e-4)


def test_jaro_winkler_boosts_common_prefix():
    """Common prefix raises the score above plain Jaro."""
    assert jaro_winkler("martha", "marhta") == pytest.approx(0.9611, abs=1e-4)


def test_jaro_winkler_ignores_case_by_default():
    """Case differences don't matter unless asked to."""
    assert jaro_winkler("SHOW", "show") == 1.0
    assert jaro_winkler("SHOW", "show", FuzzyOptions(ignore_case=False)) < 1.0


def test_normalize_strips_leading_punctuation():
    """Leading non-alphanumerics such as ':' are dropped."""
    assert normalize(":show") == "show"
    assert normalize("__init") == "init"


def test_match_small_pool_returns_everything():
    """Three candidates or fewer are all returned, best first."""
    result = match("shows", ["index", "show", "create"])

    assert result[0] == "show"
    assert sorted(result) == ["create", "index", "show"]


def test_match_large_pool_filters_by_score():
    """More than three candidates keeps only close matches."""
    result = match("shows", ["show", "index", "create", "destroy"])

    assert result == ["show"]


def test_match_large_pool_orders_descending():
    """Qualifying candidates are sorted by similarity."""
    result = match("document", ["documents", "documenting", "index", "create"])

    assert result == ["documents", "documenting"]


def test_match_nothing_qualifies():
    """No close candidates yields an empty list."""
    assert match("zzz", ["show", "index", "create", "destroy"]) == []


def test_match_empty_pool():
    """An empty pool never raises."""
    assert match("show", []) == []
