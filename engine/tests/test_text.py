"""
Unit tests for text normalization and field transforms (pure functions).
"""

from __future__ import annotations

from engine.text import normalize_whitespace, strip_prefix, url_path_slug


def test_normalize_whitespace_collapses_and_trims():
    assert normalize_whitespace("  Naruto   Shippuden \n") == "Naruto Shippuden"


def test_normalize_whitespace_tabs_and_newlines():
    assert normalize_whitespace("\tOne\n\nPiece\r\n") == "One Piece"


def test_normalize_whitespace_empty():
    assert normalize_whitespace("   \n ") == ""


def test_strip_prefix_removes_label():
    assert strip_prefix("Status: ")("Status: Completed") == "Completed"


def test_strip_prefix_leaves_unlabelled_value():
    assert strip_prefix("Status: ")("Completed") == "Completed"


def test_url_path_slug_absolute_url():
    assert url_path_slug("https://gogoanime.by/one-piece-episode-1/") == "one-piece-episode-1"


def test_url_path_slug_series_url_keeps_inner_path():
    assert url_path_slug("https://gogoanime.by/series/one-piece/") == "series/one-piece"


def test_url_path_slug_relative_path():
    assert url_path_slug("/series/naruto/") == "series/naruto"
