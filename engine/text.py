"""
Text normalization and field transforms used by extraction rules.
"""

from __future__ import annotations

import re
from typing import Callable
from urllib.parse import urlparse

Transform = Callable[[str], str]


def normalize_whitespace(text: str) -> str:
    """Normalize whitespace: collapse multiples, trim."""
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def strip_prefix(prefix: str) -> Transform:
    """Build a transform that drops `prefix` from the start, then trims."""

    def _strip(value: str) -> str:
        if value.startswith(prefix):
            value = value[len(prefix):]
        return value.strip()

    return _strip


def url_path_slug(value: str) -> str:
    """
    Reduce a link to its path without surrounding slashes.

    https://gogoanime.by/one-piece-episode-1/ -> one-piece-episode-1
    /series/one-piece/ -> series/one-piece
    """
    path = urlparse(value).path if "://" in value else value
    return path.strip("/")
