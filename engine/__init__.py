"""
Browser-rendered extraction engine.

This package implements the shared browser pool, scoped rendering sessions,
navigation with readiness waits, declarative extraction rules, and the
network response watcher used for stream resolution.

Public API: re-exports the symbols used by the API layer, the CLI and tests
so that `from engine import ...` stays valid.
"""

from __future__ import annotations

from engine.catalog import DETAIL_RULE, EPISODE_RULE, LATEST_LISTING_RULE, SEARCH_LISTING_RULE
from engine.errors import (
    EngineUnavailableError,
    NavigationError,
    NavigationTimeoutError,
    NotFoundError,
    ResponseTimeoutError,
    ScrapeFailedError,
    ScraperError,
    user_safe_message,
)
from engine.navigation import NetworkIdle, SelectorPresent, navigate
from engine.network import ResponseWatcher, await_matching_response, url_pattern
from engine.pool import BrowserPool, Session
from engine.records import DetailRecord, EpisodeEntry, ListingRecord, StreamResolution
from engine.rules import ExtractionRule, FieldRule, extract_many, extract_one
from engine.service import AnimeScraperService
from engine.session import session_scope
from engine.text import normalize_whitespace

__all__ = [
    # pool / session
    "BrowserPool",
    "Session",
    "session_scope",
    # navigation
    "NetworkIdle",
    "SelectorPresent",
    "navigate",
    # network
    "ResponseWatcher",
    "await_matching_response",
    "url_pattern",
    # rules
    "ExtractionRule",
    "FieldRule",
    "extract_many",
    "extract_one",
    "LATEST_LISTING_RULE",
    "SEARCH_LISTING_RULE",
    "DETAIL_RULE",
    "EPISODE_RULE",
    # records
    "ListingRecord",
    "DetailRecord",
    "EpisodeEntry",
    "StreamResolution",
    # errors
    "ScraperError",
    "EngineUnavailableError",
    "NavigationError",
    "NavigationTimeoutError",
    "NotFoundError",
    "ResponseTimeoutError",
    "ScrapeFailedError",
    "user_safe_message",
    # service
    "AnimeScraperService",
    # text
    "normalize_whitespace",
]
