"""
Engine constants: browser context settings, timeouts, structural selectors.
"""

from __future__ import annotations

# Browser context (one per session)
VIEWPORT = {"width": 1920, "height": 1080}
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
TIMEZONE_ID = "America/New_York"
LOCALE = "en-US"

# Engine launch: first attempt plus one retry
ENGINE_LAUNCH_ATTEMPTS = 2

# Timeout constants (in milliseconds)
NAV_TIMEOUT_MS = 30_000
NETWORK_IDLE_TIMEOUT_MS = 30_000
SELECTOR_TIMEOUT_MS = 5_000
STREAM_TIMEOUT_MS = 30_000
# Per-field read bound; the node is already known to exist when this applies
FIELD_READ_TIMEOUT_MS = 1_000

# Root scopes
LATEST_LISTING_ROOT = ".listupd.normal"
SEARCH_LISTING_ROOT = ".listupd"
LISTING_ITEM = "article.bs"
DETAIL_ROOT = ".bigcontent.nobigcv"
EPISODES_ROOT = ".episodes-container"
EPISODE_ITEM = ".episode-item a"

LISTING_STATUS_DEFAULT = "Ongoing"
GENRE_SEPARATOR = ", "
