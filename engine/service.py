"""
Extraction operations exposed to the HTTP layer and the CLI.

Every operation runs inside session_scope, so its session is released on
every exit path. Errors leave tagged with operation and target; anything
outside the engine's taxonomy is wrapped in ScrapeFailedError.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from urllib.parse import quote, urlencode

from engine.catalog import DETAIL_RULE, EPISODE_RULE, LATEST_LISTING_RULE, SEARCH_LISTING_RULE
from engine.constants import (
    DETAIL_ROOT,
    EPISODES_ROOT,
    LATEST_LISTING_ROOT,
    SEARCH_LISTING_ROOT,
)
from engine.errors import (
    NavigationError,
    NotFoundError,
    ScrapeFailedError,
    ScraperError,
)
from engine.navigation import NetworkIdle, SelectorPresent, navigate
from engine.network import ResponseWatcher, url_pattern
from engine.pool import BrowserPool
from engine.records import DetailRecord, EpisodeEntry, ListingRecord, StreamResolution
from engine.rules import extract_many, extract_one
from engine.session import session_scope
from shared.config import AppConfig
from shared.logging import bind_request_context, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def _operation(operation: str, target: str) -> AsyncIterator[None]:
    bind_request_context(operation=operation, target=target)
    try:
        yield
    except NavigationError as e:
        if e.status == 404:
            raise NotFoundError(
                f"{target} not found", operation=operation, target=target
            ) from e
        logger.error("operation_failed", error=str(e), error_type=type(e).__name__)
        raise e.tag(operation, target)
    except NotFoundError as e:
        logger.info("operation_not_found", error=str(e))
        raise e.tag(operation, target)
    except ScraperError as e:
        logger.error("operation_failed", error=str(e), error_type=type(e).__name__)
        raise e.tag(operation, target)
    except Exception as e:
        logger.error("operation_failed", error=str(e), error_type=type(e).__name__)
        raise ScrapeFailedError(
            f"{operation} failed for {target}", operation=operation, target=target
        ) from e


class AnimeScraperService:
    """The five extraction operations against the configured target site."""

    def __init__(self, pool: BrowserPool, config: AppConfig) -> None:
        self._pool = pool
        self._config = config

    def _url(self, path: str, query: Optional[dict] = None) -> str:
        url = f"{self._config.target_base_url}/{path}"
        if query:
            url = f"{url}?{urlencode(query)}"
        return url

    def _network_idle(self) -> NetworkIdle:
        return NetworkIdle(timeout_ms=self._config.network_idle_timeout_ms)

    def _root_marker(self, selector: str) -> SelectorPresent:
        # Soft: a missing root is decided by extraction (empty list or not-found).
        return SelectorPresent(
            selector,
            timeout_ms=self._config.selector_timeout_ms,
            required=False,
        )

    async def get_latest_listing(self, page_number: int) -> list[ListingRecord]:
        if page_number < 1:
            raise ValueError(f"page_number must be positive, got {page_number}")
        target = str(page_number)
        async with _operation("get_latest_listing", target):
            async with session_scope(
                self._pool, operation="get_latest_listing", target=target
            ) as session:
                await navigate(
                    session.page,
                    self._url(f"page/{page_number}/"),
                    self._network_idle(),
                    self._root_marker(LATEST_LISTING_ROOT),
                    nav_timeout_ms=self._config.nav_timeout_ms,
                )
                records = await extract_many(session.page, LATEST_LISTING_RULE)
            if not records:
                raise NotFoundError(f"No anime found on page {page_number}")
            return records

    async def get_detail(self, content_id: str) -> DetailRecord:
        async with _operation("get_detail", content_id):
            async with session_scope(
                self._pool, operation="get_detail", target=content_id
            ) as session:
                await navigate(
                    session.page,
                    self._url(f"series/{quote(content_id)}/"),
                    self._network_idle(),
                    self._root_marker(DETAIL_ROOT),
                    nav_timeout_ms=self._config.nav_timeout_ms,
                )
                try:
                    return await extract_one(session.page, DETAIL_RULE, id=content_id)
                except NotFoundError as e:
                    raise NotFoundError(f"Anime with ID {content_id} not found") from e

    async def get_episodes(self, content_id: str) -> list[EpisodeEntry]:
        async with _operation("get_episodes", content_id):
            async with session_scope(
                self._pool, operation="get_episodes", target=content_id
            ) as session:
                await navigate(
                    session.page,
                    self._url(f"series/{quote(content_id)}/"),
                    self._network_idle(),
                    self._root_marker(EPISODES_ROOT),
                    nav_timeout_ms=self._config.nav_timeout_ms,
                )
                episodes = await extract_many(session.page, EPISODE_RULE)
            if not episodes:
                raise NotFoundError(f"No episodes found for anime ID {content_id}")
            return episodes

    async def get_stream_resolution(self, episode_id: str) -> StreamResolution:
        """
        Resolve the media URL requested by the episode player.

        The watcher is armed before navigation; the player fires the request
        during load, so a later subscription would miss it. Navigation runs
        alongside the wait: the first match wins, and a navigation failure
        after a match is ignored. Network-idle is not awaited here since an
        active stream keeps the network busy.
        """
        async with _operation("get_stream_resolution", episode_id):
            async with session_scope(
                self._pool, operation="get_stream_resolution", target=episode_id
            ) as session:
                predicate = url_pattern(self._config.stream_url_pattern)
                async with ResponseWatcher(
                    session.page, predicate, self._config.stream_timeout_ms
                ) as watcher:
                    resolved_url = await watcher.wait_during(
                        navigate(
                            session.page,
                            self._url(f"{quote(episode_id)}/"),
                            nav_timeout_ms=self._config.nav_timeout_ms,
                        )
                    )
            logger.info("stream.resolved", ignored_responses=watcher.ignored)
            return StreamResolution(resolved_url=resolved_url)

    async def search_listing(self, query: str) -> list[ListingRecord]:
        term = query.strip()
        if not term:
            raise ValueError("search query must not be blank")
        async with _operation("search_listing", term):
            async with session_scope(
                self._pool, operation="search_listing", target=term
            ) as session:
                await navigate(
                    session.page,
                    self._url("", {"s": term}),
                    self._network_idle(),
                    self._root_marker(SEARCH_LISTING_ROOT),
                    nav_timeout_ms=self._config.nav_timeout_ms,
                )
                records = await extract_many(session.page, SEARCH_LISTING_RULE)
            if not records:
                raise NotFoundError(f'No anime found for search term "{term}"')
            return records
