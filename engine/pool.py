"""
Shared browser engine and per-request rendering sessions.

One BrowserPool owns one Chromium process. Each request gets its own
Session: a fresh BrowserContext (isolated cookies, storage and JS state)
with a single Page. The check-liveness-and-relaunch step runs under a lock
so concurrent first requests launch the engine exactly once.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, Optional
from uuid import uuid4

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from engine.constants import (
    ENGINE_LAUNCH_ATTEMPTS,
    LOCALE,
    TIMEZONE_ID,
    USER_AGENT,
    VIEWPORT,
)
from engine.errors import EngineUnavailableError
from shared.logging import get_logger

logger = get_logger(__name__)


@dataclass
class Session:
    """An isolated rendering context owned by exactly one request."""

    context: BrowserContext
    page: Page
    id: str = field(default_factory=lambda: uuid4().hex[:12])
    closed: bool = False


async def create_browser_context(browser: Browser) -> BrowserContext:
    """
    Create an isolated browser context.

    Uses stable UA, viewport, and timezone for anti-bot considerations.
    """
    return await browser.new_context(
        viewport=dict(VIEWPORT),
        user_agent=USER_AGENT,
        timezone_id=TIMEZONE_ID,
        locale=LOCALE,
    )


class BrowserPool:
    """Owns the shared browser process and hands out sessions."""

    def __init__(
        self,
        *,
        headless: bool = True,
        playwright_factory: Callable[[], Any] = async_playwright,
    ) -> None:
        self._headless = headless
        self._playwright_factory = playwright_factory
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()
        self.launch_count = 0

    @property
    def is_running(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def start(self) -> None:
        """Launch the engine eagerly (application startup)."""
        await self._ensure_browser()

    async def _ensure_browser(self) -> Browser:
        async with self._lock:
            if self._browser is not None:
                if self._browser.is_connected():
                    return self._browser
                logger.warning("browser.disconnected", launch_count=self.launch_count)
                await self._discard_browser()

            self._browser = await self._launch()
            self.launch_count += 1
            logger.info(
                "browser.launched",
                headless=self._headless,
                launch_count=self.launch_count,
            )
            return self._browser

    async def _launch(self) -> Browser:
        last_error: Optional[BaseException] = None
        for attempt in range(1, ENGINE_LAUNCH_ATTEMPTS + 1):
            try:
                if self._playwright is None:
                    self._playwright = await self._playwright_factory().start()
                return await self._playwright.chromium.launch(headless=self._headless)
            except Exception as e:
                last_error = e
                logger.error(
                    "browser.launch_failed",
                    attempt=attempt,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                await self._stop_playwright()
        raise EngineUnavailableError("Failed to launch browser") from last_error

    async def _discard_browser(self) -> None:
        browser, self._browser = self._browser, None
        if browser is None:
            return
        try:
            await browser.close()
        except Exception as e:
            logger.warning("browser.close_failed", error=str(e), error_type=type(e).__name__)

    async def _stop_playwright(self) -> None:
        playwright, self._playwright = self._playwright, None
        if playwright is None:
            return
        try:
            await playwright.stop()
        except Exception as e:
            logger.warning("playwright.stop_failed", error=str(e), error_type=type(e).__name__)

    async def acquire_session(self) -> Session:
        """
        Open a new isolated session, relaunching the engine if it is absent or dead.

        Raises EngineUnavailableError if the engine cannot be launched (after one
        retry) or refuses to open a context/page.
        """
        browser = await self._ensure_browser()
        context: Optional[BrowserContext] = None
        page: Optional[Page] = None
        try:
            context = await create_browser_context(browser)
            page = await context.new_page()
        except Exception as e:
            logger.error("session.open_failed", error=str(e), error_type=type(e).__name__)
            raise EngineUnavailableError("Failed to open browser session") from e
        finally:
            # Half-built session (failure or cancellation): nothing else can close it.
            if page is None and context is not None:
                await asyncio.shield(self._close_context(context))

        session = Session(context=context, page=page)
        logger.debug("session.acquired", session_id=session.id)
        return session

    async def _close_context(self, context: BrowserContext) -> None:
        try:
            await context.close()
        except Exception as e:
            logger.warning("session.close_failed", error=str(e), error_type=type(e).__name__)

    async def release_session(self, session: Session) -> None:
        """Close the session. Failures are logged, never raised; repeated calls are no-ops."""
        if session.closed:
            return
        session.closed = True
        try:
            await session.page.close()
        except Exception as e:
            logger.warning(
                "session.page_close_failed",
                session_id=session.id,
                error=str(e),
                error_type=type(e).__name__,
            )
        try:
            await session.context.close()
        except Exception as e:
            logger.warning(
                "session.context_close_failed",
                session_id=session.id,
                error=str(e),
                error_type=type(e).__name__,
            )
        logger.debug("session.released", session_id=session.id)

    async def shutdown(self) -> None:
        """Close the engine; a later acquire_session() relaunches it."""
        async with self._lock:
            was_running = self._browser is not None
            await self._discard_browser()
            await self._stop_playwright()
        if was_running:
            logger.info("browser.closed")
