"""
Network response watcher.

Media URLs on episode pages are requested by player script during load, so
the watcher must be subscribed before navigation starts. It resolves on the
first response whose URL matches, ignores everything else, and detaches as
soon as it resolves, times out or is cancelled.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional, Pattern, Union

from playwright.async_api import Page, Response

from engine.constants import STREAM_TIMEOUT_MS
from engine.errors import ResponseTimeoutError
from shared.logging import get_logger

logger = get_logger(__name__)

UrlPredicate = Callable[[str], bool]


def url_pattern(pattern: Union[str, Pattern[str]]) -> UrlPredicate:
    """Substring match for plain strings, `search` for compiled regexes."""
    if isinstance(pattern, str):
        return lambda url: pattern in url
    return lambda url: pattern.search(url) is not None


class ResponseWatcher:
    """
    Future-backed wait for one matching network response.

    Usage:
        async with ResponseWatcher(page, url_pattern("videoplayback")) as watcher:
            await navigate(page, url)
            media_url = await watcher.wait()
    """

    def __init__(
        self,
        page: Page,
        predicate: UrlPredicate,
        timeout_ms: int = STREAM_TIMEOUT_MS,
    ) -> None:
        self._page = page
        self._predicate = predicate
        self._timeout_ms = timeout_ms
        self._future: Optional[asyncio.Future[str]] = None
        self._deadline: Optional[float] = None
        self._attached = False
        self.ignored = 0

    @property
    def resolved(self) -> bool:
        return (
            self._future is not None
            and self._future.done()
            and not self._future.cancelled()
        )

    def arm(self) -> None:
        """Subscribe and start the timeout clock."""
        if self._attached or self.resolved:
            return
        loop = asyncio.get_running_loop()
        self._future = loop.create_future()
        self._deadline = loop.time() + self._timeout_ms / 1000
        self._page.on("response", self._on_response)
        self._attached = True
        logger.debug("response_watcher.armed", timeout_ms=self._timeout_ms)

    def detach(self) -> None:
        if not self._attached:
            return
        self._attached = False
        self._page.remove_listener("response", self._on_response)

    def _on_response(self, response: Response) -> None:
        if self._future is None or self._future.done():
            return
        try:
            url = response.url
            matched = self._predicate(url)
        except Exception as e:
            logger.debug("response_watcher.predicate_failed", error=str(e))
            return
        if not matched:
            self.ignored += 1
            return
        self._future.set_result(url)
        self.detach()

    async def wait(self) -> str:
        """Return the first matching URL or raise ResponseTimeoutError."""
        if self._future is None or self._deadline is None:
            raise RuntimeError("ResponseWatcher.wait() called before arm()")
        remaining = max(0.0, self._deadline - asyncio.get_running_loop().time())
        try:
            return await asyncio.wait_for(asyncio.shield(self._future), timeout=remaining)
        except asyncio.TimeoutError as e:
            logger.warning(
                "response_watcher.timeout",
                timeout_ms=self._timeout_ms,
                ignored_responses=self.ignored,
            )
            raise ResponseTimeoutError("No matching network response observed") from e
        finally:
            self.detach()

    async def wait_during(self, trigger: Awaitable[Any]) -> str:
        """
        Run `trigger` (usually navigation) alongside wait() and return the first match.

        A match ends the wait at once; the trigger is cancelled if still running.
        A trigger failure is raised only when nothing has matched yet.
        """
        trigger_task = asyncio.ensure_future(trigger)
        wait_task = asyncio.ensure_future(self.wait())
        try:
            await asyncio.wait({trigger_task, wait_task}, return_when=asyncio.FIRST_COMPLETED)
            if not wait_task.done():
                error = trigger_task.exception()
                if error is not None:
                    if not self.resolved:
                        raise error
                    logger.info(
                        "response_watcher.trigger_failed_after_match",
                        error_type=type(error).__name__,
                    )
            return await wait_task
        finally:
            for task in (trigger_task, wait_task):
                if not task.done():
                    task.cancel()
            await asyncio.gather(trigger_task, wait_task, return_exceptions=True)

    async def __aenter__(self) -> "ResponseWatcher":
        self.arm()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.detach()
        if self._future is not None and not self._future.done():
            self._future.cancel()


async def await_matching_response(
    page: Page,
    pattern: Union[str, Pattern[str], UrlPredicate],
    trigger: Callable[[], Awaitable[Any]],
    timeout_ms: int = STREAM_TIMEOUT_MS,
) -> str:
    """Arm a watcher, then run `trigger` (usually navigation) while waiting for the match."""
    predicate = pattern if callable(pattern) else url_pattern(pattern)
    async with ResponseWatcher(page, predicate, timeout_ms) as watcher:
        return await watcher.wait_during(trigger())
