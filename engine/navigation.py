"""
Navigation and readiness waits.

The page is loaded to DOMContentLoaded, then each readiness condition runs in
order. Playwright timeouts become NavigationTimeoutError; connection-level
failures and error statuses become NavigationError. A SelectorPresent with
required=False is a soft wait: its timeout is logged and extraction decides
whether the missing root means an empty result or a not-found.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from engine.constants import NAV_TIMEOUT_MS, NETWORK_IDLE_TIMEOUT_MS, SELECTOR_TIMEOUT_MS
from engine.errors import NavigationError, NavigationTimeoutError
from shared.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class NetworkIdle:
    """No in-flight network activity for Playwright's quiet window (500 ms)."""

    timeout_ms: int = NETWORK_IDLE_TIMEOUT_MS


@dataclass(frozen=True)
class SelectorPresent:
    """A structural marker is attached to the document."""

    selector: str
    timeout_ms: int = SELECTOR_TIMEOUT_MS
    required: bool = True


Readiness = Union[NetworkIdle, SelectorPresent]


def _is_error_status(status: int | None) -> bool:
    return status is not None and status >= 400


async def _wait_for(page: Page, url: str, condition: Readiness) -> None:
    start = time.monotonic()
    try:
        if isinstance(condition, NetworkIdle):
            await page.wait_for_load_state("networkidle", timeout=condition.timeout_ms)
        else:
            await page.wait_for_selector(
                condition.selector,
                state="attached",
                timeout=condition.timeout_ms,
            )
    except PlaywrightTimeoutError as e:
        elapsed_ms = round((time.monotonic() - start) * 1000)
        if isinstance(condition, SelectorPresent) and not condition.required:
            logger.warning(
                "readiness_soft_timeout",
                selector=condition.selector,
                timeout_ms=condition.timeout_ms,
                elapsed_ms=elapsed_ms,
            )
            return
        logger.warning(
            "readiness_timeout",
            condition=type(condition).__name__,
            timeout_ms=condition.timeout_ms,
            elapsed_ms=elapsed_ms,
        )
        raise NavigationTimeoutError(f"Readiness not met for {url}") from e


async def navigate(
    page: Page,
    url: str,
    *readiness: Readiness,
    nav_timeout_ms: int = NAV_TIMEOUT_MS,
) -> None:
    """
    Load `url` in `page` and wait for every readiness condition in order.

    Raises NavigationTimeoutError or NavigationError; never acquires or
    releases the session itself.
    """
    logger.info("navigation.start", url=url)
    start = time.monotonic()
    try:
        response = await page.goto(url, wait_until="domcontentloaded", timeout=nav_timeout_ms)
    except PlaywrightTimeoutError as e:
        logger.warning("navigation.failed", url=url, failure_classification="navigation_timeout")
        raise NavigationTimeoutError(f"Navigation to {url} timed out") from e
    except PlaywrightError as e:
        logger.warning(
            "navigation.failed",
            url=url,
            failure_classification="net_err" if "net::err_" in str(e).lower() else "error",
            error=str(e),
        )
        raise NavigationError(f"Navigation to {url} failed") from e

    status = response.status if response is not None else None
    if _is_error_status(status):
        logger.warning("navigation.failed", url=url, failure_classification="status", status=status)
        raise NavigationError(f"Navigation to {url} returned {status}", status=status)

    for condition in readiness:
        await _wait_for(page, url, condition)

    logger.info(
        "navigation.ready",
        url=url,
        status=status,
        duration_ms=round((time.monotonic() - start) * 1000),
    )
