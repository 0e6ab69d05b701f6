"""
Unit tests for the shared browser pool.

Covers: lazy single launch under concurrency, session isolation, relaunch of a
dead engine, one launch retry, best-effort release, shutdown then relaunch.
Uses an in-memory Playwright fake; no browser required.
"""

from __future__ import annotations

import asyncio

import pytest

from engine.errors import EngineUnavailableError
from engine.pool import BrowserPool
from engine.tests.fakes import FakePlaywrightFactory


@pytest.mark.asyncio
async def test_acquire_launches_engine_lazily(pool, fake_playwright):
    assert fake_playwright.chromium.launch_calls == 0
    assert pool.is_running is False

    session = await pool.acquire_session()

    assert fake_playwright.chromium.launch_calls == 1
    assert pool.launch_count == 1
    assert pool.is_running is True
    assert session.page is fake_playwright.pages[0]


@pytest.mark.asyncio
async def test_start_launches_once_and_acquire_reuses(pool, fake_playwright):
    await pool.start()
    await pool.acquire_session()
    await pool.acquire_session()

    assert fake_playwright.chromium.launch_calls == 1


@pytest.mark.asyncio
async def test_concurrent_acquire_launches_engine_once(pool, fake_playwright):
    sessions = await asyncio.gather(*(pool.acquire_session() for _ in range(20)))

    assert fake_playwright.chromium.launch_calls == 1
    assert pool.launch_count == 1
    assert len({id(s) for s in sessions}) == 20
    assert len({id(s.page) for s in sessions}) == 20
    assert len({id(s.context) for s in sessions}) == 20
    assert len({s.id for s in sessions}) == 20


@pytest.mark.asyncio
async def test_dead_engine_is_relaunched(pool, fake_playwright):
    await pool.acquire_session()
    first_browser = fake_playwright.chromium.browsers[0]
    first_browser.connected = False

    await pool.acquire_session()

    assert fake_playwright.chromium.launch_calls == 2
    assert pool.launch_count == 2
    assert first_browser.close_calls == 1


@pytest.mark.asyncio
async def test_launch_retries_once():
    factory = FakePlaywrightFactory(launch_failures=1)
    pool = BrowserPool(playwright_factory=factory)

    await pool.acquire_session()

    assert factory.chromium.launch_calls == 2
    assert pool.launch_count == 1
    # Playwright driver restarted after the failed attempt
    assert len(factory.started) == 2
    assert factory.started[0].stop_calls == 1


@pytest.mark.asyncio
async def test_launch_failing_twice_raises_engine_unavailable():
    factory = FakePlaywrightFactory(launch_failures=2)
    pool = BrowserPool(playwright_factory=factory)

    with pytest.raises(EngineUnavailableError):
        await pool.acquire_session()

    assert factory.chromium.launch_calls == 2
    assert pool.is_running is False


@pytest.mark.asyncio
async def test_engine_usable_after_failed_launch():
    factory = FakePlaywrightFactory(launch_failures=2)
    pool = BrowserPool(playwright_factory=factory)
    with pytest.raises(EngineUnavailableError):
        await pool.acquire_session()

    session = await pool.acquire_session()

    assert session.page is not None
    assert pool.launch_count == 1


@pytest.mark.asyncio
async def test_new_page_failure_closes_context_and_raises(pool, fake_playwright):
    await pool.start()
    browser = fake_playwright.chromium.browsers[0]
    browser.new_page_error = RuntimeError("Target page, context or browser has been closed")

    with pytest.raises(EngineUnavailableError):
        await pool.acquire_session()

    assert browser.contexts[0].close_calls == 1


@pytest.mark.asyncio
async def test_cancelled_acquire_closes_half_built_context(pool, fake_playwright):
    await pool.start()
    browser = fake_playwright.chromium.browsers[0]
    browser.new_page_delay = 10.0

    task = asyncio.create_task(pool.acquire_session())
    await asyncio.sleep(0.05)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert len(browser.contexts) == 1
    assert browser.contexts[0].close_calls == 1


@pytest.mark.asyncio
async def test_release_closes_page_and_context_once(pool):
    session = await pool.acquire_session()

    await pool.release_session(session)
    await pool.release_session(session)

    assert session.closed is True
    assert session.page.close_calls == 1
    assert session.context.close_calls == 1


@pytest.mark.asyncio
async def test_release_swallows_close_failures(pool):
    session = await pool.acquire_session()

    async def broken_close():
        raise RuntimeError("Target closed")

    session.page.close = broken_close

    await pool.release_session(session)

    assert session.context.close_calls == 1


@pytest.mark.asyncio
async def test_shutdown_then_acquire_relaunches(pool, fake_playwright):
    await pool.acquire_session()
    await pool.shutdown()

    assert pool.is_running is False
    assert fake_playwright.chromium.browsers[0].close_calls == 1
    assert fake_playwright.started[0].stop_calls == 1

    await pool.acquire_session()

    assert fake_playwright.chromium.launch_calls == 2
    assert pool.is_running is True


@pytest.mark.asyncio
async def test_shutdown_without_start_is_noop(pool, fake_playwright):
    await pool.shutdown()

    assert fake_playwright.chromium.launch_calls == 0
