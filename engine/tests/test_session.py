"""
Unit tests for scoped session acquisition: release exactly once on success,
failure and cancellation.
"""

from __future__ import annotations

import asyncio

import pytest

from engine.session import session_scope


@pytest.mark.asyncio
async def test_session_released_after_success(pool):
    async with session_scope(pool, operation="test", target="t") as session:
        assert session.closed is False

    assert session.closed is True
    assert session.page.close_calls == 1
    assert session.context.close_calls == 1


@pytest.mark.asyncio
async def test_session_released_after_exception(pool):
    captured = {}
    with pytest.raises(ValueError):
        async with session_scope(pool, operation="test", target="t") as session:
            captured["session"] = session
            raise ValueError("boom")

    assert captured["session"].page.close_calls == 1


@pytest.mark.asyncio
async def test_session_released_after_cancellation(pool):
    captured = {}
    entered = asyncio.Event()

    async def work():
        async with session_scope(pool, operation="test", target="t") as session:
            captured["session"] = session
            entered.set()
            await asyncio.sleep(10)

    task = asyncio.create_task(work())
    await entered.wait()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert captured["session"].page.close_calls == 1
    assert captured["session"].context.close_calls == 1


@pytest.mark.asyncio
async def test_close_failure_does_not_mask_primary_error(pool):
    with pytest.raises(KeyError):
        async with session_scope(pool, operation="test", target="t") as session:

            async def broken_close():
                raise RuntimeError("Target closed")

            session.page.close = broken_close
            raise KeyError("primary")
