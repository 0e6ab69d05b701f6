"""
Scoped session acquisition: the only place sessions are acquired and released.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from engine.pool import BrowserPool, Session
from shared.logging import bind_request_context, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def session_scope(
    pool: BrowserPool,
    *,
    operation: str,
    target: str,
) -> AsyncIterator[Session]:
    """
    Acquire a session, yield it, and release it exactly once on every exit path.

    Release is shielded so a cancelled request still closes its page and context.
    """
    session = await pool.acquire_session()
    bind_request_context(session_id=session.id)
    logger.debug("session_scope.enter", operation=operation, target=target)
    try:
        yield session
    finally:
        await asyncio.shield(pool.release_session(session))
        logger.debug("session_scope.exit", operation=operation, target=target)
