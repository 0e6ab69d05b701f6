"""
Error taxonomy for the extraction engine.

NotFound conditions (valid page, nothing there) are kept apart from engine
and navigation failures so callers can tell "nothing there" from "system
degraded". Detailed errors stay in logs; `user_safe_message` returns the
text that may be shown to API clients.
"""

from __future__ import annotations

from typing import Optional


class ScraperError(Exception):
    """Base class; carries the operation and target it failed on."""

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        target: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.target = target

    def tag(self, operation: str, target: str) -> "ScraperError":
        """Fill in operation/target if the raiser did not know them."""
        if self.operation is None:
            self.operation = operation
        if self.target is None:
            self.target = target
        return self


class EngineUnavailableError(ScraperError):
    """The browser engine could not be launched, or refused a new session."""


class NavigationError(ScraperError):
    """Target unreachable (DNS, connection) or answered with an error status."""

    def __init__(self, message: str, *, status: Optional[int] = None, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.status = status


class NavigationTimeoutError(NavigationError):
    """Navigation or a required readiness condition exceeded its bound."""


class NotFoundError(ScraperError):
    """Page is well-formed but holds no matching root or items."""


class ResponseTimeoutError(NotFoundError):
    """The expected network response was never observed within its bound."""


class ScrapeFailedError(ScraperError):
    """Unexpected failure during an operation (wraps the original exception)."""


_SAFE_MESSAGES = {
    EngineUnavailableError: "Browser engine unavailable",
    NavigationTimeoutError: "Target page timed out",
    NavigationError: "Target page unreachable",
    ResponseTimeoutError: "Stream not available",
    NotFoundError: "Not found",
}


def user_safe_message(exc: BaseException, fallback: str = "Extraction failed") -> str:
    """
    Return a user-safe summary for API bodies.

    NotFoundError messages are built from caller-supplied identifiers only
    and may be shown; everything else maps to a fixed string.
    """
    if isinstance(exc, NotFoundError) and not isinstance(exc, ResponseTimeoutError):
        return exc.message or _SAFE_MESSAGES[NotFoundError]
    for exc_type, message in _SAFE_MESSAGES.items():
        if isinstance(exc, exc_type):
            return message
    return fallback
