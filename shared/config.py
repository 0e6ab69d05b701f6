"""
Environment-based configuration for the anime render scraper.

This module exposes a small, typed configuration surface shared by the
API service, the CLI and the extraction engine. All values are sourced
from environment variables with sensible, non-secret defaults.

Local development may keep overrides in a `.env` file; entry points load
it with python-dotenv before calling `get_config()`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal, Optional

Environment = Literal["local", "dev", "staging", "prod"]

DEFAULT_TARGET_BASE_URL = "https://gogoanime.by"
DEFAULT_STREAM_URL_PATTERN = "googlevideo.com/videoplayback"


@dataclass(frozen=True)
class AppConfig:
    """
    Top-level application configuration.

    Timeouts are in milliseconds, matching the Playwright API.
    """

    environment: Environment
    log_level: str

    # Optional file path for structured JSON logs; when set, logs are written
    # to file (and stdout if log_stdout).
    log_file: Optional[str]
    # When True, logs go to stdout. When False, only file (if LOG_FILE set). Default True.
    log_stdout: bool

    # Target site root, without trailing slash.
    target_base_url: str

    # Browser engine
    browser_headless: bool

    # Navigation and readiness bounds
    nav_timeout_ms: int
    network_idle_timeout_ms: int
    selector_timeout_ms: int

    # Stream resolution: bound and URL fragment of the media response
    stream_timeout_ms: int
    stream_url_pattern: str

    @classmethod
    def from_env(cls) -> "AppConfig":
        """
        Construct configuration from environment variables.

        All fields have sensible defaults suitable for local development.
        Production deployments are expected to override these via env vars.
        """

        environment = os.getenv("APP_ENV", "local")

        if environment not in {"local", "dev", "staging", "prod"}:
            raise ValueError(f"Unsupported APP_ENV value: {environment!r}")

        def _bool_env(name: str, default: bool) -> bool:
            raw = (os.getenv(name) or str(default)).strip().lower()
            return raw in ("true", "1", "yes")

        def _int_env(name: str, default: int) -> int:
            raw = (os.getenv(name) or "").strip()
            try:
                value = int(raw)
            except ValueError:
                return default
            return value if value > 0 else default

        base_url = (os.getenv("TARGET_BASE_URL") or DEFAULT_TARGET_BASE_URL).strip()

        return cls(
            environment=environment,  # type: ignore[arg-type]
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE") or None,
            log_stdout=_bool_env("LOG_STDOUT", True),
            target_base_url=base_url.rstrip("/"),
            browser_headless=_bool_env("BROWSER_HEADLESS", True),
            nav_timeout_ms=_int_env("NAV_TIMEOUT_MS", 30_000),
            network_idle_timeout_ms=_int_env("NETWORK_IDLE_TIMEOUT_MS", 30_000),
            selector_timeout_ms=_int_env("SELECTOR_TIMEOUT_MS", 5_000),
            stream_timeout_ms=_int_env("STREAM_TIMEOUT_MS", 30_000),
            stream_url_pattern=os.getenv("STREAM_URL_PATTERN") or DEFAULT_STREAM_URL_PATTERN,
        )


def get_config() -> AppConfig:
    """
    Helper to obtain the current configuration.

    In simple scripts, calling this function directly is sufficient. In
    longer-lived processes, construct a single `AppConfig` at startup and
    pass it explicitly (the API lifespan does this).
    """

    return AppConfig.from_env()
