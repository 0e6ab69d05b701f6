"""
Unit tests for environment-based configuration.
"""

from __future__ import annotations

import pytest

from shared.config import AppConfig

_VARS = (
    "APP_ENV",
    "LOG_LEVEL",
    "LOG_FILE",
    "LOG_STDOUT",
    "TARGET_BASE_URL",
    "BROWSER_HEADLESS",
    "NAV_TIMEOUT_MS",
    "NETWORK_IDLE_TIMEOUT_MS",
    "SELECTOR_TIMEOUT_MS",
    "STREAM_TIMEOUT_MS",
    "STREAM_URL_PATTERN",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = AppConfig.from_env()

    assert config.environment == "local"
    assert config.target_base_url == "https://gogoanime.by"
    assert config.browser_headless is True
    assert config.nav_timeout_ms == 30_000
    assert config.selector_timeout_ms == 5_000
    assert config.stream_timeout_ms == 30_000
    assert config.stream_url_pattern == "googlevideo.com/videoplayback"
    assert config.log_file is None


def test_overrides(monkeypatch):
    monkeypatch.setenv("TARGET_BASE_URL", "https://mirror.example/ ")
    monkeypatch.setenv("BROWSER_HEADLESS", "false")
    monkeypatch.setenv("STREAM_TIMEOUT_MS", "45000")
    monkeypatch.setenv("LOG_FILE", "logs/scraper.jsonl")

    config = AppConfig.from_env()

    assert config.target_base_url == "https://mirror.example"
    assert config.browser_headless is False
    assert config.stream_timeout_ms == 45_000
    assert config.log_file == "logs/scraper.jsonl"


@pytest.mark.parametrize("raw", ["abc", "0", "-5", ""])
def test_invalid_timeout_falls_back_to_default(monkeypatch, raw):
    monkeypatch.setenv("NAV_TIMEOUT_MS", raw)

    assert AppConfig.from_env().nav_timeout_ms == 30_000


def test_unknown_environment_is_rejected(monkeypatch):
    monkeypatch.setenv("APP_ENV", "qa")

    with pytest.raises(ValueError):
        AppConfig.from_env()
