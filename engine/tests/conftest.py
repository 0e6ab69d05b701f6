"""
Shared fixtures for engine tests: configuration with short bounds and a
BrowserPool backed by in-memory Playwright fakes. No browser or network.
"""

from __future__ import annotations

import pytest

from engine.pool import BrowserPool
from engine.tests.fakes import FakePlaywrightFactory, make_config
from shared.config import AppConfig


@pytest.fixture
def app_config() -> AppConfig:
    return make_config()


@pytest.fixture
def fake_playwright() -> FakePlaywrightFactory:
    return FakePlaywrightFactory()


@pytest.fixture
def pool(fake_playwright: FakePlaywrightFactory) -> BrowserPool:
    return BrowserPool(playwright_factory=fake_playwright)
