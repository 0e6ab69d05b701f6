"""
Pytest configuration and fixtures for API tests.

`client` serves the app with a stubbed scraper service (the lifespan is not
entered, so no browser pool exists). `live_client` enters the lifespan with
the browser pool backed by the in-memory Playwright fakes.
"""

from __future__ import annotations

from typing import Generator
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

import api.main
from api.main import create_app
from api.routes.anime import get_scraper_service
from engine import AnimeScraperService, BrowserPool
from engine.tests.fakes import FakePlaywrightFactory, make_config


@pytest.fixture
def scraper_service() -> AsyncMock:
    """Service double; tests set return values or side effects per method."""
    return AsyncMock(spec=AnimeScraperService)


@pytest.fixture
def client(scraper_service: AsyncMock) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client with the scraper service overridden."""
    app = create_app(make_config())
    app.dependency_overrides[get_scraper_service] = lambda: scraper_service

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def fake_playwright() -> FakePlaywrightFactory:
    return FakePlaywrightFactory()


@pytest.fixture
def live_client(
    monkeypatch: pytest.MonkeyPatch, fake_playwright: FakePlaywrightFactory
) -> Generator[TestClient, None, None]:
    """Run the real lifespan; BrowserPool is built on the Playwright fakes."""

    def fake_pool(headless: bool = True) -> BrowserPool:
        return BrowserPool(headless=headless, playwright_factory=fake_playwright)

    monkeypatch.setattr(api.main, "BrowserPool", fake_pool)
    app = create_app(make_config())

    with TestClient(app) as test_client:
        yield test_client
