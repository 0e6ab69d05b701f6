"""
FastAPI application entrypoint for the anime render scraper API.

This module sets up the FastAPI app, configures logging, owns the browser
pool lifecycle (start on startup, shutdown on exit), and registers route
handlers.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import anime
from engine import AnimeScraperService, BrowserPool, EngineUnavailableError
from shared.config import AppConfig, get_config
from shared.logging import configure_logging, get_logger

load_dotenv()


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or get_config()

    log_level = logging.getLevelName(config.log_level.upper())
    configure_logging(
        level=log_level,
        log_file=config.log_file,
        log_stdout=config.log_stdout,
    )
    logger = get_logger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        pool = BrowserPool(headless=config.browser_headless)
        app.state.browser_pool = pool
        app.state.scraper_service = AnimeScraperService(pool, config)
        try:
            await pool.start()
        except EngineUnavailableError as e:
            # Requests relaunch the engine on demand.
            logger.error("browser_start_failed", error=str(e))
        logger.info("api_started", environment=config.environment, target=config.target_base_url)
        try:
            yield
        finally:
            await pool.shutdown()
            logger.info("api_stopped")

    app = FastAPI(
        title="Anime Render Scraper API",
        description="Extracts listings, details, episodes and stream URLs from a rendered site",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS middleware (permissive; tighten in production)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(anime.router)

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        pool: Optional[BrowserPool] = getattr(app.state, "browser_pool", None)
        return {"status": "ok", "browser": bool(pool and pool.is_running)}

    return app


app = create_app()
