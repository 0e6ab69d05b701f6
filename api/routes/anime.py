"""
Route handlers for anime extraction endpoints.

Handlers parse and validate parameters, call AnimeScraperService, and map
engine errors to HTTP status codes: not-found conditions to 404, an
unavailable browser engine to 503, everything else to 500.
"""

from __future__ import annotations

from typing import Annotated, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from api.schemas import DetailResponse, EpisodeResponse, ListingItemResponse, StreamResponse
from engine import (
    AnimeScraperService,
    EngineUnavailableError,
    NotFoundError,
    ScraperError,
    user_safe_message,
)
from shared.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/anime", tags=["anime"])


def get_scraper_service(request: Request) -> AnimeScraperService:
    """Dependency returning the service built by the application lifespan."""
    return request.app.state.scraper_service


ScraperService = Annotated[AnimeScraperService, Depends(get_scraper_service)]


def _raise_http(exc: ScraperError) -> NoReturn:
    if isinstance(exc, NotFoundError):
        logger.info(
            "request_not_found",
            operation=exc.operation,
            target=exc.target,
            error_type=type(exc).__name__,
        )
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=user_safe_message(exc),
        ) from exc
    if isinstance(exc, EngineUnavailableError):
        logger.error("request_engine_unavailable", operation=exc.operation, target=exc.target)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=user_safe_message(exc),
        ) from exc
    logger.error(
        "request_failed",
        operation=exc.operation,
        target=exc.target,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"{user_safe_message(exc)} ({exc.operation} {exc.target})",
    ) from exc


@router.get(
    "/latest",
    response_model=list[ListingItemResponse],
    response_model_by_alias=True,
    summary="Latest releases for a listing page",
)
async def get_latest_anime(
    service: ScraperService,
    page: Annotated[int, Query(ge=1)] = 1,
) -> list[ListingItemResponse]:
    try:
        records = await service.get_latest_listing(page)
    except ScraperError as e:
        _raise_http(e)
    return [ListingItemResponse.from_record(r) for r in records]


@router.get(
    "/details/{content_id}",
    response_model=DetailResponse,
    response_model_by_alias=True,
    summary="Series detail",
)
async def get_anime_details(content_id: str, service: ScraperService) -> DetailResponse:
    try:
        record = await service.get_detail(content_id)
    except ScraperError as e:
        _raise_http(e)
    return DetailResponse.from_record(record)


@router.get(
    "/episodes/{content_id}",
    response_model=list[EpisodeResponse],
    response_model_by_alias=True,
    summary="Episode list of a series",
)
async def get_anime_episodes(content_id: str, service: ScraperService) -> list[EpisodeResponse]:
    try:
        episodes = await service.get_episodes(content_id)
    except ScraperError as e:
        _raise_http(e)
    return [EpisodeResponse.from_record(e) for e in episodes]


@router.get(
    "/stream/{episode_id}",
    response_model=StreamResponse,
    response_model_by_alias=True,
    summary="Resolve the media URL of an episode",
)
async def get_stream_episode(episode_id: str, service: ScraperService) -> StreamResponse:
    """
    Resolve the media URL the episode player requests while loading.

    Returns 404 when no media request is observed within the stream timeout.
    """
    try:
        resolution = await service.get_stream_resolution(episode_id)
    except ScraperError as e:
        _raise_http(e)
    return StreamResponse.from_record(resolution)


@router.get(
    "/search",
    response_model=list[ListingItemResponse],
    response_model_by_alias=True,
    summary="Search the catalogue",
)
async def search_anime(
    service: ScraperService,
    value: Annotated[str, Query(min_length=1)],
) -> list[ListingItemResponse]:
    try:
        records = await service.search_listing(value)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e
    except ScraperError as e:
        _raise_http(e)
    return [ListingItemResponse.from_record(r) for r in records]
