"""API routes implementation."""

from fastapi import APIRouter, HTTPException, Request, status
from dataclasses import asdict
from datetime import datetime, timezone
from typing import List

from .schemas import (
    ShortenRequest,
    ShortenResponse,
    URLStatsResponse,
    ClickDetail,
    LocationInfo,
    HealthResponse,
    ErrorResponse,
    StatisticsResponse,
    URLSummary,
)
from shortener.common.headers import build_short_link, get_client_ip

SERVICE_NAME = "URL Shortener Microservice"

router = APIRouter()

# Only mounted under /api so it never shadows a shortcode
stats_router = APIRouter()


@router.post(
    "/shorturls",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid url, shortcode or validity"},
        409: {"model": ErrorResponse, "description": "Short code already exists"},
        500: {"model": ErrorResponse, "description": "Short code generation exhausted"},
    },
    summary="Create short URL",
    description="Create a time-bound short URL. Optionally provide a custom short code.",
)
async def create_short_url(request: Request, body: ShortenRequest):
    """Create a shortened URL."""
    service = request.app.state.service
    config = request.app.state.config
    logger = request.app.state.logger

    logger.info(
        f"Create short URL request: url={body.url} validity={body.validity} "
        f"shortcode={body.shortcode} ip={get_client_ip(dict(request.headers), _peer(request))}"
    )

    record = await service.create_short_url(
        original_url=body.url,
        validity_minutes=body.validity,
        custom_code=body.shortcode,
    )

    short_link = build_short_link(
        record.shortcode,
        headers=dict(request.headers),
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
        path_prefix=config.path_prefix,
    )

    return ShortenResponse(short_link=short_link, expiry=record.expiry_date)


@router.get(
    "/shorturls/{shortcode}",
    response_model=URLStatsResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid short code format"},
        404: {"model": ErrorResponse, "description": "Short code not found or expired"},
    },
    summary="Get URL statistics",
    description="Get a short URL's details and click analytics.",
)
async def get_url_stats(request: Request, shortcode: str):
    """Get statistics for a shortened URL."""
    service = request.app.state.service

    stats = await service.get_url_stats(shortcode)

    return URLStatsResponse(
        shortcode=stats.shortcode,
        original_url=stats.original_url,
        created_at=stats.created_at,
        expiry_date=stats.expiry_date,
        is_active=stats.is_active,
        total_clicks=stats.total_clicks,
        click_details=[
            ClickDetail(
                timestamp=click.timestamp,
                referrer=click.referrer,
                location=LocationInfo(
                    country=click.location.country,
                    region=click.location.region,
                    city=click.location.city,
                ),
                user_agent=click.user_agent,
            )
            for click in stats.clicks
        ],
    )


@stats_router.get(
    "/stats",
    response_model=StatisticsResponse,
    summary="Get statistics",
    description="Get service-wide statistics.",
)
async def get_statistics(request: Request):
    """Get service statistics."""
    service = request.app.state.service

    stats = await service.get_statistics()

    return StatisticsResponse(**stats)


@stats_router.get(
    "/shorturls",
    response_model=List[URLSummary],
    summary="List short URLs",
    description="List every stored short URL, newest first. Development only.",
)
async def list_urls(request: Request):
    """Debug listing of all stored short URLs."""
    if not request.app.state.config.is_development:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)

    rows = await request.app.state.service.list_urls()

    return [URLSummary(**asdict(row)) for row in rows]


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
        service=SERVICE_NAME,
    )


def _peer(request: Request):
    return request.client.host if request.client else None
