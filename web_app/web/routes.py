"""Root and redirect routes implementation."""

from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse

import shortener
from shortener.common.headers import extract_referrer, get_client_ip, get_user_agent
from ..api.routes import SERVICE_NAME
from ..api.schemas import ErrorResponse, ServiceInfoResponse

router = APIRouter()


@router.get("/", response_model=ServiceInfoResponse, summary="Service information")
async def service_info(request: Request):
    """Describe the service and its endpoints."""
    request.app.state.logger.info("Root endpoint accessed")
    return ServiceInfoResponse(
        service=SERVICE_NAME,
        version=shortener.__version__,
        status="running",
        timestamp=datetime.now(timezone.utc),
        endpoints={
            "create": "POST /shorturls",
            "statistics": "GET /shorturls/:shortcode",
            "redirect": "GET /:shortcode",
            "health": "GET /health",
        },
    )


@router.get(
    "/{shortcode}",
    status_code=status.HTTP_302_FOUND,
    responses={
        302: {"description": "Redirect to the original URL"},
        400: {"model": ErrorResponse, "description": "Invalid short code format"},
        404: {"model": ErrorResponse, "description": "Short code not found or expired"},
    },
    summary="Follow short URL",
)
async def redirect_to_url(request: Request, shortcode: str):
    """Redirect to the original URL, recording the click."""
    service = request.app.state.service
    headers = dict(request.headers)
    peer = request.client.host if request.client else None

    original_url = await service.redirect(
        shortcode,
        ip=get_client_ip(headers, peer),
        user_agent=get_user_agent(headers),
        referrer=extract_referrer(headers),
    )

    # 302 (not 301) so browsers come back and every visit is counted
    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
