"""API routes implementation."""

from fastapi import APIRouter, Query, Request, status

from .schemas import (
    ShortenRequest,
    ShortenResponse,
    URLRecordResponse,
    ClickResponse,
    ClickHistoryResponse,
    DeleteResponse,
    HealthResponse,
    ErrorResponse,
    StatisticsResponse,
)
from lib.common.url_builder import build_short_url

router = APIRouter()

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Short code not found"}}


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL or short code"},
        409: {"model": ErrorResponse, "description": "Short code already exists"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Create short URL",
    description="Create a shortened URL. Optionally provide a custom short code.",
)
async def shorten_url(request: Request, body: ShortenRequest):
    """Create a shortened URL."""
    service = request.app.state.service
    config = request.app.state.config

    record = service.create_short_url(
        original_url=body.original_url,
        custom_code=body.custom_code,
    )

    short_url = build_short_url(
        short_code=record.short_code,
        base_url=request.state.base_url,
        path_prefix=config.path_prefix,
    )

    return ShortenResponse(
        short_code=record.short_code,
        original_url=record.original_url,
        short_url=short_url,
        created_at=record.created_at,
    )


@router.get(
    "/url/{short_code}",
    response_model=URLRecordResponse,
    responses=NOT_FOUND,
    summary="Get URL information",
    description="Get the stored record for a short code, including click statistics.",
)
async def get_url_info(request: Request, short_code: str):
    """Get information about a shortened URL."""
    record = request.app.state.service.get_url_info(short_code)
    return URLRecordResponse.from_record(record)


@router.post(
    "/url/{short_code}/click",
    response_model=ClickResponse,
    responses=NOT_FOUND,
    summary="Record click",
    description="Count a click on a short URL without redirecting.",
)
async def record_click(request: Request, short_code: str):
    """Record a click reported by a client."""
    clicks = request.app.state.service.record_click(
        short_code,
        user_agent=request.headers.get("user-agent"),
        ip=request.state.client_ip,
    )
    return ClickResponse(clicks=clicks)


@router.get(
    "/url/{short_code}/clicks",
    response_model=ClickHistoryResponse,
    responses=NOT_FOUND,
    summary="Get click history",
    description="List the most recent visits to a short URL, newest first.",
)
async def get_click_history(
    request: Request,
    short_code: str,
    limit: int = Query(100, ge=1, le=1000),
):
    """Get recent clicks for a short code."""
    events = request.app.state.service.get_click_history(short_code, limit=limit)
    return ClickHistoryResponse.from_events(short_code, events)


@router.delete(
    "/url/{short_code}",
    response_model=DeleteResponse,
    responses=NOT_FOUND,
    summary="Delete short URL",
)
async def delete_url(request: Request, short_code: str):
    """Delete a shortened URL."""
    request.app.state.service.delete_short_url(short_code)
    return DeleteResponse()


@router.get(
    "/stats",
    response_model=StatisticsResponse,
    summary="Get statistics",
    description="Get service-wide click statistics.",
)
async def get_statistics(request: Request):
    """Get service statistics."""
    stats = request.app.state.service.get_statistics()
    return StatisticsResponse.from_statistics(stats)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is alive.",
)
async def health_check(request: Request):
    """Liveness endpoint for load balancers and monitoring."""
    health = request.app.state.service.health_check()
    return HealthResponse(**health)
