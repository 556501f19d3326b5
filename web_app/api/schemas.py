"""Pydantic schemas for API requests and responses."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime

from lib.database.models import ClickEvent, StoreStatistics, URLRecord


class CamelModel(BaseModel):
    """Response model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    original_url: Optional[str] = Field(
        None,
        description="The URL to shorten; https:// is assumed when no scheme is given",
        validation_alias=AliasChoices("originalUrl", "original_url", "url"),
    )
    custom_code: Optional[str] = Field(
        None,
        description="Optional custom short code (3-10 letters, digits or hyphens)",
        validation_alias=AliasChoices("customCode", "custom_code", "shortcode"),
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "originalUrl": "https://example.com/very/long/path/to/resource",
                },
                {
                    "originalUrl": "github.com/user/repo",
                    "customCode": "myrepo"
                }
            ]
        }
    }


class ShortenResponse(CamelModel):
    """Response after shortening a URL."""

    success: bool = True
    short_code: str = Field(..., description="The generated short code")
    original_url: str = Field(..., description="The normalized original URL")
    short_url: str = Field(..., description="The complete short URL")
    created_at: datetime = Field(..., description="Creation timestamp")


class URLRecordResponse(CamelModel):
    """Response with everything stored for a short code."""

    short_code: str
    original_url: str
    created_at: datetime
    clicks: int
    last_accessed: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: URLRecord) -> "URLRecordResponse":
        return cls(
            short_code=record.short_code,
            original_url=record.original_url,
            created_at=record.created_at,
            clicks=record.clicks,
            last_accessed=record.last_accessed,
        )


class ClickResponse(CamelModel):
    """Response after recording a click."""

    success: bool = True
    clicks: int


class ClickEventResponse(CamelModel):
    """One recorded visit."""

    timestamp: datetime
    user_agent: Optional[str] = None
    ip: Optional[str] = None


class ClickHistoryResponse(CamelModel):
    """Recent visits to a short code, newest first."""

    short_code: str
    clicks: List[ClickEventResponse]

    @classmethod
    def from_events(cls, short_code: str, events: List[ClickEvent]) -> "ClickHistoryResponse":
        return cls(
            short_code=short_code,
            clicks=[
                ClickEventResponse(timestamp=e.timestamp, user_agent=e.user_agent, ip=e.ip)
                for e in events
            ],
        )


class DeleteResponse(CamelModel):
    """Response after deleting a short URL."""

    success: bool = True
    message: str = "URL deleted successfully"


class TopURL(CamelModel):
    """Entry in the most-clicked list."""

    short_code: str
    original_url: str
    clicks: int


class DayClicks(CamelModel):
    """Clicks recorded on one UTC day."""

    date: str
    clicks: int


class StatisticsResponse(CamelModel):
    """Statistics response."""

    total_urls: int
    total_clicks: int
    average_clicks: float
    top_urls: List[TopURL]
    clicks_by_day: List[DayClicks]

    @classmethod
    def from_statistics(cls, stats: StoreStatistics) -> "StatisticsResponse":
        return cls(
            total_urls=stats.total_urls,
            total_clicks=stats.total_clicks,
            average_clicks=stats.average_clicks,
            top_urls=[
                TopURL(short_code=r.short_code, original_url=r.original_url, clicks=r.clicks)
                for r in stats.top_urls
            ],
            clicks_by_day=[DayClicks(**day) for day in stats.clicks_by_day],
        )


class HealthResponse(CamelModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    timestamp: datetime = Field(..., description="Check timestamp")
    urls_count: int = Field(..., description="Number of stored URLs")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
