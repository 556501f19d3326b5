"""Data models for URL shortener."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class URLRecord:
    """Represents one shortened URL held by the store."""

    short_code: str
    original_url: str
    created_at: datetime
    clicks: int = 0
    last_accessed: Optional[datetime] = None


@dataclass(frozen=True)
class ClickEvent:
    """A single recorded visit to a short code."""

    timestamp: datetime
    user_agent: Optional[str] = None
    ip: Optional[str] = None


@dataclass
class StoreStatistics:
    """Aggregate click statistics across all live records."""

    total_urls: int = 0
    total_clicks: int = 0
    average_clicks: float = 0
    top_urls: List[URLRecord] = field(default_factory=list)
    clicks_by_day: List[Dict[str, Any]] = field(default_factory=list)
