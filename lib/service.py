"""Business logic service for URL shortener."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .common.logging_config import get_logger
from .database.base import URLStoreBase
from .database.models import ClickEvent, StoreStatistics, URLRecord
from .exceptions import InvalidShortCodeError, NotFoundError


class URLShortenerService:
    """Service layer between the HTTP handlers and the URL store.

    Each method performs one store operation and then emits a structured log
    event describing it. The store itself never logs.
    """

    def __init__(
        self,
        store: URLStoreBase,
        logger: Optional[logging.Logger] = None,
        enable_custom_codes: bool = True,
    ):
        """Initialize URL shortener service.

        Args:
            store: URL store instance
            logger: Optional logger
            enable_custom_codes: Whether to allow custom short codes
        """
        self.store = store
        self.logger = logger or get_logger("url_shortener.service")
        self.enable_custom_codes = enable_custom_codes

    def create_short_url(
        self,
        original_url: Optional[str],
        custom_code: Optional[str] = None,
    ) -> URLRecord:
        """Create a new short URL.

        Args:
            original_url: The original long URL
            custom_code: Optional custom short code

        Returns:
            The stored record

        Raises:
            InvalidUrlError: If validation fails
            InvalidShortCodeError: If the custom code is malformed or custom codes are disabled
            ShortCodeConflictError: If the custom code already exists
        """
        if custom_code and not self.enable_custom_codes:
            raise InvalidShortCodeError("Custom short codes are not enabled")

        record = self.store.create(original_url or "", short_code=custom_code or None)

        self.logger.info(
            f"Created short URL: {record.short_code} -> {record.original_url}",
            extra={
                "event": "url.created",
                "short_code": record.short_code,
                "original_url": record.original_url,
                "custom_code": bool(custom_code),
            },
        )
        return record

    def get_url_info(self, short_code: str) -> URLRecord:
        """Get the record for a short code without counting a visit."""
        record = self._lookup(short_code, self.store.resolve)
        self.logger.debug(
            f"Retrieved URL info for {short_code}",
            extra={"event": "url.resolved", "short_code": short_code},
        )
        return record

    def visit(
        self,
        short_code: str,
        user_agent: Optional[str] = None,
        ip: Optional[str] = None,
    ) -> URLRecord:
        """Resolve a short code for redirection and count the visit.

        Args:
            short_code: The short code being followed
            user_agent: Client user agent
            ip: Client address

        Returns:
            The record, with the click count after this visit
        """
        record = self._lookup(short_code, self.store.resolve)
        record.clicks = self._lookup(
            short_code, self.store.record_visit, user_agent=user_agent, ip=ip
        )
        self.logger.info(
            f"Redirecting {short_code} -> {record.original_url}",
            extra={
                "event": "url.visited",
                "short_code": short_code,
                "clicks": record.clicks,
                "client_ip": ip,
            },
        )
        return record

    def record_click(
        self,
        short_code: str,
        user_agent: Optional[str] = None,
        ip: Optional[str] = None,
    ) -> int:
        """Count a click reported by a client without redirecting.

        Returns:
            The updated click count
        """
        clicks = self._lookup(short_code, self.store.record_visit, user_agent=user_agent, ip=ip)
        self.logger.info(
            f"Recorded click for {short_code} (total {clicks})",
            extra={"event": "url.clicked", "short_code": short_code, "clicks": clicks},
        )
        return clicks

    def delete_short_url(self, short_code: str) -> None:
        """Delete a short URL."""
        self._lookup(short_code, self.store.delete)
        self.logger.info(
            f"Deleted short URL: {short_code}",
            extra={"event": "url.deleted", "short_code": short_code},
        )

    def get_click_history(self, short_code: str, limit: int = 100) -> List[ClickEvent]:
        """Get the most recent visits to a short code, newest first."""
        return self._lookup(short_code, self.store.click_history, limit=limit)

    def get_statistics(self) -> StoreStatistics:
        """Get service-wide click statistics."""
        stats = self.store.stats()
        self.logger.debug(
            f"Computed statistics over {stats.total_urls} URLs",
            extra={
                "event": "stats.computed",
                "total_urls": stats.total_urls,
                "total_clicks": stats.total_clicks,
            },
        )
        return stats

    def health_check(self) -> Dict[str, Any]:
        """Perform health check.

        Returns:
            Dictionary with status, timestamp and number of stored URLs
        """
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc),
            "urls_count": self.store.count(),
        }

    def _lookup(self, short_code: str, operation, *args, **kwargs):
        try:
            return operation(short_code, *args, **kwargs)
        except NotFoundError:
            self.logger.warning(
                f"Short code not found: {short_code}",
                extra={"event": "url.not_found", "short_code": short_code},
            )
            raise
