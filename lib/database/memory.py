"""In-memory implementation of the URL store."""

import threading
from collections import deque
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Callable, Deque, Dict, List, Optional

from ..common.validators import is_valid_short_code, is_valid_url, normalize_url
from ..exceptions import (
    InvalidShortCodeError,
    InvalidUrlError,
    NotFoundError,
    ShortCodeConflictError,
)
from ..shortcode import MAX_CODE_LENGTH, ShortCodeGenerator
from .base import URLStoreBase
from .models import ClickEvent, StoreStatistics, URLRecord


TOP_URLS_LIMIT = 10
CLICKS_BY_DAY_WINDOW = 7


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryURLStore(URLStoreBase):
    """Process-local URL store backed by a dict.

    A single lock serializes every operation, so a visit's read-increment-write
    is atomic even when handlers run on a thread pool. State is lost when the
    process exits.
    """

    def __init__(
        self,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        max_collision_retries: int = 10,
        max_click_history: int = 1000,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the store.

        Args:
            short_code_generator: Generator for new codes (6 characters by default)
            max_collision_retries: Attempts per code length before growing the length
            max_click_history: Click events retained per short code
            clock: Callable returning the current aware UTC time
        """
        self.generator = short_code_generator or ShortCodeGenerator()
        self.max_collision_retries = max(1, max_collision_retries)
        self.max_click_history = max_click_history
        self.clock = clock or utc_now

        self._records: Dict[str, URLRecord] = {}
        self._history: Dict[str, Deque[ClickEvent]] = {}
        self._lock = threading.Lock()

    def create(self, original_url: str, short_code: Optional[str] = None) -> URLRecord:
        normalized = normalize_url(original_url)
        is_valid, error = is_valid_url(normalized)
        if not is_valid:
            raise InvalidUrlError(error)

        if short_code is not None:
            is_valid, error = is_valid_short_code(short_code)
            if not is_valid:
                raise InvalidShortCodeError(error)

        with self._lock:
            if short_code is None:
                short_code = self._generate_unique_short_code()
            elif short_code in self._records:
                raise ShortCodeConflictError(f"Short code '{short_code}' already exists")

            record = URLRecord(
                short_code=short_code,
                original_url=normalized,
                created_at=self.clock(),
            )
            self._records[short_code] = record
            self._history[short_code] = deque(maxlen=self.max_click_history)
            return replace(record)

    def resolve(self, short_code: str) -> URLRecord:
        with self._lock:
            return replace(self._get(short_code))

    def record_visit(
        self,
        short_code: str,
        user_agent: Optional[str] = None,
        ip: Optional[str] = None,
    ) -> int:
        with self._lock:
            record = self._get(short_code)
            now = self.clock()
            record.clicks += 1
            record.last_accessed = now
            self._history[short_code].append(
                ClickEvent(timestamp=now, user_agent=user_agent, ip=ip)
            )
            return record.clicks

    def delete(self, short_code: str) -> None:
        with self._lock:
            self._get(short_code)
            del self._records[short_code]
            self._history.pop(short_code, None)

    def stats(self) -> StoreStatistics:
        with self._lock:
            records = list(self._records.values())
            events = [event for history in self._history.values() for event in history]
            today = self.clock().date()

            total_urls = len(records)
            total_clicks = sum(record.clicks for record in records)
            average_clicks = round(total_clicks / total_urls, 2) if total_urls else 0

            # sorted() is stable, so ties keep insertion order
            top_urls = sorted(records, key=lambda r: r.clicks, reverse=True)[:TOP_URLS_LIMIT]

            return StoreStatistics(
                total_urls=total_urls,
                total_clicks=total_clicks,
                average_clicks=average_clicks,
                top_urls=[replace(record) for record in top_urls],
                clicks_by_day=self._clicks_by_day(events, today),
            )

    def click_history(self, short_code: str, limit: int = 100) -> List[ClickEvent]:
        with self._lock:
            self._get(short_code)
            history = list(self._history[short_code])
        history.reverse()
        return history[:max(0, limit)]

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def _get(self, short_code: str) -> URLRecord:
        record = self._records.get(short_code)
        if record is None:
            raise NotFoundError(short_code)
        return record

    def _generate_unique_short_code(self) -> str:
        """Generate a free short code, growing the length when a size keeps colliding.

        Must be called with the lock held.

        Raises:
            ShortCodeConflictError: If no free code is found up to the maximum length
        """
        length = self.generator.default_length
        while length <= MAX_CODE_LENGTH:
            for _ in range(self.max_collision_retries):
                code = self.generator.generate_random(length=length)
                if code not in self._records:
                    return code
            length += 1
        raise ShortCodeConflictError("Unable to generate unique short code after multiple attempts")

    @staticmethod
    def _clicks_by_day(events: List[ClickEvent], today) -> List[dict]:
        days = [today - timedelta(days=offset) for offset in range(CLICKS_BY_DAY_WINDOW - 1, -1, -1)]
        counts = {day: 0 for day in days}
        for event in events:
            day = event.timestamp.astimezone(timezone.utc).date()
            if day in counts:
                counts[day] += 1
        return [{"date": day.isoformat(), "clicks": counts[day]} for day in days]
