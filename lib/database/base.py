"""Abstract base class for URL shortener store implementations."""

from abc import ABC, abstractmethod
from typing import List, Optional

from .models import ClickEvent, StoreStatistics, URLRecord


class URLStoreBase(ABC):
    """Abstract base class for URL store operations.

    Implementations own every record they hold; callers only ever receive
    copies, so records can not be mutated outside the store.
    """

    @abstractmethod
    def create(self, original_url: str, short_code: Optional[str] = None) -> URLRecord:
        """Normalize, validate and store a new URL.

        Args:
            original_url: The URL as submitted (a missing scheme becomes https)
            short_code: Optional custom short code; generated when omitted

        Returns:
            The new record, with zero clicks

        Raises:
            InvalidUrlError: If the URL is empty or malformed
            InvalidShortCodeError: If the custom short code is malformed or reserved
            ShortCodeConflictError: If the short code is taken
        """
        pass

    @abstractmethod
    def resolve(self, short_code: str) -> URLRecord:
        """Look up a record without changing it.

        Raises:
            NotFoundError: If no live record has this short code
        """
        pass

    @abstractmethod
    def record_visit(
        self,
        short_code: str,
        user_agent: Optional[str] = None,
        ip: Optional[str] = None,
    ) -> int:
        """Count one visit to a short code.

        Args:
            short_code: The short code visited
            user_agent: Optional client user agent for the click history
            ip: Optional client address for the click history

        Returns:
            The updated click count

        Raises:
            NotFoundError: If no live record has this short code
        """
        pass

    @abstractmethod
    def delete(self, short_code: str) -> None:
        """Remove a record and its click history.

        Raises:
            NotFoundError: If no live record has this short code
        """
        pass

    @abstractmethod
    def stats(self) -> StoreStatistics:
        """Compute aggregate statistics over all live records."""
        pass

    @abstractmethod
    def click_history(self, short_code: str, limit: int = 100) -> List[ClickEvent]:
        """Return recent visits to a short code, newest first.

        Raises:
            NotFoundError: If no live record has this short code
        """
        pass

    @abstractmethod
    def count(self) -> int:
        """Return the number of live records."""
        pass
