"""Storage layer for URL shortener."""

from .base import URLStoreBase
from .memory import InMemoryURLStore
from .models import ClickEvent, StoreStatistics, URLRecord

__all__ = ["URLStoreBase", "InMemoryURLStore", "ClickEvent", "StoreStatistics", "URLRecord"]
