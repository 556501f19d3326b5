"""Common utilities for URL shortener."""

from .validators import normalize_url, is_valid_url, is_valid_short_code
from .headers import extract_forwarded_headers, build_base_url, get_client_ip
from .url_builder import build_short_url
from .logging_config import setup_logging, get_logger

__all__ = [
    "normalize_url",
    "is_valid_url",
    "is_valid_short_code",
    "extract_forwarded_headers",
    "build_base_url",
    "get_client_ip",
    "build_short_url",
    "setup_logging",
    "get_logger",
]
