"""Validation utilities for URL shortener."""

import re
from urllib.parse import urlparse
from typing import Tuple


MAX_URL_LENGTH = 2048

SHORT_CODE_PATTERN = re.compile(r'^[A-Za-z0-9-]{3,10}$')

# Any explicit scheme; non-http ones are kept so validation can reject them
SCHEME_PATTERN = re.compile(r'^[A-Za-z][A-Za-z0-9+.-]*://')

# Path segments the HTTP surface already routes
RESERVED_CODES = frozenset({
    "url", "stats", "health", "shorten", "docs", "redoc",
})


def normalize_url(url: str) -> str:
    """Normalize a submitted URL.

    Surrounding whitespace is stripped and ``https://`` is prefixed when the
    input carries no scheme at all.

    Args:
        url: The URL as submitted

    Returns:
        Normalized URL (empty string stays empty)
    """
    url = (url or "").strip()
    if not url or SCHEME_PATTERN.match(url):
        return url
    return f"https://{url}"


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    try:
        result = urlparse(url)

        # Check if scheme is http or https
        if result.scheme.lower() not in ("http", "https"):
            return False, "URL must use http or https protocol"

        # Check if host exists (netloc alone can be just ":80" or "user@")
        if not result.netloc or not result.hostname:
            return False, "URL must have a valid domain"

        # Accessing the port validates it
        result.port

        if any(c.isspace() for c in url):
            return False, "URL must not contain whitespace"

        return True, ""

    except ValueError as e:
        return False, f"Invalid URL format: {str(e)}"


def is_valid_short_code(short_code: str) -> Tuple[bool, str]:
    """Validate a custom short code.

    Args:
        short_code: The short code to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not short_code or not isinstance(short_code, str):
        return False, "Short code is required"

    if not SHORT_CODE_PATTERN.match(short_code):
        return False, "Short code must be 3-10 characters long and contain only letters, numbers, and hyphens"

    if short_code.lower() in RESERVED_CODES:
        return False, f"'{short_code}' is a reserved word and cannot be used"

    return True, ""
