"""Exceptions raised by the URL store and service."""


class URLShortenerError(Exception):
    """Base class for URL shortener errors."""

    status_code = 500


class InvalidUrlError(URLShortenerError, ValueError):
    """Raised when the submitted URL is empty or malformed."""

    status_code = 400


class InvalidShortCodeError(URLShortenerError, ValueError):
    """Raised when a custom short code has the wrong format or is reserved."""

    status_code = 400


class NotFoundError(URLShortenerError, KeyError):
    """Raised when no live record exists for a short code."""

    status_code = 404

    def __init__(self, short_code: str):
        super().__init__(short_code)
        self.short_code = short_code

    def __str__(self) -> str:
        return f"Short code '{self.short_code}' not found"


class ShortCodeConflictError(URLShortenerError):
    """Raised when a short code is already taken or no free code could be generated."""

    status_code = 409
