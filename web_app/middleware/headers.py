"""Forwarded headers middleware."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from lib.common.headers import build_base_url, get_client_ip


class ForwardedHeadersMiddleware(BaseHTTPMiddleware):
    """Resolve the public base URL and client address once per request.

    Results are stored on ``request.state`` as ``base_url`` and ``client_ip``.
    """

    def __init__(self, app, fallback_base_url: str):
        super().__init__(app)
        self.fallback_base_url = fallback_base_url

    async def dispatch(self, request: Request, call_next: Callable):
        """Process request and extract forwarded headers."""
        headers = dict(request.headers)

        request.state.base_url = build_base_url(
            headers=headers,
            fallback_base_url=self.fallback_base_url,
            request_scheme=request.url.scheme,
            request_host=request.headers.get("host"),
        )
        request.state.client_ip = get_client_ip(
            headers,
            peer_host=request.client.host if request.client else None,
        )

        response = await call_next(request)
        return response
