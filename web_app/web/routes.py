"""Redirect route for short links."""

from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse

router = APIRouter()


@router.api_route("/{short_code}", methods=["GET", "HEAD"], include_in_schema=False)
async def redirect_to_url(request: Request, short_code: str):
    """Redirect to the original URL, counting the visit.

    HEAD answers with the same redirect but leaves the click count alone, so
    link checkers and previewers do not inflate statistics.
    """
    service = request.app.state.service
    if request.method == "HEAD":
        record = service.get_url_info(short_code)
    else:
        record = service.visit(
            short_code,
            user_agent=request.headers.get("user-agent"),
            ip=request.state.client_ip,
        )

    # Perform 302 redirect (temporary redirect for tracking)
    return RedirectResponse(url=record.original_url, status_code=status.HTTP_302_FOUND)
