"""URL metadata endpoint used to auto-fill cover images and descriptions.

Routes
------
GET /urlInfo?url=<raw-url>                   Preview metadata for a page
GET /client/common/urlInfo?url=<raw-url>     Same, legacy path

``targetUrl`` is accepted in place of ``url`` and wins when both are sent.
Fetch and parse failures still answer ``status=1`` with empty ``data``; only
a malformed request is reported as an error.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from urlinfo.scraper import InvalidURL, RequestError, get_url_info, validate_url

logger = logging.getLogger(__name__)

router = APIRouter()

STATUS_SUCCESS = 1
STATUS_FAILURE = 0


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class UrlInfoResponse(BaseModel):
    status: int
    msg: str
    data: Optional[dict[str, str]] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _respond(status_code: int, body: UrlInfoResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _error(status_code: int, message: str) -> JSONResponse:
    return _respond(status_code, UrlInfoResponse(status=STATUS_FAILURE, msg=message))


def _target_url(url: Optional[str], target_url: Optional[str]) -> str:
    """Return the URL to inspect, preferring ``targetUrl`` over ``url``.

    Raises:
        RequestError: If neither parameter was supplied.
    """
    for value in (target_url, url):
        if value and value.strip():
            return value
    raise RequestError("URL parameter is required")


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------

@router.api_route(
    "",
    # Every other verb is listed so it gets the JSON 405 body.  CORS
    # preflights never get here; CORSMiddleware answers them first.
    methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"],
    response_model=UrlInfoResponse,
    response_model_exclude_none=True,
)
async def url_info(
    request: Request,
    url: Optional[str] = None,
    target_url: Optional[str] = Query(None, alias="targetUrl"),
) -> Any:
    """Fetch *url* and return its Open Graph / Twitter Card / favicon metadata."""
    if request.method != "GET":
        return _error(405, "Method not allowed")

    try:
        normalized = validate_url(_target_url(url, target_url))
    except RequestError as exc:
        return _error(400, str(exc))
    except InvalidURL as exc:
        return _error(400, f"Invalid URL: {exc}")

    meta = await get_url_info(normalized)
    return _respond(
        200,
        UrlInfoResponse(status=STATUS_SUCCESS, msg="success", data=meta.to_dict()),
    )
