"""Bounded HTTP fetcher for untrusted pages.

Every fetch is capped in time (one overall deadline covering connect,
redirects and body transfer), in redirect hops, and in body size, and only
HTML responses are accepted.

Redirect targets are followed without re-running host validation, so a
public URL that redirects to a private address is still fetched.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from urlinfo.config import settings
from urlinfo.scraper.errors import FetchError
from urlinfo.scraper.models import FetchResult

logger = logging.getLogger(__name__)

_HTML_CONTENT_TYPES = ("text/html", "application/xhtml")

_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


def _default_headers() -> dict[str, str]:
    return {
        "User-Agent": settings.user_agent,
        "Accept": _ACCEPT,
        "Accept-Language": "en-US,en;q=0.5",
    }


def _is_html(content_type: str) -> bool:
    """Return ``True`` if *content_type* names an HTML document."""
    content_type = content_type.lower()
    return any(ct in content_type for ct in _HTML_CONTENT_TYPES)


async def _read_bounded(response: httpx.Response, limit: int) -> bytes:
    """Read at most *limit* bytes of *response*; the rest is discarded."""
    buf = bytearray()
    async for chunk in response.aiter_bytes():
        buf.extend(chunk[: limit - len(buf)])
        if len(buf) >= limit:
            break
    return bytes(buf)


async def _fetch(url: str) -> FetchResult:
    async with httpx.AsyncClient(
        headers=_default_headers(),
        timeout=settings.fetch_timeout,
        follow_redirects=True,
        max_redirects=settings.max_redirects,
    ) as client:
        async with client.stream("GET", url) as response:
            if response.status_code != httpx.codes.OK:
                raise FetchError(f"bad status {response.status_code}")

            content_type = response.headers.get("content-type", "")
            if not _is_html(content_type):
                raise FetchError(f"unsupported content-type: {content_type or '(none)'}")

            body = await _read_bounded(response, settings.max_content_bytes)
            return FetchResult(
                body=body,
                content_type=content_type,
                final_url=str(response.url),
            )


async def fetch_page(url: str) -> FetchResult:
    """Fetch *url* and return a :class:`FetchResult`.

    Raises:
        FetchError: On timeout, too many redirects, a non-200 status, a
            non-HTML content type, or any other transport failure.
    """
    try:
        result = await asyncio.wait_for(_fetch(url), timeout=settings.fetch_timeout)
    except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
        raise FetchError("timeout") from exc
    except httpx.TooManyRedirects as exc:
        raise FetchError("too many redirects") from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise FetchError(f"request failed: {exc}") from exc

    logger.debug(
        "Fetched %s (%d bytes, %s)", result.final_url, len(result.body), result.content_type
    )
    return result
