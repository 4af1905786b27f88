"""End-to-end pipeline: fetch a validated URL and extract its metadata."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from urlinfo.scraper.errors import FetchError, ParseError
from urlinfo.scraper.extractor import Extractor, get_extractor
from urlinfo.scraper.fetcher import fetch_page
from urlinfo.scraper.models import PageMetadata

logger = logging.getLogger(__name__)


async def get_url_info(url: str, extractor: Optional[Extractor] = None) -> PageMetadata:
    """Return preview metadata for the already-validated *url*.

    Fetch and parse failures are logged and produce an empty
    :class:`PageMetadata`; callers treat "nothing found" and "fetch failed"
    the same way.  Parsing is CPU-bound, so it runs in the default thread
    pool and other requests keep being served meanwhile.
    """
    extractor = extractor or get_extractor()
    loop = asyncio.get_running_loop()
    try:
        page = await fetch_page(url)
        meta = await loop.run_in_executor(
            None, extractor.extract, page.body, page.final_url
        )
    except (FetchError, ParseError) as exc:
        logger.warning("Failed to fetch metadata for %s: %s", url, exc)
        return PageMetadata()

    logger.debug("Extracted metadata for %s: %s", url, meta)
    return meta
