"""Scraper package: URL validation, bounded fetch and metadata extraction."""

from urlinfo.scraper.errors import (
    FetchError,
    InvalidURL,
    ParseError,
    PrivateHost,
    RequestError,
    UrlInfoError,
)
from urlinfo.scraper.extractor import (
    Extractor,
    PatternExtractor,
    StructuralExtractor,
    get_extractor,
)
from urlinfo.scraper.fetcher import fetch_page
from urlinfo.scraper.models import FetchResult, PageMetadata
from urlinfo.scraper.resolver import default_favicon, resolve_url
from urlinfo.scraper.service import get_url_info
from urlinfo.scraper.validator import is_private_host, validate_url

__all__ = [
    "validate_url",
    "is_private_host",
    "fetch_page",
    "Extractor",
    "StructuralExtractor",
    "PatternExtractor",
    "get_extractor",
    "resolve_url",
    "default_favicon",
    "get_url_info",
    "FetchResult",
    "PageMetadata",
    "UrlInfoError",
    "RequestError",
    "InvalidURL",
    "PrivateHost",
    "FetchError",
    "ParseError",
]
