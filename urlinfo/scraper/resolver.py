"""Link resolution for extracted image and favicon references."""

from __future__ import annotations

from dataclasses import replace
from urllib.parse import urljoin, urlsplit

from urlinfo.scraper.models import PageMetadata


def resolve_url(ref: str, base_url: str) -> str:
    """Return *ref* as an absolute URL, resolved against *base_url*.

    Absolute references are returned unchanged, protocol-relative ones
    (``//cdn.example.com/x.png``) take the scheme of *base_url*, and
    anything else goes through standard relative resolution.  If resolution
    fails the original *ref* is returned.
    """
    if not ref:
        return ref
    if ref.startswith(("http://", "https://")):
        return ref
    try:
        if ref.startswith("//"):
            return f"{urlsplit(base_url).scheme}:{ref}"
        return urljoin(base_url, ref)
    except ValueError:
        return ref


def default_favicon(base_url: str) -> str:
    """Return the conventional ``/favicon.ico`` location for *base_url*'s host."""
    parts = urlsplit(base_url)
    host = parts.netloc.rpartition("@")[2]
    return f"{parts.scheme}://{host}/favicon.ico"


def resolve_metadata(meta: PageMetadata, base_url: str) -> PageMetadata:
    """Make the image and favicon of *meta* absolute, defaulting the favicon."""
    preview_image = resolve_url(meta.preview_image, base_url) if meta.preview_image else None
    favicon = resolve_url(meta.favicon, base_url) if meta.favicon else None
    if not favicon and base_url:
        favicon = default_favicon(base_url)
    return replace(meta, preview_image=preview_image, favicon=favicon)
