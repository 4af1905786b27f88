"""Host validation: turns a caller-supplied string into a fetchable URL.

The private-host check is purely syntactic.  It looks at the literal
hostname only and never resolves DNS, so a public name that resolves to a
private address is *not* rejected here.  Alternative IPv4 spellings
(``0177.0.0.1``, ``2130706433``) and IPv6 forms other than ``::1`` are not
caught either.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import urlsplit

from urlinfo.scraper.errors import InvalidURL, PrivateHost

logger = logging.getLogger(__name__)

_BLOCKED_HOSTS = frozenset({"localhost", "127.0.0.1", "0.0.0.0", "::1"})

_PRIVATE_HOST_PATTERNS = (
    re.compile(r"^10\."),
    re.compile(r"^172\.(1[6-9]|2[0-9]|3[0-1])\."),
    re.compile(r"^192\.168\."),
    re.compile(r"^169\.254\."),
)

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def is_private_host(host: str) -> bool:
    """Return ``True`` if *host* is loopback, link-local or RFC-1918."""
    host = host.lower()
    if host in _BLOCKED_HOSTS:
        return True
    return any(pattern.match(host) for pattern in _PRIVATE_HOST_PATTERNS)


def validate_url(raw: str) -> str:
    """Validate and normalise *raw* into an absolute http(s) URL.

    A missing scheme defaults to ``https://``.

    Raises:
        InvalidURL: If *raw* is empty, unparseable or has no host.
        PrivateHost: If the host is loopback or on a private network.
    """
    raw = (raw or "").strip()
    if not raw:
        raise InvalidURL("URL cannot be empty")

    if not _SCHEME_RE.match(raw):
        raw = "https://" + raw

    try:
        parts = urlsplit(raw)
        parts.port  # noqa: B018 - raises ValueError on a malformed port
    except ValueError as exc:
        raise InvalidURL(f"failed to parse URL: {exc}") from exc

    host = parts.hostname
    if not host:
        raise InvalidURL("URL must have a valid host")

    if is_private_host(host):
        logger.info("Rejected private host %r", host)
        raise PrivateHost("private/local URLs are not allowed")

    return parts.geturl()
