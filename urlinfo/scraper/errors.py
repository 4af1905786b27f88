"""Exception hierarchy for the URL info pipeline.

Only :class:`RequestError` and :class:`InvalidURL` (including
:class:`PrivateHost`) are ever reported to a caller.  :class:`FetchError`
and :class:`ParseError` describe the remote site's behaviour and are
absorbed into an empty result by :func:`urlinfo.scraper.service.get_url_info`.
"""

from __future__ import annotations


class UrlInfoError(Exception):
    """Base error for URL metadata extraction."""


class RequestError(UrlInfoError):
    """The request itself is malformed (missing parameter, wrong method)."""


class InvalidURL(UrlInfoError):
    """The supplied URL is empty, unparseable or has no host."""


class PrivateHost(InvalidURL):
    """The supplied URL targets a loopback or private-network host."""


class FetchError(UrlInfoError):
    """The page could not be retrieved or is not HTML."""


class ParseError(UrlInfoError):
    """The page body could not be turned into metadata."""
