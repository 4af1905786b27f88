"""Metadata extraction: turns an HTML body into :class:`PageMetadata`.

Two interchangeable strategies share one interface,
``extract(html, base_url) -> PageMetadata``:

  * :class:`StructuralExtractor` parses the page with BeautifulSoup and
    walks the element tree once.
  * :class:`PatternExtractor` scans the raw text with pre-compiled
    regular expressions: one pass for whole ``<meta>``/``<link>`` tags, then
    an attribute tokenizer inside each tag.  Both passes run in linear time
    on any input.  Parser-free, but blind to nesting, comments and scripts.

Both strategies only *collect* the first non-empty value seen for each
source (``og:image``, ``<title>`` …).  Field precedence is applied
afterwards from :data:`FIELD_SOURCES`, so the two cannot drift apart.
"""

from __future__ import annotations

import html as html_lib
import logging
import re
from abc import ABC, abstractmethod
from typing import Dict, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from urlinfo.config import settings
from urlinfo.scraper.errors import ParseError
from urlinfo.scraper.models import PageMetadata
from urlinfo.scraper.resolver import resolve_metadata

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Sources and precedence
# ---------------------------------------------------------------------------
OG_IMAGE = "og:image"
OG_TITLE = "og:title"
OG_DESCRIPTION = "og:description"
TWITTER_IMAGE = "twitter:image"
TWITTER_DESCRIPTION = "twitter:description"
META_DESCRIPTION = "description"
TITLE_TAG = "<title>"
ICON_LINK = "<link rel=icon>"

# Sources matched against <meta property=...> and <meta name=...>.
_PROPERTY_SOURCES = frozenset({OG_IMAGE, OG_TITLE, OG_DESCRIPTION})
_NAME_SOURCES = frozenset({TWITTER_IMAGE, TWITTER_DESCRIPTION, META_DESCRIPTION})

# Highest priority first.
FIELD_SOURCES: Dict[str, tuple[str, ...]] = {
    "preview_image": (OG_IMAGE, TWITTER_IMAGE),
    "title": (OG_TITLE, TITLE_TAG),
    "description": (OG_DESCRIPTION, TWITTER_DESCRIPTION, META_DESCRIPTION),
    "favicon": (ICON_LINK,),
}


def build_metadata(found: Dict[str, str]) -> PageMetadata:
    """Pick each field from the highest-priority source present in *found*."""
    values: Dict[str, Optional[str]] = {}
    for field_name, sources in FIELD_SOURCES.items():
        values[field_name] = next((found[s] for s in sources if found.get(s)), None)
    return PageMetadata(**values)


def _remember(found: Dict[str, str], source: str, value: Optional[str]) -> None:
    """Record *value* for *source* unless an earlier occurrence was kept."""
    value = (value or "").strip()
    if value and source not in found:
        found[source] = value


def _record_meta(found: Dict[str, str], prop: str, name: str, content: str) -> None:
    prop = prop.strip().lower()
    if prop in _PROPERTY_SOURCES:
        _remember(found, prop, content)
    name = name.strip().lower()
    if name in _NAME_SOURCES:
        _remember(found, name, content)


def _record_link(found: Dict[str, str], rel: str, href: str) -> None:
    # Substring match: "icon", "shortcut icon", "apple-touch-icon" ...
    if "icon" in rel.lower():
        _remember(found, ICON_LINK, href)


# ---------------------------------------------------------------------------
# Strategy interface
# ---------------------------------------------------------------------------

class Extractor(ABC):
    """Abstract base class for a metadata extraction strategy."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Configuration name of the strategy."""

    @abstractmethod
    def collect(self, html: bytes) -> Dict[str, str]:
        """Return the first non-empty value of every source found in *html*."""

    def extract(self, html: bytes, base_url: str) -> PageMetadata:
        """Extract metadata from *html* and resolve its links against *base_url*.

        Malformed markup yields partial or empty metadata, never an error.

        Raises:
            ParseError: Only if the underlying parser itself breaks down.
        """
        try:
            found = self.collect(html)
        except Exception as exc:
            raise ParseError(f"{self.name} extraction failed: {exc}") from exc

        logger.debug("[%s] sources found: %s", self.name, sorted(found))
        return resolve_metadata(build_metadata(found), base_url)


# ---------------------------------------------------------------------------
# Structural strategy (BeautifulSoup)
# ---------------------------------------------------------------------------

def _attr(tag: Tag, key: str) -> str:
    """Return attribute *key* of *tag* as a string (multi-valued attrs joined)."""
    value = tag.get(key)
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


class StructuralExtractor(Extractor):
    """Parse-tree strategy: a single depth-first walk over every element."""

    @property
    def name(self) -> str:
        return "structural"

    def collect(self, html: bytes) -> Dict[str, str]:
        # html.parser lower-cases tag and attribute names.
        soup = BeautifulSoup(html, "html.parser")
        found: Dict[str, str] = {}

        for node in soup.descendants:
            if not isinstance(node, Tag):
                continue
            if node.name == "meta":
                _record_meta(
                    found,
                    _attr(node, "property"),
                    _attr(node, "name"),
                    _attr(node, "content"),
                )
            elif node.name == "title":
                _remember(found, TITLE_TAG, node.get_text())
            elif node.name == "link":
                _record_link(found, _attr(node, "rel"), _attr(node, "href"))

        return found


# ---------------------------------------------------------------------------
# Pattern strategy (regular expressions)
# ---------------------------------------------------------------------------
# Two linear passes: whole <meta>/<link> tags first, then the attributes of
# each tag.  Tag bodies stop at the next "<" so no span is rescanned.

_TAG_RE = re.compile(r"<(meta|link)\b([^<>]*)>", re.IGNORECASE)
_TITLE_RE = re.compile(r"<title\b[^<>]*>([^<]*)</title>", re.IGNORECASE)
_ATTR_RE = re.compile(
    r"""([^\s"'<>/=]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'<>`=]+)))?"""
)


def _parse_attrs(text: str) -> Dict[str, str]:
    """Return the attributes in *text*, lower-cased names, first one wins."""
    attrs: Dict[str, str] = {}
    for match in _ATTR_RE.finditer(text):
        value = next((g for g in match.groups()[1:] if g is not None), "")
        attrs.setdefault(match.group(1).lower(), html_lib.unescape(value))
    return attrs


class PatternExtractor(Extractor):
    """Parser-free strategy scanning the decoded page text."""

    @property
    def name(self) -> str:
        return "pattern"

    def collect(self, html: bytes) -> Dict[str, str]:
        text = html.decode("utf-8", errors="replace")
        found: Dict[str, str] = {}

        for match in _TAG_RE.finditer(text):
            attrs = _parse_attrs(match.group(2))
            if match.group(1).lower() == "meta":
                _record_meta(
                    found,
                    attrs.get("property", ""),
                    attrs.get("name", ""),
                    attrs.get("content", ""),
                )
            else:
                _record_link(found, attrs.get("rel", ""), attrs.get("href", ""))

        for match in _TITLE_RE.finditer(text):
            _remember(found, TITLE_TAG, html_lib.unescape(match.group(1)))
            if TITLE_TAG in found:
                break

        return found


# ---------------------------------------------------------------------------
# Strategy selection
# ---------------------------------------------------------------------------

_EXTRACTORS = {
    "structural": StructuralExtractor,
    "pattern": PatternExtractor,
}


def get_extractor(name: Optional[str] = None) -> Extractor:
    """Return the extraction strategy called *name* (default: ``settings.extractor``).

    Raises:
        ValueError: If *name* is not a known strategy.
    """
    name = (name or settings.extractor).strip().lower()
    try:
        return _EXTRACTORS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown extractor {name!r}. Use: {' | '.join(_EXTRACTORS)}"
        ) from None
