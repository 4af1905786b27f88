"""Data models for the URL info pipeline."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Dict, Optional

# Wire names used by the JSON response.
_WIRE_NAMES = {
    "preview_image": "ogImage",
    "title": "title",
    "description": "description",
    "favicon": "favicon",
}


@dataclass(frozen=True)
class FetchResult:
    """The bounded HTTP response for a single page fetch."""

    body: bytes
    content_type: str
    final_url: str


@dataclass
class PageMetadata:
    """Preview metadata for one page.  ``None`` means "not found"."""

    preview_image: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    favicon: Optional[str] = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def to_dict(self) -> Dict[str, str]:
        """Return the found fields keyed by their wire names."""
        return {
            _WIRE_NAMES[f.name]: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name)
        }
