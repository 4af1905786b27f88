"""Centralised settings for the URL info service.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Outbound fetch
    # ------------------------------------------------------------------
    fetch_timeout: float = field(
        default_factory=lambda: float(os.environ.get("URLINFO_FETCH_TIMEOUT", "10.0"))
    )
    max_redirects: int = field(
        default_factory=lambda: int(os.environ.get("URLINFO_MAX_REDIRECTS", "5"))
    )
    # One ceiling for both extraction strategies.
    max_content_bytes: int = field(
        default_factory=lambda: int(
            os.environ.get("URLINFO_MAX_CONTENT_BYTES", str(5 * 1024 * 1024))
        )
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "URLINFO_USER_AGENT",
            "Mozilla/5.0 (compatible; UrlInfoBot/1.0; +https://github.com/urlinfo)",
        )
    )

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------
    extractor: str = field(
        default_factory=lambda: os.environ.get("URLINFO_EXTRACTOR", "structural")
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("URLINFO_LOG_LEVEL", "INFO")
    )

    def configure_logging(self) -> None:
        """Install the root log handler at :attr:`log_level`."""
        logging.basicConfig(level=self.log_level.upper(), format=_LOG_FORMAT)


# Module-level singleton, import this everywhere:
#   from urlinfo.config import settings
settings = Settings()
