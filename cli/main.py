"""URL Info CLI: preview metadata for a URL from the terminal.

Usage:
    python cli/main.py --help

Commands:
    preview   → validate, fetch and extract metadata for one URL
    config    → print the effective settings
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from urlinfo.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import json
from dataclasses import asdict
from typing import Optional

import typer

from urlinfo.config import settings
from urlinfo.scraper import InvalidURL, get_extractor, get_url_info, validate_url

app = typer.Typer(
    name="urlinfo",
    help="URL preview metadata CLI.",
    no_args_is_help=True,
)


@app.command("preview")
def preview(
    url: str = typer.Argument(..., help="URL to inspect (scheme optional)."),
    strategy: Optional[str] = typer.Option(
        None, "--strategy", help="Extractor: structural | pattern (default from settings)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON payload."),
) -> None:
    """Fetch a URL and print its title, description, preview image and favicon."""
    settings.configure_logging()

    try:
        extractor = get_extractor(strategy)
    except ValueError as exc:
        typer.echo(f"[preview] {exc}")
        raise typer.Exit(1)

    try:
        normalized = validate_url(url)
    except InvalidURL as exc:
        typer.echo(f"[preview] Invalid URL: {exc}")
        raise typer.Exit(1)

    if not as_json:
        typer.echo(f"[preview] Fetching {normalized!r} ({extractor.name}) …")
    meta = asyncio.run(get_url_info(normalized, extractor))

    if as_json:
        typer.echo(json.dumps(meta.to_dict(), indent=2))
        return

    if meta.is_empty():
        typer.echo("[preview] No metadata found.")
        return
    typer.echo(f"[preview] Title       : {meta.title or '(none)'}")
    typer.echo(f"[preview] Description : {meta.description or '(none)'}")
    typer.echo(f"[preview] Image       : {meta.preview_image or '(none)'}")
    typer.echo(f"[preview] Favicon     : {meta.favicon or '(none)'}")


@app.command("config")
def show_config() -> None:
    """Print the effective settings (environment and .env applied)."""
    for key, value in asdict(settings).items():
        typer.echo(f"  {key:<18} {value}")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
