"""Tests for the bounded fetcher and the end-to-end ``get_url_info`` pipeline.

Mocking strategy:
- ``respx`` patches ``httpx`` at the transport layer so no real network calls
  are made.  Redirects are followed by the real ``httpx`` client against the
  mocked routes.
- The overall-deadline test replaces ``_fetch`` with a coroutine that sleeps
  past a tiny ``settings.fetch_timeout``.
- Coroutines are driven with ``asyncio.run``.
"""

from __future__ import annotations

import asyncio
import logging
import threading

import httpx
import pytest
import respx

from urlinfo.scraper.errors import FetchError
from urlinfo.scraper.extractor import PatternExtractor, StructuralExtractor
from urlinfo.scraper.fetcher import _is_html, fetch_page
from urlinfo.scraper.models import FetchResult, PageMetadata
from urlinfo.scraper.service import get_url_info


# ---------------------------------------------------------------------------
# Fixtures / constants
# ---------------------------------------------------------------------------

_SIMPLE_HTML = """\
<!DOCTYPE html>
<html>
<head>
  <title>Test Page</title>
  <meta property="og:description" content="A page for tests.">
  <meta property="og:image" content="/img/cover.png">
  <meta name="twitter:image" content="https://example.com/twitter.png">
</head>
<body><p>Hello</p></body>
</html>
"""


def _redirect_chain(hops: int, host: str = "https://example.com", router=respx) -> str:
    """Mock ``hops`` redirects ending in an HTML page; return the start URL."""
    for i in range(hops):
        router.get(f"{host}/r{i}").mock(
            return_value=httpx.Response(302, headers={"Location": f"{host}/r{i + 1}"})
        )
    router.get(f"{host}/r{hops}").mock(return_value=httpx.Response(200, html=_SIMPLE_HTML))
    return f"{host}/r0"


# ---------------------------------------------------------------------------
# _is_html unit tests
# ---------------------------------------------------------------------------

class TestIsHtml:
    @pytest.mark.parametrize(
        "content_type",
        ["text/html", "text/html; charset=utf-8", "TEXT/HTML", "application/xhtml+xml"],
    )
    def test_html_types(self, content_type: str) -> None:
        assert _is_html(content_type) is True

    @pytest.mark.parametrize(
        "content_type", ["", "application/json", "image/png", "application/pdf", "text/plain"]
    )
    def test_other_types(self, content_type: str) -> None:
        assert _is_html(content_type) is False


# ---------------------------------------------------------------------------
# fetch_page tests
# ---------------------------------------------------------------------------

class TestFetchPage:
    def test_successful_fetch_returns_fetch_result(self) -> None:
        with respx.mock:
            respx.get("https://example.com/article").mock(
                return_value=httpx.Response(200, html=_SIMPLE_HTML)
            )
            result = asyncio.run(fetch_page("https://example.com/article"))

        assert isinstance(result, FetchResult)
        assert result.final_url == "https://example.com/article"
        assert "text/html" in result.content_type
        assert b"<title>Test Page</title>" in result.body

    def test_sends_identifying_headers(self) -> None:
        with respx.mock:
            route = respx.get("https://example.com/").mock(
                return_value=httpx.Response(200, html=_SIMPLE_HTML)
            )
            asyncio.run(fetch_page("https://example.com/"))

        request = route.calls.last.request
        assert "UrlInfoBot" in request.headers["User-Agent"]
        assert request.headers["Accept"].startswith("text/html")

    def test_bad_status_raises(self) -> None:
        with respx.mock:
            respx.get("https://example.com/missing").mock(
                return_value=httpx.Response(404, text="Not Found")
            )
            with pytest.raises(FetchError, match="bad status 404"):
                asyncio.run(fetch_page("https://example.com/missing"))

    def test_non_html_content_type_raises(self) -> None:
        with respx.mock:
            respx.get("https://example.com/api").mock(
                return_value=httpx.Response(200, json={"hello": "world"})
            )
            with pytest.raises(FetchError, match="unsupported content-type"):
                asyncio.run(fetch_page("https://example.com/api"))

    def test_xhtml_accepted(self) -> None:
        with respx.mock:
            respx.get("https://example.com/x").mock(
                return_value=httpx.Response(
                    200,
                    headers={"Content-Type": "application/xhtml+xml"},
                    content=b"<html><head><title>X</title></head></html>",
                )
            )
            result = asyncio.run(fetch_page("https://example.com/x"))

        assert result.body.startswith(b"<html>")

    def test_body_is_capped(self, monkeypatch) -> None:
        monkeypatch.setattr("urlinfo.config.settings.max_content_bytes", 16)
        with respx.mock:
            respx.get("https://example.com/big").mock(
                return_value=httpx.Response(200, html="<html>" + "x" * 1000)
            )
            result = asyncio.run(fetch_page("https://example.com/big"))

        assert len(result.body) == 16
        assert result.body == b"<html>xxxxxxxxxx"

    def test_follows_five_redirects(self) -> None:
        with respx.mock:
            start = _redirect_chain(5)
            result = asyncio.run(fetch_page(start))

        assert result.final_url == "https://example.com/r5"

    def test_sixth_redirect_fails(self) -> None:
        with respx.mock(assert_all_called=False) as respx_mock:
            start = _redirect_chain(6, router=respx_mock)
            with pytest.raises(FetchError, match="too many redirects"):
                asyncio.run(fetch_page(start))

    def test_transport_timeout_maps_to_timeout(self) -> None:
        with respx.mock:
            respx.get("https://slow.example.com/").mock(side_effect=httpx.ConnectTimeout)
            with pytest.raises(FetchError, match="timeout"):
                asyncio.run(fetch_page("https://slow.example.com/"))

    def test_overall_deadline(self, monkeypatch) -> None:
        """The deadline covers the whole fetch, not just individual reads."""

        async def _never_finishes(url: str) -> FetchResult:
            await asyncio.sleep(5)
            raise AssertionError("deadline not enforced")

        monkeypatch.setattr("urlinfo.config.settings.fetch_timeout", 0.05)
        monkeypatch.setattr("urlinfo.scraper.fetcher._fetch", _never_finishes)
        with pytest.raises(FetchError, match="timeout"):
            asyncio.run(fetch_page("https://example.com/"))

    def test_connection_error_raises(self) -> None:
        with respx.mock:
            respx.get("https://down.example.com/").mock(side_effect=httpx.ConnectError)
            with pytest.raises(FetchError, match="request failed"):
                asyncio.run(fetch_page("https://down.example.com/"))


# ---------------------------------------------------------------------------
# get_url_info tests
# ---------------------------------------------------------------------------

class TestGetUrlInfo:
    @pytest.mark.parametrize("extractor", [StructuralExtractor(), PatternExtractor()])
    def test_returns_resolved_metadata(self, extractor) -> None:
        with respx.mock:
            respx.get("https://example.com/post").mock(
                return_value=httpx.Response(200, html=_SIMPLE_HTML)
            )
            meta = asyncio.run(get_url_info("https://example.com/post", extractor))

        assert meta.title == "Test Page"
        assert meta.description == "A page for tests."
        assert meta.preview_image == "https://example.com/img/cover.png"
        assert meta.favicon == "https://example.com/favicon.ico"

    def test_resolves_against_final_url(self) -> None:
        with respx.mock:
            respx.get("https://old.example.com/").mock(
                return_value=httpx.Response(
                    301, headers={"Location": "https://new.example.com/blog/"}
                )
            )
            respx.get("https://new.example.com/blog/").mock(
                return_value=httpx.Response(
                    200, html='<meta property="og:image" content="hero.jpg">'
                )
            )
            meta = asyncio.run(get_url_info("https://old.example.com/"))

        assert meta.preview_image == "https://new.example.com/blog/hero.jpg"
        assert meta.favicon == "https://new.example.com/favicon.ico"

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(500, text="oops"),
            httpx.Response(200, content=b"\x89PNG", headers={"Content-Type": "image/png"}),
        ],
    )
    def test_fetch_failure_degrades_to_empty(self, response, caplog) -> None:
        with respx.mock:
            respx.get("https://example.com/broken").mock(return_value=response)
            with caplog.at_level(logging.WARNING, logger="urlinfo.scraper.service"):
                meta = asyncio.run(get_url_info("https://example.com/broken"))

        assert meta == PageMetadata()
        assert "Failed to fetch metadata for https://example.com/broken" in caplog.text

    def test_too_many_redirects_degrades_to_empty(self, caplog) -> None:
        with respx.mock(assert_all_called=False) as respx_mock:
            start = _redirect_chain(6, router=respx_mock)
            with caplog.at_level(logging.WARNING, logger="urlinfo.scraper.service"):
                meta = asyncio.run(get_url_info(start))

        assert meta.is_empty()
        assert "too many redirects" in caplog.text

    def test_parse_failure_degrades_to_empty(self, monkeypatch) -> None:
        def _crash(self, html):
            raise RuntimeError("parser exploded")

        monkeypatch.setattr(StructuralExtractor, "collect", _crash)
        with respx.mock:
            respx.get("https://example.com/").mock(
                return_value=httpx.Response(200, html=_SIMPLE_HTML)
            )
            meta = asyncio.run(get_url_info("https://example.com/", StructuralExtractor()))

        assert meta.is_empty()

    def test_extraction_runs_off_the_event_loop(self, monkeypatch) -> None:
        threads = {}
        original = StructuralExtractor.collect

        def _spy(self, html):
            threads["collect"] = threading.get_ident()
            return original(self, html)

        async def _run():
            threads["loop"] = threading.get_ident()
            return await get_url_info("https://example.com/", StructuralExtractor())

        monkeypatch.setattr(StructuralExtractor, "collect", _spy)
        with respx.mock:
            respx.get("https://example.com/").mock(
                return_value=httpx.Response(200, html=_SIMPLE_HTML)
            )
            meta = asyncio.run(_run())

        assert meta.title == "Test Page"
        assert threads["collect"] != threads["loop"]
