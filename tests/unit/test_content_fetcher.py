"""
Unit tests for the external link content fetcher.

Tests failure handling WITHOUT touching the network.
"""

from itertools import chain, repeat
from unittest.mock import Mock, patch

import pytest
import requests
from urllib3.exceptions import ProtocolError

from psg.content.fetcher import ContentFetcher


def _response(*chunks, content_type="text/html; charset=utf-8", status_error=None):
    response = Mock()
    response.headers = {"Content-Type": content_type}
    response.encoding = "utf-8"
    response.raise_for_status = Mock(side_effect=status_error)
    response.raw.read1 = Mock(side_effect=[*chunks, b""])
    return response


class TestContentFetcherInit:
    def test_custom_parameters(self):
        fetcher = ContentFetcher(timeout=3, retries=0, max_bytes=100)
        assert fetcher.timeout == 3
        assert fetcher.max_bytes == 100
        assert "psg-engine" in fetcher.session.headers["User-Agent"]
        fetcher.close()

    def test_injected_session_is_used(self):
        session = Mock()
        fetcher = ContentFetcher(timeout=1, session=session)
        assert fetcher.session is session

    def test_body_cap_from_settings(self, settings):
        with patch("psg.content.fetcher.get_settings", return_value=settings):
            fetcher = ContentFetcher(session=Mock())
        assert fetcher.max_bytes == settings.content_fetch_max_bytes


class TestFetch:
    """Tests for fetch()."""

    def test_returns_text(self):
        session = Mock()
        response = _response(b"<img ", b"src='a'>")
        session.get.return_value = response
        fetcher = ContentFetcher(timeout=2, session=session)

        assert fetcher.fetch("https://example.org/page") == "<img src='a'>"
        session.get.assert_called_once_with("https://example.org/page", timeout=2, stream=True)
        response.close.assert_called_once()

    def test_missing_encoding_decodes_as_utf8(self):
        session = Mock()
        response = _response("<p>café</p>".encode())
        response.encoding = None
        session.get.return_value = response
        fetcher = ContentFetcher(timeout=2, session=session)

        assert fetcher.fetch("https://example.org/page") == "<p>café</p>"

    def test_connection_error_returns_none(self):
        session = Mock()
        session.get.side_effect = requests.ConnectionError("unreachable")
        fetcher = ContentFetcher(timeout=1, session=session)

        assert fetcher.fetch("http://unreachable.invalid/") is None

    def test_timeout_returns_none(self):
        session = Mock()
        session.get.side_effect = requests.Timeout("slow")
        fetcher = ContentFetcher(timeout=1, session=session)

        assert fetcher.fetch("http://slow.example.org/") is None

    def test_http_error_returns_none(self):
        session = Mock()
        response = _response(status_error=requests.HTTPError("404"))
        session.get.return_value = response
        fetcher = ContentFetcher(timeout=1, session=session)

        assert fetcher.fetch("https://example.org/missing") is None
        response.close.assert_called_once()

    def test_binary_content_returns_none(self):
        session = Mock()
        response = _response(b"%PDF", content_type="application/pdf")
        session.get.return_value = response
        fetcher = ContentFetcher(timeout=1, session=session)

        assert fetcher.fetch("https://example.org/file.pdf") is None
        response.raw.read1.assert_not_called()

    @pytest.mark.parametrize("url", [None, "", "ftp://example.org/x", "mailto:someone@example.org"])
    def test_non_http_urls_skipped(self, url):
        session = Mock()
        fetcher = ContentFetcher(timeout=1, session=session)

        assert fetcher.fetch(url) is None
        session.get.assert_not_called()


class TestFetchLimits:
    """Tests for the body size cap and the whole-download deadline."""

    def test_oversized_body_returns_none(self):
        session = Mock()
        response = _response(b"x" * 60, b"x" * 60, b"x" * 60)
        session.get.return_value = response
        fetcher = ContentFetcher(timeout=5, max_bytes=100, session=session)

        assert fetcher.fetch("https://example.org/huge") is None
        # stops at the chunk that crosses the cap
        assert response.raw.read1.call_count == 2
        response.close.assert_called_once()

    def test_body_at_cap_is_kept(self):
        session = Mock()
        session.get.return_value = _response(b"x" * 50, b"y" * 50)
        fetcher = ContentFetcher(timeout=5, max_bytes=100, session=session)

        assert fetcher.fetch("https://example.org/exact") == "x" * 50 + "y" * 50

    def test_slow_trickle_past_deadline_returns_none(self):
        session = Mock()
        response = _response(b"<p>", b"slow", b"</p>")
        session.get.return_value = response
        fetcher = ContentFetcher(timeout=5, session=session)

        # start, first chunk in time, second chunk after the deadline
        with patch("psg.content.fetcher.time.monotonic", side_effect=chain([100.0, 101.0], repeat(106.0))):
            assert fetcher.fetch("https://example.org/trickle") is None

        assert response.raw.read1.call_count == 2
        response.close.assert_called_once()

    def test_read_error_returns_none(self):
        session = Mock()
        response = Mock()
        response.headers = {"Content-Type": "text/html"}
        response.raw.read1 = Mock(side_effect=ProtocolError("connection reset"))
        session.get.return_value = response
        fetcher = ContentFetcher(timeout=1, session=session)

        assert fetcher.fetch("https://example.org/reset") is None
        response.close.assert_called_once()
