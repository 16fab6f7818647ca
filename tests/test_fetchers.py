"""Tests for page fetchers."""

from unittest.mock import MagicMock, Mock, patch

import httpx
import pytest

from webpage_analyzer.core.config_manager import FetchConfig
from webpage_analyzer.core.errors import UpstreamFetchError
from webpage_analyzer.fetchers import (
    BrowserPageFetcher,
    HTTPPageFetcher,
    create_fetcher,
)
from webpage_analyzer.fetchers.http_utils import safe_http_get


def mock_client_get(mock_client, response=None, side_effect=None):
    """Wire a patched httpx.Client so that client.get() returns/raises."""
    client_instance = Mock()
    if side_effect is not None:
        client_instance.get.side_effect = side_effect
    else:
        client_instance.get.return_value = response
    mock_client.return_value.__enter__.return_value = client_instance
    mock_client.return_value.__exit__.return_value = False
    return client_instance


def ok_response(text="<html></html>"):
    response = Mock()
    response.status_code = 200
    response.text = text
    response.raise_for_status.return_value = None
    return response


# ============================================================================
# safe_http_get
# ============================================================================


class TestSafeHTTPGet:
    """Test standardized HTTP error handling."""

    @patch("webpage_analyzer.fetchers.http_utils.httpx.Client")
    def test_success(self, mock_client):
        mock_client_get(mock_client, ok_response("<p>hi</p>"))

        result = safe_http_get("https://example.com")

        assert result.success is True
        assert result.response.text == "<p>hi</p>"

    @patch("webpage_analyzer.fetchers.http_utils.httpx.Client")
    def test_timeout(self, mock_client):
        mock_client_get(mock_client, side_effect=httpx.ReadTimeout("slow"))

        result = safe_http_get("https://example.com", timeout=2.0)

        assert result.success is False
        assert result.error_type == "timeout"
        assert "2.0s" in result.error

    @patch("webpage_analyzer.fetchers.http_utils.httpx.Client")
    def test_http_status_error(self, mock_client):
        request = httpx.Request("GET", "https://example.com/missing")
        response = httpx.Response(404, request=request)
        mock_client_get(mock_client, response)

        result = safe_http_get("https://example.com/missing")

        assert result.success is False
        assert result.error_type == "http_error"
        assert result.error == "HTTP 404: https://example.com/missing"

    @patch("webpage_analyzer.fetchers.http_utils.httpx.Client")
    def test_ssl_error(self, mock_client):
        mock_client_get(
            mock_client, side_effect=httpx.ConnectError("[SSL: CERTIFICATE_VERIFY_FAILED]")
        )

        result = safe_http_get("https://self-signed.example.com")

        assert result.error_type == "ssl_error"

    @patch("webpage_analyzer.fetchers.http_utils.httpx.Client")
    def test_connection_error(self, mock_client):
        mock_client_get(mock_client, side_effect=httpx.ConnectError("Name or service not known"))

        result = safe_http_get("https://nonexistent.invalid")

        assert result.error_type == "connection_error"

    @patch("webpage_analyzer.fetchers.http_utils.httpx.Client")
    def test_verify_and_user_agent_passed(self, mock_client):
        client_instance = mock_client_get(mock_client, ok_response())

        safe_http_get("https://example.com", verify=False, user_agent="TestBot/1.0")

        assert mock_client.call_args.kwargs["verify"] is False
        headers = client_instance.get.call_args.kwargs["headers"]
        assert headers["User-Agent"] == "TestBot/1.0"


# ============================================================================
# HTTPPageFetcher
# ============================================================================


class TestHTTPPageFetcher:
    """Test the plain HTTP fetcher."""

    @patch("webpage_analyzer.fetchers.http_utils.httpx.Client")
    def test_fetch_returns_body(self, mock_client):
        mock_client_get(mock_client, ok_response("<title>x</title>"))

        assert HTTPPageFetcher().fetch("https://example.com") == "<title>x</title>"

    @patch("webpage_analyzer.fetchers.http_utils.httpx.Client")
    def test_fetch_failure_raises(self, mock_client):
        mock_client_get(mock_client, side_effect=httpx.ConnectError("refused"))

        with pytest.raises(UpstreamFetchError, match="Connection error"):
            HTTPPageFetcher().fetch("https://example.com")

    @patch("webpage_analyzer.fetchers.http_utils.httpx.Client")
    def test_error_status_page_is_returned(self, mock_client):
        """A 404 page is still fetched and handed to the analyses."""
        request = httpx.Request("GET", "https://example.com/missing")
        body = "<!DOCTYPE html>\n<title>Not found</title><h1>x</h1>"
        mock_client_get(mock_client, httpx.Response(404, request=request, text=body))

        assert HTTPPageFetcher().fetch("https://example.com/missing") == body

    @patch("webpage_analyzer.fetchers.http_utils.httpx.Client")
    def test_verify_tls_from_config(self, mock_client):
        mock_client_get(mock_client, ok_response())

        HTTPPageFetcher(FetchConfig(verify_tls=False)).fetch("https://example.com")

        assert mock_client.call_args.kwargs["verify"] is False


# ============================================================================
# BrowserPageFetcher
# ============================================================================


class TestBrowserPageFetcher:
    """Test the headless browser fetcher without a real browser."""

    @patch("webpage_analyzer.fetchers.browser_fetcher.safe_http_get")
    def test_unreachable_page_fails_before_browser(self, mock_get):
        mock_get.return_value = Mock(success=False, error="Timeout accessing https://x (10.0s)")
        fetcher = BrowserPageFetcher()
        fetcher._driver = MagicMock()

        with pytest.raises(UpstreamFetchError, match="Timeout"):
            fetcher.fetch("https://x")

        fetcher._driver.get.assert_not_called()
        assert mock_get.call_args.kwargs["verify"] is False

    @patch("webpage_analyzer.fetchers.browser_fetcher.safe_http_get")
    def test_fetch_without_running_browser(self, mock_get):
        mock_get.return_value = Mock(success=True)

        with pytest.raises(UpstreamFetchError, match="not running"):
            BrowserPageFetcher().fetch("https://example.com")

    @patch("webpage_analyzer.fetchers.browser_fetcher.safe_http_get")
    def test_fetch_returns_rendered_source(self, mock_get):
        pytest.importorskip("selenium")
        mock_get.return_value = Mock(success=True)
        fetcher = BrowserPageFetcher()
        fetcher._driver = MagicMock()
        fetcher._driver.page_source = "<html><h1>rendered</h1></html>"

        assert fetcher.fetch("https://example.com") == "<html><h1>rendered</h1></html>"
        fetcher._driver.get.assert_called_once_with("https://example.com")

    @patch("webpage_analyzer.fetchers.browser_fetcher.safe_http_get")
    def test_error_status_counts_as_reachable(self, mock_get):
        pytest.importorskip("selenium")
        mock_get.return_value = Mock(
            success=False, error_type="http_error", error="HTTP 500: https://example.com"
        )
        fetcher = BrowserPageFetcher()
        fetcher._driver = MagicMock()
        fetcher._driver.page_source = "<html><h1>server error</h1></html>"

        assert fetcher.fetch("https://example.com") == "<html><h1>server error</h1></html>"
        fetcher._driver.get.assert_called_once_with("https://example.com")

    def test_stop_quits_driver(self):
        fetcher = BrowserPageFetcher()
        driver = MagicMock()
        fetcher._driver = driver

        fetcher.stop()

        driver.quit.assert_called_once()
        assert fetcher._driver is None

    def test_stop_without_start_is_noop(self):
        BrowserPageFetcher().stop()


# ============================================================================
# create_fetcher
# ============================================================================


class TestCreateFetcher:
    """Test fetcher selection."""

    def test_default_is_http(self):
        assert isinstance(create_fetcher(), HTTPPageFetcher)

    def test_browser(self):
        fetcher = create_fetcher(FetchConfig(fetcher="browser", window_size="800,600"))
        assert isinstance(fetcher, BrowserPageFetcher)
        assert fetcher.config.window_size == "800,600"
