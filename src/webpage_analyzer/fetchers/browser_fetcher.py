"""Headless Chrome page fetcher.

Renders pages in a real browser so that script-generated markup is
analyzed. One driver is shared by the whole process; page loads are
serialized because a WebDriver session is not thread-safe.
"""

import logging
import threading
from typing import Any

from ..constants import DEFAULT_CHROME_ARGS
from ..core.config_manager import FetchConfig
from ..core.errors import UpstreamFetchError
from .base import PageFetcher
from .http_utils import safe_http_get

logger = logging.getLogger(__name__)


class BrowserPageFetcher(PageFetcher):
    """
    Fetches rendered HTML through selenium-driven headless Chrome.

    The URL is first checked with a plain GET (certificate errors ignored)
    so unreachable pages fail fast without touching the browser. Any HTTP
    status counts as reachable; only transport failures stop the fetch.
    """

    def __init__(self, config: FetchConfig | None = None):
        self.config = config or FetchConfig()
        self._driver: Any = None
        self._lock = threading.Lock()

    def start(self) -> None:
        """
        Start the shared browser.

        Raises:
            ImportError: If selenium is not installed
        """
        if self._driver is not None:
            return

        try:
            from selenium import webdriver
        except ImportError:
            raise ImportError(
                "selenium is required for the browser fetcher. "
                "Install with: pip install 'webpage-analyzer[browser]'"
            )

        options = webdriver.ChromeOptions()
        for arg in DEFAULT_CHROME_ARGS:
            options.add_argument(arg)
        options.add_argument(f"--window-size={self.config.window_size}")

        self._driver = webdriver.Chrome(options=options)
        self._driver.set_page_load_timeout(self.config.timeout)
        logger.info("Started headless Chrome")

    def stop(self) -> None:
        if self._driver is None:
            return
        try:
            self._driver.quit()
            logger.info("Stopped headless Chrome")
        finally:
            self._driver = None

    def fetch(self, url: str) -> str:
        check = safe_http_get(
            url,
            timeout=self.config.timeout,
            user_agent=self.config.user_agent,
            verify=False,
        )
        if not check.success and check.error_type != "http_error":
            raise UpstreamFetchError(check.error or f"Failed to fetch {url}")

        if self._driver is None:
            raise UpstreamFetchError("Browser is not running")

        from selenium.common.exceptions import WebDriverException

        with self._lock:
            try:
                self._driver.get(url)
            except WebDriverException as e:
                raise UpstreamFetchError(f"Failed to Navigate: {e.msg or e}") from e
            try:
                return self._driver.page_source
            except WebDriverException as e:
                raise UpstreamFetchError(f"Failed to get html: {e.msg or e}") from e
