"""Plain HTTP page fetcher."""

import logging

from ..core.config_manager import FetchConfig
from ..core.errors import UpstreamFetchError
from .base import PageFetcher
from .http_utils import safe_http_get

logger = logging.getLogger(__name__)


class HTTPPageFetcher(PageFetcher):
    """Fetches the server-sent HTML with a single GET request."""

    def __init__(self, config: FetchConfig | None = None):
        self.config = config or FetchConfig()

    def fetch(self, url: str) -> str:
        result = safe_http_get(
            url,
            timeout=self.config.timeout,
            user_agent=self.config.user_agent,
            verify=self.config.verify_tls,
        )
        if result.response is None:
            logger.info(f"Fetch failed ({result.error_type}): {result.error}")
            raise UpstreamFetchError(result.error or f"Failed to fetch {url}")

        # 4xx/5xx pages are analyzed like any other page
        if not result.success:
            logger.info(f"Analyzing error page: {result.error}")

        logger.debug(f"Fetched {url}: HTTP {result.response.status_code}")
        return result.response.text
