"""Page fetchers: plain HTTP and headless browser."""

from ..core.config_manager import FetchConfig
from .base import PageFetcher
from .browser_fetcher import BrowserPageFetcher
from .http_fetcher import HTTPPageFetcher


def create_fetcher(config: FetchConfig | None = None) -> PageFetcher:
    """
    Create the fetcher selected by configuration.

    Args:
        config: Fetch configuration

    Returns:
        Unstarted page fetcher
    """
    config = config or FetchConfig()
    if config.fetcher == "browser":
        return BrowserPageFetcher(config)
    return HTTPPageFetcher(config)


__all__ = ["BrowserPageFetcher", "HTTPPageFetcher", "PageFetcher", "create_fetcher"]
