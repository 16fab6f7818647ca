"""Base page fetcher protocol."""

from abc import ABC, abstractmethod


class PageFetcher(ABC):
    """
    Obtains the HTML of a page.

    Fetchers with expensive resources (a browser) acquire them in start()
    and release them in stop(); the owner of the fetcher calls both.
    """

    def start(self) -> None:
        """Acquire long-lived resources."""

    def stop(self) -> None:
        """Release long-lived resources."""

    @abstractmethod
    def fetch(self, url: str) -> str:
        """
        Fetch the page HTML.

        Args:
            url: Page URL

        Returns:
            Raw HTML

        Raises:
            UpstreamFetchError: If the page cannot be obtained
        """
        ...
