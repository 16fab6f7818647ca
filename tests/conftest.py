"""Shared fixtures for analyzer tests."""

import threading

import pytest

from webpage_analyzer.analyses.protocol import AnalyzeStatus, ResultMessage
from webpage_analyzer.core.document import Document
from webpage_analyzer.core.errors import DeliveryError, UpstreamFetchError
from webpage_analyzer.emitters.base import ResultEmitter
from webpage_analyzer.fetchers.base import PageFetcher

SAMPLE_PAGE = """<!DOCTYPE html>
<html>
<head><title>Example &amp; Co</title></head>
<body>
  <h1>Main</h1>
  <h1>Second</h1>
  <h2>Sub</h2>
  <a href="/about">About</a>
  <a href="/about">About again</a>
  <a href="http://x.com/a">Elsewhere</a>
  <a href="not a url ::: bad">Broken</a>
  <form action="/user/login" method="post"><input name="user"></form>
</body>
</html>"""


class CollectingEmitter(ResultEmitter):
    """Records delivered messages; optionally refuses some of them."""

    def __init__(self, reject=None):
        super().__init__()
        self.messages: list[ResultMessage] = []
        self.reject = reject
        self._lock = threading.Lock()

    def deliver(self, message: ResultMessage) -> None:
        if self.reject is not None and self.reject(message):
            raise DeliveryError("listener went away")
        with self._lock:
            self.messages.append(message)

    @property
    def texts(self) -> list[str]:
        return [m.text for m in self.messages]

    def by_status(self, status: AnalyzeStatus) -> list[ResultMessage]:
        return [m for m in self.messages if m.status == status]


class FakeFetcher(PageFetcher):
    """Serves canned HTML without touching the network."""

    def __init__(self, pages: dict[str, str] | None = None, error: str | None = None):
        self.pages = pages or {}
        self.error = error
        self.started = False
        self.stopped = False
        self.fetched: list[str] = []

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def fetch(self, url: str) -> str:
        self.fetched.append(url)
        if self.error:
            raise UpstreamFetchError(self.error)
        return self.pages.get(url, SAMPLE_PAGE)


@pytest.fixture
def emitter():
    return CollectingEmitter()


@pytest.fixture
def sample_document():
    return Document.from_html(SAMPLE_PAGE)


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()
