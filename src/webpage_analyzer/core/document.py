"""Read-only query facade over a parsed HTML document."""

import logging

from bs4 import BeautifulSoup
from bs4.element import Tag

from .errors import ParseError

logger = logging.getLogger(__name__)


class Element:
    """A single matched element."""

    def __init__(self, tag: Tag):
        self._tag = tag

    @property
    def name(self) -> str:
        return self._tag.name

    def text(self) -> str:
        """Return the concatenated text content of the element."""
        return self._tag.get_text()

    def attr(self, name: str) -> tuple[str, bool]:
        """
        Read an attribute.

        Args:
            name: Attribute name

        Returns:
            Tuple of (value, present). Missing attributes yield ("", False).
        """
        value = self._tag.get(name)
        if value is None:
            return "", False
        # Multi-valued attributes (class, rel) come back as lists
        if isinstance(value, list):
            return " ".join(value), True
        return value, True


class Document:
    """
    Parsed HTML document shared by all analyses of a run.

    Nothing in the analyzer mutates a Document after construction, so it is
    safe to query from several threads at once.
    """

    def __init__(self, soup: BeautifulSoup, raw_html: str):
        self._soup = soup
        self._raw_html = raw_html

    @classmethod
    def from_html(cls, raw_html: str, parser: str = "html.parser") -> "Document":
        """
        Parse raw HTML into a Document.

        Args:
            raw_html: HTML source
            parser: BeautifulSoup tree builder name

        Returns:
            Parsed document

        Raises:
            ParseError: If the markup cannot be parsed
        """
        if raw_html is None:
            raise ParseError("Failed to get document: no HTML content")

        try:
            soup = BeautifulSoup(raw_html, parser)
        except Exception as e:
            raise ParseError(f"Failed to get document: {e}") from e

        logger.debug(f"Parsed document ({len(raw_html)} chars) with {parser}")
        return cls(soup, raw_html)

    @property
    def raw_html(self) -> str:
        return self._raw_html

    def first_line(self) -> str:
        """Return the first line of the raw source."""
        return self._raw_html.split("\n")[0]

    def find(self, selector: str) -> list[Element]:
        """
        Select elements with a CSS selector.

        Args:
            selector: CSS selector (e.g. "title", "a[href]")

        Returns:
            Matching elements in document order
        """
        return [Element(tag) for tag in self._soup.select(selector)]
