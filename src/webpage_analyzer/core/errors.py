"""Exception hierarchy for the analyzer."""


class AnalyzerError(Exception):
    """Base class for all analyzer errors."""


class UpstreamFetchError(AnalyzerError):
    """Obtaining or rendering the page failed."""


class ParseError(AnalyzerError):
    """Raw HTML could not be turned into a queryable document."""


class DeliveryError(AnalyzerError):
    """A result message could not be delivered to the listener."""


class InvalidHrefError(ValueError):
    """An href is not a valid request URI."""
