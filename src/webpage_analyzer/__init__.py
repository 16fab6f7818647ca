"""Concurrent web page analyzer with streamed results."""

from . import analyses  # noqa: F401  # Triggers analysis registration

__version__ = "0.1.0"
