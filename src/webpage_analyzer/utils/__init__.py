"""Utility functions and helpers."""

from .escaping import escape_html
from .logger import setup_logger

__all__ = ["escape_html", "setup_logger"]
