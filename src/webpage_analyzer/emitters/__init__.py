"""Emitters for analysis results.

This package provides emitter implementations for different outputs. All
emitters implement the ResultEmitter protocol and are completely decoupled
from analysis implementations.
"""

from .base import ResultEmitter, send_safely
from .console_emitter import ConsoleEmitter
from .jsonlines_emitter import JSONLinesEmitter

__all__ = ["ConsoleEmitter", "JSONLinesEmitter", "ResultEmitter", "send_safely"]
