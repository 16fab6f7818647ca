"""Doctype analysis - extracts the <!DOCTYPE ...> declaration from the source."""

import re

from ..constants import DOCTYPE_PATTERN
from ..core.document import Document
from ..core.registry import registry
from ..utils.escaping import escape_html
from .protocol import AnalysisConfig, Emit, ResultMessage, RunState

_DOCTYPE_RE = re.compile(DOCTYPE_PATTERN, re.IGNORECASE)


def find_doctype(first_line: str) -> str:
    """
    Find the doctype declaration in a line of source.

    Args:
        first_line: First line of the raw HTML

    Returns:
        The matched declaration, or "" if there is none
    """
    match = _DOCTYPE_RE.search(first_line)
    return match.group(0) if match else ""


@registry.register
class DoctypeAnalysis:
    """
    Reports the HTML version declared on the first line of the raw source.

    Only the first line is scanned, matching how browsers expect the
    declaration. The match is HTML-escaped since clients may render the
    message as markup.
    """

    analysis_id = "doctype"
    name = "HTML Version"
    description = "Doctype declaration on the first source line"
    category = "content"
    order = 20
    config_class = AnalysisConfig

    def __init__(self, config: AnalysisConfig | None = None):
        self.config = config or self.config_class()

    def run(self, document: Document, emit: Emit, state: RunState) -> None:
        match = find_doctype(document.first_line())
        emit(ResultMessage.success(f"html version : {escape_html(match)}"))
