"""Title analysis - reports the text of the page's first <title> element."""

from ..core.document import Document
from ..core.registry import registry
from ..utils.escaping import escape_html
from .protocol import AnalysisConfig, Emit, ResultMessage, RunState


@registry.register
class TitleAnalysis:
    """Reports the page title, HTML-escaped."""

    analysis_id = "title"
    name = "Title"
    description = "Text of the first <title> element"
    category = "content"
    order = 10
    config_class = AnalysisConfig

    def __init__(self, config: AnalysisConfig | None = None):
        self.config = config or self.config_class()

    def run(self, document: Document, emit: Emit, state: RunState) -> None:
        titles = document.find("title")
        value = titles[0].text() if titles else ""
        emit(ResultMessage.success(f"title : {escape_html(value)}"))
