"""Heading analyses - one independent count per heading level h1..h6."""

from typing import ClassVar

from ..core.document import Document
from ..core.registry import registry
from .protocol import AnalysisConfig, Emit, ResultMessage, RunState


class HeadingCountAnalysis:
    """Counts the elements of a single heading level."""

    level: ClassVar[int]
    category = "structure"
    config_class = AnalysisConfig

    def __init__(self, config: AnalysisConfig | None = None):
        self.config = config or self.config_class()

    def run(self, document: Document, emit: Emit, state: RunState) -> None:
        tag = f"h{self.level}"
        count = len(document.find(tag))
        emit(ResultMessage.success(f"{tag} count : {count}"))


@registry.register
class H1CountAnalysis(HeadingCountAnalysis):
    level = 1
    analysis_id = "h1"
    name = "H1 Headings"
    description = "Number of <h1> elements"
    order = 31


@registry.register
class H2CountAnalysis(HeadingCountAnalysis):
    level = 2
    analysis_id = "h2"
    name = "H2 Headings"
    description = "Number of <h2> elements"
    order = 32


@registry.register
class H3CountAnalysis(HeadingCountAnalysis):
    level = 3
    analysis_id = "h3"
    name = "H3 Headings"
    description = "Number of <h3> elements"
    order = 33


@registry.register
class H4CountAnalysis(HeadingCountAnalysis):
    level = 4
    analysis_id = "h4"
    name = "H4 Headings"
    description = "Number of <h4> elements"
    order = 34


@registry.register
class H5CountAnalysis(HeadingCountAnalysis):
    level = 5
    analysis_id = "h5"
    name = "H5 Headings"
    description = "Number of <h5> elements"
    order = 35


@registry.register
class H6CountAnalysis(HeadingCountAnalysis):
    level = 6
    analysis_id = "h6"
    name = "H6 Headings"
    description = "Number of <h6> elements"
    order = 36
