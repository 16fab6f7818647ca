"""Protocol definitions for page analyses.

This module defines the core protocols and data structures shared by the
analysis plugins, the coordinator and the emitters. All analyses must
implement the PageAnalysis protocol.
"""

from abc import abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from ..core.document import Document


class VerbosityLevel(Enum):
    """Output verbosity levels."""

    QUIET = "quiet"
    NORMAL = "normal"
    VERBOSE = "verbose"
    DEBUG = "debug"

    def __ge__(self, other):
        """Allow >= comparison for verbosity filtering."""
        if not isinstance(other, VerbosityLevel):
            return NotImplemented
        levels = list(VerbosityLevel)
        return levels.index(self) >= levels.index(other)

    def __gt__(self, other):
        """Allow > comparison for verbosity filtering."""
        if not isinstance(other, VerbosityLevel):
            return NotImplemented
        levels = list(VerbosityLevel)
        return levels.index(self) > levels.index(other)


class AnalyzeStatus(IntEnum):
    """Status code carried by every result message on the wire."""

    SUCCESS = 0
    FAILURE = 1
    COMPLETE = 2


@dataclass(frozen=True)
class ResultMessage:
    """
    A single finding streamed to the listener.

    Example:
        ResultMessage.success("title : Example Domain").to_wire()
        # {"Result": "title : Example Domain", "Status": 0}
    """

    text: str
    status: AnalyzeStatus

    @classmethod
    def success(cls, text: str) -> "ResultMessage":
        return cls(text, AnalyzeStatus.SUCCESS)

    @classmethod
    def failure(cls, text: str) -> "ResultMessage":
        return cls(text, AnalyzeStatus.FAILURE)

    @classmethod
    def complete(cls, text: str) -> "ResultMessage":
        return cls(text, AnalyzeStatus.COMPLETE)

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the wire structure sent to clients."""
        return {"Result": self.text, "Status": int(self.status)}


Emit = Callable[[ResultMessage], None]


@dataclass
class RunState:
    """
    Mutable state of one analyzer run.

    Link counters are written only by the links analysis and read only
    after the run's join counter has reached zero.
    """

    started_at: float = 0.0
    internal_link_count: int = 0
    external_link_count: int = 0
    processing_duration: float | None = None


class AnalysisConfig(BaseModel):
    """
    Base configuration for all analyses.

    Each analysis extends this with its own fields using Pydantic.

    Example:
        class LoginFormConfig(AnalysisConfig):
            keyword: str = Field(default="login")
    """

    model_config = ConfigDict(extra="allow")

    enabled: bool = True


@runtime_checkable
class PageAnalysis(Protocol):
    """
    Protocol that all analysis plugins must implement.

    Example:
        @registry.register
        class TitleAnalysis:
            analysis_id = "title"
            name = "Title"
            description = "Page title"
            category = "content"
            order = 10
            config_class = AnalysisConfig

            def __init__(self, config: AnalysisConfig | None = None): ...

            def run(self, document, emit, state) -> None:
                emit(ResultMessage.success(f"title : {...}"))
    """

    analysis_id: ClassVar[str]
    name: ClassVar[str]
    description: ClassVar[str]
    category: ClassVar[str]
    order: ClassVar[int]
    config_class: ClassVar[type[AnalysisConfig]]

    @abstractmethod
    def run(self, document: "Document", emit: Emit, state: RunState) -> None:
        """
        Analyze the document and emit findings.

        Args:
            document: Parsed page, shared read-only
            emit: Sink for result messages
            state: Mutable state of the current run
        """
        ...
