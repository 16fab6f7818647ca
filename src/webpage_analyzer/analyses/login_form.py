"""Login form analysis - detects forms that post to a login endpoint."""

from pydantic import Field

from ..constants import DEFAULT_LOGIN_KEYWORD
from ..core.document import Document
from ..core.registry import registry
from .protocol import AnalysisConfig, Emit, ResultMessage, RunState


class LoginFormConfig(AnalysisConfig):
    """Login form analysis configuration."""

    keyword: str = Field(
        default=DEFAULT_LOGIN_KEYWORD,
        min_length=1,
        description="Substring of a form action that marks a login form",
    )
    case_sensitive: bool = Field(
        default=False,
        description="Match the keyword case-sensitively (action 'submitLogin' then no longer matches)",
    )


@registry.register
class LoginFormAnalysis:
    """Reports whether any form's action contains the login keyword."""

    analysis_id = "login_form"
    name = "Login Form"
    description = "Whether the page contains a login form"
    category = "forms"
    order = 50
    config_class = LoginFormConfig

    def __init__(self, config: LoginFormConfig | None = None):
        self.config = config or self.config_class()

    def _matches(self, action: str) -> bool:
        if self.config.case_sensitive:
            return self.config.keyword in action
        return self.config.keyword.casefold() in action.casefold()

    def run(self, document: Document, emit: Emit, state: RunState) -> None:
        login_found = False
        for form in document.find("form"):
            action, _ = form.attr("action")
            if self._matches(action):
                login_found = True

        emit(ResultMessage.success(f"contain login form : {str(login_found).lower()}"))
