"""Page analysis pipeline shared between the CLI and the websocket server."""

import logging

from ..analyses.protocol import PageAnalysis, ResultMessage, RunState
from ..emitters.base import ResultEmitter, send_safely
from ..fetchers.base import PageFetcher
from ..utils.escaping import escape_html
from .config_manager import ConfigManager
from .coordinator import AnalysisRequest, PageAnalyzer
from .document import Document
from .errors import ParseError, UpstreamFetchError
from .registry import registry

logger = logging.getLogger(__name__)


def run_page_analysis(
    url: str,
    fetcher: PageFetcher,
    emitter: ResultEmitter,
    config_manager: ConfigManager | None = None,
    analyses: list[PageAnalysis] | None = None,
) -> RunState | None:
    """
    Fetch, parse and analyze one page, streaming results to the emitter.

    Fetch and parse failures are reported as a single Failure message and
    no analysis run is started.

    Args:
        url: Page URL
        fetcher: Page fetcher (already started)
        emitter: Sink for result messages
        config_manager: Configuration (defaults if None)
        analyses: Analyses to run (all enabled analyses if None)

    Returns:
        Final run state, or None if the page could not be fetched or parsed
    """
    config_manager = config_manager or ConfigManager()

    try:
        raw_html = fetcher.fetch(url)
    except UpstreamFetchError as e:
        logger.info(f"Couldn't fetch {url}: {e}")
        send_safely(emitter, ResultMessage.failure(escape_html(str(e))))
        return None

    try:
        document = Document.from_html(raw_html)
    except ParseError as e:
        logger.info(f"Couldn't parse {url}: {e}")
        send_safely(emitter, ResultMessage.failure(escape_html(str(e))))
        return None

    if analyses is None:
        analyses = registry.create_analyses(config_manager)

    analyzer = PageAnalyzer(
        AnalysisRequest(source_url=url, document=document),
        emitter,
        analyses,
        wait_timeout=config_manager.global_config.wait_timeout,
    )
    return analyzer.run()
