"""Websocket server streaming analysis results to browser clients.

Clients connect to ``/webSocket`` and send one URL per text message. Each URL
is analyzed in full before the next message is read, and every result is sent
back as a JSON frame ``{"Result": ..., "Status": ...}``. A binary frame gets a
single Failure back and the connection stays open.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from importlib import resources
from string import Template
from typing import Any

import uvicorn
from fastapi import FastAPI, WebSocket
from fastapi.responses import HTMLResponse
from starlette.concurrency import run_in_threadpool
from starlette.websockets import WebSocketState

from .analyses.protocol import ResultMessage
from .constants import DEFAULT_SEND_TIMEOUT, WEBSOCKET_PATH
from .core.analyzer import run_page_analysis
from .core.config_manager import ConfigManager, ServerSettings
from .core.errors import DeliveryError
from .emitters.base import ResultEmitter
from .fetchers import PageFetcher, create_fetcher

logger = logging.getLogger(__name__)

BINARY_FRAME_ERROR = "expected a text frame containing a URL"


class WebSocketEmitter(ResultEmitter):
    """
    Sends results over a websocket from analysis threads.

    Each send is scheduled on the server's event loop and waited for at most
    ``send_timeout`` seconds so a stalled client cannot hold up analyses.
    """

    def __init__(
        self,
        websocket: WebSocket,
        loop: asyncio.AbstractEventLoop,
        send_timeout: float = DEFAULT_SEND_TIMEOUT,
    ):
        super().__init__()
        self.websocket = websocket
        self.loop = loop
        self.send_timeout = send_timeout
        self._send_lock = asyncio.Lock()

    async def _send_json(self, payload: dict[str, Any]) -> None:
        async with self._send_lock:
            if self.websocket.client_state != WebSocketState.CONNECTED:
                raise DeliveryError("websocket is not connected")
            await self.websocket.send_json(payload)

    async def reply(self, message: ResultMessage) -> None:
        """Send a message from the event loop itself, outside any analysis run."""
        await self._send_json(message.to_wire())

    def deliver(self, message: ResultMessage) -> None:
        future = asyncio.run_coroutine_threadsafe(self._send_json(message.to_wire()), self.loop)
        try:
            future.result(timeout=self.send_timeout)
        except DeliveryError:
            raise
        except TimeoutError as e:
            future.cancel()
            raise DeliveryError(f"send timed out after {self.send_timeout}s") from e
        except Exception as e:
            raise DeliveryError(f"couldn't send websocket response: {e}") from e


def render_index(settings: ServerSettings) -> str:
    """
    Render the index page that talks to the websocket endpoint.

    Args:
        settings: Server settings with the public websocket host and port

    Returns:
        HTML page
    """
    template = resources.files(__package__).joinpath("templates/index.html").read_text("utf-8")
    return Template(template).safe_substitute(
        websocket_host=settings.websocket_host,
        websocket_port=settings.websocket_port,
        websocket_path=WEBSOCKET_PATH,
    )


def create_app(
    config_manager: ConfigManager | None = None,
    fetcher: PageFetcher | None = None,
    settings: ServerSettings | None = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config_manager: Loaded configuration (defaults if None)
        fetcher: Page fetcher, started and stopped with the app
        settings: Server settings (read from environment if None)

    Returns:
        Configured application
    """
    config_manager = config_manager or ConfigManager()
    settings = settings or ServerSettings()
    fetcher = fetcher or create_fetcher(config_manager.fetch_config)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await run_in_threadpool(fetcher.start)
        try:
            yield
        finally:
            await run_in_threadpool(fetcher.stop)

    app = FastAPI(title="Web Page Analyzer", lifespan=lifespan)
    app.state.config_manager = config_manager
    app.state.fetcher = fetcher
    app.state.settings = settings

    @app.get("/", response_class=HTMLResponse)
    async def index() -> str:
        return render_index(settings)

    @app.websocket(WEBSOCKET_PATH)
    async def analyze_socket(websocket: WebSocket) -> None:
        await websocket.accept()
        client = f"{websocket.client.host}:{websocket.client.port}" if websocket.client else "unknown"
        logger.info(f"Client {client} connected")

        emitter = WebSocketEmitter(
            websocket,
            asyncio.get_running_loop(),
            send_timeout=config_manager.global_config.send_timeout,
        )

        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                logger.info(f"Client {client} disconnected (code {frame.get('code', 1000)})")
                break

            url = frame.get("text")
            if url is None:
                logger.warning(f"Ignoring binary frame from {client}")
                try:
                    await emitter.reply(ResultMessage.failure(BINARY_FRAME_ERROR))
                except DeliveryError as e:
                    logger.info(f"Client {client} went away: {e}")
                    break
                continue

            url = url.strip()
            logger.info(f"Analysis requested by {client}: {url}")
            await run_in_threadpool(run_page_analysis, url, fetcher, emitter, config_manager)

    return app


def serve(
    host: str,
    port: int,
    config_manager: ConfigManager | None = None,
    settings: ServerSettings | None = None,
) -> None:
    """
    Run the websocket server until interrupted.

    Args:
        host: Bind address
        port: Bind port
        config_manager: Loaded configuration
        settings: Server settings
    """
    app = create_app(config_manager=config_manager, settings=settings)
    logger.info(f"Serving on {host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="info")
