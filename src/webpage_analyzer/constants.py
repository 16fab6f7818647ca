"""Constants and default values used across the application."""

# HTTP Constants
DEFAULT_HTTP_TIMEOUT = 10.0  # Page fetch timeout in seconds
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (compatible; WebpageAnalyzer/0.1; +https://github.com/mjmyaseer/webPageAnalyzer)"
)

# Browser Constants
DEFAULT_WINDOW_SIZE = "1680,1050"
DEFAULT_CHROME_ARGS = [
    "--headless",
    "--no-sandbox",
    "--disable-gpu",
]

# Server Constants
DEFAULT_WEBSOCKET_HOST = "localhost"
DEFAULT_WEBSOCKET_PORT = 8080
WEBSOCKET_PATH = "/webSocket"
DEFAULT_SEND_TIMEOUT = 10.0  # Max seconds a single websocket send may block an analysis

# Analysis Constants
DEFAULT_LOGIN_KEYWORD = "login"
DOCTYPE_PATTERN = r"<!DOCTYPE(.*?)>"
