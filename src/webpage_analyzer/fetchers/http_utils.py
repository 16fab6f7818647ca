"""HTTP utilities for page fetchers."""

from dataclasses import dataclass
from typing import Any

import httpx

from ..constants import DEFAULT_HTTP_TIMEOUT, DEFAULT_USER_AGENT


@dataclass
class HTTPResult:
    """
    Result of an HTTP request.

    Either contains a successful response or error information.
    """

    success: bool
    response: httpx.Response | None = None
    error: str | None = None
    error_type: str | None = None  # "timeout", "http_error", "ssl_error", "connection_error"


def safe_http_get(
    url: str,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
    follow_redirects: bool = True,
    user_agent: str | None = None,
    verify: bool = True,
    **kwargs: Any,
) -> HTTPResult:
    """
    Perform HTTP GET with standardized error handling.

    Provides consistent error handling for:
    - Timeout exceptions
    - HTTP status errors (4xx, 5xx)
    - SSL/TLS errors
    - Connection errors
    - Invalid URLs and other request errors

    Args:
        url: URL to fetch
        timeout: Request timeout in seconds (default from constants)
        follow_redirects: Whether to follow redirects (default: True)
        user_agent: Custom user agent string (default from constants)
        verify: Verify TLS certificates
        **kwargs: Additional httpx.Client arguments

    Returns:
        HTTPResult with either successful response or error information

    Example:
        >>> result = safe_http_get("https://example.com/")
        >>> if result.success:
        ...     print(result.response.text)
        ... else:
        ...     print(f"Error: {result.error}")
    """
    headers = kwargs.pop("headers", {})
    if "User-Agent" not in headers:
        headers["User-Agent"] = user_agent or DEFAULT_USER_AGENT

    try:
        with httpx.Client(
            timeout=timeout,
            follow_redirects=follow_redirects,
            verify=verify,
            **kwargs,
        ) as client:
            response = client.get(url, headers=headers)
            response.raise_for_status()
            return HTTPResult(success=True, response=response)

    except httpx.TimeoutException:
        return HTTPResult(
            success=False,
            error=f"Timeout accessing {url} ({timeout}s)",
            error_type="timeout",
        )

    except httpx.HTTPStatusError as e:
        return HTTPResult(
            success=False,
            response=e.response,
            error=f"HTTP {e.response.status_code}: {url}",
            error_type="http_error",
        )

    except httpx.ConnectError as e:
        error_msg = str(e).lower()
        is_ssl_error = any(ssl_term in error_msg for ssl_term in ["ssl", "certificate", "tls"])

        if is_ssl_error:
            return HTTPResult(
                success=False,
                error=f"SSL error accessing {url}: {e}",
                error_type="ssl_error",
            )
        return HTTPResult(
            success=False,
            error=f"Connection error accessing {url}: {e}",
            error_type="connection_error",
        )

    except (httpx.HTTPError, httpx.InvalidURL) as e:
        return HTTPResult(
            success=False,
            error=f"Error accessing {url}: {e}",
            error_type="general",
        )
