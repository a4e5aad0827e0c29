"""ABOUTME: HTTP client utilities - timeouts, client construction and response helpers."""

from typing import Optional, Dict, Any

import httpx

from .error_handling import HTTPStatusCodes

# Constants
DEFAULT_HTTP_TIMEOUT = 10.0
MIN_HTTP_TIMEOUT = 1.0
MAX_HTTP_TIMEOUT = 300.0


def clamp_timeout(timeout: Optional[float] = None) -> float:
    """Clamp an HTTP timeout to [MIN_HTTP_TIMEOUT, MAX_HTTP_TIMEOUT].

    None falls back to DEFAULT_HTTP_TIMEOUT.
    """
    if timeout is None:
        timeout = DEFAULT_HTTP_TIMEOUT
    return max(MIN_HTTP_TIMEOUT, min(MAX_HTTP_TIMEOUT, timeout))


def build_async_client(
    timeout: float = DEFAULT_HTTP_TIMEOUT,
    headers: Optional[Dict[str, str]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    follow_redirects: bool = True
) -> httpx.AsyncClient:
    """Create an httpx.AsyncClient with shared defaults."""
    return httpx.AsyncClient(
        timeout=timeout,
        headers=headers,
        transport=transport,
        follow_redirects=follow_redirects
    )


def get_retry_after_seconds(response: httpx.Response) -> Optional[int]:
    """Extract Retry-After header from response."""
    retry_after = response.headers.get("retry-after")
    if retry_after:
        try:
            return int(retry_after)
        except ValueError:
            return None
    return None


def parse_json_body(response: httpx.Response) -> Optional[Any]:
    """Decode a JSON response body, returning None when it is not valid JSON."""
    try:
        return response.json()
    except ValueError:
        return None


__all__ = [
    "DEFAULT_HTTP_TIMEOUT",
    "MIN_HTTP_TIMEOUT",
    "MAX_HTTP_TIMEOUT",
    "clamp_timeout",
    "build_async_client",
    "get_retry_after_seconds",
    "parse_json_body",
    "HTTPStatusCodes",
]
