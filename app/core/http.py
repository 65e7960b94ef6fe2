"""HTTP client factory for external API calls.

Provides the shared client used for the Google OAuth endpoints, with
connection pooling, timeouts and explicit shutdown.
"""

import httpx

# Default timeout configuration (seconds)
DEFAULT_CONNECT_TIMEOUT = 5.0
DEFAULT_READ_TIMEOUT = 10.0
DEFAULT_WRITE_TIMEOUT = 10.0
DEFAULT_POOL_TIMEOUT = 5.0

_google_client: httpx.AsyncClient | None = None


def create_http_client(
    max_connections: int = 20,
    max_keepalive_connections: int = 10,
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    read_timeout: float = DEFAULT_READ_TIMEOUT,
) -> httpx.AsyncClient:
    """Create a configured async HTTP client.

    Args:
        max_connections: Maximum number of concurrent connections
        max_keepalive_connections: Maximum idle connections to keep alive
        connect_timeout: Timeout for establishing connection
        read_timeout: Timeout for reading response

    Returns:
        Configured httpx.AsyncClient instance
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(
            connect=connect_timeout,
            read=read_timeout,
            write=DEFAULT_WRITE_TIMEOUT,
            pool=DEFAULT_POOL_TIMEOUT,
        ),
        limits=httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive_connections,
        ),
        headers={"Accept": "application/json"},
    )


def get_google_client() -> httpx.AsyncClient:
    """Get the lazily created client for Google OAuth endpoints.

    Closed by close_google_client() during application shutdown.
    """
    global _google_client
    if _google_client is None:
        _google_client = create_http_client()
    return _google_client


async def close_google_client() -> None:
    """Close the Google HTTP client and release its connections."""
    global _google_client
    if _google_client is not None:
        await _google_client.aclose()
        _google_client = None
