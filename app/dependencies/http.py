import logging

import httpx

from app.config import get_settings

logger = logging.getLogger(__name__)

_http_client: httpx.AsyncClient | None = None


def get_http_client() -> httpx.AsyncClient:
    """Get the shared async HTTP client used for upstream lookups.

    Created lazily with the configured timeout; recreated if closed.
    """
    global _http_client
    if _http_client is None or _http_client.is_closed:
        settings = get_settings()
        logger.info("Initializing upstream HTTP client")
        _http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.HTTP_TIMEOUT_SECONDS),
            headers={"Accept": "application/json"},
        )
        logger.debug("HTTP client timeout: %ss", settings.HTTP_TIMEOUT_SECONDS)
    return _http_client


async def close_http_client() -> None:
    """Close the shared HTTP client."""
    global _http_client
    if _http_client is not None:
        logger.info("Closing upstream HTTP client")
        await _http_client.aclose()
        _http_client = None
        logger.debug("HTTP client closed")
