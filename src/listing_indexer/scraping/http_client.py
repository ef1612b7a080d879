"""
Asynchronous HTTP client for retrieving listing pages.

This module fetches the search results page that is going to be scraped.
It uses aiohttp and only hands back documents that are safe to parse:
the response must have a success status and an HTML content type.
Every other outcome is turned into a RetrievalFailed carrying either the
HTTP status code or a string tag describing the failure, so the caller can
report it without knowing anything about aiohttp.

No retries are performed here: a failed retrieval ends the run.

Author: Leonardo Pacciani-Mori
License: MIT
"""

import asyncio
from typing import Optional

import aiohttp

from listing_indexer.config.settings import (
    HTTP_TIMEOUT_SECONDS,
    HTTP_CONNECTION_LIMIT,
    HTML_CONTENT_TYPE,
    SCRAPING_HEADERS,
)
from listing_indexer.config.logging_config import get_logger
from listing_indexer.core.exceptions import RetrievalFailed

# Initialize module logger
logger = get_logger(__name__)


def is_html_content_type(content_type: Optional[str]) -> bool:
    if not content_type:
        return False
    return HTML_CONTENT_TYPE in content_type.lower()


async def _fetch_with_session(
    url: str,
    session: aiohttp.ClientSession,
    timeout: int
) -> str:
    try:
        # Caller-supplied sessions may not carry the scraping headers
        async with session.get(
            url,
            headers=SCRAPING_HEADERS,
            timeout=aiohttp.ClientTimeout(total=timeout),
            allow_redirects=True
        ) as response:

            logger.info(f"Fetching listing page {url}")

            # Anything outside 2xx is a failed retrieval
            if not 200 <= response.status < 300:
                logger.error(f"Error {response.status} when fetching {url}")
                raise RetrievalFailed(
                    f"Could not retrieve the page (status {response.status})",
                    url=url,
                    status=response.status,
                )

            content_type = response.headers.get("Content-Type", "")
            if not is_html_content_type(content_type):
                logger.error(f"Unexpected content type '{content_type}' for {url}")
                raise RetrievalFailed(
                    f"The page is not HTML (content type '{content_type or 'unknown'}')",
                    url=url,
                    status="content_type",
                )

            html = await response.text(errors="replace")

            logger.info(f"Listing page fetched successfully ({len(html)} characters)")
            return html

    # Handle timeout errors. Checked first: aiohttp's ServerTimeoutError
    # is also a ClientError.
    except asyncio.TimeoutError as e:
        logger.error(f"ERROR: Timeout error for {url}")
        raise RetrievalFailed(
            "Timeout error",
            url=url,
            status="timeout_error",
        ) from e

    # Handle connection, payload and invalid URL errors
    except aiohttp.ClientError as e:
        logger.error(f"ERROR: Connection issue for {url}: {str(e)}")
        raise RetrievalFailed(
            f"Connection error: {str(e)}",
            url=url,
            status="connection_error",
        ) from e


async def fetch_document(
    url: str,
    session: Optional[aiohttp.ClientSession] = None,
    timeout: int = HTTP_TIMEOUT_SECONDS
) -> str:
    """
    Fetch a listing page and return its HTML.

    Every request carries the scraping headers (user agent, accepted
    languages). If no session is given a short-lived one is created and
    closed afterwards.

    Args:
        url: The URL to fetch. Should be a complete URL including protocol.
        session: An optional active aiohttp ClientSession. Reusing a session
            gives connection pooling when several pages are fetched.
        timeout: Request timeout in seconds. Defaults to HTTP_TIMEOUT_SECONDS
            from settings.

    Returns:
        str: The decoded HTML document.

    Raises:
        RetrievalFailed: If the request fails, the status is not 2xx or the
            content type is not HTML. The ``status`` attribute holds the
            HTTP status or one of ``connection_error``, ``timeout_error``,
            ``content_type``.

    Example:
        >>> html = await fetch_document("https://inmuebles.example/venta")
        >>> print(f"Fetched {len(html)} characters")
    """
    if session is not None:
        return await _fetch_with_session(url, session, timeout)

    connector = aiohttp.TCPConnector(limit=HTTP_CONNECTION_LIMIT)
    async with aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=timeout),
    ) as own_session:
        return await _fetch_with_session(url, own_session, timeout)
