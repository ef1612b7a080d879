"""
Listing page scraping orchestration.

This module coordinates the HTTP client, layout detector and record
extractor to turn one search results URL into a batch of listing records.
All fatal failures (retrieval, parsing, unknown layout) propagate to the
caller unchanged; no partial batch is ever returned for a failed page.

Author: Leonardo Pacciani-Mori
License: MIT
"""

from typing import List, Optional

import aiohttp

from listing_indexer.config.logging_config import get_logger
from listing_indexer.core.exceptions import ListingIndexerError
from listing_indexer.scraping.http_client import fetch_document
from listing_indexer.scraping.layout_detector import detect_layout, parse_document
from listing_indexer.scraping.record_extractor import ListingRecord, extract_records

# Initialize module logger
logger = get_logger(__name__)


def scrape_listing_html(html_source: str, base_url: str) -> List[ListingRecord]:
    """
    Extract listing records from an already retrieved HTML document.

    Args:
        html_source: The HTML of the search results page.
        base_url: URL that relative listing links are resolved against.

    Returns:
        list: One ListingRecord per card of the detected layout.

    Raises:
        ParseFailed: If the document cannot be parsed.
        LayoutNotRecognized: If no catalog layout matches.
    """
    soup = parse_document(html_source)
    layout, cards = detect_layout(soup)
    return extract_records(cards, layout, base_url)


async def scrape_listing_page(
    url: str,
    base_url: Optional[str] = None,
    session: Optional[aiohttp.ClientSession] = None
) -> List[ListingRecord]:
    """
    Fetch a search results page and extract its listing records.

    Args:
        url: The URL of the search results page.
        base_url: URL that relative listing links are resolved against.
            Defaults to the page URL itself.
        session: Optional aiohttp session used for the fetch.

    Returns:
        list: The batch of records, in document order. May be empty only if
            the detected layout produced no records; the caller decides
            whether that is an error.

    Raises:
        RetrievalFailed: If the page cannot be fetched as HTML.
        ParseFailed: If the document cannot be parsed.
        LayoutNotRecognized: If no catalog layout matches.

    Example:
        >>> records = await scrape_listing_page("https://inmuebles.example/venta")
        >>> print(f"Found {len(records)} listings")
    """
    try:
        html_source = await fetch_document(url, session=session)
        records = scrape_listing_html(html_source, base_url or url)
    except ListingIndexerError as e:
        logger.error(f"Error while scraping {url}: {str(e)}")
        raise

    logger.info(f"Extracted {len(records)} listings from {url}")
    return records
