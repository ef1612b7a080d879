"""
Web scraping module for the listing indexer.

This module provides functionality for fetching real estate search results
pages, recognising their layout and extracting one record per listing card.

Submodules:
    selectors: Ordered catalog of supported page layouts.
    http_client: Asynchronous HTTP client for fetching listing pages.
    layout_detector: BeautifulSoup parsing and first-match layout detection.
    record_extractor: Per-card field extraction and normalization.
    listing_scraper: Fetch, detect and extract for one page.
"""

from .selectors import LayoutDefinition, SELECTOR_CATALOG
from .http_client import fetch_document
from .layout_detector import parse_document, detect_layout
from .record_extractor import ListingRecord, extract_record, extract_records
from .listing_scraper import scrape_listing_html, scrape_listing_page
