"""
Configuration settings for the listing indexer.

This module centralizes all configuration constants used while fetching
listing pages, extracting records and forwarding them to the indexing
service. Settings are grouped by their functional area for easy maintenance.

Configuration includes:
    - HTTP client settings for page retrieval
    - HTML parsing settings
    - Indexing service endpoint and credentials
    - MongoDB parameters for the knowledge source registry

All values support environment variables for container deployment, with
fallback values for local development.

Author: Leonardo Pacciani-Mori
License: MIT
"""

import os

# =============================================================================
# HTTP CLIENT CONFIGURATION
# =============================================================================

# User agent sent when fetching listing pages.
SCRAPING_USER_AGENT = os.getenv("SCRAPING_USER_AGENT", "BotBoxxScraper/1.0")
SCRAPING_ACCEPT_LANGUAGE = os.getenv(
    "SCRAPING_ACCEPT_LANGUAGE",
    "es-AR,es;q=0.9,en-US;q=0.8,en;q=0.7",
)
SCRAPING_HEADERS = {
    "User-Agent": SCRAPING_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": SCRAPING_ACCEPT_LANGUAGE,
}

# Timeout in seconds for page retrieval.
# Prevents indefinite hanging on slow or unresponsive servers.
HTTP_TIMEOUT_SECONDS = int(os.getenv("HTTP_TIMEOUT_SECONDS", "60"))

# Maximum number of connections per TCP connector.
# Also bounds the number of simultaneous indexing requests in flight.
HTTP_CONNECTION_LIMIT = int(os.getenv("HTTP_CONNECTION_LIMIT", "25"))

# Only responses whose Content-Type contains this value are parsed.
HTML_CONTENT_TYPE = "text/html"

# =============================================================================
# HTML PARSING CONFIGURATION
# =============================================================================

# BeautifulSoup parser feature name.
HTML_PARSER = os.getenv("HTML_PARSER", "html.parser")

# =============================================================================
# INDEXING SERVICE CONFIGURATION
# =============================================================================

# Endpoint of the embed-and-store function that indexes one listing text.
# Use INDEXING_FUNCTION_URL=http://functions:9000/embed-and-store for Docker.
INDEXING_FUNCTION_URL = os.getenv(
    "INDEXING_FUNCTION_URL",
    "http://localhost:54321/functions/v1/embed-and-store",
)

# Bearer token for the indexing service. Empty means no Authorization header.
INDEXING_SERVICE_KEY = os.getenv("INDEXING_SERVICE_KEY", "")

# Timeout applied by the HTTP session to each indexing request.
INDEXING_TIMEOUT_SECONDS = int(os.getenv("INDEXING_TIMEOUT_SECONDS", "120"))

# =============================================================================
# SOURCE REGISTRY CONFIGURATION
# =============================================================================

# -----------------------------------------------------------------------------
# MongoDB Configuration
# -----------------------------------------------------------------------------
# Connection parameters for the MongoDB server holding knowledge sources.
# Use MONGODB_HOST=mongodb for Docker, or 127.0.0.1 for local development.
MONGODB_HOST = os.getenv("MONGODB_HOST", "127.0.0.1")
MONGODB_PORT = int(os.getenv("MONGODB_PORT", "27017"))
MONGODB_USER = os.getenv("MONGODB_USER", "")
MONGODB_PASSWORD = os.getenv("MONGODB_PASSWORD", "")
MONGODB_AUTH_SOURCE = os.getenv("MONGODB_AUTH_SOURCE", "admin")
MONGODB_TIMEOUT_MS = int(os.getenv("MONGODB_TIMEOUT_MS", "5000"))

MONGODB_DATABASE_NAME = os.getenv("MONGODB_DATABASE_NAME", "listing_indexer")

# Collection that stores one document per indexed listing page.
SOURCES_COLLECTION_NAME = os.getenv("SOURCES_COLLECTION_NAME", "knowledge_sources")

# Source type recorded for containers created from listing pages.
SOURCE_KIND_LISTING = "listing"
