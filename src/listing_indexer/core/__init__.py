"""
Core utilities module for the listing indexer.

This module provides shared utilities used across the scraping and indexing
stages, including the exception hierarchy, field normalizers and database
connections.

Submodules:
    exceptions: Failure taxonomy raised by a run.
    string_utils: Price, whitespace and link normalizers.
    connections: MongoDB connection management.
"""

from .exceptions import (
    ListingIndexerError,
    InvalidRequest,
    RetrievalFailed,
    ParseFailed,
    LayoutNotRecognized,
    EmptyResult,
    SubmissionFailed,
    SourceCreationFailed,
)
from .string_utils import strip_price_grouping, collapse_whitespace, resolve_listing_url
from .connections import get_mongodb_client, mongodb_connection, get_sources_collection
