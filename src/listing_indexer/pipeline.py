"""
End-to-end listing indexing run.

This module is the entry point used by callers (CLI, web handlers). A run
validates its input, scrapes the listing page, refuses empty batches,
creates the knowledge source, and schedules the indexing of every record
in the background. It returns as soon as indexing has been scheduled:
the result only says how many listings were found. Indexing success or
failure is reported later through the logs.

Every fatal failure is raised as a ListingIndexerError subclass before
any indexing starts; error_payload() turns it into a response body that
names the failure kind.

Author: Leonardo Pacciani-Mori
License: MIT
"""

import asyncio
import functools
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional

import aiohttp

from listing_indexer.config.settings import SOURCE_KIND_LISTING
from listing_indexer.config.logging_config import get_logger
from listing_indexer.core.exceptions import EmptyResult, InvalidRequest, ListingIndexerError
from listing_indexer.indexing.dispatcher import dispatch_records, schedule_dispatch
from listing_indexer.indexing.indexing_client import index_records
from listing_indexer.indexing.source_registry import build_source_label, create_index_container
from listing_indexer.scraping.listing_scraper import scrape_listing_page

# Initialize module logger
logger = get_logger(__name__)

# create_container(owner_id, label, kind, agent_id) -> container id
ContainerFactory = Callable[[str, str, str, Optional[str]], str]

# submit(container_id, text) -> awaitable result
ContainerSubmitFunction = Callable[[str, str], Awaitable[Any]]


@dataclass(frozen=True)
class IndexingRun:
    """
    Immediate result of an accepted run.

    Attributes:
        record_count: Number of listings found on the page.
        container_id: Identifier of the knowledge source created for them.
        dispatch_task: Background task indexing the records. Callers are
            not expected to await it.
    """
    record_count: int
    container_id: str
    dispatch_task: Optional[asyncio.Task] = field(default=None, compare=False, repr=False)

    @property
    def message(self) -> str:
        return f"Processing started for {self.record_count} listings."

    def as_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "propertiesFound": self.record_count,
            "sourceId": self.container_id,
        }


def error_payload(error: Exception) -> Dict[str, str]:
    """
    Build the response body for a failed run.

    Known failures are named by their kind; anything else is reported as
    an internal error.

    Example:
        >>> error_payload(LayoutNotRecognized("no cards"))
        {'error': 'LayoutNotRecognized', 'message': 'no cards'}
    """
    if isinstance(error, ListingIndexerError):
        return {"error": error.kind, "message": str(error)}
    return {"error": "InternalError", "message": str(error)}


async def run_listing_indexing(
    url: str,
    owner_id: str,
    agent_id: Optional[str] = None,
    base_url: Optional[str] = None,
    session: Optional[aiohttp.ClientSession] = None,
    create_container: ContainerFactory = create_index_container,
    submit: Optional[ContainerSubmitFunction] = None
) -> IndexingRun:
    """
    Scrape a listing page and schedule the indexing of its records.

    Must be awaited inside the event loop that should run the background
    indexing.

    Args:
        url: The URL of the search results page.
        owner_id: Identifier of the user requesting the run.
        agent_id: Optional identifier of the agent the listings are for.
        base_url: URL that relative listing links are resolved against.
            Defaults to url.
        session: Optional aiohttp session used to fetch the page.
        create_container: Blocking function creating the knowledge source.
            Defaults to the MongoDB-backed create_index_container().
        submit: Optional coroutine function ``submit(container_id, text)``.
            If None, records are sent to the embed-and-store HTTP service.

    Returns:
        IndexingRun: Record count and knowledge source id.

    Raises:
        InvalidRequest: If url or owner_id is missing.
        RetrievalFailed: If the page cannot be fetched as HTML.
        ParseFailed: If the document cannot be parsed.
        LayoutNotRecognized: If no catalog layout matches.
        EmptyResult: If the page produced no records.
        SourceCreationFailed: If the knowledge source cannot be created.

    Example:
        >>> run = await run_listing_indexing(
        ...     "https://inmuebles.example/venta", owner_id="user-1", agent_id="agent-7"
        ... )
        >>> print(run.as_dict())
    """
    if not url or not owner_id:
        raise InvalidRequest("url and owner_id are required.")

    records = await scrape_listing_page(url, base_url=base_url, session=session)

    if not records:
        raise EmptyResult(
            "No listings were found at the given URL with the current selectors."
        )

    label = build_source_label(url)
    container_id = await asyncio.to_thread(
        create_container, owner_id, label, SOURCE_KIND_LISTING, agent_id
    )

    if submit is None:
        dispatch = index_records(records, container_id)
    else:
        dispatch = dispatch_records(
            records,
            functools.partial(submit, container_id),
            source_id=container_id,
        )

    task = schedule_dispatch(dispatch)

    run = IndexingRun(
        record_count=len(records),
        container_id=container_id,
        dispatch_task=task,
    )
    logger.info(run.message)
    return run
