"""
HTTP client for the embed-and-store indexing service.

Each listing text is POSTed on its own to the indexing function together
with the identifier of the knowledge source it belongs to. The service
embeds and stores the text; this module only cares whether the call
succeeded. Failures of any kind are raised as SubmissionFailed so that the
dispatcher can record them per listing.

Author: Leonardo Pacciani-Mori
License: MIT
"""

import asyncio
import functools
from typing import Dict, Sequence

import aiohttp

from listing_indexer.config.settings import (
    HTTP_CONNECTION_LIMIT,
    INDEXING_FUNCTION_URL,
    INDEXING_SERVICE_KEY,
    INDEXING_TIMEOUT_SECONDS,
)
from listing_indexer.config.logging_config import get_logger
from listing_indexer.core.exceptions import SubmissionFailed
from listing_indexer.indexing.dispatcher import AggregateOutcome, dispatch_records
from listing_indexer.scraping.record_extractor import ListingRecord

# Initialize module logger
logger = get_logger(__name__)


def build_indexing_headers(service_key: str = INDEXING_SERVICE_KEY) -> Dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if service_key:
        headers["Authorization"] = f"Bearer {service_key}"
    return headers


async def submit_for_indexing(
    session: aiohttp.ClientSession,
    container_id: str,
    text: str,
    endpoint: str = INDEXING_FUNCTION_URL
) -> str:
    """
    Submit one listing text for indexing.

    Args:
        session: An active aiohttp ClientSession carrying the service headers.
        container_id: Identifier of the knowledge source shared by the batch.
        text: The flattened listing description.
        endpoint: URL of the embed-and-store function.

    Returns:
        str: The response body returned by the service.

    Raises:
        SubmissionFailed: If the service answers with status >= 400, the
            connection fails or the request times out.
    """
    payload = {"sourceId": container_id, "textContent": text}

    try:
        async with session.post(endpoint, json=payload) as response:
            body = await response.text()

            if response.status >= 400:
                raise SubmissionFailed(
                    f"Indexing service returned {response.status}: {body[:200]}",
                    status=response.status,
                )

            logger.debug(f"Listing indexed for source {container_id}")
            return body

    except asyncio.TimeoutError as e:
        raise SubmissionFailed("Timeout error", status="timeout_error") from e

    except aiohttp.ClientError as e:
        raise SubmissionFailed(
            f"Connection error: {str(e)}",
            status="connection_error",
        ) from e


async def index_records(
    records: Sequence[ListingRecord],
    container_id: str,
    endpoint: str = INDEXING_FUNCTION_URL,
    service_key: str = INDEXING_SERVICE_KEY,
    timeout: int = INDEXING_TIMEOUT_SECONDS
) -> AggregateOutcome:
    """
    Index a whole batch over HTTP.

    Opens a dedicated session (it must outlive the request that triggered
    the run) and dispatches every record through submit_for_indexing.

    Args:
        records: The batch produced by the record extractor.
        container_id: Identifier of the knowledge source shared by the batch.
        endpoint: URL of the embed-and-store function.
        service_key: Bearer token for the service. Empty sends no
            Authorization header.
        timeout: Total timeout for each indexing request, in seconds.

    Returns:
        AggregateOutcome: The dispatch summary.
    """
    connector = aiohttp.TCPConnector(limit=HTTP_CONNECTION_LIMIT)

    async with aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=timeout),
        headers=build_indexing_headers(service_key),
    ) as session:
        submit = functools.partial(
            submit_for_indexing, session, container_id, endpoint=endpoint
        )
        return await dispatch_records(records, submit, source_id=container_id)
