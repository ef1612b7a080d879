"""
Knowledge source registry backed by MongoDB.

Before a batch is indexed, one knowledge source document is created to
group every listing text of that batch. Its identifier is threaded into
each indexing call. The document records who requested the run, for which
agent, and a readable label derived from the page host name.

Author: Leonardo Pacciani-Mori
License: MIT
"""

from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlparse

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from listing_indexer.config.settings import SOURCE_KIND_LISTING
from listing_indexer.config.logging_config import get_logger
from listing_indexer.core.connections import get_sources_collection, mongodb_connection
from listing_indexer.core.exceptions import SourceCreationFailed

# Initialize module logger
logger = get_logger(__name__)


def build_source_label(url: str) -> str:
    """
    Build the display name of the knowledge source for a listing page.

    Example:
        >>> build_source_label("https://www.zonaprop.com.ar/departamentos-venta.html")
        'Listing of www.zonaprop.com.ar'
    """
    hostname = urlparse(url).hostname or url
    return f"Listing of {hostname}"


def create_index_container(
    owner_id: str,
    label: str,
    kind: str = SOURCE_KIND_LISTING,
    agent_id: Optional[str] = None,
    collection: Optional[Collection] = None
) -> str:
    """
    Insert a knowledge source document and return its identifier.

    This is a blocking call; from async code run it in a worker thread.

    Args:
        owner_id: Identifier of the user who requested the run.
        label: Display name, usually from build_source_label().
        kind: Source type. Defaults to SOURCE_KIND_LISTING.
        agent_id: Optional identifier of the agent the source belongs to.
        collection: Collection to insert into. If None, a connection is
            opened with the settings defaults and closed afterwards.

    Returns:
        str: The inserted document id as a string.

    Raises:
        SourceCreationFailed: If MongoDB rejects or cannot perform the insert.
    """
    document = {
        "user_id": owner_id,
        "agent_id": agent_id,
        "name": label,
        "type": kind,
        "created_at": datetime.now(timezone.utc),
    }

    try:
        if collection is not None:
            result = collection.insert_one(document)
        else:
            with mongodb_connection() as client:
                result = get_sources_collection(client).insert_one(document)
    except PyMongoError as e:
        logger.error(f"Error creating knowledge source '{label}': {str(e)}")
        raise SourceCreationFailed(
            f"Could not create the knowledge source: {str(e)}"
        ) from e

    source_id = str(result.inserted_id)
    logger.info(f"Created knowledge source {source_id} ('{label}')")
    return source_id
