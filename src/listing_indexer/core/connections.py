"""
Database connection utilities for the listing indexer.

This module provides MongoDB connection management for the knowledge
source registry. It implements a context manager and helper functions for
consistent database access.

Usage:
    from listing_indexer.core.connections import (
        mongodb_connection,
        get_sources_collection,
    )

    with mongodb_connection() as client:
        sources = get_sources_collection(client)
        sources.count_documents({})

Author: Leonardo Pacciani-Mori
License: MIT
"""

from contextlib import contextmanager
from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection

from listing_indexer.config.settings import (
    MONGODB_HOST,
    MONGODB_PORT,
    MONGODB_USER,
    MONGODB_PASSWORD,
    MONGODB_AUTH_SOURCE,
    MONGODB_TIMEOUT_MS,
    MONGODB_DATABASE_NAME,
    SOURCES_COLLECTION_NAME,
)


# =============================================================================
# MONGODB CONNECTION UTILITIES
# =============================================================================

def _get_mongo_auth_kwargs(
    username: Optional[str],
    password: Optional[str],
    auth_source: Optional[str],
) -> dict:
    if username and password:
        return {
            "username": username,
            "password": password,
            "authSource": auth_source or "admin",
        }
    return {}


def get_mongodb_client(
    host: str = MONGODB_HOST,
    port: int = MONGODB_PORT,
    username: Optional[str] = MONGODB_USER,
    password: Optional[str] = MONGODB_PASSWORD,
    auth_source: Optional[str] = MONGODB_AUTH_SOURCE,
    timeout_ms: Optional[int] = MONGODB_TIMEOUT_MS,
) -> MongoClient:
    """
    Create and return a MongoDB client connection.

    Args:
        host: The hostname or IP address of the MongoDB server.
        port: The port number of the MongoDB server.
        username: Optional user name; credentials are only sent when both
            username and password are set.
        password: Optional password.
        auth_source: Authentication database for the credentials.
        timeout_ms: Server selection timeout in milliseconds.

    Returns:
        MongoClient: A MongoDB client instance. PyMongo connects lazily,
            so errors surface on the first operation.

    Example:
        >>> client = get_mongodb_client()
        >>> sources = get_sources_collection(client)
        >>> client.close()
    """
    kwargs = _get_mongo_auth_kwargs(username, password, auth_source)
    if timeout_ms is not None:
        kwargs["serverSelectionTimeoutMS"] = timeout_ms
    return MongoClient(host, port, **kwargs)


@contextmanager
def mongodb_connection(
    host: str = MONGODB_HOST,
    port: int = MONGODB_PORT,
    username: Optional[str] = MONGODB_USER,
    password: Optional[str] = MONGODB_PASSWORD,
    auth_source: Optional[str] = MONGODB_AUTH_SOURCE,
    timeout_ms: Optional[int] = MONGODB_TIMEOUT_MS,
):
    """
    Context manager for MongoDB connections with automatic cleanup.

    Yields:
        MongoClient: A MongoDB client instance, closed on exit even if the
            block raises.
    """
    client = get_mongodb_client(
        host, port, username, password, auth_source, timeout_ms
    )

    try:
        yield client
    finally:
        client.close()


def get_sources_collection(
    client: MongoClient,
    database_name: str = MONGODB_DATABASE_NAME,
    collection_name: str = SOURCES_COLLECTION_NAME,
) -> Collection:
    """
    Get the collection that stores knowledge source documents.

    Args:
        client: An active MongoDB client connection.
        database_name: Name of the database. Defaults to settings.
        collection_name: Name of the collection. Defaults to settings.

    Returns:
        Collection: The knowledge sources collection.
    """
    return client[database_name][collection_name]
