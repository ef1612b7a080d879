"""
Exception hierarchy for the listing indexer.

Every failure a run can end with has its own class so the caller can name
the failure kind in its response. The fatal kinds (retrieval, parsing,
layout detection, empty result, invalid request, source creation) stop a
run before any indexing starts. SubmissionFailed is per record: the dispatcher records it
and the batch carries on.

Author: Leonardo Pacciani-Mori
License: MIT
"""

from typing import Optional, Union


class ListingIndexerError(Exception):
    """Base class for all listing indexer failures."""

    kind = "ListingIndexerError"


class InvalidRequest(ListingIndexerError):
    """A run was requested without the mandatory parameters."""

    kind = "InvalidRequest"


class RetrievalFailed(ListingIndexerError):
    """
    The listing page could not be retrieved as an HTML document.

    Attributes:
        url: The URL that was requested.
        status: The HTTP status code, or a string tag for failures that have
            no status (``connection_error``, ``timeout_error``,
            ``content_type``).
    """

    kind = "RetrievalFailed"

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status: Optional[Union[int, str]] = None
    ):
        super().__init__(message)
        self.url = url
        self.status = status


class ParseFailed(ListingIndexerError):
    """The document could not be parsed into a traversable tree."""

    kind = "ParseFailed"


class LayoutNotRecognized(ListingIndexerError):
    """The document is valid HTML but no known layout matched any card."""

    kind = "LayoutNotRecognized"


class EmptyResult(ListingIndexerError):
    """A layout matched but no listing records were produced."""

    kind = "EmptyResult"


class SubmissionFailed(ListingIndexerError):
    """A single listing could not be submitted for indexing."""

    kind = "SubmissionFailed"

    def __init__(self, message: str, status: Optional[Union[int, str]] = None):
        super().__init__(message)
        self.status = status


class SourceCreationFailed(ListingIndexerError):
    """The knowledge source that groups a batch could not be created."""

    kind = "SourceCreationFailed"
