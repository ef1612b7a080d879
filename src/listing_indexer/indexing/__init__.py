"""
Indexing module for the listing indexer.

This module forwards extracted listing records to the downstream
embed-and-store service.

Submodules:
    dispatcher: All-settled concurrent dispatch and background scheduling.
    indexing_client: HTTP submission of one listing text.
    source_registry: MongoDB-backed creation of the knowledge source.
"""

from .dispatcher import (
    AggregateOutcome,
    DispatchOutcome,
    OutcomeStatus,
    dispatch_records,
    schedule_dispatch,
    wait_for_pending_dispatches,
)
from .indexing_client import submit_for_indexing, index_records
from .source_registry import build_source_label, create_index_container
