"""
Concurrent dispatch of listing records to the indexing service.

This module submits every record of a batch through a caller supplied
``submit`` coroutine function, all at once, and waits for every submission
to settle. A failed submission never cancels or short-circuits its
siblings: each call is wrapped so that it returns a tagged DispatchOutcome
instead of raising, and the outcomes are folded into an AggregateOutcome.

Dispatch is meant to run after the caller has already answered its own
request. schedule_dispatch() starts it as a background asyncio task and
keeps a reference to it until it finishes; failures are only visible in
the logs.

Key features:
    - All-settled join over independent submissions
    - Per-record failure collection with 1-based log messages
    - Fire-and-forget scheduling with a drain helper for short-lived processes

Author: Leonardo Pacciani-Mori
License: MIT
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Set, Tuple

from listing_indexer.config.logging_config import get_logger
from listing_indexer.scraping.record_extractor import ListingRecord

# Initialize module logger
logger = get_logger(__name__)

# A submit function receives the flattened text of one record.
SubmitFunction = Callable[[str], Awaitable[Any]]

# Strong references to running background dispatches. The event loop only
# keeps weak references to tasks.
_background_tasks: Set[asyncio.Task] = set()


class OutcomeStatus(Enum):
    """Settlement state of a single submission."""
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


@dataclass(frozen=True)
class DispatchOutcome:
    """
    Result of submitting one record.

    Attributes:
        index: 0-based position of the record in the batch.
        status: FULFILLED or REJECTED.
        result: Value returned by submit (fulfilled only).
        reason: Exception raised by submit (rejected only).
    """
    index: int
    status: OutcomeStatus
    result: Any = None
    reason: Optional[BaseException] = None


@dataclass
class AggregateOutcome:
    """
    Summary of one dispatched batch.

    Attributes:
        total: Number of records submitted.
        succeeded: Number of fulfilled submissions.
        failures: (index, reason) for every rejected submission, in batch order.
    """
    total: int
    succeeded: int
    failures: List[Tuple[int, BaseException]] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)


async def _settle(index: int, text: str, submit: SubmitFunction) -> DispatchOutcome:
    """Run one submission and tag its result instead of raising."""
    try:
        result = await submit(text)
    except Exception as e:
        return DispatchOutcome(index=index, status=OutcomeStatus.REJECTED, reason=e)

    return DispatchOutcome(index=index, status=OutcomeStatus.FULFILLED, result=result)


def aggregate_outcomes(outcomes: Sequence[DispatchOutcome]) -> AggregateOutcome:
    """
    Fold per-record outcomes into an AggregateOutcome.

    The result always satisfies ``succeeded + failed == total``.
    """
    failures = [
        (outcome.index, outcome.reason)
        for outcome in sorted(outcomes, key=lambda o: o.index)
        if outcome.status is OutcomeStatus.REJECTED
    ]
    return AggregateOutcome(
        total=len(outcomes),
        succeeded=len(outcomes) - len(failures),
        failures=failures,
    )


async def dispatch_records(
    records: Sequence[ListingRecord],
    submit: SubmitFunction,
    source_id: Optional[str] = None
) -> AggregateOutcome:
    """
    Submit every record concurrently and wait for all of them to settle.

    Individual submission errors are collected and logged, never re-raised:
    a batch with failures is still a completed dispatch. There is no
    timeout here; a submission that never settles keeps the join waiting,
    so the submit function is expected to bound its own calls.

    Args:
        records: The batch produced by the record extractor.
        submit: Coroutine function called with each record's description.
        source_id: Identifier of the knowledge source, used in log messages.

    Returns:
        AggregateOutcome: Totals and the (index, reason) of every failure.

    Example:
        >>> async def submit(text):
        ...     return await client.index(source_id, text)
        >>> outcome = await dispatch_records(records, submit, source_id)
        >>> print(outcome.succeeded, outcome.failed)
    """
    target = f" for source {source_id}" if source_id else ""
    logger.info(f"Starting indexing of {len(records)} listings{target}")

    outcomes = await asyncio.gather(
        *(_settle(index, record.description, submit) for index, record in enumerate(records))
    )
    aggregate = aggregate_outcomes(outcomes)

    logger.info(
        f"Indexed {aggregate.succeeded} of {aggregate.total} listings{target}"
    )
    for index, reason in aggregate.failures:
        logger.error(f"Error indexing listing {index + 1}: {reason!r}")

    return aggregate


async def _run_in_background(dispatch: Awaitable[AggregateOutcome]) -> Optional[AggregateOutcome]:
    try:
        return await dispatch
    except Exception:
        logger.exception("Error in background indexing process")
        return None


def schedule_dispatch(dispatch: Awaitable[AggregateOutcome]) -> asyncio.Task:
    """
    Start a dispatch as a background task and return immediately.

    Must be called from inside a running event loop. The caller is free to
    answer its own request without awaiting the returned task. Unexpected
    errors inside the dispatch are logged with their traceback and the task
    result is None.

    Args:
        dispatch: An awaitable producing an AggregateOutcome, typically
            ``dispatch_records(...)`` or ``index_records(...)``.

    Returns:
        asyncio.Task: The background task.
    """
    task = asyncio.create_task(_run_in_background(dispatch))
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return task


def pending_dispatch_count() -> int:
    return len(_background_tasks)


async def wait_for_pending_dispatches() -> None:
    """
    Wait until every scheduled background dispatch has finished.

    Long-running servers never need this. Short-lived processes such as the
    CLI call it before the event loop closes so background indexing is not
    cut off.
    """
    while _background_tasks:
        await asyncio.gather(*list(_background_tasks), return_exceptions=True)
