"""
Join / race / deadline helpers over awaitables that produce OperationResults.

None of these cancel work by default: an operation that loses a race or
misses a deadline keeps running and its result is dropped. Pass
`cancel_losers=True` / `cancel=True` to cancel instead.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable, Optional, TypeVar

from typedrest.errors import RequestTimeoutError
from typedrest.result import Failure, OperationResult, Success

logger = logging.getLogger(__name__)

T = TypeVar("T")

# the event loop only holds weak references to tasks
_background: set[asyncio.Future] = set()


def keep_alive(tasks: Iterable[asyncio.Future]) -> None:
    """Hold references to abandoned tasks until they finish."""
    for t in tasks:
        if t.done():
            continue
        _background.add(t)
        t.add_done_callback(_background.discard)


def pending_background() -> int:
    return len(_background)


async def gather_all(*operations: Awaitable[OperationResult[Any]]) -> OperationResult[tuple]:
    """
    Run heterogeneous operations concurrently (e.g. a user, their posts and
    their albums) and return all values in argument order, or the first
    failure to complete.
    """
    tasks = [asyncio.ensure_future(op) for op in operations]
    for next_done in asyncio.as_completed(tasks):
        result = await next_done
        if isinstance(result, Failure):
            keep_alive(tasks)
            return result
    return Success(tuple(t.result().value for t in tasks))


async def race(
    *candidates: Awaitable[OperationResult[T]],
    cancel_losers: bool = False,
) -> OperationResult[T]:
    """
    Return the first Success among concurrently started candidates.

    Failures are skipped while other candidates are still running. When every
    candidate fails, the failure of the first candidate (argument order) is
    returned.
    """
    if not candidates:
        raise ValueError("race() needs at least one candidate")
    tasks = [asyncio.ensure_future(c) for c in candidates]
    for next_done in asyncio.as_completed(tasks):
        result = await next_done
        if isinstance(result, Success):
            losers = [t for t in tasks if not t.done()]
            if cancel_losers:
                for t in losers:
                    t.cancel()
            else:
                keep_alive(losers)
            return result
    return tasks[0].result()


async def with_deadline(
    operation: Awaitable[OperationResult[T]],
    seconds: float,
    on_timeout: Optional[Callable[[], T]] = None,
    cancel: bool = False,
) -> OperationResult[T]:
    """
    Bound `operation` by `seconds`.

    On expiry returns Failure(TIMEOUT), or Success(on_timeout()) when a
    fallback is given.
    """
    task = asyncio.ensure_future(operation)
    try:
        # shield keeps the operation running past the deadline
        return await asyncio.wait_for(task if cancel else asyncio.shield(task), timeout=seconds)
    except asyncio.TimeoutError:
        if not cancel:
            keep_alive([task])
        if on_timeout is not None:
            logger.info("deadline of %gs exceeded, using fallback", seconds)
            return Success(on_timeout())
        return Failure.from_error(RequestTimeoutError(f"deadline of {seconds:g}s exceeded"))
