"""
Bounded-concurrency fan-out.

INVARIANTS:
- output[i] is the result for items[i], whatever the completion order
- At most min(limit, len(items)) calls are in flight at once
- A failing call is not swallowed: the first failure cancels the remaining
  workers and propagates to the caller
- No retries, no backoff
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_CONCURRENCY = 12


async def gather_bounded(
    items: Sequence[T],
    fn: Callable[[T], Awaitable[R]],
    limit: int = DEFAULT_CONCURRENCY,
) -> list[R]:
    """
    Apply an async function to every item with a fixed-size worker pool.

    Args:
        items: Inputs, processed in order of dispatch
        fn: Async mapping function
        limit: Maximum number of concurrent calls

    Returns:
        Results in input order

    Raises:
        ValueError: If limit is less than 1
    """
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")

    count = len(items)
    if count == 0:
        return []

    results: list[R | None] = [None] * count
    next_index = 0

    async def worker() -> None:
        nonlocal next_index
        # Single event loop: claiming an index between awaits cannot race
        while next_index < count:
            index = next_index
            next_index += 1
            results[index] = await fn(items[index])

    workers = [asyncio.create_task(worker()) for _ in range(min(limit, count))]
    try:
        await asyncio.gather(*workers)
    except BaseException:
        for task in workers:
            task.cancel()
        await asyncio.gather(*workers, return_exceptions=True)
        raise

    return results  # type: ignore[return-value]
