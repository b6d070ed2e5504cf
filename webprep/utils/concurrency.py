"""Bounded concurrency for conversion units."""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from webprep.utils.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class TaskResult(Generic[T]):
    """Result of a bounded task."""

    item: T
    success: bool
    result: Any | None = None
    error: str | None = None


class BoundedRunner:
    """Runs an async function over items with at most ``limit`` in flight.

    The rendering engine is CPU and IO heavy, so conversion units run with
    ``limit=1`` by default: each unit completes, including all of its own
    sub-operations, before the next one starts. Results always come back in
    input order, and a failing item never cancels its siblings.
    """

    def __init__(self, limit: int = 1) -> None:
        """Initialize the runner.

        Args:
            limit: Maximum number of items processed concurrently
        """
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        self.limit = limit

    async def map(
        self,
        items: Sequence[T],
        func: Callable[[T], Awaitable[R]],
        on_progress: Callable[[T, R | None, Exception | None], None] | None = None,
    ) -> list[TaskResult[T]]:
        """Process items under the concurrency limit.

        Args:
            items: Items to process
            func: Async function to apply to each item
            on_progress: Optional callback invoked after every item

        Returns:
            List of TaskResult objects, in the order of ``items``
        """
        # One semaphore per call: a runner may be driven by successive event loops
        semaphore = asyncio.Semaphore(self.limit)

        async def process_item(item: T) -> TaskResult[T]:
            async with semaphore:
                try:
                    result = await func(item)
                except Exception as e:
                    log.error(
                        "Unit failed",
                        item=str(item),
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    if on_progress:
                        on_progress(item, None, e)
                    return TaskResult(item=item, success=False, error=str(e))

                if on_progress:
                    on_progress(item, result, None)
                return TaskResult(item=item, success=True, result=result)

        return await asyncio.gather(*(process_item(item) for item in items))
