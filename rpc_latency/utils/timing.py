"""Timing helpers: bounded waits and millisecond stopwatches."""

import asyncio
import time
from typing import Awaitable, Callable, TypeVar

from ..errors import ProbeTimeoutError

T = TypeVar("T")


async def run_with_timeout(awaitable: Awaitable[T], timeout_ms: float) -> T:
    """Await ``awaitable`` but give up after ``timeout_ms``.

    Unlike ``asyncio.wait_for`` this does not wait for the cancelled work to
    unwind: the caller unblocks at the deadline even if the underlying call
    (for example a blocking request on a worker thread) keeps running.
    """
    task = asyncio.ensure_future(awaitable)
    done, _ = await asyncio.wait({task}, timeout=timeout_ms / 1000)
    if task in done:
        return task.result()

    task.cancel()
    # Collect the eventual outcome so it is never reported as unretrieved
    task.add_done_callback(_consume)
    raise ProbeTimeoutError(timeout_ms)


def _consume(task: asyncio.Future) -> None:
    if not task.cancelled():
        task.exception()


class Stopwatch:
    """Measures elapsed milliseconds with a high-resolution clock."""

    def __init__(self, clock: Callable[[], float] = time.perf_counter):
        self._clock = clock
        self.started_at = clock()

    def elapsed_ms(self) -> float:
        return (self._clock() - self.started_at) * 1000
