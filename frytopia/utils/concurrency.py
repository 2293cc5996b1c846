"""
Concurrent fan-out over blocking calls.

The REST client is blocking (requests), so overlapping requests run on a
thread pool. map_concurrent waits for every call to settle and returns the
results in input order; a failing call is captured in its Outcome instead of
cancelling its siblings.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, List, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(frozen=True)
class Outcome(Generic[V]):
    """Result of one call: either a value or the exception it raised."""
    value: Optional[V] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _settle(fn: Callable[[K], V], key: K) -> Outcome[V]:
    try:
        return Outcome(value=fn(key))
    except Exception as e:
        return Outcome(error=e)


def map_concurrent(
    keys: Sequence[K],
    fn: Callable[[K], V],
    limit: Optional[int] = None,
) -> List[Outcome[V]]:
    """
    Call fn(key) for every key concurrently and wait for all of them.

    Args:
        keys: Inputs, one call each
        fn: Blocking function to run per key
        limit: Maximum calls in flight; None runs one worker per key

    Returns:
        One Outcome per key, in the same order as keys.
    """
    if not keys:
        return []
    if limit is not None and limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")
    workers = len(keys) if limit is None else min(limit, len(keys))
    logger.debug("Fanning out %d calls on %d workers", len(keys), workers)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="frytopia-fetch") as pool:
        futures = [pool.submit(_settle, fn, key) for key in keys]
        return [future.result() for future in futures]


def run_concurrently(*calls: Callable[[], V]) -> List[Outcome[V]]:
    """
    Run independent zero-argument calls concurrently and join on all of them.

    Used for the "primary list + favorites" pair every page fetches together.
    """
    return map_concurrent(list(range(len(calls))), lambda index: calls[index]())
