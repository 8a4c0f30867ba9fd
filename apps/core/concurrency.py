"""
Fan-out helpers for independent queries.

- fetch_concurrently: run independent callables in a thread pool, await all
- CancellationToken: cooperative cancellation checked between phases
- GenerationTracker: discard results of superseded computations
"""
import logging
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from django.conf import settings
from django.db import connections

logger = logging.getLogger(__name__)


class OperationCancelled(Exception):
    """Raised when a cancelled operation reaches a checkpoint."""


class CancellationToken:
    """
    Cooperative cancellation flag shared between a caller and a worker.

    Args:
        is_stale: Optional predicate; once it returns True the token counts
            as cancelled. Lets a computation stop as soon as a newer one
            supersedes it.
    """

    def __init__(self, is_stale: Callable[[], bool] | None = None):
        self._event = threading.Event()
        self._is_stale = is_stale

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if not self._event.is_set() and self._is_stale is not None and self._is_stale():
            self._event.set()
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise OperationCancelled('Operation was cancelled')


def _run_and_close(func: Callable[[], Any]) -> Any:
    # Worker threads get their own DB connections; release them afterwards
    try:
        return func()
    finally:
        connections.close_all()


def fetch_concurrently(
    tasks: dict[str, Callable[[], Any]],
    max_workers: int | None = None,
    cancel_token: CancellationToken | None = None,
) -> dict[str, Any]:
    """
    Run independent zero-argument callables and return their results by key.

    All tasks are submitted at once. The first failure (in task order) is
    re-raised after every task has finished; no partial dict is returned.

    Args:
        tasks: Mapping of result key to callable
        max_workers: Thread count; defaults to STATS_FETCH_WORKERS.
            A value of 1 or less runs the tasks inline.
        cancel_token: Checked before the tasks start and after they finish
    """
    if cancel_token:
        cancel_token.raise_if_cancelled()

    if max_workers is None:
        max_workers = getattr(settings, 'STATS_FETCH_WORKERS', 1)

    if max_workers <= 1 or len(tasks) <= 1:
        results = {key: func() for key, func in tasks.items()}
    else:
        with ThreadPoolExecutor(max_workers=min(max_workers, len(tasks))) as pool:
            futures = {key: pool.submit(_run_and_close, func) for key, func in tasks.items()}
        # Leaving the with-block waits for every future
        results = {key: future.result() for key, future in futures.items()}

    if cancel_token:
        cancel_token.raise_if_cancelled()

    return results


class GenerationTracker:
    """
    Per-key generation counter.

    Each computation calls begin() and later asks is_current(); a computation
    that has been superseded by a newer begin() for the same key must not
    publish its result.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._generations: dict[str, int] = {}

    def begin(self, key: str) -> int:
        with self._lock:
            generation = self._generations.get(key, 0) + 1
            self._generations[key] = generation
            return generation

    def current(self, key: str) -> int:
        with self._lock:
            return self._generations.get(key, 0)

    def is_current(self, key: str, generation: int) -> bool:
        return self.current(key) == generation
