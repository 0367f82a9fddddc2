# packforge/core/tasks.py
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Iterable, TypeVar

from packforge.app.settings import settingsInt

logger = logging.getLogger(__name__)

__all__ = ["TaskExecutor", "getSharedExecutor", "shutdownSharedExecutor"]

T = TypeVar("T")
R = TypeVar("R")



class TaskExecutor:
    """
    Runs blocking operations on worker threads and hands back futures.

    This is the only concurrency primitive in packforge: repositories use it to
    offer getPackAsync() on top of their synchronous getPack(). Nothing is
    submitted implicitly; callers decide when to fan out and when to wait.
    """

    def __init__(self, maxWorkers: int | None = None, *, name: str = "packforge") -> None:
        self._maxWorkers = maxWorkers
        self._name = name
        self._pool: ThreadPoolExecutor | None = None
        self._lock = threading.Lock()

    def _ensurePool(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._pool is None:
                self._pool = ThreadPoolExecutor(max_workers=self._maxWorkers, thread_name_prefix=self._name)
                logger.debug("Started executor '%s' (maxWorkers=%s)", self._name, self._maxWorkers)
            return self._pool

    def submit(self, fn: Callable[..., R], *args: Any, **kwargs: Any) -> Future[R]:
        return self._ensurePool().submit(fn, *args, **kwargs)

    def map(self, fn: Callable[[T], R], items: Iterable[T]) -> list[Future[R]]:
        """Submits fn(item) for every item, preserving input order in the returned list."""
        return [self.submit(fn, item) for item in items]

    def shutdown(self, *, wait: bool = True) -> None:
        with self._lock:
            pool, self._pool = self._pool, None
        if pool is not None:
            pool.shutdown(wait=wait)
            logger.debug("Stopped executor '%s'", self._name)

    def __enter__(self) -> "TaskExecutor":
        return self

    def __exit__(self, *exc: object) -> None:
        self.shutdown()



_sharedExecutor: TaskExecutor | None = None
_sharedLock = threading.Lock()



def getSharedExecutor() -> TaskExecutor:
    """Process-wide executor sized by the tasks.maxWorkers setting."""
    global _sharedExecutor
    with _sharedLock:
        if _sharedExecutor is None:
            _sharedExecutor = TaskExecutor(settingsInt("tasks.maxWorkers", 4), name="packforge-shared")
        return _sharedExecutor



def shutdownSharedExecutor(*, wait: bool = True) -> None:
    global _sharedExecutor
    with _sharedLock:
        executor, _sharedExecutor = _sharedExecutor, None
    if executor is not None:
        executor.shutdown(wait=wait)
