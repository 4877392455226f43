"""
Background Tasks - fire-and-forget work off the request path.

Used for writes whose outcome must not delay or change the reply
(storing a user's statement as a memory). Each task's completion is
reported through the logs and the runner's counters; wait() is the
join point for shutdown and tests.
"""
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait as wait_futures
from typing import Any, Callable, Dict, Optional, Set

from soar.core.logging_config import get_logger

logger = get_logger(__name__)


class BackgroundTaskRunner:
    """
    Thread-pool runner for fire-and-forget tasks.

    Example:
        >>> runner = BackgroundTaskRunner(max_workers=2)
        >>> future = runner.submit("store-statement", memory_client.add, "text", "u1")
        >>> runner.wait(timeout=5)
        True
        >>> runner.get_stats()["succeeded"]
        1
    """

    def __init__(self, max_workers: int = 4, name: str = "soar-bg"):
        """
        Initialize the runner.

        Args:
            max_workers: Number of worker threads
            name: Thread name prefix (shows up in logs)
        """
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=name)
        self._lock = threading.Lock()
        self._pending: Set[Future] = set()
        self._stats = {"submitted": 0, "succeeded": 0, "failed": 0}

        logger.info(f"BackgroundTaskRunner initialized: max_workers={max_workers}")

    def submit(self, label: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """
        Schedule fn(*args, **kwargs) and return immediately.

        Exceptions raised by fn are logged and counted; they stay on the
        returned future and are never re-raised to the submitter.
        """
        # Counted only once the executor accepts the task; raises after shutdown
        with self._lock:
            future = self._executor.submit(self._run, label, fn, args, kwargs)
            self._stats["submitted"] += 1
            self._pending.add(future)
        future.add_done_callback(self._discard)
        return future

    def _run(self, label: str, fn: Callable[..., Any], args: tuple, kwargs: dict) -> Any:
        # Counters are updated before the future resolves, so wait() sees them
        try:
            result = fn(*args, **kwargs)
        except Exception as e:
            with self._lock:
                self._stats["failed"] += 1
            logger.error(f"Background task failed: {label}: {e}")
            raise
        with self._lock:
            self._stats["succeeded"] += 1
        logger.debug(f"Background task completed: {label}")
        return result

    def _discard(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until every submitted task has finished.

        Returns:
            True if nothing is left running when the call returns
        """
        with self._lock:
            pending = set(self._pending)
        if pending:
            wait_futures(pending, timeout=timeout)
        with self._lock:
            return all(f.done() for f in self._pending)

    def get_stats(self) -> Dict[str, int]:
        """Submitted / succeeded / failed / pending counts."""
        with self._lock:
            return {**self._stats, "pending": sum(1 for f in self._pending if not f.done())}

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; optionally wait for running tasks."""
        self._executor.shutdown(wait=wait)
        logger.info(f"BackgroundTaskRunner shut down: {self.get_stats()}")


# Global runner instance
_runner: Optional[BackgroundTaskRunner] = None


def get_background_runner() -> BackgroundTaskRunner:
    """Get or create the global background runner."""
    global _runner
    if _runner is None:
        from soar.core.config import get_settings
        _runner = BackgroundTaskRunner(max_workers=get_settings().background_max_workers)
    return _runner


def shutdown_background_runner(wait: bool = True) -> None:
    """Shut down and forget the global runner."""
    global _runner
    if _runner is not None:
        _runner.shutdown(wait=wait)
    _runner = None
