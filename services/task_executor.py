"""
Asynchronous task execution on a dedicated worker pool.

Blocking work (SMTP delivery, batch jobs) is moved off the event loop and
off the request path. When disabled, tasks run inline on the caller's thread.
"""
import asyncio
import concurrent.futures
import logging
import uuid
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class TaskExecutor:
    """Thread pool wrapper with fire-and-forget and awaitable dispatch"""

    def __init__(self, enabled: bool = True, max_workers: int = 4, thread_name_prefix: str = "fitgenius-async"):
        self.enabled = enabled
        self.max_workers = max_workers
        self.thread_name_prefix = thread_name_prefix
        self._pool: Optional[concurrent.futures.ThreadPoolExecutor] = None

    @property
    def is_running(self) -> bool:
        return self._pool is not None

    def start(self) -> None:
        if not self.enabled:
            logger.info("Async executor disabled; tasks run inline")
            return
        if self._pool is None:
            self._pool = concurrent.futures.ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix=self.thread_name_prefix,
            )
            logger.info(f"Async executor started ({self.max_workers} workers)")

    def shutdown(self, wait: bool = True) -> None:
        """Wait for running tasks and drop queued ones"""
        if self._pool is not None:
            self._pool.shutdown(wait=wait, cancel_futures=True)
            self._pool = None
            logger.info("Async executor stopped")

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Optional[concurrent.futures.Future]:
        """
        Fire-and-forget dispatch.

        Failures are logged with a task id; nothing propagates to the caller.
        Returns the Future when pooled, None when the task ran inline.
        """
        task_id = f"task-{uuid.uuid4().hex[:8]}"
        name = getattr(fn, "__name__", repr(fn))

        if self._pool is None:
            try:
                fn(*args, **kwargs)
            except Exception:
                logger.exception(f"[{task_id}] Task {name} failed")
            return None

        future = self._pool.submit(fn, *args, **kwargs)

        def _report(f: concurrent.futures.Future) -> None:
            if f.cancelled():
                logger.warning(f"[{task_id}] Task {name} cancelled")
                return
            exc = f.exception()
            if exc is not None:
                logger.error(f"[{task_id}] Task {name} failed: {exc}", exc_info=exc)

        future.add_done_callback(_report)
        return future

    async def run(self, fn: Callable[..., Any], *args: Any) -> Any:
        """Run fn on the pool and await its result; exceptions propagate"""
        if self._pool is None:
            return fn(*args)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._pool, fn, *args)


_executor: Optional[TaskExecutor] = None


def set_task_executor(executor: Optional[TaskExecutor]) -> None:
    global _executor
    _executor = executor


def get_task_executor() -> TaskExecutor:
    """Executor installed by the application; an inline one before startup"""
    if _executor is None:
        return TaskExecutor(enabled=False)
    return _executor
