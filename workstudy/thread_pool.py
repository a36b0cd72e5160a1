"""A fixed-size pool of worker threads that drains its queue before stopping."""

from __future__ import annotations

import queue
import threading
from concurrent.futures import Future
from typing import Any, Callable, List, Optional, Tuple

_Task = Tuple[Future, Callable[..., Any], tuple, dict]


class ThreadPool:
    """Runs submitted callables on a fixed number of threads."""

    def __init__(self, threads: int) -> None:
        if threads < 1:
            raise ValueError("a thread pool needs at least one thread")
        self._tasks: "queue.Queue[Optional[_Task]]" = queue.Queue()
        self._lock = threading.Lock()
        self._stopped = False
        self._workers: List[threading.Thread] = [
            threading.Thread(target=self._work, daemon=True) for _ in range(threads)
        ]
        for worker in self._workers:
            worker.start()

    @property
    def size(self) -> int:
        return len(self._workers)

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> "Future[Any]":
        """Queue a call and return a future for its result."""
        future: "Future[Any]" = Future()
        with self._lock:
            if self._stopped:
                raise RuntimeError("submit on a stopped thread pool")
            self._tasks.put((future, fn, args, kwargs))
        return future

    def shutdown(self) -> None:
        """Finish every queued task, then stop and join the workers."""
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            for _ in self._workers:
                self._tasks.put(None)
        for worker in self._workers:
            worker.join()

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    def _work(self) -> None:
        while True:
            task = self._tasks.get()
            if task is None:
                return
            future, fn, args, kwargs = task
            if not future.set_running_or_notify_cancel():
                continue
            try:
                future.set_result(fn(*args, **kwargs))
            except BaseException as exc:  # handed to the caller through the future
                future.set_exception(exc)