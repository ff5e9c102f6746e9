from __future__ import annotations

import queue
import threading
from collections.abc import Callable, Sequence
from typing import TypeVar

T = TypeVar("T")
R = TypeVar("R")


def map_bounded(fn: Callable[[T], R], items: Sequence[T], workers: int) -> list[R]:
    """Apply *fn* to every item on at most *workers* threads.

    Results come back in input order.  *fn* must not raise; callers wrap
    their own failures into the return value.
    """
    results: list[R | None] = [None] * len(items)
    if not items:
        return []

    q: queue.Queue[int | None] = queue.Queue()
    for index in range(len(items)):
        q.put(index)

    def run_worker() -> None:
        while True:
            index = q.get()
            if index is None:
                q.task_done()
                break
            try:
                results[index] = fn(items[index])
            finally:
                q.task_done()

    num_workers = max(1, min(workers, len(items)))
    threads = [threading.Thread(target=run_worker, daemon=True) for _ in range(num_workers)]
    for thread in threads:
        thread.start()
    for _ in threads:
        q.put(None)
    for thread in threads:
        thread.join()
    return results  # type: ignore[return-value]
