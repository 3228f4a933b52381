"""
Bounded concurrent task execution with typed results
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, List, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass
class TaskResult(Generic[T]):
    """Value or error of one task; errors are captured, never raised"""
    key: Any
    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def batched(items: Sequence[T], batch_size: int) -> Iterator[List[T]]:
    """Split items into consecutive batches of at most batch_size"""
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")
    for start in range(0, len(items), batch_size):
        yield list(items[start:start + batch_size])


def run_concurrently(tasks: Sequence[Any],
                     fn: Callable[[Any], T],
                     max_workers: Optional[int] = None) -> List[TaskResult]:
    """
    Run fn over every task on a thread pool

    Args:
        tasks: Task keys; each is passed to fn
        fn: Work function
        max_workers: Pool size, defaults to one thread per task

    Returns:
        One TaskResult per task, in submission order regardless of completion order
    """
    if not tasks:
        return []

    results: List[Optional[TaskResult]] = [None] * len(tasks)
    workers = max_workers or len(tasks)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        future_to_index = {
            executor.submit(fn, task): index
            for index, task in enumerate(tasks)
        }

        for future in as_completed(future_to_index):
            index = future_to_index[future]
            try:
                results[index] = TaskResult(key=tasks[index], value=future.result())
            except Exception as e:
                results[index] = TaskResult(key=tasks[index], error=e)

    return results
