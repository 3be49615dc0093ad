"""Bounded per-recipient fan-out with ordered result collection."""

from __future__ import annotations

import threading
import time
from collections import deque
from concurrent.futures import FIRST_COMPLETED, Future, wait
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

DEFAULT_MAX_WORKERS = 4
DEFAULT_TASK_TIMEOUT_SEC = 15.0


@dataclass
class TaskResult(Generic[T]):
    """Outcome of one fan-out task, ``error`` set when the task failed."""

    item: str
    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class FanOutPolicy:
    """Concurrent task bound and per-task time limit."""

    max_workers: int = DEFAULT_MAX_WORKERS
    task_timeout_sec: float = DEFAULT_TASK_TIMEOUT_SEC


def fan_out(
    items: list[str],
    task: Callable[[str], T],
    policy: FanOutPolicy,
) -> list[TaskResult[T]]:
    """Run ``task`` for every item and return results in input order.

    At most ``max_workers`` tasks run at once. Each task's time limit starts
    when the task starts; a task past its limit is abandoned, reported as
    timed out, and its slot goes to the next queued item.
    """
    if not items:
        return []

    workers = max(1, policy.max_workers)
    pending = deque(enumerate(items))
    running: dict[Future, tuple[int, float]] = {}
    results: dict[int, TaskResult[T]] = {}

    while pending or running:
        while pending and len(running) < workers:
            index, item = pending.popleft()
            running[_start(task, item)] = (index, time.monotonic())

        next_deadline = min(
            started + policy.task_timeout_sec for _, started in running.values()
        )
        done, _ = wait(
            list(running),
            timeout=max(0.0, next_deadline - time.monotonic()),
            return_when=FIRST_COMPLETED,
        )

        for future in done:
            index, _ = running.pop(future)
            error = future.exception()
            if error is None:
                results[index] = TaskResult(item=items[index], value=future.result())
            else:
                results[index] = TaskResult(item=items[index], error=error)

        now = time.monotonic()
        for future, (index, started) in list(running.items()):
            if now - started >= policy.task_timeout_sec:
                del running[future]
                results[index] = TaskResult(
                    item=items[index],
                    error=TimeoutError(f"timed out after {policy.task_timeout_sec}s"),
                )

    return [results[index] for index in range(len(items))]


def _start(task: Callable[[str], T], item: str) -> Future:
    future: Future = Future()

    def _run() -> None:
        try:
            future.set_result(task(item))
        except Exception as error:
            future.set_exception(error)

    threading.Thread(target=_run, name=f"fanout-{item}", daemon=True).start()
    return future
