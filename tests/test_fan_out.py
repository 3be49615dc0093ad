"""Bounded fan-out tests."""

import threading
import time

from libs.core.application.fan_out import FanOutPolicy, fan_out


def test_results_follow_input_order() -> None:
    delays = {"a": 0.05, "b": 0.0, "c": 0.02}

    def _task(item: str) -> str:
        time.sleep(delays[item])
        return item.upper()

    results = fan_out(["a", "b", "c"], _task, FanOutPolicy(max_workers=3))

    assert [result.item for result in results] == ["a", "b", "c"]
    assert [result.value for result in results] == ["A", "B", "C"]


def test_failure_is_captured_per_item() -> None:
    def _task(item: str) -> str:
        if item == "bad":
            raise ValueError("boom")
        return item

    results = fan_out(["ok", "bad", "ok2"], _task, FanOutPolicy(max_workers=2))

    assert [result.ok for result in results] == [True, False, True]
    assert isinstance(results[1].error, ValueError)


def test_slow_item_times_out_alone() -> None:
    def _task(item: str) -> str:
        if item == "slow":
            time.sleep(0.5)
        return item

    results = fan_out(
        ["fast", "slow"],
        _task,
        FanOutPolicy(max_workers=2, task_timeout_sec=0.1),
    )

    assert results[0].value == "fast"
    assert isinstance(results[1].error, TimeoutError)


def test_hung_item_does_not_time_out_items_queued_behind_it() -> None:
    def _task(item: str) -> str:
        time.sleep(1.0 if item == "hung" else 0.05)
        return item

    results = fan_out(
        ["hung", "fast"],
        _task,
        FanOutPolicy(max_workers=1, task_timeout_sec=0.3),
    )

    assert isinstance(results[0].error, TimeoutError)
    assert results[1].ok
    assert results[1].value == "fast"


def test_concurrency_stays_within_worker_bound() -> None:
    lock = threading.Lock()
    active = 0
    peak = 0

    def _task(item: str) -> str:
        nonlocal active, peak
        with lock:
            active += 1
            peak = max(peak, active)
        time.sleep(0.02)
        with lock:
            active -= 1
        return item

    results = fan_out(
        ["a", "b", "c", "d", "e"],
        _task,
        FanOutPolicy(max_workers=2, task_timeout_sec=5.0),
    )

    assert [result.value for result in results] == ["a", "b", "c", "d", "e"]
    assert peak <= 2


def test_empty_input() -> None:
    assert fan_out([], str.upper, FanOutPolicy()) == []
