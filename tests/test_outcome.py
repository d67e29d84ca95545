"""Tests for subscriber outcome helpers."""

from __future__ import annotations

import asyncio

from anysignal._outcome import Deferred, Immediate, first_result, invoke, spawn


def test_invoke_classifies_plain_value():
    """Test sync return values become Immediate outcomes."""
    assert invoke(lambda a, b: a + b, (1, 2)) == Immediate(3)
    assert invoke(lambda: None, ()) == Immediate(None)


def test_invoke_classifies_awaitable():
    """Test coroutines become Deferred outcomes."""

    async def handler(value: int) -> int:
        return value

    outcome = invoke(handler, (1,))
    assert isinstance(outcome, Deferred)
    assert asyncio.run(outcome.awaitable) == 1


def test_first_result():
    """Test first_result skips None but keeps falsy values."""
    assert first_result([None, 0, 1]) == 0
    assert first_result([None, None]) is None
    assert first_result([]) is None


def test_spawn_without_loop_runs_to_completion():
    """Test spawn() blocks when no loop is running."""
    out: list[str] = []

    async def work() -> None:
        await asyncio.sleep(0)
        out.append("done")

    assert spawn(work()) is None
    assert out == ["done"]


async def test_spawn_with_loop_returns_task():
    """Test spawn() schedules on the running loop."""
    out: list[str] = []

    async def work() -> None:
        out.append("done")

    task = spawn(work())
    assert isinstance(task, asyncio.Task)
    assert out == []
    await task
    assert out == ["done"]
