"""Classification of subscriber return values into immediate and deferred outcomes."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import inspect
from typing import TYPE_CHECKING, Any

from typing_extensions import TypeIs


if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Coroutine, Iterable


@dataclass(frozen=True, slots=True)
class Immediate[T]:
    """Value a subscriber returned synchronously."""

    value: T


@dataclass(frozen=True, slots=True)
class Deferred[T]:
    """Awaitable a subscriber returned, to be settled later."""

    awaitable: Awaitable[T]


type Outcome[T] = Immediate[T] | Deferred[T]

# Strong references to tasks started by spawn(), dropped once they finish.
_background_tasks: set[asyncio.Task[Any]] = set()


def is_deferred[T](value: T | Awaitable[T]) -> TypeIs[Awaitable[T]]:
    """Check whether a subscriber return value still has to be awaited."""
    return inspect.isawaitable(value)


def invoke[T](callback: Callable[..., T | Awaitable[T]], args: tuple[Any, ...]) -> Outcome[T]:
    """Call a subscriber once and wrap what it returned."""
    value = callback(*args)
    if is_deferred(value):
        return Deferred(value)
    return Immediate(value)


def first_result[T](values: Iterable[T | None]) -> T | None:
    """Return the first value that is not None."""
    return next((value for value in values if value is not None), None)


def spawn(coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any] | None:
    """Run a coroutine without suspending the caller.

    - If a loop is running, schedules it and returns the asyncio.Task.
    - If no loop is running, blocks until it is done and returns None.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        asyncio.run(coro)
        return None
    task = loop.create_task(coro)
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return task
