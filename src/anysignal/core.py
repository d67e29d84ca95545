"""Signal: ordered subscribers receiving values, without results."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeVarTuple, Unpack

from anysignal._base import SignalBase
from anysignal._outcome import Deferred, Immediate, invoke, is_deferred, spawn


if TYPE_CHECKING:
    from collections.abc import Sequence


Ts = TypeVarTuple("Ts")

type SignalCallback[*Ts] = Callable[[Unpack[Ts]], None | Awaitable[None]]
type CompletionCallback = Callable[[], None | Awaitable[None]]


class Signal[*Ts](SignalBase[SignalCallback[*Ts]]):
    """Signal whose subscribers may be sync functions or coroutine functions.

    Example:
        clicked = Signal[int]()

        @clicked.connect
        async def on_click(button: int) -> None:
            print(f"Button {button} clicked")

        clicked.send(1)       # start all subscribers, don't wait
        await clicked.emit(1)  # run subscribers one after another
    """

    __slots__ = ()

    def send(
        self,
        *args: *Ts,
        on_complete: CompletionCallback | None = None,
    ) -> asyncio.Task[None] | None:
        """Call all subscribers now, then settle async ones concurrently.

        Subscribers are called in subscription order in a single synchronous
        pass over a snapshot of the subscriber list. Failures, sync or async,
        are reported to the error handler and never raised to the caller.

        Args:
            *args: Values passed to every subscriber.
            on_complete: Called once every subscriber has settled. If no
                         subscriber returned an awaitable, it is called before
                         send() returns.

        Returns:
            The task settling pending awaitables if a loop is running and any
            subscriber returned one, otherwise None.
        """
        pending: list[Awaitable[Any]] = []
        for callback in self._subscribers.snapshot():
            try:
                outcome = invoke(callback, args)
            except Exception as e:  # noqa: BLE001
                self._report(e)
                continue
            match outcome:
                case Deferred(awaitable):
                    pending.append(awaitable)
                case Immediate():
                    pass

        if not pending:
            handled = self._complete(on_complete)
            if handled is not None:
                spawn(self._settle(handled))
            return None
        return spawn(self._settle_all(pending, on_complete))

    async def emit(self, *args: *Ts) -> None:
        """Run subscribers one at a time, awaiting each before the next.

        Unlike send(), a failing subscriber is not contained: its exception
        propagates to the caller and the remaining subscribers are skipped.
        """
        for callback in self._subscribers.snapshot():
            match invoke(callback, args):
                case Deferred(awaitable):
                    await awaitable
                case Immediate():
                    pass

    async def _settle_all(
        self,
        pending: Sequence[Awaitable[Any]],
        on_complete: CompletionCallback | None,
    ) -> None:
        await asyncio.gather(*(self._settle(awaitable) for awaitable in pending))
        handled = self._complete(on_complete)
        if handled is not None:
            await self._settle(handled)

    async def _settle(self, awaitable: Awaitable[Any]) -> None:
        try:
            await awaitable
        except Exception as e:  # noqa: BLE001
            self._report(e)

    def _complete(self, on_complete: CompletionCallback | None) -> Awaitable[None] | None:
        """Call on_complete and return its awaitable, if it returned one."""
        if on_complete is None:
            return None
        try:
            result = on_complete()
        except Exception as e:  # noqa: BLE001
            self._report(e)
            return None
        return result if is_deferred(result) else None
