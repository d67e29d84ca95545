"""SignalWithResult: subscribers may answer, the first answer wins."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVarTuple, Unpack

from anysignal._base import SignalBase
from anysignal._outcome import Deferred, Immediate, first_result, invoke, is_deferred, spawn


if TYPE_CHECKING:
    from collections.abc import Sequence


Ts = TypeVarTuple("Ts")

type ResultCallback[R, *Ts] = Callable[[Unpack[Ts]], R | None | Awaitable[R | None]]
type ResultHandler[R] = Callable[[R | None], None | Awaitable[None]]


class SignalWithResult[R, *Ts](SignalBase[ResultCallback[R, *Ts]]):
    """Signal whose subscribers can return a result.

    The result of a dispatch is the first non-None value in subscription
    order, no matter whether that subscriber answered synchronously or
    asynchronously, or when it finished. None means "no answer".

    Example:
        resolve = SignalWithResult[str, int]()

        resolve.on(lambda user_id: None)

        @resolve.connect
        async def from_db(user_id: int) -> str | None:
            return await db.lookup(user_id)

        name = await resolve.emit(42)
    """

    __slots__ = ()

    def send(
        self,
        *args: *Ts,
        on_complete: ResultHandler[R] | None = None,
    ) -> asyncio.Task[None] | None:
        """Call all subscribers now, then settle async ones concurrently.

        Subscribers are called in subscription order in a single synchronous
        pass over a snapshot of the subscriber list. A failing subscriber is
        reported to the error handler and counts as having no result.

        Args:
            *args: Values passed to every subscriber.
            on_complete: Called with the aggregated result once every
                         subscriber has settled. If no subscriber returned an
                         awaitable, it is called before send() returns.

        Returns:
            The task settling pending awaitables if a loop is running and any
            subscriber returned one, otherwise None.
        """
        # one slot per subscriber, indexed by subscription position
        slots: list[R | None] = []
        pending: list[tuple[int, Awaitable[R | None]]] = []
        for index, callback in enumerate(self._subscribers.snapshot()):
            slots.append(None)
            try:
                outcome = invoke(callback, args)
            except Exception as e:  # noqa: BLE001
                self._report(e)
                continue
            match outcome:
                case Immediate(value):
                    slots[index] = value
                case Deferred(awaitable):
                    pending.append((index, awaitable))

        if not pending:
            handled = self._complete(on_complete, first_result(slots))
            if handled is not None:
                spawn(self._settle(handled))
            return None
        return spawn(self._settle_all(slots, pending, on_complete))

    async def emit(self, *args: *Ts) -> R | None:
        """Run subscribers one at a time and return the first non-None result.

        All subscribers run, later results are ignored once one was found.
        Unlike send(), a failing subscriber is not contained: its exception
        propagates to the caller and the remaining subscribers are skipped.
        """
        result: R | None = None
        for callback in self._subscribers.snapshot():
            match invoke(callback, args):
                case Deferred(awaitable):
                    value = await awaitable
                case Immediate(value):
                    pass
            if result is None:
                result = value
        return result

    async def _settle_all(
        self,
        slots: list[R | None],
        pending: Sequence[tuple[int, Awaitable[R | None]]],
        on_complete: ResultHandler[R] | None,
    ) -> None:
        values = await asyncio.gather(*(self._settle(awaitable) for _, awaitable in pending))
        for (index, _), value in zip(pending, values, strict=True):
            slots[index] = value
        handled = self._complete(on_complete, first_result(slots))
        if handled is not None:
            await self._settle(handled)

    async def _settle(self, awaitable: Awaitable[R | None]) -> R | None:
        try:
            return await awaitable
        except Exception as e:  # noqa: BLE001
            self._report(e)
            return None

    def _complete(
        self, on_complete: ResultHandler[R] | None, result: R | None
    ) -> Awaitable[None] | None:
        """Call on_complete with the result and return its awaitable, if any."""
        if on_complete is None:
            return None
        try:
            handled = on_complete(result)
        except Exception as e:  # noqa: BLE001
            self._report(e)
            return None
        return handled if is_deferred(handled) else None
