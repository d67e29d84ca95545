"""Subscriber bookkeeping shared by Signal and SignalWithResult."""

from __future__ import annotations

from collections.abc import Callable
import contextlib
import logging
from typing import TYPE_CHECKING, Any, Literal, overload


if TYPE_CHECKING:
    from anysignal.registry import SignalRegistry


logger = logging.getLogger(__name__)

type ErrorHandler = Callable[[BaseException], Any]
type Unsubscribe = Callable[[], None]


class SubscriberList[C]:
    """Ordered callbacks. Duplicates allowed, removal drops the first match."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[C] = []

    def append(self, callback: C) -> None:
        self._items.append(callback)

    def remove(self, callback: C) -> None:
        """Remove the first occurrence. No-op if it was not registered."""
        with contextlib.suppress(ValueError):
            self._items.remove(callback)

    def snapshot(self) -> tuple[C, ...]:
        return tuple(self._items)

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)


class SignalBase[C: Callable[..., Any]]:
    """Registration API and error reporting common to all signals.

    Args:
        id: Opaque identifier, used as key when registering with a registry.
        registry: Registry notified once about this instance on construction.
        on_error: Receives exceptions of failing subscribers.
                  Defaults to logging them. If the handler itself raises,
                  both errors are logged instead.
    """

    __slots__ = ("_id", "_on_error", "_subscribers")

    def __init__(
        self,
        id: str | None = None,  # noqa: A002
        *,
        registry: SignalRegistry | None = None,
        on_error: ErrorHandler | None = None,
    ) -> None:
        self._id = id
        self._on_error = on_error
        self._subscribers: SubscriberList[C] = SubscriberList()
        if registry is not None:
            registry.register(self)

    @property
    def id(self) -> str | None:
        """Identifier of this signal, if any."""
        return self._id

    @property
    def subscribers(self) -> tuple[C, ...]:
        """Currently registered callbacks in dispatch order."""
        return self._subscribers.snapshot()

    @overload
    def on(self, callback: C, *, handle: Literal[False] = False) -> None: ...

    @overload
    def on(self, callback: C, *, handle: Literal[True]) -> Unsubscribe: ...

    def on(self, callback: C, *, handle: bool = False) -> Unsubscribe | None:
        """Subscribe a callback. Sync and async callbacks are both accepted.

        Args:
            callback: Called with the dispatched arguments.
            handle: Return a function that removes exactly this subscription.
                    Useful for lambdas that can't be passed to off() later.
        """
        if not callable(callback):
            msg = "callback must be callable"
            raise TypeError(msg)
        self._subscribers.append(callback)
        if not handle:
            return None

        def unsubscribe() -> None:
            self._subscribers.remove(callback)

        return unsubscribe

    def off(self, callback: C) -> None:
        """Unsubscribe the first registration of callback. No-op if absent."""
        self._subscribers.remove(callback)

    def connect(self, callback: C) -> C:
        """Subscribe callback. Can be used as decorator."""
        self.on(callback)
        return callback

    def disconnect(self, callback: C) -> None:
        """Remove callback."""
        self.off(callback)

    def clear(self) -> None:
        """Remove all subscribers."""
        self._subscribers.clear()

    def _report(self, exc: BaseException) -> None:
        if self._on_error is not None:
            try:
                self._on_error(exc)
            except Exception:
                logger.exception("Error handler of %r failed", self)
            else:
                return
        logger.error("Subscriber of %r failed", self, exc_info=exc)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._id!r}, subscribers={len(self._subscribers)})"
