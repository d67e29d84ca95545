"""Registry of signals keyed by id, with an instantiation hook."""

from __future__ import annotations

from functools import partial
import logging
from typing import TYPE_CHECKING, Any

from anysignal.core import Signal
from anysignal.result import SignalWithResult


if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from anysignal._base import SignalBase


logger = logging.getLogger(__name__)


class SignalFactory[S: SignalBase[Any]]:
    """Factory class that supports generic syntax Signal[Type]() bound to a registry."""

    __slots__ = ("_registry", "_signal_cls")

    def __init__(self, registry: SignalRegistry, signal_cls: type[S]) -> None:
        self._registry = registry
        self._signal_cls = signal_cls

    def __getitem__(self, params: Any) -> Callable[..., S]:
        """Support registry.Signal[int]("id") syntax."""
        return partial(self._signal_cls[params], registry=self._registry)  # type: ignore[index]

    def __call__(self, *args: Any, **kwargs: Any) -> S:
        return self._signal_cls(*args, registry=self._registry, **kwargs)


class SignalRegistry:
    """Lookup table for signals constructed with this registry.

    Signals with an id are stored under it, a later signal with the same id
    replaces the earlier one. Every signal constructed with the registry is
    announced via the `instantiated` signal, with or without id.

    Example:
        registry = SignalRegistry("app")

        @registry.instantiated.connect
        def on_new_signal(signal: SignalBase[Any]) -> None:
            print(f"New signal {signal.id}")

        saved = registry.Signal[str]("file-saved")
        assert registry["file-saved"] is saved
    """

    __slots__ = ("Signal", "SignalWithResult", "_name", "_signals", "instantiated")

    def __init__(self, name: str = "default") -> None:
        self._name = name
        self._signals: dict[str, SignalBase[Any]] = {}
        self.instantiated: Signal[SignalBase[Any]] = Signal()
        self.Signal = SignalFactory[Signal[Any]](self, Signal)
        self.SignalWithResult = SignalFactory[SignalWithResult[Any, Any]](self, SignalWithResult)

    @property
    def name(self) -> str:
        """Get the name of this registry."""
        return self._name

    def register(self, signal: SignalBase[Any]) -> None:
        """Store signal under its id (if any) and announce it."""
        if signal.id is not None:
            if signal.id in self._signals:
                logger.debug("Registry %r: replacing signal %r", self._name, signal.id)
            self._signals[signal.id] = signal
        self.instantiated.send(signal)

    def unregister(self, id: str) -> SignalBase[Any] | None:  # noqa: A002
        """Remove the signal stored under id and return it, if there was one."""
        return self._signals.pop(id, None)

    def get(self, id: str) -> SignalBase[Any] | None:  # noqa: A002
        """Return the signal stored under id, or None."""
        return self._signals.get(id)

    def clear(self) -> None:
        """Forget all stored signals. Subscribers of `instantiated` are kept."""
        self._signals.clear()

    def __getitem__(self, id: str) -> SignalBase[Any]:  # noqa: A002
        try:
            return self._signals[id]
        except KeyError:
            msg = f"Signal {id!r} not found in registry {self._name!r}"
            raise KeyError(msg) from None

    def __contains__(self, id: object) -> bool:  # noqa: A002
        return id in self._signals

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._signals))

    def __len__(self) -> int:
        return len(self._signals)

    def __repr__(self) -> str:
        return f"SignalRegistry(name={self._name!r}, signals={len(self)})"


# Default registry instance, for applications that want a single shared one
default_registry = SignalRegistry("default")
