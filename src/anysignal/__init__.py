"""Typed signals with sync and async subscribers.

Two flavours share the same registration API:

- Signal: fire-and-observe, subscribers return nothing.
- SignalWithResult: fire-and-collect, the first non-None subscriber result
  (in subscription order) becomes the result.

Both dispatch either immediately via `send()` (all subscribers called right
away, async ones settled concurrently, failures logged and contained) or
sequentially via `await emit()` (one subscriber after another, failures
propagate).

Example:
    registry = SignalRegistry("app")
    saved = registry.Signal[str]("file-saved")

    @saved.connect
    async def on_saved(path: str) -> None:
        print(f"Saved {path}")

    saved.send("/tmp/test.txt")
"""

from __future__ import annotations

from anysignal._base import SignalBase
from anysignal.core import Signal
from anysignal.registry import SignalFactory, SignalRegistry, default_registry
from anysignal.result import SignalWithResult

__all__ = [
    "Signal",
    "SignalBase",
    "SignalFactory",
    "SignalRegistry",
    "SignalWithResult",
    "default_registry",
]

__version__ = "0.1.0"
