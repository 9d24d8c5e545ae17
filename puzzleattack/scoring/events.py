"""Synchronous observer lists for scoring and match notifications.

Observers are called in the order they connected, immediately inside the
operation that emits. Nothing is queued, so notifications for one grid always
precede notifications caused by a later call for another grid. A failing
observer is logged and skipped; it never aborts the operation that emitted.
"""

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


class Signal:
    """An ordered list of callbacks fired with the same positional arguments."""

    def __init__(self, name: str = ""):
        self.name = name
        self._callbacks: list[Callable[..., Any]] = []

    def connect(self, callback: Callable[..., Any]) -> Callable[..., Any]:
        """Subscribe a callback. Returns it so this can be used as a decorator."""
        self._callbacks.append(callback)
        return callback

    def disconnect(self, callback: Callable[..., Any]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def disconnect_all(self) -> None:
        self._callbacks.clear()

    def emit(self, *args: Any) -> None:
        # Copy so a callback may disconnect itself while being notified
        for callback in list(self._callbacks):
            try:
                callback(*args)
            except Exception:
                logger.exception("Observer %r of signal '%s' failed", callback, self.name)

    def __len__(self) -> int:
        return len(self._callbacks)

    def __repr__(self) -> str:
        return f"<Signal({self.name}, {len(self._callbacks)} observers)>"
