"""Synchronous multicast signal used for amount change notifications."""
from __future__ import annotations

from typing import Any, Callable, List

Handler = Callable[..., None]


class Signal:
    """Ordered list of handlers invoked in-line by :meth:`emit`.

    Handlers run in registration order before ``emit`` returns. Emission
    iterates over a copy of the handler list, so a handler may connect or
    disconnect handlers (or trigger another emission) without affecting the
    delivery that is already in progress.
    """

    def __init__(self) -> None:
        self._handlers: List[Handler] = []

    def connect(self, handler: Handler) -> Handler:
        """Register ``handler`` and return it (usable as a decorator)."""

        if not callable(handler):
            raise TypeError(f"Signal handler must be callable, got {handler!r}")
        self._handlers.append(handler)
        return handler

    def disconnect(self, handler: Handler) -> None:
        """Remove the first registration of ``handler``; unknown handlers are ignored."""

        try:
            self._handlers.remove(handler)
        except ValueError:
            pass

    def emit(self, *args: Any) -> None:
        for handler in list(self._handlers):
            handler(*args)

    def clear(self) -> None:
        self._handlers.clear()

    def __len__(self) -> int:
        return len(self._handlers)


__all__ = ["Handler", "Signal"]
