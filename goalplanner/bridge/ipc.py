from __future__ import annotations

from typing import Any, Callable

from goalplanner.core.errors import NotInitializedError

HandlerFn = Callable[..., Any]


class Bridge:
    """Synchronous request/response channel between the UI side and the data layer.

    Handlers are registered per channel name; ``invoke`` runs the handler in the
    caller's thread and returns its result or raises its exception.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, HandlerFn] = {}

    def handle(self, channel: str, fn: HandlerFn) -> None:
        if channel in self._handlers:
            raise ValueError(f"Attempted to register a second handler for '{channel}'")
        self._handlers[channel] = fn

    def remove_handler(self, channel: str) -> None:
        self._handlers.pop(channel, None)

    @property
    def channels(self) -> list[str]:
        return sorted(self._handlers)

    def invoke(self, channel: str, *args: Any) -> Any:
        fn = self._handlers.get(channel)
        if fn is None:
            raise NotInitializedError(f"No handler registered for '{channel}'")
        return fn(*args)
