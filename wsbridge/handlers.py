"""A registry of message handlers by packet type, and connect-error text."""

from __future__ import annotations

import threading
from typing import Any, Callable, Iterator

MsgHandler = Callable[[Any, Any], Any]


class MsgHandlerRegistry:
    """Maps packet types to handlers; safe to use from several threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handlers: dict[int, MsgHandler] = {}

    def register(self, msg_type: int, handler: MsgHandler | None) -> bool:
        """Add a handler for a type.

        Returns False when the type already has a handler or no handler is given.
        Raises TypeError when the handler is not callable.
        """
        if handler is None:
            return False
        if not callable(handler):
            raise TypeError(f"message handler must be callable, got {type(handler).__name__}")
        with self._lock:
            if msg_type in self._handlers:
                return False
            self._handlers[msg_type] = handler
            return True

    def get(self, msg_type: int) -> MsgHandler | None:
        """Return the handler for a type, or None."""
        with self._lock:
            return self._handlers.get(msg_type)

    def erase(self, msg_type: int) -> bool:
        """Remove the handler for a type; False if there was none."""
        with self._lock:
            return self._handlers.pop(msg_type, None) is not None

    def __contains__(self, msg_type: object) -> bool:
        with self._lock:
            return msg_type in self._handlers

    def __len__(self) -> int:
        with self._lock:
            return len(self._handlers)

    def __iter__(self) -> Iterator[int]:
        with self._lock:
            return iter(list(self._handlers))

    def __repr__(self) -> str:
        return f"MsgHandlerRegistry(types={sorted(self)!r})"


def gen_connect_error(error: str, endpoint: str, end: bool) -> str:
    """Format one endpoint's connect failure; a separator follows unless it is the last."""
    message = f"{error}:/{endpoint}"
    if not end:
        message += ", "
    return message