"""
Synchronous event surface for SecureDatabase.

Listeners are plain callables registered per DatabaseEvent. They run in
registration order, on the caller's thread, before the operation that
emitted them returns.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Union


logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class DatabaseEvent(Enum):
    # Lifecycle notifications; values are the wire names listeners subscribe with
    SAVED = "saved"
    ERROR = "error"
    RECORD_ADDED = "recordAdded"
    RECORD_DELETED = "recordDeleted"
    DATABASE_CLEARED = "databaseCleared"


EventName = Union[DatabaseEvent, str]


def _as_event(event: EventName) -> DatabaseEvent:
    if isinstance(event, DatabaseEvent):
        return event
    try:
        return DatabaseEvent(event)
    except ValueError:
        raise ValueError(f"Unknown database event: {event!r}") from None


class _Once:
    __slots__ = ("listener",)

    def __init__(self, listener: Listener):
        self.listener = listener

    def __call__(self, *args: Any) -> Any:
        return self.listener(*args)


class EventEmitter:
    """Per-event listener lists with on/once/off and synchronous emit."""

    def __init__(self) -> None:
        self._listeners: Dict[DatabaseEvent, List[Listener]] = {e: [] for e in DatabaseEvent}

    def on(self, event: EventName, listener: Listener) -> "EventEmitter":
        if not callable(listener):
            raise TypeError("listener must be callable")
        self._listeners[_as_event(event)].append(listener)
        return self

    def once(self, event: EventName, listener: Listener) -> "EventEmitter":
        """Register ``listener`` to run on the next ``event`` only."""
        if not callable(listener):
            raise TypeError("listener must be callable")
        self._listeners[_as_event(event)].append(_Once(listener))
        return self

    def off(self, event: EventName, listener: Listener) -> "EventEmitter":
        """
        Remove the most recent registration of ``listener`` for ``event``.

        Works for listeners added with either :meth:`on` or :meth:`once`.
        Unknown listeners are ignored.
        """
        registered = self._listeners[_as_event(event)]
        for i in range(len(registered) - 1, -1, -1):
            entry = registered[i]
            if entry is listener or (isinstance(entry, _Once) and entry.listener is listener):
                del registered[i]
                break
        return self

    def listeners(self, event: EventName) -> List[Listener]:
        return [
            entry.listener if isinstance(entry, _Once) else entry
            for entry in self._listeners[_as_event(event)]
        ]

    def listener_count(self, event: EventName) -> int:
        return len(self._listeners[_as_event(event)])

    def emit(self, event: EventName, *args: Any) -> bool:
        """
        Call every listener for ``event`` with ``args``.

        Returns True if at least one listener ran. An ``error`` event with no
        listeners is logged instead. Exceptions raised by listeners propagate.
        """
        ev = _as_event(event)
        # snapshot so listeners may (un)subscribe while being called
        snapshot = list(self._listeners[ev])
        if not snapshot:
            if ev is DatabaseEvent.ERROR:
                err = args[0] if args else None
                logger.error("Unhandled database error: %s", err)
            return False

        for entry in snapshot:
            if isinstance(entry, _Once):
                self._remove_entry(ev, entry)
            entry(*args)
        return True

    def _remove_entry(self, ev: DatabaseEvent, entry: Listener) -> None:
        registered = self._listeners[ev]
        for i, existing in enumerate(registered):
            if existing is entry:
                del registered[i]
                return
