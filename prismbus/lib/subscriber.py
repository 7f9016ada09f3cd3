"""Subscriber handles and the delivery capability check."""

from __future__ import annotations

from typing import Any, Callable

from prismbus.lib.events import Event


def can_receive(target: Any) -> bool:
    """Check whether an object can accept events.

    Any object exposing a callable ``dispatch_event`` attribute qualifies.
    """
    return target is not None and callable(getattr(target, "dispatch_event", None))


def describe(target: Any) -> str:
    """Short human readable name of a subscriber for log messages."""
    label = getattr(target, "label", None)
    if label:
        return str(label)
    return type(target).__name__


class Subscriber:
    """Opaque handle wrapping a plain callback so it can join a bus.

    Handles compare by identity: two handles around the same callback are two
    different subscribers.
    """

    __slots__ = ("_callback", "label")

    def __init__(self, callback: Callable[[Event], Any], label: str | None = None) -> None:
        self._callback = callback
        self.label = label or getattr(callback, "__name__", None) or "Subscriber"

    def dispatch_event(self, event: Event) -> None:
        """Synchronously hand the event to the wrapped callback."""
        self._callback(event)

    def __repr__(self) -> str:
        return f"<Subscriber {self.label} at {id(self):#x}>"
