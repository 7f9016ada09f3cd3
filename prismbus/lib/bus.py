"""A single named bus: registry, dispatcher and delay buffer."""

from __future__ import annotations

import contextlib
import logging
import threading
from typing import Any, Callable

from prismbus.constants import DEFAULT_BUS_NAME, LOG_TAG
from prismbus.lib.dispatcher import DelayBuffer, Dispatcher
from prismbus.lib.events import Event
from prismbus.lib.registry import Registry, Subscription


class Bus:
    """Independent event routing domain identified by name.

    Registry and buffer mutations, as well as deliveries, happen under a
    per-bus re-entrant lock so that a handler may post, register or
    unregister on the same bus while it is being called. A bus that lost its
    last subscriber is closed for good; the directory replaces it on next use.
    """

    def __init__(
        self,
        name: str = DEFAULT_BUS_NAME,
        on_empty: Callable[["Bus"], Any] | None = None,
        thread_safe: bool = True,
    ) -> None:
        self.name = name
        self._on_empty = on_empty
        self.closed = False
        self._lock = threading.RLock() if thread_safe else contextlib.nullcontext()
        self._registry = Registry()
        self._buffer = DelayBuffer()
        self._dispatcher = Dispatcher(self._registry, self._buffer)

    def add_subscriber(self, target: Any, types: Any = None) -> bool:
        """Register ``target`` and replay buffered events for its new types.

        Returns:
            False if the bus was already torn down and nothing was registered.
        """
        with self._lock:
            if self.closed:
                return False
            added = self._registry.add_subscriber(target, types)
            if added:
                self._dispatcher.poll(target, added)
            return True

    def remove_subscriber(self, target: Any, types: Any = None) -> None:
        """Unregister ``target`` or some of its types, tearing down when empty."""
        with self._lock:
            emptied = self._registry.remove_subscriber(target, types)
            closing = emptied and self._close()
        if closing:
            self._detach()

    def emit(self, event: Event, restricted: bool = False) -> int:
        with self._lock:
            return self._dispatcher.emit(event, restricted)

    def queue(self, event: Event) -> bool:
        """Deliver or buffer ``event``; False if the bus was already torn down."""
        with self._lock:
            if self.closed:
                return False
            self._dispatcher.queue(event)
            return True

    def poll(self, target: Any, types: list[str]) -> int:
        with self._lock:
            return self._dispatcher.poll(target, types)

    def destroy(self) -> None:
        """Tear down the bus if it has no subscribers left."""
        with self._lock:
            closing = not len(self._registry) and self._close()
        if closing:
            self._detach()

    def _close(self) -> bool:
        # Caller holds the bus lock
        if self.closed:
            return False
        self.closed = True
        self._buffer.clear()
        return True

    def _detach(self) -> None:
        # Runs without the bus lock so the directory never waits on it
        logging.debug(f"[{LOG_TAG}] instance '{self.name}' is destroyed")
        if self._on_empty is not None:
            self._on_empty(self)

    @property
    def subscribers(self) -> tuple[Subscription, ...]:
        """Current subscriptions, most recently added first."""
        with self._lock:
            return self._registry.snapshot()

    def types_of(self, target: Any) -> list[str] | None:
        with self._lock:
            return self._registry.types_of(target)

    def pending(self) -> dict[str, int]:
        """Buffered event counts per type."""
        with self._lock:
            return self._buffer.pending()

    def is_empty(self) -> bool:
        with self._lock:
            return len(self._registry) == 0

    def __contains__(self, target: Any) -> bool:
        with self._lock:
            return target in self._registry

    def __len__(self) -> int:
        with self._lock:
            return len(self._registry)

    def __repr__(self) -> str:
        return f"<Bus {self.name!r} subscribers={len(self)}>"
