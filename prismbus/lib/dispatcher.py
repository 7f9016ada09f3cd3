"""Event routing and the delay buffer.

The dispatcher delivers events synchronously to matching subscribers. Events
posted with delay that reach nobody are kept per type in a ``DelayBuffer`` and
replayed to the first subscriber that registers for that type.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from prismbus.constants import LOG_TAG
from prismbus.lib.events import Event
from prismbus.lib.registry import Registry
from prismbus.lib.subscriber import describe


class DelayBuffer:
    """Unbounded per-type FIFO of events waiting for a subscriber."""

    def __init__(self) -> None:
        self._items: dict[str, list[Event]] = {}

    def enqueue(self, event: Event) -> None:
        self._items.setdefault(event.type, []).append(event)
        logging.debug(f"[{LOG_TAG}] '{event.type}' event is queued")

    def dequeue(self, event_type: str) -> list[Event]:
        """Remove and return every buffered event of a type, oldest first."""
        return self._items.pop(event_type, [])

    def pending(self) -> dict[str, int]:
        """Number of buffered events per type."""
        return {event_type: len(items) for event_type, items in self._items.items()}

    def clear(self) -> None:
        self._items.clear()

    def __contains__(self, event_type: str) -> bool:
        return event_type in self._items

    def __len__(self) -> int:
        return sum(len(items) for items in self._items.values())


def deliver(target: Any, event: Event) -> None:
    """Hand an event to a single subscriber."""
    logging.debug(f"[{LOG_TAG}] dispatch '{event.type}' event via {describe(target)}")
    target.dispatch_event(event)


class Dispatcher:
    """Matches events against a registry and delivers them.

    Handlers are called synchronously; exceptions bubble up normally.
    """

    def __init__(self, registry: Registry, buffer: DelayBuffer) -> None:
        self._registry = registry
        self._buffer = buffer

    def emit(self, event: Event, restricted: bool = False) -> int:
        """Deliver ``event`` to every matching subscriber.

        Args:
            event: The event to deliver.
            restricted: Only deliver to subscribers listing the event type
                explicitly, skipping wildcard subscribers.

        Returns:
            The number of subscribers the event was delivered to.
        """
        count = 0
        for subscription in self._registry.snapshot():
            if subscription.accepts(event.type, restricted):
                deliver(subscription.target, event)
                count += 1
        return count

    def queue(self, event: Event) -> None:
        """Deliver to explicit subscribers, or buffer when there are none."""
        if self.emit(event, restricted=True) == 0:
            self._buffer.enqueue(event)

    def poll(self, target: Any, types: Iterable[str]) -> int:
        """Drain buffered events of ``types`` straight into ``target``.

        Returns:
            The number of replayed events.
        """
        count = 0
        for event_type in types:
            for event in self._buffer.dequeue(event_type):
                deliver(target, event)
                count += 1
        return count
