"""Named bus lookup and the public post/register entry points."""

from __future__ import annotations

import contextlib
import logging
import threading
from typing import TYPE_CHECKING, Any

from prismbus.constants import DEFAULT_BUS_NAME, LOG_TAG
from prismbus.lib.bus import Bus
from prismbus.lib.events import Event
from prismbus.lib.subscriber import can_receive

if TYPE_CHECKING:
    from prismbus.lib.settings_manager import SettingsManager


class Directory:
    """Process-wide mapping of bus names to ``Bus`` instances.

    Buses are created lazily by ``register`` and ``post_delayed`` and removed
    again when their last subscriber leaves. None of the operations raise for
    unknown names or unusable subscribers; they log and do nothing.
    """

    def __init__(self, default_name: str = DEFAULT_BUS_NAME, thread_safe: bool = True) -> None:
        self.default_name = default_name
        self.thread_safe = thread_safe
        self._lock = threading.RLock() if thread_safe else contextlib.nullcontext()
        self._buses: dict[str, Bus] = {}

    @classmethod
    def from_settings(cls, settings: SettingsManager) -> "Directory":
        """Build a directory configured from a settings manager."""
        return cls(
            default_name=str(settings.get_or_default("default_bus_name")),
            thread_safe=bool(settings.get_or_default("thread_safe")),
        )

    # Bus lifecycle

    def get(self, name: str) -> Bus | None:
        with self._lock:
            bus = self._buses.get(name)
        return None if bus is None or bus.closed else bus

    def create(self, name: str) -> Bus:
        """Return the live bus called ``name``, constructing it when missing.

        A closed bus still waiting to be forgotten is replaced by a fresh one.
        """
        with self._lock:
            bus = self._buses.get(name)
            if bus is None or bus.closed:
                bus = Bus(name, on_empty=self.destroy_if_empty, thread_safe=self.thread_safe)
                self._buses[name] = bus
                logging.debug(f"[{LOG_TAG}] instance '{name}' is created")
            return bus

    def get_instance(self, name: str | None = None, create_if_missing: bool = False) -> Bus | None:
        """Look up a bus by name, optionally creating it."""
        name = name or self.default_name
        if create_if_missing:
            return self.create(name)
        return self.get(name)

    def destroy_if_empty(self, bus: Bus) -> bool:
        """Forget ``bus`` once it has been closed.

        Only the closed flag is consulted so the bus lock is never taken while
        the directory lock is held.
        """
        with self._lock:
            if self._buses.get(bus.name) is not bus or not bus.closed:
                return False
            del self._buses[bus.name]
            return True

    def instances(self) -> list[Bus]:
        """Snapshot of every live bus."""
        with self._lock:
            buses = list(self._buses.values())
        return [bus for bus in buses if not bus.closed]

    def names(self) -> list[str]:
        return [bus.name for bus in self.instances()]

    def clear(self) -> None:
        with self._lock:
            self._buses.clear()

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __len__(self) -> int:
        return len(self.instances())

    # Public entry points

    def post(self, event: Event, name: str | None = None) -> None:
        """Deliver an event now, to one named bus or to every bus."""
        if name:
            bus = self.get(name)
            if bus is None:
                logging.debug(f"[{LOG_TAG}] instance '{name}' not found")
                return
            bus.emit(event)
        else:
            for bus in self.instances():
                bus.emit(event)

    def post_delayed(self, event: Event, name: str | None = None) -> None:
        """Deliver to explicit subscribers, buffering when none is listening."""
        if name:
            self._queue_on(name, event)
            return

        self.create(self.default_name)
        for bus in self.instances():
            # A bus closed since the snapshot is gone, except the default one
            if not bus.queue(event) and bus.name == self.default_name:
                self._queue_on(bus.name, event)

    def _queue_on(self, name: str, event: Event) -> None:
        while not self.create(name).queue(event):
            logging.debug(f"[{LOG_TAG}] instance '{name}' closed while queueing, retrying")

    def register(self, target: Any, types: Any = None, name: str | None = None) -> None:
        """Subscribe ``target`` to ``types`` (all types when empty) on a bus."""
        if not can_receive(target):
            logging.debug(f"[{LOG_TAG}] cannot register {target!r}: no dispatch_event")
            return
        name = name or self.default_name
        while not self.create(name).add_subscriber(target, types):
            logging.debug(f"[{LOG_TAG}] instance '{name}' closed while registering, retrying")

    def unregister(self, target: Any, types: Any = None, name: str | None = None) -> None:
        """Remove ``target`` from a bus, or only some of its types."""
        if not can_receive(target):
            logging.debug(f"[{LOG_TAG}] cannot unregister {target!r}: no dispatch_event")
            return
        bus = self.get(name or self.default_name)
        if bus is None:
            logging.debug(f"[{LOG_TAG}] instance '{name or self.default_name}' not found")
            return
        bus.remove_subscriber(target, types)
