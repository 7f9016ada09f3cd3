from __future__ import annotations

from typing import Any

from prismbus.lib.bus import Bus
from prismbus.lib.current_directory import get_directory, set_directory
from prismbus.lib.directory import Directory
from prismbus.lib.events import Event
from prismbus.lib.subscriber import Subscriber
from prismbus.version import __version__

PACKAGE = __package__
VERSION = __version__


def post(event: Event, name: str | None = None) -> None:
    """Dispatch an event to the subscribers of one bus, or of every bus."""
    get_directory().post(event, name)


def post_delayed(event: Event, name: str | None = None) -> None:
    """Dispatch an event, buffering it until a subscriber for its type appears."""
    get_directory().post_delayed(event, name)


def register(subscriber: Any, types: Any = None, name: str | None = None) -> None:
    """Register a subscriber, for all event types when ``types`` is empty."""
    get_directory().register(subscriber, types, name)


def unregister(subscriber: Any, types: Any = None, name: str | None = None) -> None:
    """Unregister a subscriber, or only the given event types."""
    get_directory().unregister(subscriber, types, name)


def get_bus(name: str | None = None, create_if_missing: bool = False) -> Bus | None:
    """Get a bus instance by name, optionally creating it."""
    return get_directory().get_instance(name, create_if_missing)


__all__ = [
    "VERSION",
    "PACKAGE",
    Bus.__name__,
    Directory.__name__,
    Event.__name__,
    Subscriber.__name__,
    get_bus.__name__,
    get_directory.__name__,
    post.__name__,
    post_delayed.__name__,
    register.__name__,
    set_directory.__name__,
    unregister.__name__,
]
