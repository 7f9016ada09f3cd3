"""Event value passed between UI components over a bus."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, eq=False)
class Event:
    """A named event with an opaque payload.

    Events are immutable once posted and are handed by reference to every
    matching subscriber. Equality is identity so that the same event buffered
    twice stays two distinct entries.
    """

    type: str
    detail: Any = None
    bubbles: bool = False
    composed: bool = True
