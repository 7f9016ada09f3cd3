"""Subscriber registry for a single bus.

Keeps one subscription per subscriber object (compared by identity) together
with the ordered set of event types it accepts. An empty type set means the
subscriber accepts everything.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Iterator

from prismbus.constants import LOG_TAG
from prismbus.lib.subscriber import describe

VALID_TYPE_CONTAINERS = (list, tuple, set, frozenset)


def normalize_types(types: Any) -> list[str]:
    """Turn a caller supplied types argument into an ordered, de-duplicated list.

    Anything that is not a list/tuple/set/frozenset (including a bare string)
    is treated as "no types", which means wildcard.
    """
    if not isinstance(types, VALID_TYPE_CONTAINERS):
        if types is not None:
            logging.debug(f"[{LOG_TAG}] ignoring invalid event types: {types!r}")
        return []
    return list(dict.fromkeys(str(t) for t in types))


def union(sources: Iterable[str], targets: Iterable[str]) -> list[str]:
    """Merge two type lists as an ordered set."""
    return list(dict.fromkeys([*sources, *targets]))


def difference(sources: Iterable[str], targets: Iterable[str]) -> list[str]:
    """Types in ``sources`` that are not in ``targets``, order kept."""
    removed = set(targets)
    return [t for t in sources if t not in removed]


class Subscription:
    """A subscriber and the event types it accepts."""

    __slots__ = ("target", "types")

    def __init__(self, target: Any, types: list[str]) -> None:
        self.target = target
        self.types = types

    @property
    def is_wildcard(self) -> bool:
        return not self.types

    def accepts(self, event_type: str, restricted: bool = False) -> bool:
        """Whether an event of this type should be delivered.

        Restricted deliveries only reach subscribers that list the type
        explicitly; wildcard subscribers are skipped.
        """
        return (not restricted and self.is_wildcard) or event_type in self.types

    def __repr__(self) -> str:
        return f"Subscription({describe(self.target)}, types={self.types})"


class Registry:
    """Ordered table of subscriptions, most recently added first."""

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []

    def find(self, target: Any) -> Subscription | None:
        """Return the subscription for ``target`` (identity match) if any."""
        for subscription in self._subscriptions:
            if subscription.target is target:
                return subscription
        return None

    def add_subscriber(self, target: Any, types: Any = None) -> list[str]:
        """Register ``target`` or extend the types it accepts.

        Returns:
            The event types that became newly accepted and should be polled
            from the delay buffer. Empty when nothing changed.
        """
        types = normalize_types(types)
        subscription = self.find(target)

        if subscription is None:
            # Newest subscribers are consulted first on emit
            self._subscriptions = [Subscription(target, types)] + self._subscriptions
            logging.debug(f"[{LOG_TAG}] event {types} of {describe(target)} is registered")
            return list(types)

        merged = union(subscription.types, types)
        if len(merged) <= len(subscription.types):
            return []

        added = difference(merged, subscription.types)
        subscription.types = merged
        logging.debug(f"[{LOG_TAG}] event {added} of {describe(target)} is registered")
        return added

    def remove_subscriber(self, target: Any, types: Any = None) -> bool:
        """Unregister ``target`` entirely or drop some of its types.

        Removing the last remaining explicit type removes the subscriber rather
        than leaving it as a wildcard.

        Returns:
            True if a subscription was removed and the registry is now empty.
        """
        types = normalize_types(types)
        subscription = self.find(target)
        if subscription is None:
            return False

        if not types:
            self._subscriptions = [s for s in self._subscriptions if s.target is not target]
            logging.debug(f"[{LOG_TAG}] {describe(target)} is unregistered")
            return not self._subscriptions

        remaining = difference(subscription.types, types)
        if subscription.types and not remaining:
            return self.remove_subscriber(target)

        subscription.types = remaining
        logging.debug(f"[{LOG_TAG}] event {types} of {describe(target)} is unregistered")
        return False

    def types_of(self, target: Any) -> list[str] | None:
        """Copy of the types ``target`` accepts, or None when not registered."""
        subscription = self.find(target)
        return None if subscription is None else list(subscription.types)

    def snapshot(self) -> tuple[Subscription, ...]:
        """Stable copy for iteration while handlers may mutate the registry."""
        return tuple(self._subscriptions)

    def __contains__(self, target: Any) -> bool:
        return self.find(target) is not None

    def __iter__(self) -> Iterator[Subscription]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self._subscriptions)
