"""Line oriented scenario scripts for exercising a bus directory.

Each non-blank line holds one operation; ``#`` starts a comment::

    register <subscriber> [types=a,b] [bus=name]
    unregister <subscriber> [types=a,b] [bus=name]
    post <type> [detail=text] [bus=name]
    post_delayed <type> [detail=text] [bus=name]

Subscribers are created on first mention and record what they receive.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from prismbus.lib.directory import Directory
from prismbus.lib.events import Event
from prismbus.lib.subscriber import Subscriber

DEMO_SCRIPT = """\
# Two panels listen on the default bus, a logger listens to everything
register toolbar types=talk
register sidebar types=walk
register logger
post talk detail=hello
# Nobody is registered for "run" yet, so it is held back
post_delayed run detail=later
register sidebar types=run
# The wildcard logger never sees delayed events
post_delayed walk detail=stroll
unregister sidebar types=walk,run
post walk detail=nobody-listens-explicitly
"""

OPERATIONS = ("register", "unregister", "post", "post_delayed")


class ScriptError(ValueError):
    """Raised for a malformed scenario line."""

    def __init__(self, line_number: int, message: str) -> None:
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


@dataclass
class Delivery:
    """One event received by one scenario subscriber."""

    subscriber: str
    event_type: str
    detail: Any = None

    def __str__(self) -> str:
        return f"{self.subscriber} <- {self.event_type} {self.detail!r}"


def parse_line(line: str, line_number: int = 0) -> tuple[str, str, dict[str, str]] | None:
    """Split a scenario line into (operation, argument, options).

    Returns None for blank and comment lines.
    """
    try:
        tokens = shlex.split(line, comments=True)
    except ValueError as e:
        raise ScriptError(line_number, str(e)) from e
    if not tokens:
        return None

    operation = tokens[0]
    if operation not in OPERATIONS:
        raise ScriptError(line_number, f"unknown operation '{operation}'")
    if len(tokens) < 2:
        raise ScriptError(line_number, f"'{operation}' needs an argument")

    options = {}
    for token in tokens[2:]:
        key, sep, value = token.partition("=")
        if not sep:
            raise ScriptError(line_number, f"expected key=value, got '{token}'")
        options[key] = value
    return operation, tokens[1], options


def split_types(value: str | None) -> list[str] | None:
    if value is None:
        return None
    return [t for t in value.split(",") if t]


class ScriptRunner:
    """Executes scenario operations against a directory."""

    def __init__(self, directory: Directory | None = None) -> None:
        self.directory = directory or Directory()
        self.deliveries: list[Delivery] = []
        self._subscribers: dict[str, Subscriber] = {}

    def subscriber(self, label: str) -> Subscriber:
        """Get or create the recording subscriber called ``label``."""
        if label not in self._subscribers:

            def record(event: Event, label: str = label) -> None:
                self.deliveries.append(Delivery(label, event.type, event.detail))

            self._subscribers[label] = Subscriber(record, label=label)
        return self._subscribers[label]

    def run_line(self, line: str, line_number: int = 0) -> None:
        parsed = parse_line(line, line_number)
        if parsed is None:
            return
        operation, argument, options = parsed
        bus = options.get("bus") or None
        logging.debug(f"Scenario line {line_number}: {operation} {argument} {options}")

        if operation in ("register", "unregister"):
            handler = getattr(self.directory, operation)
            handler(self.subscriber(argument), split_types(options.get("types")), bus)
        else:
            event = Event(argument, detail=options.get("detail"))
            getattr(self.directory, operation)(event, bus)

    def run(self, lines: Iterable[str]) -> list[Delivery]:
        for line_number, line in enumerate(lines, start=1):
            self.run_line(line, line_number)
        return self.deliveries


def run_script(lines: Iterable[str], directory: Directory | None = None) -> list[Delivery]:
    """Run scenario lines and return the deliveries in order."""
    return ScriptRunner(directory).run(lines)
