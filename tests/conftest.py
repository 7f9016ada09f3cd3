"""Pytest fixtures for prismbus tests."""

import pytest

from prismbus.lib.current_directory import set_directory
from prismbus.lib.directory import Directory


class MockElement:
    """Minimal stand-in for a UI component that can receive events.

    Records every event it is handed, in order.
    """

    def __init__(self, label="element"):
        self.label = label
        self.received = []

    def dispatch_event(self, event):
        self.received.append(event)

    @property
    def received_types(self):
        return [event.type for event in self.received]


class NotAnElement:
    """Object without the dispatch_event capability."""

    label = "plain"


@pytest.fixture
def directory():
    """Create an isolated Directory for testing."""
    return Directory()


@pytest.fixture
def element():
    return MockElement("first")


@pytest.fixture
def other_element():
    return MockElement("second")


@pytest.fixture
def global_directory():
    """Install a fresh process-wide Directory and restore the previous one afterwards."""
    fresh = Directory()
    previous = set_directory(fresh)
    yield fresh
    set_directory(previous)


@pytest.fixture
def make_element():
    """Factory for additional MockElement instances."""
    return MockElement


@pytest.fixture
def not_an_element():
    return NotAnElement()
