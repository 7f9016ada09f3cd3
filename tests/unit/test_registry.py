"""Unit tests for the subscriber Registry in isolation."""

import pytest

from prismbus.lib.registry import Registry, Subscription, difference, normalize_types, union


@pytest.fixture
def registry():
    return Registry()


class TestNormalizeTypes:
    """Tests for the normalize_types helper."""

    def test_none_is_wildcard(self):
        assert normalize_types(None) == []

    def test_list_kept_in_order(self):
        assert normalize_types(["talk", "walk"]) == ["talk", "walk"]

    def test_duplicates_removed(self):
        assert normalize_types(["talk", "talk", "walk"]) == ["talk", "walk"]

    def test_tuple_accepted(self):
        assert normalize_types(("talk",)) == ["talk"]

    def test_bare_string_is_invalid(self):
        """A string is not treated as a sequence of one-letter types."""
        assert normalize_types("talk") == []

    def test_other_objects_are_invalid(self):
        assert normalize_types(42) == []
        assert normalize_types({"talk": 1}) == []


class TestSetHelpers:
    def test_union_keeps_order(self):
        assert union(["a", "b"], ["b", "c"]) == ["a", "b", "c"]

    def test_difference_keeps_order(self):
        assert difference(["a", "b", "c"], ["b"]) == ["a", "c"]

    def test_difference_with_unknown_types(self):
        assert difference(["a"], ["z"]) == ["a"]


class TestSubscription:
    def test_wildcard_accepts_unrestricted(self, element):
        assert Subscription(element, []).accepts("talk") is True

    def test_wildcard_rejects_restricted(self, element):
        assert Subscription(element, []).accepts("talk", restricted=True) is False

    def test_explicit_type_accepts_restricted(self, element):
        assert Subscription(element, ["talk"]).accepts("talk", restricted=True) is True

    def test_other_type_rejected(self, element):
        assert Subscription(element, ["talk"]).accepts("walk") is False


class TestAddSubscriber:
    """Tests for Registry.add_subscriber."""

    def test_new_subscriber_returns_all_types(self, registry, element):
        assert registry.add_subscriber(element, ["talk", "walk"]) == ["talk", "walk"]
        assert registry.types_of(element) == ["talk", "walk"]

    def test_new_wildcard_subscriber(self, registry, element):
        assert registry.add_subscriber(element) == []
        assert element in registry
        assert registry.types_of(element) == []

    def test_same_types_twice_is_idempotent(self, registry, element):
        """Registering {A} twice leaves one subscription accepting {A}."""
        registry.add_subscriber(element, ["talk"])

        assert registry.add_subscriber(element, ["talk"]) == []
        assert len(registry) == 1
        assert registry.types_of(element) == ["talk"]

    def test_extension_returns_only_new_types(self, registry, element):
        registry.add_subscriber(element, ["talk"])

        assert registry.add_subscriber(element, ["talk", "walk"]) == ["walk"]
        assert registry.types_of(element) == ["talk", "walk"]

    def test_newest_subscriber_first(self, registry, element, other_element):
        registry.add_subscriber(element)
        registry.add_subscriber(other_element)

        assert [s.target for s in registry.snapshot()] == [other_element, element]

    def test_identity_not_equality(self, registry):
        """Two objects that compare equal are still two subscribers."""

        class Twin:
            def __eq__(self, other):
                return True

            __hash__ = object.__hash__

            def dispatch_event(self, event):
                pass

        registry.add_subscriber(Twin(), ["talk"])
        registry.add_subscriber(Twin(), ["talk"])

        assert len(registry) == 2


class TestRemoveSubscriber:
    """Tests for Registry.remove_subscriber."""

    def test_remove_without_types(self, registry, element):
        registry.add_subscriber(element, ["talk"])

        assert registry.remove_subscriber(element) is True
        assert element not in registry

    def test_remove_reports_not_empty(self, registry, element, other_element):
        registry.add_subscriber(element)
        registry.add_subscriber(other_element)

        assert registry.remove_subscriber(element) is False
        assert len(registry) == 1

    def test_partial_removal(self, registry, element):
        registry.add_subscriber(element, ["talk", "walk"])

        assert registry.remove_subscriber(element, ["talk"]) is False
        assert registry.types_of(element) == ["walk"]

    def test_removing_all_types_removes_subscriber(self, registry, element):
        registry.add_subscriber(element, ["talk", "walk"])

        assert registry.remove_subscriber(element, ["talk", "walk"]) is True
        assert element not in registry

    def test_removing_types_from_wildcard_keeps_it(self, registry, element):
        """A wildcard subscriber stays a wildcard when unknown types are removed."""
        registry.add_subscriber(element)

        assert registry.remove_subscriber(element, ["talk"]) is False
        assert registry.types_of(element) == []

    def test_unknown_type_is_noop(self, registry, element):
        registry.add_subscriber(element, ["talk"])

        registry.remove_subscriber(element, ["walk"])

        assert registry.types_of(element) == ["talk"]

    def test_unknown_subscriber_is_noop(self, registry, element, other_element):
        registry.add_subscriber(element)

        assert registry.remove_subscriber(other_element) is False
        assert len(registry) == 1

    def test_snapshot_unaffected_by_later_removal(self, registry, element):
        registry.add_subscriber(element)
        snapshot = registry.snapshot()

        registry.remove_subscriber(element)

        assert len(snapshot) == 1
        assert len(registry) == 0
