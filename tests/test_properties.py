"""Tests for the property store and its dirty-tracking overlay."""

from __future__ import annotations

from cypherbolt.models.properties import PropertyStore
from cypherbolt.models.values import Structure, as_uint64, is_property_value


def test_set_property_records_update():
    store = PropertyStore()
    store.set_property("weight", 0.5)
    assert store.properties == {"weight": 0.5}
    assert store.updated_properties == {"weight": 0.5}
    assert store.removed_keys == []
    assert store.is_modified
    assert store.is_dirty


def test_overwrite_keeps_latest_value():
    store = PropertyStore(properties={"weight": 1})
    store.set_property("weight", 2)
    store.set_property("weight", 3)
    assert store.get("weight") == 3
    assert store.updated_properties == {"weight": 3}


def test_remove_property():
    store = PropertyStore(properties={"since": 2020})
    store.set_property("since", None)
    assert "since" not in store.properties
    assert store.removed_keys == ["since"]
    assert store.get("since") is None
    assert store.is_modified


def test_set_then_remove_is_last_write_wins():
    store = PropertyStore()
    store.set_property("since", 2021)
    store.set_property("since", None)
    assert "since" not in store.properties
    assert "since" not in store.updated_properties
    assert store.removed_keys == ["since"]
    assert store.get("since") is None


def test_remove_then_set_clears_removal():
    store = PropertyStore(properties={"since": 2020})
    store.set_property("since", None)
    store.set_property("since", 2022)
    assert store.removed_keys == []
    assert store.updated_properties == {"since": 2022}
    assert store.get("since") == 2022


def test_remove_twice_records_key_once():
    store = PropertyStore()
    store.set_property("gone", None)
    store.set_property("gone", None)
    assert store.removed_keys == ["gone"]


def test_get_missing_key():
    assert PropertyStore().get("nope") is None


def test_false_and_zero_are_values_not_removals():
    store = PropertyStore()
    store.set_property("active", False)
    store.set_property("count", 0)
    assert store.properties == {"active": False, "count": 0}
    assert store.removed_keys == []


def test_initial_properties_are_not_dirty():
    store = PropertyStore(properties={"a": 1})
    assert not store.is_modified
    assert not store.is_dirty


def test_commit_clears_overlay_but_keeps_snapshot():
    store = PropertyStore(properties={"a": 1, "b": 2})
    store.set_property("a", 10)
    store.set_property("b", None)
    store.commit()
    assert store.properties == {"a": 10}
    assert store.updated_properties == {}
    assert store.removed_keys == []
    assert not store.is_modified
    assert not store.is_dirty


def test_insertion_order_preserved():
    store = PropertyStore(properties={"z": 1, "a": 2})
    store.set_property("m", 3)
    assert list(store.properties) == ["z", "a", "m"]


class TestPropertyValues:
    def test_scalars(self):
        for value in (None, True, 1, 1.5, "text"):
            assert is_property_value(value)

    def test_nested_collections(self):
        assert is_property_value([1, "two", {"three": [3.0, None]}])
        assert is_property_value(Structure(signature=78, fields=[1, [], {}]))

    def test_rejects_foreign_types(self):
        assert not is_property_value(object())
        assert not is_property_value({1: "non-string key"})
        assert not is_property_value((1, 2))

    def test_as_uint64(self):
        assert as_uint64(0) == 0
        assert as_uint64(2**64 - 1) == 2**64 - 1
        assert as_uint64(2**64) is None
        assert as_uint64(-1) is None
        assert as_uint64(True) is None
        assert as_uint64("7") is None
