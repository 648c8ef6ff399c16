"""Tests for the Relationship and Node models."""

from __future__ import annotations

import pytest

from conftest import node_struct, rel_struct
from cypherbolt.errors import (
    IdentifierAlreadyAssignedError,
    InvalidStructureError,
    MissingIdentifierError,
)
from cypherbolt.models.edge import Direction, Relationship, Resolved, Unresolved
from cypherbolt.models.node import Node
from cypherbolt.models.values import Structure

# --- Construction ---


def test_between_persisted_nodes():
    alice = Node(id=1, labels=["Person"])
    bob = Node(id=2, labels=["Person"])
    edge = Relationship.between(alice, bob, "KNOWS", properties={"since": 2019})

    assert edge.id is None
    assert edge.from_endpoint_id == 1
    assert edge.to_endpoint_id == 2
    assert edge.from_node is alice
    assert edge.to_node is bob
    assert isinstance(edge.from_endpoint, Resolved)
    assert edge.direction == Direction.FORWARD
    assert edge.properties == {"since": 2019}
    assert not edge.is_modified


def test_between_requires_node_ids():
    alice = Node(id=1)
    unsaved = Node(labels=["Person"])
    with pytest.raises(MissingIdentifierError):
        Relationship.between(alice, unsaved, "KNOWS")
    with pytest.raises(MissingIdentifierError):
        Relationship.between(unsaved, alice, "KNOWS")


def test_from_ids():
    edge = Relationship.from_ids(3, 4, "OWNS", direction=Direction.REVERSE)
    assert edge.from_endpoint == Unresolved(id=3)
    assert edge.to_endpoint_id == 4
    assert edge.from_node is None
    assert edge.to_node is None
    assert edge.direction == Direction.REVERSE
    assert edge.properties == {}


def test_properties_are_copied_from_caller():
    props = {"since": 2020}
    edge = Relationship.from_ids(1, 2, "LIKES", properties=props)
    edge.set_property("since", 2021)
    assert props == {"since": 2020}


# --- Decoding ---


def test_from_structure():
    edge = Relationship.from_structure(Structure(signature=82, fields=[7, 1, 2, "KNOWS", {}]))
    assert edge.id == 7
    assert edge.from_endpoint_id == 1
    assert edge.to_endpoint_id == 2
    assert edge.label == "KNOWS"
    assert edge.properties == {}
    assert edge.direction == Direction.FORWARD
    assert not edge.is_modified
    assert edge.updated_properties == {}
    assert edge.removed_property_keys == []


def test_from_structure_with_properties():
    edge = Relationship.from_structure(rel_struct(9, 1, 2, "RATED", stars=4, note="good"))
    assert edge.properties == {"stars": 4, "note": "good"}
    assert edge["stars"] == 4


@pytest.mark.parametrize(
    "data",
    [
        Structure(signature=78, fields=[7, 1, 2, "KNOWS", {}]),
        Structure(signature=82, fields=[7, 1, 2, "KNOWS"]),
        Structure(signature=82, fields=[-1, 1, 2, "KNOWS", {}]),
        Structure(signature=82, fields=[7, "1", 2, "KNOWS", {}]),
        Structure(signature=82, fields=[7, 1, 2, 5, {}]),
        Structure(signature=82, fields=[7, 1, 2, "KNOWS", []]),
        Structure(signature=82, fields=[7, 1, 2, "KNOWS", {"x": object()}]),
        Structure(signature=82, fields=[7, 1, 2, "KNOWS", {"x": [1, {2, 3}]}]),
        Structure(signature=82, fields=[7, 1, 2, "KNOWS", {"x": {1: "non-string key"}}]),
        {"id": 7},
    ],
)
def test_from_structure_rejects_bad_records(data):
    with pytest.raises(InvalidStructureError):
        Relationship.from_structure(data)


def test_node_from_structure():
    node = Node.from_structure(node_struct(5, "Person", "Admin", name="Ann"))
    assert node.id == 5
    assert node.labels == ["Person", "Admin"]
    assert node["name"] == "Ann"
    assert not node.store.is_modified


def test_node_from_structure_rejects_relationship():
    with pytest.raises(InvalidStructureError):
        Node.from_structure(rel_struct(1, 2, 3, "KNOWS"))


def test_node_from_structure_rejects_unsupported_property_values():
    with pytest.raises(InvalidStructureError):
        Node.from_structure(Structure(signature=78, fields=[5, ["Person"], {"x": object()}]))


def test_from_structure_accepts_nested_property_values():
    nested = {"tags": ["a", "b"], "meta": {"score": 1.5, "ok": None}, "node": node_struct(1)}
    edge = Relationship.from_structure(rel_struct(7, 1, 2, "KNOWS", **nested))
    assert edge.properties == nested


# --- Mutation ---


def test_label_change_marks_modified():
    edge = Relationship.from_ids(1, 2, "LIKES")
    before = edge.updated_at
    edge.label = "LOVES"
    assert edge.label == "LOVES"
    assert edge.is_modified
    assert edge.updated_at >= before


def test_setting_direction_does_not_mark_modified():
    edge = Relationship.from_ids(1, 2, "LIKES")
    edge.direction = Direction.REVERSE
    assert not edge.is_modified


def test_mapping_access():
    edge = Relationship.from_ids(1, 2, "LIKES")
    edge["since"] = 2020
    assert edge["since"] == 2020
    assert edge.get("since") == 2020
    del edge["since"]
    assert edge["since"] is None
    assert edge.removed_property_keys == ["since"]
    assert edge.is_modified


def test_set_then_remove_leaves_key_absent():
    edge = Relationship.from_ids(1, 2, "LIKES")
    edge.set_property("weight", 1.5)
    edge.set_property("weight", None)
    assert "weight" not in edge.properties
    assert "weight" in edge.removed_property_keys
    assert "weight" not in edge.updated_properties
    assert edge.get("weight") is None


def test_exposed_collections_are_copies():
    edge = Relationship.from_ids(1, 2, "LIKES", properties={"a": 1})
    edge.properties["b"] = 2
    edge.removed_property_keys.append("c")
    assert edge.properties == {"a": 1}
    assert edge.removed_property_keys == []


def test_commit():
    edge = Relationship.from_ids(1, 2, "LIKES")
    edge["a"] = 1
    del edge["b"]
    edge.commit()
    assert edge.properties == {"a": 1}
    assert edge.updated_properties == {}
    assert edge.removed_property_keys == []
    assert not edge.is_modified


# --- Identity ---


def test_assign_id_once():
    edge = Relationship.from_ids(1, 2, "LIKES")
    edge.assign_id(99)
    assert edge.id == 99
    edge.assign_id(99)
    with pytest.raises(IdentifierAlreadyAssignedError):
        edge.assign_id(100)
    with pytest.raises(IdentifierAlreadyAssignedError):
        edge.id = 101
    assert edge.id == 99


@pytest.mark.parametrize("bad", [-1, 2**64, "99", True])
def test_assign_id_validates(bad):
    edge = Relationship.from_ids(1, 2, "LIKES")
    with pytest.raises(ValueError):
        edge.assign_id(bad)
    assert edge.id is None


def test_endpoint_ids_must_be_uint64():
    with pytest.raises(ValueError):
        Relationship.from_ids(-1, 2, "LIKES")


def test_resolve_endpoints():
    edge = Relationship.from_structure(rel_struct(7, 1, 2, "KNOWS"))
    alice = Node(id=1)
    bob = Node(id=2)
    edge.resolve_endpoints(alice, bob)
    assert edge.from_node is alice
    assert edge.to_node is bob
    assert edge.from_endpoint_id == 1


def test_resolve_endpoints_rejects_wrong_node():
    edge = Relationship.from_ids(1, 2, "KNOWS")
    with pytest.raises(ValueError):
        edge.resolve_endpoints(to_node=Node(id=3))
    assert edge.to_node is None
