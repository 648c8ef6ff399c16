"""Relationship model for directed, labeled graph edges."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from cypherbolt.errors import (
    IdentifierAlreadyAssignedError,
    InvalidStructureError,
    MissingIdentifierError,
)
from cypherbolt.models.node import Node
from cypherbolt.models.properties import PropertyStore
from cypherbolt.models.values import (
    RELATIONSHIP_SIGNATURE,
    PropertyValue,
    Structure,
    UInt64,
    as_uint64,
    is_property_value,
)


def _now() -> str:
    return datetime.now(UTC).isoformat()


class Direction(StrEnum):
    """Which way the arrow points when the relationship is written out."""

    FORWARD = "forward"
    REVERSE = "reverse"


class Unresolved(BaseModel):
    """An endpoint known only by its node id."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unresolved"] = "unresolved"
    id: UInt64


class Resolved(BaseModel):
    """An endpoint whose node entity has been fetched."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["resolved"] = "resolved"
    id: UInt64
    node: Node


Endpoint = Annotated[Unresolved | Resolved, Field(discriminator="kind")]


def _endpoint_for(node: Node) -> Resolved:
    if node.id is None:
        raise MissingIdentifierError("Nodes must have an id before they can be related")
    return Resolved(id=node.id, node=node)


class Relationship(BaseModel):
    """A directed, labeled edge with dirty-tracked properties.

    ``id`` stays None until the server assigns one on creation. Endpoint ids
    never change after construction; ``direction`` only affects how the
    relationship is written into a statement, not which endpoint is which.

    Mutate properties through ``set_property`` (or ``edge[key] = value``) so
    the changes can be compiled into a minimal update statement.
    """

    id: UInt64 | None = None
    from_endpoint: Endpoint
    to_endpoint: Endpoint
    label: str
    direction: Direction = Direction.FORWARD
    store: PropertyStore = Field(default_factory=PropertyStore)
    created_at: str = Field(default_factory=_now)
    updated_at: str = Field(default_factory=_now)

    @classmethod
    def between(
        cls,
        from_node: Node,
        to_node: Node,
        label: str,
        *,
        direction: Direction = Direction.FORWARD,
        properties: dict[str, Any] | None = None,
    ) -> Relationship:
        """Relate two persisted nodes. Raises MissingIdentifierError if either lacks an id."""
        return cls(
            from_endpoint=_endpoint_for(from_node),
            to_endpoint=_endpoint_for(to_node),
            label=label,
            direction=direction,
            store=PropertyStore(properties=dict(properties or {})),
        )

    @classmethod
    def from_ids(
        cls,
        from_id: int,
        to_id: int,
        label: str,
        *,
        direction: Direction = Direction.FORWARD,
        properties: dict[str, Any] | None = None,
    ) -> Relationship:
        return cls(
            from_endpoint=Unresolved(id=from_id),
            to_endpoint=Unresolved(id=to_id),
            label=label,
            direction=direction,
            store=PropertyStore(properties=dict(properties or {})),
        )

    @classmethod
    def from_structure(cls, data: Any) -> Relationship:
        """Decode a relationship record: signature 82, fields ``[id, from, to, label, properties]``."""
        if not isinstance(data, Structure) or data.signature != RELATIONSHIP_SIGNATURE:
            raise InvalidStructureError(f"Not a relationship structure: {data!r}")
        if len(data.fields) < 5:
            raise InvalidStructureError(
                f"Relationship structure needs 5 fields, got {len(data.fields)}"
            )

        rel_id, from_id, to_id = (as_uint64(value) for value in data.fields[:3])
        label = data.fields[3]
        properties = data.fields[4]
        if rel_id is None or from_id is None or to_id is None:
            raise InvalidStructureError(f"Invalid relationship ids: {data.fields[:3]!r}")
        if not isinstance(label, str):
            raise InvalidStructureError(f"Invalid relationship label: {label!r}")
        if not isinstance(properties, dict) or not is_property_value(properties):
            raise InvalidStructureError(f"Invalid relationship properties: {properties!r}")

        return cls(
            id=rel_id,
            from_endpoint=Unresolved(id=from_id),
            to_endpoint=Unresolved(id=to_id),
            label=label,
            store=PropertyStore(properties=properties),
        )

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "id" and self.id is not None and value != self.id:
            raise IdentifierAlreadyAssignedError(
                f"Relationship already has id {self.id}, refusing to reassign {value}"
            )
        super().__setattr__(name, value)
        if name == "label":
            self.store.mark_modified()
            self._touch()

    # --- Identity and endpoints ---

    @property
    def from_endpoint_id(self) -> int:
        return self.from_endpoint.id

    @property
    def to_endpoint_id(self) -> int:
        return self.to_endpoint.id

    @property
    def from_node(self) -> Node | None:
        return self.from_endpoint.node if isinstance(self.from_endpoint, Resolved) else None

    @property
    def to_node(self) -> Node | None:
        return self.to_endpoint.node if isinstance(self.to_endpoint, Resolved) else None

    def assign_id(self, rel_id: int) -> None:
        """Record the id the server assigned when the relationship was created."""
        if as_uint64(rel_id) is None:
            raise ValueError(f"Relationship id must be an unsigned 64-bit integer: {rel_id!r}")
        self.id = rel_id

    def resolve_endpoints(self, from_node: Node | None = None, to_node: Node | None = None) -> None:
        """Cache fetched endpoint nodes. Their ids must match the endpoint ids."""
        if from_node is not None:
            if from_node.id != self.from_endpoint_id:
                raise ValueError(
                    f"Node {from_node.id} is not the start node {self.from_endpoint_id}"
                )
            self.from_endpoint = Resolved(id=self.from_endpoint_id, node=from_node)
        if to_node is not None:
            if to_node.id != self.to_endpoint_id:
                raise ValueError(f"Node {to_node.id} is not the end node {self.to_endpoint_id}")
            self.to_endpoint = Resolved(id=self.to_endpoint_id, node=to_node)

    # --- Properties ---

    @property
    def properties(self) -> dict[str, Any]:
        return dict(self.store.properties)

    @property
    def updated_properties(self) -> dict[str, Any]:
        return dict(self.store.updated_properties)

    @property
    def removed_property_keys(self) -> list[str]:
        return list(self.store.removed_keys)

    @property
    def is_modified(self) -> bool:
        return self.store.is_modified

    def set_property(self, key: str, value: PropertyValue) -> None:
        self.store.set_property(key, value)
        self._touch()

    def get(self, key: str) -> PropertyValue:
        return self.store.get(key)

    def commit(self) -> None:
        """Clear the recorded changes after an update has been executed."""
        self.store.commit()

    def __getitem__(self, key: str) -> PropertyValue:
        return self.get(key)

    def __setitem__(self, key: str, value: PropertyValue) -> None:
        self.set_property(key, value)

    def __delitem__(self, key: str) -> None:
        self.set_property(key, None)

    def _touch(self) -> None:
        super().__setattr__("updated_at", _now())
