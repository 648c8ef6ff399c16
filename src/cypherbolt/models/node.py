"""Node model for graph vertices."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from cypherbolt.errors import InvalidStructureError
from cypherbolt.models.properties import PropertyStore
from cypherbolt.models.values import (
    NODE_SIGNATURE,
    PropertyValue,
    Structure,
    UInt64,
    as_uint64,
    is_property_value,
)


class Node(BaseModel):
    """A labeled vertex, identified by the id the server assigned on creation."""

    id: UInt64 | None = None
    labels: list[str] = Field(default_factory=list)
    store: PropertyStore = Field(default_factory=PropertyStore)
    created_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())

    @classmethod
    def from_structure(cls, data: Any) -> Node:
        """Decode a node record: signature 78, fields ``[id, labels, properties]``."""
        if not isinstance(data, Structure) or data.signature != NODE_SIGNATURE:
            raise InvalidStructureError(f"Not a node structure: {data!r}")
        if len(data.fields) < 3:
            raise InvalidStructureError(
                f"Node structure needs 3 fields, got {len(data.fields)}"
            )

        node_id = as_uint64(data.fields[0])
        labels = data.fields[1]
        properties = data.fields[2]
        if node_id is None:
            raise InvalidStructureError(f"Invalid node id: {data.fields[0]!r}")
        if not isinstance(labels, list) or not all(isinstance(lbl, str) for lbl in labels):
            raise InvalidStructureError(f"Invalid node labels: {labels!r}")
        if not isinstance(properties, dict) or not is_property_value(properties):
            raise InvalidStructureError(f"Invalid node properties: {properties!r}")

        return cls(id=node_id, labels=labels, store=PropertyStore(properties=properties))

    @property
    def properties(self) -> dict[str, Any]:
        return dict(self.store.properties)

    def __getitem__(self, key: str) -> PropertyValue:
        return self.store.get(key)

    def __setitem__(self, key: str, value: PropertyValue) -> None:
        self.store.set_property(key, value)
