"""Relationship lifecycle events."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from cypherbolt.models.edge import Relationship


class EventType(StrEnum):
    EDGE_CREATED = "edge.created"
    EDGE_UPDATED = "edge.updated"
    EDGE_DELETED = "edge.deleted"


class RelationshipEvent(BaseModel):
    """What happened to which relationship.

    ``keys`` lists the property keys an update wrote or removed; it is empty
    for creates and deletes.
    """

    model_config = ConfigDict(frozen=True)

    type: EventType
    id: int | None
    from_id: int
    to_id: int
    label: str
    keys: tuple[str, ...] = Field(default_factory=tuple)

    @classmethod
    def for_edge(
        cls, event_type: EventType, edge: Relationship, keys: tuple[str, ...] = ()
    ) -> RelationshipEvent:
        return cls(
            type=event_type,
            id=edge.id,
            from_id=edge.from_endpoint_id,
            to_id=edge.to_endpoint_id,
            label=edge.label,
            keys=keys,
        )
