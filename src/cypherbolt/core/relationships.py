"""Relationship repository: runs compiled statements and applies their results."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from cypherbolt.config import Config
from cypherbolt.core.batch import (
    compile_batch_create,
    compile_batch_delete,
    compile_batch_update,
)
from cypherbolt.core.compiler import (
    CompileOptions,
    compile_create,
    compile_delete,
    compile_update,
)
from cypherbolt.errors import InvalidStructureError, UnexpectedResultError
from cypherbolt.events.bus import EventBus
from cypherbolt.events.types import EventType, RelationshipEvent
from cypherbolt.models.edge import Relationship
from cypherbolt.models.node import Node
from cypherbolt.models.values import Structure
from cypherbolt.transport.base import Record, Transport

logger = logging.getLogger(__name__)


class RelationshipRepository:
    """Relationship writes over a transport.

    Compiling never touches the entity; this is where ids get assigned and
    recorded changes get committed, and only once the server has returned
    the relationship it wrote.
    """

    def __init__(
        self, transport: Transport, event_bus: EventBus, config: Config | None = None
    ) -> None:
        self.transport = transport
        self.bus = event_bus
        options = CompileOptions.from_config(config or Config())
        if not options.alias:
            options = options.model_copy(update={"alias": "rel"})
        self.options = options

    @property
    def alias(self) -> str:
        return self.options.alias

    async def create(self, edge: Relationship) -> Relationship:
        """Create the relationship and record the id the server assigned."""
        statement = compile_create(edge, self.options)
        rows = await self.transport.run(statement)
        if not rows:
            raise UnexpectedResultError("Create returned no rows; were both endpoints found?")

        self._apply_created(edge, rows[0], self.alias, "fromNode", "toNode")
        logger.info("Created relationship %s (%s)", edge.id, edge.label)
        await self.bus.emit(RelationshipEvent.for_edge(EventType.EDGE_CREATED, edge))
        return edge

    async def create_many(self, edges: Sequence[Relationship]) -> list[Relationship]:
        """Create all relationships with one batched statement."""
        statement = compile_batch_create(edges, with_return=True)
        rows = await self.transport.run(statement)
        if not rows:
            raise UnexpectedResultError("Batch create returned no rows")

        row = rows[0]
        for i, edge in enumerate(edges, start=1):
            self._apply_created(edge, row, f"rel{i}", f"fromNode{i}", f"toNode{i}")
        logger.info("Created %d relationships", len(edges))
        for edge in edges:
            await self.bus.emit(RelationshipEvent.for_edge(EventType.EDGE_CREATED, edge))
        return list(edges)

    async def update(self, edge: Relationship) -> bool:
        """Write recorded property changes.

        Returns False when there were no property changes to write. A label
        change alone is never written, since Cypher cannot retype an existing
        relationship; it is logged and the edge stays modified.

        Raises UnexpectedResultError, leaving the changes recorded, when the
        server does not return the relationship (it no longer exists).
        """
        if not edge.store.is_dirty:
            if edge.is_modified:
                logger.warning(
                    "Relationship %s has a label change to %r that cannot be written; "
                    "delete it and create a new one instead",
                    edge.id,
                    edge.label,
                )
            return False

        statement = compile_update(edge, self.options.model_copy(update={"with_return": True}))
        rows = await self.transport.run(statement)
        if not rows:
            raise UnexpectedResultError(f"Update matched no relationship with id {edge.id}")
        _returned_relationship(rows[0], self.alias)

        changed = tuple(edge.updated_properties) + tuple(edge.removed_property_keys)
        edge.commit()
        logger.info("Updated relationship %s", edge.id)
        await self.bus.emit(
            RelationshipEvent.for_edge(EventType.EDGE_UPDATED, edge, keys=changed)
        )
        return True

    async def update_many(self, edges: Sequence[Relationship]) -> int:
        """Write the recorded changes of every dirty relationship. Returns how many were written.

        Nothing is committed unless the server returned every one of them.
        """
        dirty = [edge for edge in edges if edge.store.is_dirty]
        if not dirty:
            return 0

        rows = await self.transport.run(compile_batch_update(dirty, with_return=True))
        if not rows:
            ids = [edge.id for edge in dirty]
            raise UnexpectedResultError(f"Batch update matched none of the relationships {ids}")
        for i in range(1, len(dirty) + 1):
            _returned_relationship(rows[0], f"rel{i}")

        changes = [
            tuple(edge.updated_properties) + tuple(edge.removed_property_keys) for edge in dirty
        ]
        for edge in dirty:
            edge.commit()
        logger.info("Updated %d relationships", len(dirty))
        for edge, changed in zip(dirty, changes):
            await self.bus.emit(
                RelationshipEvent.for_edge(EventType.EDGE_UPDATED, edge, keys=changed)
            )
        return len(dirty)

    async def delete(self, edge: Relationship) -> None:
        statement = compile_delete(edge, self.options)
        await self.transport.run(statement)
        logger.info("Deleted relationship %s", edge.id)
        await self.bus.emit(RelationshipEvent.for_edge(EventType.EDGE_DELETED, edge))

    async def delete_many(self, edges: Sequence[Relationship]) -> None:
        await self.transport.run(compile_batch_delete(edges))
        logger.info("Deleted %d relationships", len(edges))
        for edge in edges:
            await self.bus.emit(RelationshipEvent.for_edge(EventType.EDGE_DELETED, edge))

    def _apply_created(
        self, edge: Relationship, row: Record, alias: str, from_column: str, to_column: str
    ) -> None:
        created = _returned_relationship(row, alias)
        edge.assign_id(created.id)
        edge.resolve_endpoints(
            _node_or_none(row.get(from_column)), _node_or_none(row.get(to_column))
        )
        edge.commit()


def _returned_relationship(row: Record, column: str) -> Relationship:
    if column not in row:
        raise UnexpectedResultError(f"Result row has no column {column!r}")
    try:
        return Relationship.from_structure(row[column])
    except InvalidStructureError as e:
        raise UnexpectedResultError(f"Column {column!r} is not a relationship") from e


def _node_or_none(value: Any) -> Node | None:
    if isinstance(value, Structure):
        return Node.from_structure(value)
    return None
