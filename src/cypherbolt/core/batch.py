"""Combine several relationships into one statement.

Edge ``i`` (counting from 1) is bound to ``rel<i>`` with endpoints
``fromNode<i>``/``toNode<i>``, and its parameters are named ``<key><i>``, so
edges sharing property keys never collide.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from cypherbolt.core.compiler import (
    Statement,
    match_node_by_id,
    relationship_pattern,
    remove_targets,
    render_property_map,
    set_assignments,
)
from cypherbolt.errors import MissingIdentifierError
from cypherbolt.models.edge import Relationship

logger = logging.getLogger(__name__)


def compile_batch_create(
    edges: Sequence[Relationship], *, with_return: bool = True
) -> Statement:
    """Create every relationship in ``edges`` with a single statement."""
    _require_edges(edges)

    matches: list[str] = []
    patterns: list[str] = []
    returns: list[str] = []
    parameters: dict[str, Any] = {}

    for i, edge in enumerate(edges, start=1):
        alias, from_var, to_var = f"rel{i}", f"fromNode{i}", f"toNode{i}"
        suffix = str(i)
        properties = edge.properties

        matches.append(match_node_by_id(from_var, edge.from_endpoint_id))
        matches.append(match_node_by_id(to_var, edge.to_endpoint_id))
        patterns.append(
            relationship_pattern(
                from_var,
                to_var,
                alias,
                edge.label,
                render_property_map(list(properties), suffix),
                edge.direction,
            )
        )
        returns.extend((alias, from_var, to_var))
        for key, value in properties.items():
            _bind(parameters, key + suffix, value)

    text = "\n".join(matches) + "\nCREATE " + ",\n  ".join(patterns)
    if with_return:
        text += "\nRETURN " + ",".join(returns)

    logger.debug("Compiled batch create of %d relationships", len(edges))
    return Statement(text=text, parameters=parameters)


def compile_batch_update(
    edges: Sequence[Relationship], *, with_return: bool = True
) -> Statement:
    """Apply the recorded changes of every relationship in ``edges`` at once."""
    _require_edges(edges)

    matches: list[str] = []
    assignments: list[str] = []
    removals: list[str] = []
    aliases: list[str] = []
    parameters: dict[str, Any] = {}

    for i, edge in enumerate(edges, start=1):
        rel_id = _require_id(edge, i)
        alias = f"rel{i}"
        matches.append(f"MATCH ()-[{alias}]->() WHERE id({alias}) = {rel_id}")
        edge_assignments, edge_parameters = set_assignments(edge, alias, str(i))
        assignments.extend(edge_assignments)
        for name, value in edge_parameters.items():
            _bind(parameters, name, value)
        removals.extend(remove_targets(edge, alias))
        aliases.append(alias)

    lines = list(matches)
    if assignments:
        lines.append("SET " + ", ".join(assignments))
    if removals:
        lines.append("REMOVE " + ", ".join(removals))
    if with_return:
        lines.append("RETURN " + ",".join(aliases))

    logger.debug("Compiled batch update of %d relationships", len(edges))
    return Statement(text="\n".join(lines), parameters=parameters)


def compile_batch_delete(edges: Sequence[Relationship]) -> Statement:
    """Delete every relationship in ``edges`` by id."""
    _require_edges(edges)
    ids = ", ".join(str(_require_id(edge, i)) for i, edge in enumerate(edges, start=1))
    lines = [
        "MATCH ()-[rel]->()",
        f"WHERE id(rel) IN [{ids}]",
        "DELETE rel",
    ]
    return Statement(text="\n".join(lines))


def _bind(parameters: dict[str, Any], name: str, value: Any) -> None:
    # "a1" on edge 1 and "a" on edge 11 would both become "a11".
    if name in parameters:
        raise ValueError(f"Parameter name {name!r} is produced by two edges in this batch")
    parameters[name] = value


def _require_edges(edges: Sequence[Relationship]) -> None:
    if not edges:
        raise ValueError("A batch needs at least one relationship")


def _require_id(edge: Relationship, position: int) -> int:
    if edge.id is None:
        raise MissingIdentifierError(
            f"Relationship {position} in the batch has no id. Did you mean to create it?"
        )
    return edge.id
