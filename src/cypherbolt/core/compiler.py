"""Compile relationship state into parameterized Cypher statements.

Every function here is a pure read of the relationship: nothing is reset or
recorded on the entity. User-supplied identifiers (alias, label, property
keys) are backtick-quoted and property values are always bound parameters.
Only the numeric ids, which come from the server, are written into the text.
"""

from __future__ import annotations

import logging
import re
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from cypherbolt.errors import MissingIdentifierError
from cypherbolt.models.edge import Direction, Relationship

if TYPE_CHECKING:
    from cypherbolt.config import Config

logger = logging.getLogger(__name__)

_PLAIN_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Bound by the MATCH clauses of a create statement.
_ENDPOINT_VARIABLES = ("fromNode", "toNode")


class OperationKind(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class Statement(BaseModel):
    """Statement text plus the values for every ``$`` reference in it."""

    model_config = ConfigDict(frozen=True)

    text: str
    parameters: dict[str, Any] = Field(default_factory=dict)


class CompileOptions(BaseModel):
    """How a single relationship statement is written.

    Attributes:
        alias: Variable the relationship is bound to. Empty means unnamed.
        with_return: Append a RETURN clause.
        param_suffix: Appended to every parameter name, for combining statements.
    """

    model_config = ConfigDict(frozen=True)

    alias: str = "rel"
    with_return: bool = True
    param_suffix: str = ""

    @classmethod
    def from_config(cls, config: Config) -> CompileOptions:
        return cls(alias=config.default_alias)


def quote_identifier(name: str) -> str:
    """Backtick-quote an identifier, doubling any backtick inside it."""
    return "`" + name.replace("`", "``") + "`"


def quote_alias(alias: str) -> str:
    return quote_identifier(alias) if alias else ""


def parameter_reference(name: str) -> str:
    if _PLAIN_NAME.match(name):
        return f"${name}"
    return "$" + quote_identifier(name)


def render_property_map(keys: list[str], suffix: str = "") -> str:
    """Render ``{`key`: $key, ...}`` for the given keys, or "" when there are none."""
    if not keys:
        return ""
    entries = ", ".join(
        f"{quote_identifier(key)}: {parameter_reference(key + suffix)}" for key in keys
    )
    return "{" + entries + "}"


def relationship_pattern(
    from_var: str, to_var: str, alias: str, label: str, props: str, direction: Direction
) -> str:
    """Write ``(from)-[alias:label{props}]->(to)``, mirrored for reverse edges."""
    body = f"[{alias}:{quote_identifier(label)}{props}]"
    if direction == Direction.REVERSE:
        return f"({from_var})<-{body}-({to_var})"
    return f"({from_var})-{body}->({to_var})"


def match_node_by_id(var: str, node_id: int) -> str:
    return f"MATCH ({var}) WHERE id({var}) = {node_id}"


def compile_create(edge: Relationship, options: CompileOptions | None = None) -> Statement:
    """Compile a CREATE statement for a relationship that does not exist yet."""
    options = options or CompileOptions()
    if options.alias in _ENDPOINT_VARIABLES:
        raise ValueError(f"Alias {options.alias!r} is already bound to an endpoint node")
    if edge.id is not None:
        logger.warning("Compiling create for relationship %s that already has an id", edge.id)

    alias = quote_alias(options.alias)
    properties = edge.properties
    props = render_property_map(list(properties), options.param_suffix)

    lines = [
        match_node_by_id("fromNode", edge.from_endpoint_id),
        match_node_by_id("toNode", edge.to_endpoint_id),
        "CREATE "
        + relationship_pattern("fromNode", "toNode", alias, edge.label, props, edge.direction),
    ]
    if options.with_return:
        lines.append("RETURN " + ",".join(item for item in (alias, "fromNode", "toNode") if item))

    parameters = {key + options.param_suffix: value for key, value in properties.items()}
    return _statement(lines, parameters)


def compile_update(edge: Relationship, options: CompileOptions | None = None) -> Statement:
    """Compile the SET/REMOVE statement for the changes recorded since the last commit."""
    options = options or CompileOptions()
    rel_id = _require_id(edge, "update")
    alias = _require_alias(options.alias, "update")

    lines = [
        f"MATCH ()-[{alias}]->()",
        f"WHERE id({alias}) = {rel_id}",
    ]
    assignments, parameters = set_assignments(edge, alias, options.param_suffix)
    if assignments:
        lines.append("SET " + ", ".join(assignments))
    removals = remove_targets(edge, alias)
    if removals:
        lines.append("REMOVE " + ", ".join(removals))
    if options.with_return:
        lines.append(f"RETURN {alias}")

    return _statement(lines, parameters)


def compile_delete(edge: Relationship, options: CompileOptions | None = None) -> Statement:
    options = options or CompileOptions()
    rel_id = _require_id(edge, "delete")
    alias = _require_alias(options.alias, "delete")

    lines = [
        f"MATCH ()-[{alias}]->()",
        f"WHERE id({alias}) = {rel_id}",
        f"DELETE {alias}",
    ]
    return _statement(lines, {})


def compile_statement(
    edge: Relationship, kind: OperationKind, options: CompileOptions | None = None
) -> Statement:
    """Compile ``edge`` for the given operation."""
    if kind == OperationKind.CREATE:
        return compile_create(edge, options)
    if kind == OperationKind.UPDATE:
        return compile_update(edge, options)
    if kind == OperationKind.DELETE:
        return compile_delete(edge, options)
    raise ValueError(f"Unknown operation: {kind}")


def set_assignments(
    edge: Relationship, alias: str, suffix: str
) -> tuple[list[str], dict[str, Any]]:
    """``alias.`key` = $key<suffix>`` for every updated property, with its parameters."""
    assignments: list[str] = []
    parameters: dict[str, Any] = {}
    for key, value in edge.updated_properties.items():
        assignments.append(
            f"{alias}.{quote_identifier(key)} = {parameter_reference(key + suffix)}"
        )
        parameters[key + suffix] = value
    return assignments, parameters


def remove_targets(edge: Relationship, alias: str) -> list[str]:
    return [f"{alias}.{quote_identifier(key)}" for key in edge.removed_property_keys]


def _require_id(edge: Relationship, operation: str) -> int:
    if edge.id is None:
        raise MissingIdentifierError(
            f"Cannot compile {operation} for a relationship without id. "
            "Did you mean to create it?"
        )
    return edge.id


def _require_alias(alias: str, operation: str) -> str:
    if not alias:
        raise ValueError(f"{operation} needs a non-empty relationship alias")
    return quote_identifier(alias)


def _statement(lines: list[str], parameters: dict[str, Any]) -> Statement:
    text = "\n".join(lines)
    logger.debug("Compiled statement with %d parameters:\n%s", len(parameters), text)
    return Statement(text=text, parameters=parameters)
