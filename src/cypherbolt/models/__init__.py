"""cypherbolt data models."""

from cypherbolt.models.edge import Direction, Relationship, Resolved, Unresolved
from cypherbolt.models.node import Node
from cypherbolt.models.properties import PropertyStore
from cypherbolt.models.values import PropertyValue, Structure

__all__ = [
    "Direction",
    "Node",
    "PropertyStore",
    "PropertyValue",
    "Relationship",
    "Resolved",
    "Structure",
    "Unresolved",
]
