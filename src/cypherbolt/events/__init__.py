"""Relationship lifecycle events."""

from cypherbolt.events.bus import EventBus
from cypherbolt.events.types import EventType, RelationshipEvent

__all__ = ["EventBus", "EventType", "RelationshipEvent"]
