"""Async event bus for relationship lifecycle notifications."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable, Coroutine
from typing import Any

from cypherbolt.events.types import EventType, RelationshipEvent

logger = logging.getLogger(__name__)

Listener = Callable[[RelationshipEvent], Coroutine[Any, Any, None]]


class EventBus:
    """Delivers relationship events to listeners, by event type or for all types.

    Listeners may also subscribe to a single relationship id, which is how a
    caller waits on the fate of one edge without filtering every event.
    """

    def __init__(self) -> None:
        self._by_type: dict[EventType, list[Listener]] = defaultdict(list)
        self._by_edge: dict[int, list[Listener]] = defaultdict(list)
        self._global: list[Listener] = []

    def on(self, event_type: EventType, listener: Listener) -> None:
        self._by_type[event_type].append(listener)

    def on_edge(self, rel_id: int, listener: Listener) -> None:
        """Listen for every event about the relationship with id ``rel_id``."""
        self._by_edge[rel_id].append(listener)

    def on_all(self, listener: Listener) -> None:
        self._global.append(listener)

    def off(self, listener: Listener) -> None:
        """Remove a listener from every subscription it was registered under."""
        for listeners in (*self._by_type.values(), *self._by_edge.values(), self._global):
            while listener in listeners:
                listeners.remove(listener)

    async def emit(self, event: RelationshipEvent) -> int:
        """Deliver ``event``. Returns how many listeners handled it without error.

        A failing listener is logged and does not stop the others. A listener
        registered under more than one matching subscription is called once.
        """
        listeners: list[Listener] = []
        candidates = self._by_type.get(event.type, []) + self._global
        if event.id is not None:
            candidates += self._by_edge.get(event.id, [])
        for listener in candidates:
            if listener not in listeners:
                listeners.append(listener)

        delivered = 0
        for listener in listeners:
            try:
                await listener(event)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception(
                    "Error in listener for %s on relationship %s", event.type, event.id
                )
            else:
                delivered += 1
        return delivered

    def clear(self) -> None:
        self._by_type.clear()
        self._by_edge.clear()
        self._global.clear()
