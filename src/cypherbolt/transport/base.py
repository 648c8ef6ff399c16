"""Abstract transport interface for cypherbolt."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from cypherbolt.core.compiler import Statement

# One result row: column name -> decoded value.
Record: TypeAlias = dict[str, Any]


class Transport(ABC):
    """Executes statements against a graph database session."""

    @abstractmethod
    async def run(self, statement: Statement) -> list[Record]:
        """Run a statement with its parameters. Returns the result rows."""
