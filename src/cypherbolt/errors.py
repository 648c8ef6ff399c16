"""Exception types for cypherbolt."""

from __future__ import annotations


class CypherboltError(Exception):
    """Base class for all cypherbolt errors."""


class MissingIdentifierError(CypherboltError):
    """Raised when an operation needs a server-assigned identifier that is absent.

    Covers compiling an update or delete for an entity that was never created,
    and building a relationship between nodes that have not been persisted.
    """


class IdentifierAlreadyAssignedError(CypherboltError):
    """Raised when assigning a different identifier to an already persisted entity."""


class InvalidStructureError(CypherboltError):
    """Raised when a decoded structural record does not have the expected shape."""


class UnexpectedResultError(CypherboltError):
    """Raised when a transport result lacks the records a statement should return."""
