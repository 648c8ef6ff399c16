"""Transport seam for executing compiled statements."""

from cypherbolt.transport.base import Record, Transport

__all__ = ["Record", "Transport"]
