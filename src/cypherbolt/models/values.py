"""Property values and decoded structural records."""

from __future__ import annotations

from typing import Annotated, Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

NODE_SIGNATURE = 78
RELATIONSHIP_SIGNATURE = 82

UINT64_MAX = 2**64 - 1

UInt64 = Annotated[int, Field(ge=0, le=UINT64_MAX)]


class Structure(BaseModel):
    """A structural record as handed over by the protocol decoder.

    ``signature`` is the structure tag, ``fields`` the positional values.
    """

    model_config = ConfigDict(frozen=True)

    signature: int = Field(ge=0, le=255)
    fields: list[Any] = Field(default_factory=list)


PropertyValue: TypeAlias = (
    None
    | bool
    | int
    | float
    | str
    | list["PropertyValue"]
    | dict[str, "PropertyValue"]
    | Structure
)


def is_property_value(value: Any) -> bool:
    """Check that a value belongs to the closed set of property value variants."""
    if value is None or isinstance(value, (bool, int, float, str, Structure)):
        return True
    if isinstance(value, list):
        return all(is_property_value(item) for item in value)
    if isinstance(value, dict):
        return all(
            isinstance(key, str) and is_property_value(item) for key, item in value.items()
        )
    return False


def as_uint64(value: Any) -> int | None:
    """Return ``value`` as an unsigned 64-bit integer, or None if it is not one."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    if value < 0 or value > UINT64_MAX:
        return None
    return value
