"""Property snapshot with a dirty-tracking overlay."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from cypherbolt.models.values import PropertyValue


class PropertyStore(BaseModel):
    """Current properties of an entity plus the changes made since the last commit.

    ``properties`` is the authoritative snapshot. ``updated_properties`` and
    ``removed_keys`` only record what changed since the last ``commit()`` and
    are what an update statement is compiled from. A key is never in both.
    """

    properties: dict[str, Any] = Field(default_factory=dict)
    updated_properties: dict[str, Any] = Field(default_factory=dict)
    removed_keys: list[str] = Field(default_factory=list)
    is_modified: bool = False

    def set_property(self, key: str, value: PropertyValue) -> None:
        """Set ``key`` to ``value``; a ``None`` value removes the property."""
        if value is not None:
            self.properties[key] = value
            self.updated_properties[key] = value
            if key in self.removed_keys:
                self.removed_keys.remove(key)
        else:
            self.properties.pop(key, None)
            # Last write wins: a removal revokes a pending update of the same key.
            self.updated_properties.pop(key, None)
            if key not in self.removed_keys:
                self.removed_keys.append(key)
        self.is_modified = True

    def get(self, key: str) -> PropertyValue:
        if key in self.updated_properties:
            return self.updated_properties[key]
        return self.properties.get(key)

    def mark_modified(self) -> None:
        self.is_modified = True

    @property
    def is_dirty(self) -> bool:
        """True when there are changes an update statement would carry."""
        return bool(self.updated_properties or self.removed_keys)

    def commit(self) -> None:
        """Forget recorded changes once they have been written to the server."""
        self.updated_properties.clear()
        self.removed_keys.clear()
        self.is_modified = False
