"""Index entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class SortDirection(str, Enum):
    """Sort direction of one indexed property."""

    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class IndexProperty:
    """One `(property path, direction)` entry of an index."""

    path: str
    direction: SortDirection = SortDirection.ASC


@dataclass
class Index:
    """Named, ordered set of indexed property paths."""

    name: str
    properties: list[IndexProperty] = field(default_factory=list)
    unique: bool = False

    def paths(self) -> tuple[str, ...]:
        """Return the indexed paths in order."""
        return tuple(entry.path for entry in self.properties)

    def position_of(self, path: str) -> int | None:
        """Return the position of `path` in this index, or None."""
        for position, entry in enumerate(self.properties):
            if entry.path == path:
                return position
        return None
