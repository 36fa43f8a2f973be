"""Property entities and kind-dependent constraint rules."""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum


class PropertyKind(str, Enum):
    """Supported property kinds."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    BYTE_ARRAY = "byte-array"


ITEMS_SEGMENT = "items"

# Deepest property level a contract may hold; top-level properties are level 1.
MAX_PROPERTY_NESTING = 64

# Canonical serialization order of constraint keys for each kind.
CONSTRAINT_KEYS: Mapping[PropertyKind, tuple[str, ...]] = {
    PropertyKind.STRING: ("minLength", "maxLength", "pattern", "format"),
    PropertyKind.INTEGER: ("minimum", "maximum", "multipleOf"),
    PropertyKind.NUMBER: ("minimum", "maximum", "multipleOf"),
    PropertyKind.BOOLEAN: (),
    PropertyKind.ARRAY: ("minItems", "maxItems", "uniqueItems"),
    PropertyKind.OBJECT: ("minProperties", "maxProperties"),
    PropertyKind.BYTE_ARRAY: ("minItems", "maxItems", "contentMediaType"),
}

ALL_CONSTRAINT_KEYS: frozenset[str] = frozenset(
    key for keys in CONSTRAINT_KEYS.values() for key in keys
)

_COUNT_KEYS = frozenset(
    {"minLength", "maxLength", "minItems", "maxItems", "minProperties", "maxProperties"}
)
_NUMERIC_KEYS = frozenset({"minimum", "maximum", "multipleOf"})
_TEXT_KEYS = frozenset({"pattern", "format", "contentMediaType"})
_FLAG_KEYS = frozenset({"uniqueItems"})


@dataclass
class Property:  # pylint: disable=too-many-instance-attributes
    """One field definition; objects own `properties`, arrays own `items`."""

    name: str
    kind: PropertyKind = PropertyKind.STRING
    constraints: dict[str, object] = field(default_factory=dict)
    description: str | None = None
    comment: str | None = None
    properties: dict[str, Property] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)
    additional_properties: bool = False
    items: ItemsDefinition | None = None

    def item_properties(self) -> tuple[Property, ...]:
        """Return the item schemas of an array as a tuple."""
        if self.items is None:
            return ()
        if isinstance(self.items, Property):
            return (self.items,)
        return tuple(self.items)

    def iter_children(self) -> Iterator[tuple[str, Property]]:
        """Yield `(path segment, child)` pairs for object children and array items."""
        if self.kind == PropertyKind.OBJECT:
            yield from self.properties.items()
        elif self.kind == PropertyKind.ARRAY:
            if isinstance(self.items, Property):
                yield ITEMS_SEGMENT, self.items
            elif self.items is not None:
                for position, item in enumerate(self.items):
                    yield tuple_item_segment(position), item


ItemsDefinition = Property | tuple[Property, ...]


@dataclass(frozen=True)
class KindChange:
    """What a kind change removed from the property."""

    dropped_properties: tuple[Property, ...]
    dropped_constraints: Mapping[str, object]

    @property
    def is_lossy(self) -> bool:
        """Return True when anything was removed."""
        return bool(self.dropped_properties or self.dropped_constraints)


def tuple_item_segment(position: int) -> str:
    """Return the path segment addressing one tuple item."""
    return f"{ITEMS_SEGMENT}[{position}]"


def default_items() -> Property:
    """Return the item schema installed when a property becomes an array."""
    return Property(name=ITEMS_SEGMENT, kind=PropertyKind.STRING)


def new_property(name: str, kind: PropertyKind = PropertyKind.STRING) -> Property:
    """Create a property of the given kind that satisfies the structural invariants."""
    prop = Property(name=name, kind=kind)
    if kind == PropertyKind.ARRAY:
        prop.items = default_items()
    return prop


def constraint_value_problem(kind: PropertyKind, key: str, value: object) -> str | None:
    """Return why `value` is unusable for `key` on `kind`, or None when it is acceptable."""
    if key not in CONSTRAINT_KEYS[kind]:
        return f"'{key}' does not apply to {kind.value} properties"
    if key in _COUNT_KEYS:
        if isinstance(value, bool) or not isinstance(value, int):
            return f"'{key}' must be an integer"
        if value < 0:
            return f"'{key}' must not be negative"
        return None
    if key in _NUMERIC_KEYS:
        allowed_types: tuple[type, ...] = (int,) if kind == PropertyKind.INTEGER else (int, float)
        if isinstance(value, bool) or not isinstance(value, allowed_types):
            expected = "an integer" if kind == PropertyKind.INTEGER else "a number"
            return f"'{key}' must be {expected}"
        if isinstance(value, float) and not math.isfinite(value):
            return f"'{key}' must be finite"
        return None
    if key in _TEXT_KEYS:
        if not isinstance(value, str):
            return f"'{key}' must be a string"
        return None
    if key in _FLAG_KEYS and not isinstance(value, bool):
        return f"'{key}' must be a boolean"
    return None
