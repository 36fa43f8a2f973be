"""Dotted property-path parsing and resolution against live property trees."""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping

from .model_errors import NotFoundError
from .property_models import ITEMS_SEGMENT, Property, PropertyKind

PATH_SEPARATOR = "."

_ITEMS_PATTERN = re.compile(rf"^{ITEMS_SEGMENT}(?:\[(\d+)\])?$")


def split_path(path: str) -> tuple[str, ...]:
    """Split a dotted path into segments, rejecting empty segments."""
    if not isinstance(path, str) or not path:
        raise NotFoundError("Property path must be a non-empty string.")
    segments = tuple(path.split(PATH_SEPARATOR))
    if any(not segment for segment in segments):
        raise NotFoundError(f"Property path contains an empty segment: '{path}'")
    return segments


def join_path(*segments: str) -> str:
    """Join non-empty segments with the path separator."""
    return PATH_SEPARATOR.join(segment for segment in segments if segment)


def resolve_property(properties: Mapping[str, Property], path: str) -> Property:
    """Return the property at `path`, descending through objects and array items."""
    segments = split_path(path)
    current = properties.get(segments[0])
    if current is None:
        raise NotFoundError(f"Property '{segments[0]}' does not exist.")
    for position, segment in enumerate(segments[1:], start=1):
        child = step_into(current, segment)
        if child is None:
            raise NotFoundError(
                f"Property path '{join_path(*segments[: position + 1])}' does not exist."
            )
        current = child
    return current


def step_into(prop: Property, segment: str) -> Property | None:
    """Return the child of `prop` addressed by one path segment, or None."""
    if prop.kind == PropertyKind.OBJECT:
        return prop.properties.get(segment)
    if prop.kind != PropertyKind.ARRAY:
        return None
    match = _ITEMS_PATTERN.match(segment)
    if match is None:
        return None
    position = match.group(1)
    if position is None:
        return prop.items if isinstance(prop.items, Property) else None
    if not isinstance(prop.items, tuple):
        return None
    index = int(position)
    return prop.items[index] if index < len(prop.items) else None


def resolve_index_path(properties: Mapping[str, Property], path: str) -> Property | None:
    """Resolve an index path, which may only descend through object properties."""
    if not isinstance(path, str) or not path:
        return None
    current: Property | None = None
    scope: Mapping[str, Property] = properties
    for segment in path.split(PATH_SEPARATOR):
        if current is not None:
            if current.kind != PropertyKind.OBJECT:
                return None
            scope = current.properties
        current = scope.get(segment)
        if current is None:
            return None
    return current


def iter_property_paths(
    properties: Mapping[str, Property], prefix: str = ""
) -> Iterator[tuple[str, Property]]:
    """Yield every `(path, property)` pair depth-first in declaration order."""
    for name, prop in properties.items():
        path = join_path(prefix, name)
        yield path, prop
        yield from _iter_descendants(prop, path)


def _iter_descendants(prop: Property, prefix: str) -> Iterator[tuple[str, Property]]:
    for segment, child in prop.iter_children():
        path = join_path(prefix, segment)
        yield path, child
        yield from _iter_descendants(child, path)


def iter_index_paths(
    properties: Mapping[str, Property], prefix: str = ""
) -> Iterator[tuple[str, Property]]:
    """Yield the paths an index may reference: properties reachable through objects only."""
    for name, prop in properties.items():
        path = join_path(prefix, name)
        yield path, prop
        if prop.kind == PropertyKind.OBJECT:
            yield from iter_index_paths(prop.properties, path)
