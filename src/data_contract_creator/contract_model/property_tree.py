"""Mutation operations on a tree of properties.

Every operation checks its preconditions before touching the tree, so a
rejected call leaves the tree exactly as it was.
"""

from __future__ import annotations

import copy
from collections.abc import Sequence
from typing import Protocol

from .model_errors import (
    DuplicateNameError,
    InvalidConstraintError,
    InvalidReferenceError,
    NotFoundError,
)
from .property_models import (
    CONSTRAINT_KEYS,
    ITEMS_SEGMENT,
    MAX_PROPERTY_NESTING,
    ItemsDefinition,
    KindChange,
    Property,
    PropertyKind,
    constraint_value_problem,
    default_items,
    tuple_item_segment,
)
from .property_paths import PATH_SEPARATOR, join_path, resolve_property, split_path, step_into


class PropertyContainer(Protocol):
    """Anything owning named properties and a required list (document types, objects)."""

    properties: dict[str, Property]
    required: list[str]


def add_child(root: PropertyContainer, parent_path: str | None, prop: Property) -> Property:
    """Insert a copy of `prop` under `parent_path` (None for top level) and return it."""
    container = _resolve_container(root, parent_path)
    _check_name(prop.name)
    if prop.name in container.properties:
        scope = parent_path or "document type"
        raise DuplicateNameError(f"Property '{prop.name}' already exists in {scope}.")
    owned = _normalized_copy(prop, depth=_depth_of(parent_path) + 1)
    container.properties[owned.name] = owned
    return owned


def remove_child(root: PropertyContainer, path: str) -> Property:
    """Detach and return the property at `path`."""
    parent, segment, _ = _locate(root, path)
    if isinstance(parent, Property) and parent.kind == PropertyKind.ARRAY:
        raise InvalidReferenceError(
            f"Array items at '{path}' cannot be removed; change the items instead."
        )
    removed = parent.properties.pop(segment)
    if segment in parent.required:
        parent.required.remove(segment)
    return removed


def rename_child(root: PropertyContainer, path: str, new_name: str) -> None:
    """Rename a property in place, keeping its position and required membership."""
    parent, segment, _ = _locate(root, path)
    if isinstance(parent, Property) and parent.kind == PropertyKind.ARRAY:
        raise InvalidReferenceError(f"Array items at '{path}' cannot be renamed.")
    _check_name(new_name)
    if new_name == segment:
        return
    if new_name in parent.properties:
        raise DuplicateNameError(f"Property '{new_name}' already exists next to '{path}'.")
    renamed: dict[str, Property] = {}
    for name, child in parent.properties.items():
        if name == segment:
            child.name = new_name
            renamed[new_name] = child
        else:
            renamed[name] = child
    parent.properties = renamed
    parent.required = [new_name if name == segment else name for name in parent.required]


def set_kind(root: PropertyContainer, path: str, kind: PropertyKind) -> KindChange:
    """Change the kind at `path`, returning the constraints and descendants it dropped."""
    prop = resolve_property(root.properties, path)
    try:
        kind = PropertyKind(kind)
    except ValueError as exc:
        raise InvalidReferenceError(f"Unknown property kind: {kind!r}") from exc
    if prop.kind == kind:
        return KindChange(dropped_properties=(), dropped_constraints={})
    if kind == PropertyKind.ARRAY and _depth_of(path) >= MAX_PROPERTY_NESTING:
        raise InvalidReferenceError(
            f"Property '{path}' is too deeply nested to hold array items."
        )

    kept = {
        key: value
        for key, value in prop.constraints.items()
        if constraint_value_problem(kind, key, value) is None
    }
    dropped_constraints = {
        key: value for key, value in prop.constraints.items() if key not in kept
    }
    if prop.kind == PropertyKind.OBJECT:
        dropped_properties: tuple[Property, ...] = tuple(prop.properties.values())
    elif prop.kind == PropertyKind.ARRAY:
        dropped_properties = prop.item_properties()
    else:
        dropped_properties = ()

    prop.kind = kind
    prop.constraints = kept
    prop.properties = {}
    prop.required = []
    prop.additional_properties = False
    prop.items = default_items() if kind == PropertyKind.ARRAY else None
    return KindChange(
        dropped_properties=dropped_properties,
        dropped_constraints=dropped_constraints,
    )


def set_constraint(root: PropertyContainer, path: str, key: str, value: object) -> None:
    """Set one constraint at `path`; a None value clears it."""
    prop = resolve_property(root.properties, path)
    if key not in CONSTRAINT_KEYS[prop.kind]:
        raise InvalidConstraintError(f"'{key}' does not apply to {prop.kind.value} properties.")
    if value is None:
        prop.constraints.pop(key, None)
        return
    problem = constraint_value_problem(prop.kind, key, value)
    if problem is not None:
        raise InvalidConstraintError(f"{path}: {problem}.")
    prop.constraints[key] = value


def set_items(
    root: PropertyContainer, path: str, items: Property | Sequence[Property]
) -> ItemsDefinition | None:
    """Replace the item schema of the array at `path`, returning the previous one."""
    prop = resolve_property(root.properties, path)
    if prop.kind != PropertyKind.ARRAY:
        raise InvalidReferenceError(f"Property '{path}' is not an array.")
    item_depth = _depth_of(path) + 1
    if isinstance(items, Property):
        replacement: ItemsDefinition = _normalized_copy(
            items, depth=item_depth, name=ITEMS_SEGMENT
        )
    else:
        members = tuple(items)
        if not members or not all(isinstance(member, Property) for member in members):
            raise InvalidReferenceError("Tuple items must be a non-empty sequence of properties.")
        replacement = tuple(
            _normalized_copy(member, depth=item_depth, name=tuple_item_segment(position))
            for position, member in enumerate(members)
        )
    previous = prop.items
    prop.items = replacement
    return previous


def set_description(root: PropertyContainer, path: str, description: str | None) -> None:
    """Set or clear (None or blank) the description at `path`."""
    prop = resolve_property(root.properties, path)
    prop.description = description if description else None


def set_comment(root: PropertyContainer, path: str, comment: str | None) -> None:
    """Set or clear (None or blank) the `$comment` at `path`."""
    prop = resolve_property(root.properties, path)
    prop.comment = comment if comment else None


def set_additional_properties(root: PropertyContainer, path: str, allowed: bool) -> None:
    """Toggle `additionalProperties` on the object at `path`."""
    prop = resolve_property(root.properties, path)
    if prop.kind != PropertyKind.OBJECT:
        raise InvalidReferenceError(f"Property '{path}' is not an object.")
    prop.additional_properties = bool(allowed)


def set_required(root: PropertyContainer, path: str, required: bool) -> None:
    """Add or remove the property at `path` from its parent's required list."""
    try:
        parent, segment, _ = _locate(root, path)
    except NotFoundError as exc:
        raise InvalidReferenceError(str(exc)) from exc
    if isinstance(parent, Property) and parent.kind == PropertyKind.ARRAY:
        raise InvalidReferenceError(f"Array items at '{path}' cannot be marked required.")
    if required and segment not in parent.required:
        parent.required.append(segment)
    elif not required and segment in parent.required:
        parent.required.remove(segment)


def is_required(root: PropertyContainer, path: str) -> bool:
    """Return True when the property at `path` is listed by its parent as required."""
    parent, segment, _ = _locate(root, path)
    if isinstance(parent, Property) and parent.kind == PropertyKind.ARRAY:
        return False
    return segment in parent.required


def _resolve_container(root: PropertyContainer, parent_path: str | None) -> PropertyContainer:
    if parent_path is None or parent_path == "":
        return root
    parent = resolve_property(root.properties, parent_path)
    if parent.kind != PropertyKind.OBJECT:
        raise InvalidReferenceError(
            f"Property '{parent_path}' is {parent.kind.value}; only objects hold child properties."
        )
    return parent


def _locate(root: PropertyContainer, path: str) -> tuple[PropertyContainer, str, Property]:
    """Return `(parent, last segment, property)` for `path`."""
    segments = split_path(path)
    if len(segments) == 1:
        prop = root.properties.get(segments[0])
        if prop is None:
            raise NotFoundError(f"Property '{path}' does not exist.")
        return root, segments[0], prop
    parent = resolve_property(root.properties, join_path(*segments[:-1]))
    prop_or_none = step_into(parent, segments[-1])
    if prop_or_none is None:
        raise NotFoundError(f"Property path '{path}' does not exist.")
    return parent, segments[-1], prop_or_none


def _check_name(name: str) -> None:
    if not isinstance(name, str):
        raise InvalidReferenceError("Property names must be strings.")
    if PATH_SEPARATOR in name:
        raise InvalidReferenceError(
            f"Property name '{name}' must not contain '{PATH_SEPARATOR}'."
        )


def _depth_of(path: str | None) -> int:
    """Return the nesting level of the property at `path`; 0 for the container itself."""
    if path is None or path == "":
        return 0
    return len(split_path(path))


def _normalized_copy(prop: Property, *, depth: int, name: str | None = None) -> Property:
    """Deep-copy `prop` so the tree owns it exclusively.

    `depth` is the level the copy will occupy. Every descendant is renamed after
    the slot holding it and arrays without items get the default item schema,
    so the copy serializes and imports back to an equal tree.
    """
    _check_nesting(prop, depth)
    owned = copy.deepcopy(prop)
    if name is not None:
        owned.name = name
    pending = [owned]
    while pending:
        node = pending.pop()
        _normalize_node(node)
        for segment, child in node.iter_children():
            child.name = segment
            pending.append(child)
    return owned


def _check_nesting(prop: Property, depth: int) -> None:
    pending = [(prop, depth)]
    while pending:
        node, level = pending.pop()
        if level > MAX_PROPERTY_NESTING:
            raise InvalidReferenceError(
                f"Properties may not nest deeper than {MAX_PROPERTY_NESTING} levels."
            )
        children = list(node.properties.values())
        if isinstance(node.items, Property):
            children.append(node.items)
        elif node.items:
            children.extend(node.items)
        pending.extend((child, level + 1) for child in children if isinstance(child, Property))


def _normalize_node(node: Property) -> None:
    try:
        node.kind = PropertyKind(node.kind)
    except ValueError as exc:
        raise InvalidReferenceError(f"Unknown property kind: {node.kind!r}") from exc
    if node.kind != PropertyKind.OBJECT and (
        node.properties or node.required or node.additional_properties
    ):
        raise InvalidReferenceError(
            f"Property '{node.name}' is {node.kind.value}; only objects hold child properties."
        )
    if node.kind == PropertyKind.ARRAY:
        if node.items is None:
            node.items = default_items()
        elif not isinstance(node.items, Property):
            members = tuple(node.items)
            if not members or not all(isinstance(member, Property) for member in members):
                raise InvalidReferenceError(
                    f"Tuple items of '{node.name}' must be a non-empty sequence of properties."
                )
            node.items = members
    elif node.items is not None:
        raise InvalidReferenceError(
            f"Property '{node.name}' is {node.kind.value}; only arrays hold items."
        )
    node.constraints = {key: value for key, value in node.constraints.items() if value is not None}
    node.description = node.description or None
    node.comment = node.comment or None
