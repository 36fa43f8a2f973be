"""Canonical JSON to contract deserialization (import)."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from data_contract_creator.contract_model import (
    ITEMS_SEGMENT,
    MAX_PROPERTY_NESTING,
    Contract,
    DocumentType,
    Index,
    IndexProperty,
    Property,
    PropertyKind,
    SortDirection,
    resolve_index_path,
)
from data_contract_creator.contract_model.property_models import (
    ALL_CONSTRAINT_KEYS,
    ItemsDefinition,
    constraint_value_problem,
    tuple_item_segment,
)

from .import_errors import (
    IndexReferenceError,
    MalformedJsonError,
    SchemaShapeError,
    UnknownKindError,
)

_LOGGER = logging.getLogger(__name__)

ROOT_PATH = "documentTypes"

_WIRE_KINDS: Mapping[str, PropertyKind] = {
    kind.value: kind for kind in PropertyKind if kind != PropertyKind.BYTE_ARRAY
}
_OBJECT_ONLY_KEYS = ("properties", "required", "additionalProperties")
_DOCUMENT_KEYS = frozenset(
    {"type", "properties", "required", "additionalProperties", "indices", "$comment"}
)
_PROPERTY_KEYS = (
    frozenset({"type", "byteArray", "items", "description", "$comment"})
    | frozenset(_OBJECT_ONLY_KEYS)
    | ALL_CONSTRAINT_KEYS
)
_INDEX_KEYS = frozenset({"name", "properties", "unique"})


def parse_contract_json(text: str | bytes) -> Contract:
    """Parse JSON text into a contract.

    Raises:
      MalformedJsonError: If `text` is not valid JSON.
      ContractImportError: For any other structural problem, with the failing path.
    """
    try:
        value = json.loads(text, parse_constant=_reject_non_finite)
    except (ValueError, TypeError, RecursionError) as exc:
        raise MalformedJsonError("", f"Invalid JSON: {exc}") from exc
    return deserialize_contract(value)


def deserialize_contract(value: object) -> Contract:
    """Build a contract from an already-decoded JSON value."""
    mapping = _require_mapping(value, ROOT_PATH, "The contract")
    contract = Contract()
    for name, definition in mapping.items():
        contract.document_types[name] = _parse_document_type(
            name, definition, f"{ROOT_PATH}.{name}"
        )
    return contract


def _parse_document_type(name: str, definition: object, path: str) -> DocumentType:
    mapping = _require_mapping(definition, path, "A document type")
    if "type" in mapping and mapping["type"] != "object":
        raise SchemaShapeError(f"{path}.type", "document types must have type 'object'")
    if "properties" not in mapping:
        raise SchemaShapeError(path, "document type is missing 'properties'")
    properties = _parse_properties(mapping["properties"], f"{path}.properties", depth=1)
    document_type = DocumentType(
        name=name,
        properties=properties,
        required=_parse_name_list(mapping, "required", path),
        additional_properties=_parse_flag(mapping, "additionalProperties", path),
        comment=_optional_text(mapping, "$comment", path),
    )
    document_type.indices = _parse_indices(mapping, path, properties)
    _log_ignored_keys(mapping, _DOCUMENT_KEYS, path)
    return document_type


def _parse_properties(value: object, path: str, *, depth: int) -> dict[str, Property]:
    mapping = _require_mapping(value, path, "'properties'")
    return {
        name: _parse_property(name, definition, f"{path}.{name}", depth=depth)
        for name, definition in mapping.items()
    }


def _parse_property(name: str, definition: object, path: str, *, depth: int) -> Property:
    if depth > MAX_PROPERTY_NESTING:
        raise SchemaShapeError(path, f"properties nest deeper than {MAX_PROPERTY_NESTING} levels")
    mapping = _require_mapping(definition, path, "A property definition")
    kind = _parse_kind(mapping, path)
    prop = Property(
        name=name,
        kind=kind,
        constraints=_parse_constraints(mapping, kind, path),
        description=_optional_text(mapping, "description", path),
        comment=_optional_text(mapping, "$comment", path),
    )

    if kind == PropertyKind.OBJECT:
        if "properties" not in mapping:
            raise SchemaShapeError(path, "object property is missing 'properties'")
        prop.properties = _parse_properties(
            mapping["properties"], f"{path}.properties", depth=depth + 1
        )
        prop.required = _parse_name_list(mapping, "required", path)
        prop.additional_properties = _parse_flag(mapping, "additionalProperties", path)
    else:
        for key in _OBJECT_ONLY_KEYS:
            if key in mapping:
                raise SchemaShapeError(f"{path}.{key}", f"'{key}' only applies to objects")

    if kind == PropertyKind.ARRAY:
        if "items" not in mapping:
            raise SchemaShapeError(path, "array property is missing 'items'")
        prop.items = _parse_items(mapping["items"], f"{path}.items", depth=depth + 1)
    elif "items" in mapping:
        raise SchemaShapeError(f"{path}.items", "'items' only applies to non-byte arrays")

    _log_ignored_keys(mapping, _PROPERTY_KEYS, path)
    return prop


def _parse_kind(mapping: Mapping[str, Any], path: str) -> PropertyKind:
    if "type" not in mapping:
        raise SchemaShapeError(path, "property is missing 'type'")
    type_name = mapping["type"]
    kind = _WIRE_KINDS.get(type_name) if isinstance(type_name, str) else None
    if kind is None:
        raise UnknownKindError(path, f"unknown property type {type_name!r}")
    byte_array = _parse_flag(mapping, "byteArray", path)
    if byte_array and kind != PropertyKind.ARRAY:
        raise SchemaShapeError(f"{path}.byteArray", "'byteArray' requires type 'array'")
    return PropertyKind.BYTE_ARRAY if byte_array else kind


def _parse_constraints(
    mapping: Mapping[str, Any], kind: PropertyKind, path: str
) -> dict[str, object]:
    constraints: dict[str, object] = {}
    for key, value in mapping.items():
        if key not in ALL_CONSTRAINT_KEYS:
            continue
        problem = constraint_value_problem(kind, key, value)
        if problem is not None:
            raise SchemaShapeError(f"{path}.{key}", problem)
        constraints[key] = value
    return constraints


def _parse_items(value: object, path: str, *, depth: int) -> ItemsDefinition:
    if isinstance(value, Mapping):
        return _parse_property(ITEMS_SEGMENT, value, path, depth=depth)
    if isinstance(value, list):
        if not value:
            raise SchemaShapeError(path, "tuple 'items' must not be empty")
        return tuple(
            _parse_property(
                tuple_item_segment(position), item, f"{path}[{position}]", depth=depth
            )
            for position, item in enumerate(value)
        )
    raise SchemaShapeError(path, "'items' must be an object or a list of objects")


def _parse_indices(
    mapping: Mapping[str, Any], path: str, properties: Mapping[str, Property]
) -> list[Index]:
    if "indices" not in mapping:
        return []
    indices_path = f"{path}.indices"
    value = mapping["indices"]
    if not isinstance(value, list):
        raise SchemaShapeError(indices_path, "'indices' must be a list")
    return [
        _parse_index(entry, f"{indices_path}[{position}]", properties)
        for position, entry in enumerate(value)
    ]


def _parse_index(entry: object, path: str, properties: Mapping[str, Property]) -> Index:
    mapping = _require_mapping(entry, path, "An index")
    name = mapping.get("name")
    if not isinstance(name, str):
        raise SchemaShapeError(f"{path}.name", "index name must be a string")
    entries = mapping.get("properties")
    if not isinstance(entries, list) or not entries:
        raise SchemaShapeError(f"{path}.properties", "index properties must be a non-empty list")

    index = Index(name=name, unique=_parse_flag(mapping, "unique", path))
    for position, item in enumerate(entries):
        item_path = f"{path}.properties[{position}]"
        if not isinstance(item, Mapping) or len(item) != 1:
            raise SchemaShapeError(item_path, "index entries must be objects with exactly one key")
        ((property_path, direction),) = item.items()
        if direction not in (SortDirection.ASC.value, SortDirection.DESC.value):
            raise SchemaShapeError(
                item_path, f"sort direction must be 'asc' or 'desc', not {direction!r}"
            )
        if resolve_index_path(properties, property_path) is None:
            raise IndexReferenceError(item_path, f"'{property_path}' is not a declared property")
        index.properties.append(
            IndexProperty(path=property_path, direction=SortDirection(direction))
        )
    _log_ignored_keys(mapping, _INDEX_KEYS, path)
    return index


def _require_mapping(value: object, path: str, label: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise SchemaShapeError(path, f"{label} must be a JSON object")
    return value


def _parse_name_list(mapping: Mapping[str, Any], key: str, path: str) -> list[str]:
    if key not in mapping:
        return []
    value = mapping[key]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise SchemaShapeError(f"{path}.{key}", f"'{key}' must be a list of strings")
    return list(value)


def _parse_flag(mapping: Mapping[str, Any], key: str, path: str) -> bool:
    if key not in mapping:
        return False
    value = mapping[key]
    if not isinstance(value, bool):
        raise SchemaShapeError(f"{path}.{key}", f"'{key}' must be a boolean")
    return value


def _optional_text(mapping: Mapping[str, Any], key: str, path: str) -> str | None:
    if key not in mapping:
        return None
    value = mapping[key]
    if not isinstance(value, str):
        raise SchemaShapeError(f"{path}.{key}", f"'{key}' must be a string")
    return value or None


def _log_ignored_keys(mapping: Mapping[str, Any], known: frozenset[str], path: str) -> None:
    ignored = [key for key in mapping if key not in known]
    if ignored:
        _LOGGER.debug("Ignoring unsupported keys at %s: %s", path, ", ".join(ignored))


def _reject_non_finite(token: str) -> float:
    raise ValueError(f"non-finite number {token} is not allowed")
