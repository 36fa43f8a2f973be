"""Contract to canonical JSON serialization."""

from __future__ import annotations

import json
from typing import Any

from data_contract_creator.contract_model import (
    CONSTRAINT_KEYS,
    Contract,
    DocumentType,
    Index,
    Property,
    PropertyKind,
)

COMPACT_SEPARATORS = (",", ":")


def serialize_contract(contract: Contract) -> dict[str, Any]:
    """Return the canonical JSON value of `contract`, in insertion order."""
    return {
        name: _serialize_document_type(document_type)
        for name, document_type in contract.document_types.items()
    }


def render_contract_json(contract: Contract, indent: int | None = None) -> str:
    """Return the canonical JSON text; compact unless `indent` is given."""
    value = serialize_contract(contract)
    if indent is None:
        return json.dumps(value, ensure_ascii=False, separators=COMPACT_SEPARATORS)
    return json.dumps(value, ensure_ascii=False, indent=indent)


def serialized_size(contract: Contract) -> int:
    """Return the UTF-8 byte length of the compact canonical JSON."""
    return len(render_contract_json(contract).encode("utf-8"))


def _serialize_document_type(document_type: DocumentType) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "properties": {
            name: serialize_property(prop) for name, prop in document_type.properties.items()
        }
    }
    if document_type.required:
        payload["required"] = list(document_type.required)
    payload["additionalProperties"] = document_type.additional_properties
    if document_type.indices:
        payload["indices"] = [_serialize_index(index) for index in document_type.indices]
    if document_type.comment:
        payload["$comment"] = document_type.comment
    return payload


def serialize_property(prop: Property) -> dict[str, Any]:
    """Return the JSON definition of one property and its descendants."""
    payload: dict[str, Any] = {}
    if prop.kind == PropertyKind.BYTE_ARRAY:
        payload["type"] = PropertyKind.ARRAY.value
        payload["byteArray"] = True
    else:
        payload["type"] = prop.kind.value

    for key in CONSTRAINT_KEYS[prop.kind]:
        if prop.constraints.get(key) is not None:
            payload[key] = prop.constraints[key]

    if prop.kind == PropertyKind.OBJECT:
        payload["properties"] = {
            name: serialize_property(child) for name, child in prop.properties.items()
        }
        if prop.required:
            payload["required"] = list(prop.required)
        payload["additionalProperties"] = prop.additional_properties
    elif prop.kind == PropertyKind.ARRAY and prop.items is not None:
        if isinstance(prop.items, Property):
            payload["items"] = serialize_property(prop.items)
        else:
            payload["items"] = [serialize_property(item) for item in prop.items]

    if prop.description:
        payload["description"] = prop.description
    if prop.comment:
        payload["$comment"] = prop.comment
    return payload


def _serialize_index(index: Index) -> dict[str, Any]:
    return {
        "name": index.name,
        "properties": [{entry.path: entry.direction.value} for entry in index.properties],
        "unique": index.unique,
    }
