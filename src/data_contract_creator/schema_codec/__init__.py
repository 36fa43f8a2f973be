"""Schema codec exports."""

from .contract_deserializer import ROOT_PATH, deserialize_contract, parse_contract_json
from .contract_serializer import (
    render_contract_json,
    serialize_contract,
    serialize_property,
    serialized_size,
)
from .import_errors import (
    ContractImportError,
    ImportErrorKind,
    IndexReferenceError,
    MalformedJsonError,
    SchemaShapeError,
    UnknownKindError,
)

__all__ = [
    "ContractImportError",
    "ImportErrorKind",
    "IndexReferenceError",
    "MalformedJsonError",
    "ROOT_PATH",
    "SchemaShapeError",
    "UnknownKindError",
    "deserialize_contract",
    "parse_contract_json",
    "render_contract_json",
    "serialize_contract",
    "serialize_property",
    "serialized_size",
]
