"""Import failure taxonomy."""

from __future__ import annotations

from enum import Enum


class ImportErrorKind(str, Enum):
    """Why an import was rejected."""

    MALFORMED_JSON = "MalformedJson"
    UNKNOWN_KIND = "UnknownKind"
    SCHEMA_SHAPE = "SchemaShapeError"
    REFERENCE = "ReferenceError"


class ContractImportError(Exception):
    """Raised when JSON text or a JSON value cannot be turned into a contract."""

    kind: ImportErrorKind = ImportErrorKind.SCHEMA_SHAPE

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"{path}: {detail}" if path else detail)


class MalformedJsonError(ContractImportError):
    """The input is not valid JSON."""

    kind = ImportErrorKind.MALFORMED_JSON


class UnknownKindError(ContractImportError):
    """A property declares a type outside the recognised set."""

    kind = ImportErrorKind.UNKNOWN_KIND


class SchemaShapeError(ContractImportError):
    """A structural field is missing or has the wrong shape."""

    kind = ImportErrorKind.SCHEMA_SHAPE


class IndexReferenceError(ContractImportError):
    """An index references a property path the document type does not declare."""

    kind = ImportErrorKind.REFERENCE
