"""Contract validation exports."""

from .contract_validator import IDENTIFIER_PATTERN, is_valid_identifier, validate_contract
from .violations import (
    Violation,
    ViolationKind,
    document_type_path,
    violations_for_document_type,
)

__all__ = [
    "IDENTIFIER_PATTERN",
    "Violation",
    "ViolationKind",
    "document_type_path",
    "is_valid_identifier",
    "validate_contract",
    "violations_for_document_type",
]
