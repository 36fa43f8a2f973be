"""Validation outcome entities."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from data_contract_creator.schema_codec import ROOT_PATH


class ViolationKind(str, Enum):
    """Closed taxonomy of validation findings."""

    MISSING_PROPERTY = "MissingProperty"
    INVALID_IDENTIFIER = "InvalidIdentifier"
    TOO_MANY_INDICES = "TooManyIndices"
    TOO_MANY_INDEX_PROPERTIES = "TooManyIndexProperties"
    DUPLICATE_INDEX_KEY = "DuplicateIndexKey"
    DUPLICATE_NAME = "DuplicateName"
    UNRESOLVED_REFERENCE = "UnresolvedReference"
    INVALID_CONSTRAINT = "InvalidConstraint"
    DEPTH_LIMIT_EXCEEDED = "DepthLimitExceeded"
    SIZE_LIMIT_EXCEEDED = "SizeLimitExceeded"


@dataclass(frozen=True)
class Violation:
    """One validation finding with its location in the contract."""

    path: str
    kind: ViolationKind
    message: str

    def describe(self) -> str:
        """Return a one-line human-readable rendering."""
        return f"{self.kind.value} at {self.path}: {self.message}"


def document_type_path(name: str) -> str:
    """Return the violation path prefix of one document type."""
    return f"{ROOT_PATH}.{name}"


def violations_for_document_type(
    violations: Sequence[Violation], name: str
) -> tuple[Violation, ...]:
    """Return the violations located in `name` plus contract-wide ones."""
    prefix = document_type_path(name)
    return tuple(
        violation
        for violation in violations
        if violation.path == ROOT_PATH
        or violation.path == prefix
        or violation.path.startswith(f"{prefix}.")
    )
