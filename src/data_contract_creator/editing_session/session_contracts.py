"""Editing session entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from data_contract_creator.contract_validation import Violation


class DocumentTypeState(str, Enum):
    """Editing lifecycle of one document type."""

    EMPTY = "empty"
    HAS_PROPERTIES = "has_properties"
    VALIDATED = "validated"
    VALIDATION_FAILED = "validation_failed"


@dataclass(frozen=True)
class SubmissionResult:
    """Canonical JSON and validation outcome produced together by one submit."""

    json_text: str
    violations: tuple[Violation, ...]
    size_bytes: int

    @property
    def is_valid(self) -> bool:
        return not self.violations
