"""Results writing entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

VIOLATIONS_SHEET_NAME = "Violations"
PROPERTIES_SHEET_NAME = "Properties"
RUN_INFO_SHEET_NAME = "RunInfo"


class ReportStatus(str, Enum):
    """Overall verdict rendered into the RunInfo sheet."""

    VALID = "VALID"
    INVALID = "INVALID"


@dataclass(frozen=True)
class ReportMetadata:
    """Metadata rendered into the RunInfo sheet."""

    generated_at: datetime
    source_path: Path | None
    output_path: Path


@dataclass(frozen=True)
class PropertyRow:
    """One row of the Properties sheet."""

    document_type: str
    path: str
    kind: str
    required: bool
