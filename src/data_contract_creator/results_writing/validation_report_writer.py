"""Validation report workbook writer service."""

from __future__ import annotations

import hashlib
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from data_contract_creator.contract_model import Contract, iter_property_paths
from data_contract_creator.contract_validation import Violation
from data_contract_creator.editing_session import SubmissionResult

from .report_models import (
    PROPERTIES_SHEET_NAME,
    RUN_INFO_SHEET_NAME,
    VIOLATIONS_SHEET_NAME,
    PropertyRow,
    ReportMetadata,
    ReportStatus,
)

_VIOLATION_COLUMNS = ("path", "kind", "message")
_PROPERTY_COLUMNS = ("document_type", "path", "kind", "required")


@dataclass(frozen=True)
class _ReportCounts:
    """Computed counters for the RunInfo sheet."""

    document_types: int
    properties: int
    indices: int
    violations: int


def write_validation_report(
    contract: Contract,
    submission: SubmissionResult,
    output_path: Path | str,
    source_path: Path | str | None = None,
) -> Path:
    """Write the validation report workbook and return its resolved path."""
    output = Path(output_path)
    metadata = ReportMetadata(
        generated_at=datetime.now(UTC),
        source_path=Path(source_path).resolve() if source_path else None,
        output_path=output.resolve(),
    )

    workbook = Workbook()
    violations_sheet = workbook.active
    violations_sheet.title = VIOLATIONS_SHEET_NAME
    _write_violations_sheet(violations_sheet, submission.violations)
    _write_properties_sheet(
        workbook.create_sheet(PROPERTIES_SHEET_NAME), collect_property_rows(contract)
    )
    _write_run_info_sheet(
        workbook.create_sheet(RUN_INFO_SHEET_NAME),
        metadata=metadata,
        submission=submission,
        counts=_calculate_counts(contract, submission),
    )

    output.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(output)
    return metadata.output_path


def collect_property_rows(contract: Contract) -> list[PropertyRow]:
    """Return one row per property path in declaration order."""
    rows = []
    for name, document_type in contract.document_types.items():
        for path, prop in iter_property_paths(document_type.properties):
            rows.append(
                PropertyRow(
                    document_type=name,
                    path=path,
                    kind=prop.kind.value,
                    required=document_type.is_required(path),
                )
            )
    return rows


def _write_violations_sheet(sheet, violations: Sequence[Violation]) -> None:
    _write_header(sheet, _VIOLATION_COLUMNS)
    for row, violation in enumerate(violations, start=2):
        sheet.cell(row=row, column=1, value=violation.path)
        sheet.cell(row=row, column=2, value=violation.kind.value)
        sheet.cell(row=row, column=3, value=violation.message)
    _fit_column_widths(
        sheet,
        [(violation.path, violation.kind.value, violation.message) for violation in violations],
    )


def _write_properties_sheet(sheet, rows: Sequence[PropertyRow]) -> None:
    _write_header(sheet, _PROPERTY_COLUMNS)
    values = [(row.document_type, row.path, row.kind, row.required) for row in rows]
    for row_number, row_values in enumerate(values, start=2):
        for column, value in enumerate(row_values, start=1):
            sheet.cell(row=row_number, column=column, value=value)
    _fit_column_widths(sheet, values)


def _write_header(sheet, columns: Sequence[str]) -> None:
    for column, label in enumerate(columns, start=1):
        sheet.cell(row=1, column=column, value=label)
        sheet.cell(row=1, column=column).style = "Headline 1"
    sheet.freeze_panes = "A2"


def _fit_column_widths(sheet, rows: Sequence[Sequence[object]]) -> None:
    for column in range(1, sheet.max_column + 1):
        header = str(sheet.cell(row=1, column=column).value or "")
        longest = max([len(header), *(len(str(row[column - 1])) for row in rows)])
        sheet.column_dimensions[get_column_letter(column)].width = max(12, min(longest + 4, 80))


def _write_run_info_sheet(
    sheet,
    *,
    metadata: ReportMetadata,
    submission: SubmissionResult,
    counts: _ReportCounts,
) -> None:
    status = ReportStatus.VALID if submission.is_valid else ReportStatus.INVALID
    contract_hash = hashlib.sha256(submission.json_text.encode("utf-8")).hexdigest()
    entries = (
        ("generated_at", metadata.generated_at.isoformat()),
        ("source_path", str(metadata.source_path) if metadata.source_path else ""),
        ("output_path", str(metadata.output_path)),
        ("status", status.value),
        ("document_types", counts.document_types),
        ("properties", counts.properties),
        ("indices", counts.indices),
        ("violations", counts.violations),
        ("size_bytes", submission.size_bytes),
        ("contract_sha256", contract_hash),
    )
    for row, (key, value) in enumerate(entries, start=1):
        sheet.cell(row=row, column=1, value=key)
        sheet.cell(row=row, column=2, value=value)
    sheet.column_dimensions["A"].width = 20
    sheet.column_dimensions["B"].width = 70


def _calculate_counts(contract: Contract, submission: SubmissionResult) -> _ReportCounts:
    return _ReportCounts(
        document_types=len(contract.document_types),
        properties=sum(
            1
            for document_type in contract.document_types.values()
            for _ in iter_property_paths(document_type.properties)
        ),
        indices=sum(
            len(document_type.indices) for document_type in contract.document_types.values()
        ),
        violations=len(submission.violations),
    )
