"""Results writing domain exports."""

from .report_models import (
    PROPERTIES_SHEET_NAME,
    RUN_INFO_SHEET_NAME,
    VIOLATIONS_SHEET_NAME,
    PropertyRow,
    ReportMetadata,
    ReportStatus,
)
from .validation_report_writer import collect_property_rows, write_validation_report

__all__ = [
    "PROPERTIES_SHEET_NAME",
    "RUN_INFO_SHEET_NAME",
    "VIOLATIONS_SHEET_NAME",
    "PropertyRow",
    "ReportMetadata",
    "ReportStatus",
    "collect_property_rows",
    "write_validation_report",
]
