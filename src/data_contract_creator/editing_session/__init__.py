"""Editing session exports."""

from .contract_session import EditingSession, import_contract_text, submit
from .session_contracts import DocumentTypeState, SubmissionResult

__all__ = [
    "DocumentTypeState",
    "EditingSession",
    "SubmissionResult",
    "import_contract_text",
    "submit",
]
