"""Contract model mutation errors."""

from __future__ import annotations


class ContractModelError(Exception):
    """Raised when a mutation is rejected; the model is left unchanged."""


class DuplicateNameError(ContractModelError):
    """Raised when a name already exists in the target scope."""


class NotFoundError(ContractModelError):
    """Raised when a document type, property, index, or index entry does not resolve."""


class InvalidReferenceError(ContractModelError):
    """Raised when a reference points at something that cannot be used for the operation."""


class InvalidConstraintError(ContractModelError):
    """Raised when a constraint key does not apply to a property kind or has a bad value."""
