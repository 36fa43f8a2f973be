"""Contract model exports."""

from .contract_aggregate import Contract
from .document_types import DEFAULT_PROPERTY_NAME, DocumentType
from .index_models import Index, IndexProperty, SortDirection
from .model_errors import (
    ContractModelError,
    DuplicateNameError,
    InvalidConstraintError,
    InvalidReferenceError,
    NotFoundError,
)
from .property_models import (
    CONSTRAINT_KEYS,
    ITEMS_SEGMENT,
    MAX_PROPERTY_NESTING,
    KindChange,
    Property,
    PropertyKind,
    new_property,
)
from .property_paths import iter_index_paths, iter_property_paths, resolve_index_path

__all__ = [
    "CONSTRAINT_KEYS",
    "Contract",
    "ContractModelError",
    "DEFAULT_PROPERTY_NAME",
    "DocumentType",
    "DuplicateNameError",
    "ITEMS_SEGMENT",
    "MAX_PROPERTY_NESTING",
    "Index",
    "IndexProperty",
    "InvalidConstraintError",
    "InvalidReferenceError",
    "KindChange",
    "NotFoundError",
    "Property",
    "PropertyKind",
    "SortDirection",
    "iter_index_paths",
    "iter_property_paths",
    "new_property",
    "resolve_index_path",
]
