"""Single-writer editing session over the current contract."""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Sequence
from typing import TypeVar

from data_contract_creator.configuration.runtime_settings import ValidationLimits
from data_contract_creator.contract_model import (
    Contract,
    DocumentType,
    Index,
    KindChange,
    Property,
    PropertyKind,
    SortDirection,
)
from data_contract_creator.contract_model.property_models import ItemsDefinition
from data_contract_creator.contract_validation import (
    validate_contract,
    violations_for_document_type,
)
from data_contract_creator.schema_codec import parse_contract_json, render_contract_json

from .session_contracts import DocumentTypeState, SubmissionResult

_LOGGER = logging.getLogger(__name__)

_T = TypeVar("_T")


def submit(contract: Contract, limits: ValidationLimits | None = None) -> SubmissionResult:
    """Serialize and validate `contract`, returning both results together."""
    json_text = render_contract_json(contract)
    violations = validate_contract(contract, limits)
    size_bytes = len(json_text.encode("utf-8"))
    _LOGGER.debug(
        "Submitted %d document type(s): %d byte(s), %d violation(s)",
        len(contract.document_types),
        size_bytes,
        len(violations),
    )
    return SubmissionResult(json_text=json_text, violations=violations, size_bytes=size_bytes)


def import_contract_text(text: str | bytes) -> Contract:
    """Parse canonical JSON text into a new contract.

    Raises:
      ContractImportError: With the path at which parsing failed.
    """
    contract = parse_contract_json(text)
    _LOGGER.debug("Imported %d document type(s)", len(contract.document_types))
    return contract


class EditingSession:  # pylint: disable=too-many-public-methods
    """Explicitly owned holder of the current contract.

    Every mutation is forwarded to the contract, bumps the revision and discards
    the last submission, so a validation result is never reported for a
    contract it was not computed from. The session keeps its contract private:
    it copies the contract it is given and hands out copies only.
    """

    def __init__(
        self, contract: Contract | None = None, limits: ValidationLimits | None = None
    ) -> None:
        self._contract = copy.deepcopy(contract) if contract is not None else Contract()
        self._limits = limits or ValidationLimits()
        self._revision = 0
        self._last_submission: SubmissionResult | None = None

    @property
    def contract(self) -> Contract:
        """A copy of the current contract; edit it through the session."""
        return self.snapshot()

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def last_submission(self) -> SubmissionResult | None:
        return self._last_submission

    def snapshot(self) -> Contract:
        """Return an independent copy safe to hand to another thread."""
        return copy.deepcopy(self._contract)

    def submit(self) -> SubmissionResult:
        """Serialize and validate the current contract and record the result."""
        result = submit(self._contract, self._limits)
        self._last_submission = result
        return result

    def record_submission(self, result: SubmissionResult, revision: int) -> bool:
        """Record a result computed elsewhere from the snapshot taken at `revision`.

        Returns False and drops the result when the contract changed since.
        """
        if revision != self._revision:
            _LOGGER.debug(
                "Discarding submission for revision %d; current revision is %d",
                revision,
                self._revision,
            )
            return False
        self._last_submission = result
        return True

    def state_of(self, document_type: str) -> DocumentTypeState:
        """Return the editing state of one document type."""
        target = self._contract.document_type(document_type)
        if target.is_empty:
            return DocumentTypeState.EMPTY
        if self._last_submission is None:
            return DocumentTypeState.HAS_PROPERTIES
        if violations_for_document_type(self._last_submission.violations, document_type):
            return DocumentTypeState.VALIDATION_FAILED
        return DocumentTypeState.VALIDATED

    def import_json(self, text: str | bytes) -> Contract:
        """Replace the current contract with an imported one.

        The current contract is kept when the import fails.
        """
        self._replace(import_contract_text(text))
        return self.snapshot()

    def reset(self) -> None:
        """Discard every document type."""
        self._replace(Contract())

    def add_document_type(self, name: str, *, seed_property: bool = False) -> DocumentType:
        created = self._mutate(
            self._contract.add_document_type, name, seed_property=seed_property
        )
        return copy.deepcopy(created)

    def remove_document_type(self, name: str) -> DocumentType:
        return self._mutate(self._contract.remove_document_type, name)

    def rename_document_type(self, name: str, new_name: str) -> None:
        self._mutate(self._contract.rename_document_type, name, new_name)

    def set_additional_properties(self, document_type: str, allowed: bool) -> None:
        self._mutate(self._contract.set_additional_properties, document_type, allowed)

    def set_document_type_comment(self, document_type: str, comment: str | None) -> None:
        self._mutate(self._contract.set_document_type_comment, document_type, comment)

    def add_property(
        self, document_type: str, prop: Property, parent_path: str | None = None
    ) -> Property:
        added = self._mutate(self._contract.add_property, document_type, prop, parent_path)
        return copy.deepcopy(added)

    def remove_property(self, document_type: str, path: str) -> Property:
        return self._mutate(self._contract.remove_property, document_type, path)

    def rename_property(self, document_type: str, path: str, new_name: str) -> None:
        self._mutate(self._contract.rename_property, document_type, path, new_name)

    def set_property_kind(self, document_type: str, path: str, kind: PropertyKind) -> KindChange:
        return self._mutate(self._contract.set_property_kind, document_type, path, kind)

    def set_constraint(self, document_type: str, path: str, key: str, value: object) -> None:
        self._mutate(self._contract.set_constraint, document_type, path, key, value)

    def set_items(
        self, document_type: str, path: str, items: Property | Sequence[Property]
    ) -> ItemsDefinition | None:
        return self._mutate(self._contract.set_items, document_type, path, items)

    def set_property_description(
        self, document_type: str, path: str, description: str | None
    ) -> None:
        self._mutate(self._contract.set_property_description, document_type, path, description)

    def set_property_comment(self, document_type: str, path: str, comment: str | None) -> None:
        self._mutate(self._contract.set_property_comment, document_type, path, comment)

    def set_object_additional_properties(
        self, document_type: str, path: str, allowed: bool
    ) -> None:
        self._mutate(
            self._contract.set_object_additional_properties, document_type, path, allowed
        )

    def set_required(self, document_type: str, path: str, required: bool) -> None:
        self._mutate(self._contract.set_required, document_type, path, required)

    def add_index(self, document_type: str, name: str, unique: bool = False) -> Index:
        return copy.deepcopy(self._mutate(self._contract.add_index, document_type, name, unique))

    def remove_index(self, document_type: str, name: str) -> Index:
        return self._mutate(self._contract.remove_index, document_type, name)

    def rename_index(self, document_type: str, name: str, new_name: str) -> None:
        self._mutate(self._contract.rename_index, document_type, name, new_name)

    def set_index_unique(self, document_type: str, name: str, unique: bool) -> None:
        self._mutate(self._contract.set_index_unique, document_type, name, unique)

    def add_index_property(
        self,
        document_type: str,
        index_name: str,
        path: str,
        direction: SortDirection = SortDirection.ASC,
    ) -> None:
        self._mutate(
            self._contract.add_index_property, document_type, index_name, path, direction
        )

    def remove_index_property(self, document_type: str, index_name: str, path: str) -> None:
        self._mutate(self._contract.remove_index_property, document_type, index_name, path)

    def set_index_direction(
        self, document_type: str, index_name: str, path: str, direction: SortDirection
    ) -> None:
        self._mutate(
            self._contract.set_index_direction, document_type, index_name, path, direction
        )

    def _mutate(self, operation: Callable[..., _T], *args: object, **kwargs: object) -> _T:
        outcome = operation(*args, **kwargs)
        self._bump()
        return outcome

    def _replace(self, contract: Contract) -> None:
        self._contract = contract
        self._bump()

    def _bump(self) -> None:
        self._revision += 1
        self._last_submission = None
