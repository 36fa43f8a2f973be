"""Structural and policy validation of a contract."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field

from data_contract_creator.configuration.runtime_settings import ValidationLimits
from data_contract_creator.contract_model import (
    ITEMS_SEGMENT,
    MAX_PROPERTY_NESTING,
    Contract,
    DocumentType,
    Property,
    PropertyKind,
    resolve_index_path,
)
from data_contract_creator.contract_model.property_models import (
    constraint_value_problem,
    tuple_item_segment,
)
from data_contract_creator.schema_codec import ROOT_PATH, serialized_size

from .violations import Violation, ViolationKind, document_type_path

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")

_BOUNDED_PAIRS = (
    ("minLength", "maxLength"),
    ("minimum", "maximum"),
    ("minItems", "maxItems"),
    ("minProperties", "maxProperties"),
)


@dataclass(frozen=True)
class _PropertyVisit:
    """One property reached while walking a document type."""

    prop: Property
    key: str
    path: str
    depth: int
    is_item: bool


@dataclass(frozen=True)
class _ValidationContext:
    """Read-only inputs shared by every check."""

    contract: Contract
    limits: ValidationLimits


@dataclass
class _Findings:
    """Mutable collector for violations in emission order."""

    violations: list[Violation] = field(default_factory=list)

    def add(self, path: str, kind: ViolationKind, message: str) -> None:
        self.violations.append(Violation(path=path, kind=kind, message=message))


_Check = Callable[[_ValidationContext, _Findings], None]


def validate_contract(
    contract: Contract, limits: ValidationLimits | None = None
) -> tuple[Violation, ...]:
    """Return every violation found in `contract`; empty means valid.

    Structural checks run before policy checks and every check runs regardless
    of what earlier checks reported. The contract is never mutated.
    """
    context = _ValidationContext(contract=contract, limits=limits or ValidationLimits())
    findings = _Findings()
    for check in (*_STRUCTURAL_CHECKS, *_POLICY_CHECKS):
        check(context, findings)
    return tuple(findings.violations)


def is_valid_identifier(name: str, reserved_words: Sequence[str] = ()) -> bool:
    """Return whether `name` matches the identifier grammar and is not reserved."""
    return (
        isinstance(name, str)
        and IDENTIFIER_PATTERN.fullmatch(name) is not None
        and name not in reserved_words
    )


def _check_required_names(context: _ValidationContext, findings: _Findings) -> None:
    for name, document_type in context.contract.document_types.items():
        dt_path = document_type_path(name)
        _check_required_list(
            document_type.required, document_type.properties, dt_path, findings
        )
        for visit in _walk(name, document_type):
            if visit.prop.kind == PropertyKind.OBJECT:
                _check_required_list(
                    visit.prop.required, visit.prop.properties, visit.path, findings
                )


def _check_required_list(
    required: Sequence[str],
    properties: Mapping[str, Property],
    owner_path: str,
    findings: _Findings,
) -> None:
    seen: set[str] = set()
    for position, entry in enumerate(required):
        entry_path = f"{owner_path}.required[{position}]"
        if entry in seen:
            findings.add(
                entry_path, ViolationKind.DUPLICATE_NAME, f"'{entry}' is listed as required twice"
            )
        elif entry not in properties:
            findings.add(
                entry_path,
                ViolationKind.MISSING_PROPERTY,
                f"required property '{entry}' is not declared",
            )
        seen.add(entry)


def _check_index_references(context: _ValidationContext, findings: _Findings) -> None:
    for name, document_type in context.contract.document_types.items():
        for position, index in enumerate(document_type.indices):
            index_path = f"{document_type_path(name)}.indices[{position}]"
            if not index.properties:
                findings.add(
                    f"{index_path}.properties",
                    ViolationKind.MISSING_PROPERTY,
                    f"index '{index.name}' has no properties",
                )
            seen: set[str] = set()
            for entry_position, entry in enumerate(index.properties):
                entry_path = f"{index_path}.properties[{entry_position}]"
                if entry.path in seen:
                    findings.add(
                        entry_path,
                        ViolationKind.DUPLICATE_NAME,
                        f"index '{index.name}' lists '{entry.path}' twice",
                    )
                elif resolve_index_path(document_type.properties, entry.path) is None:
                    findings.add(
                        entry_path,
                        ViolationKind.UNRESOLVED_REFERENCE,
                        f"index '{index.name}' references undeclared property '{entry.path}'",
                    )
                seen.add(entry.path)


def _check_index_names(context: _ValidationContext, findings: _Findings) -> None:
    for name, document_type in context.contract.document_types.items():
        seen: set[str] = set()
        for position, index in enumerate(document_type.indices):
            if index.name in seen:
                findings.add(
                    f"{document_type_path(name)}.indices[{position}].name",
                    ViolationKind.DUPLICATE_NAME,
                    f"index name '{index.name}' is used more than once",
                )
            seen.add(index.name)


def _check_names_match_keys(context: _ValidationContext, findings: _Findings) -> None:
    for name, document_type in context.contract.document_types.items():
        if document_type.name != name:
            findings.add(
                document_type_path(name),
                ViolationKind.INVALID_IDENTIFIER,
                f"document type name {document_type.name!r} does not match its key '{name}'",
            )
        for visit in _walk(name, document_type):
            if visit.prop.name != visit.key:
                findings.add(
                    visit.path,
                    ViolationKind.INVALID_IDENTIFIER,
                    f"property name {visit.prop.name!r} does not match its key '{visit.key}'",
                )


def _check_container_shapes(context: _ValidationContext, findings: _Findings) -> None:
    for name, document_type in context.contract.document_types.items():
        for visit in _walk(name, document_type):
            prop = visit.prop
            if prop.kind == PropertyKind.ARRAY and not prop.item_properties():
                findings.add(
                    f"{visit.path}.items",
                    ViolationKind.MISSING_PROPERTY,
                    "array property does not define its items",
                )
            elif prop.kind == PropertyKind.OBJECT and not prop.properties:
                findings.add(
                    f"{visit.path}.properties",
                    ViolationKind.MISSING_PROPERTY,
                    "object property declares no properties",
                )


def _check_declares_properties(context: _ValidationContext, findings: _Findings) -> None:
    for name, document_type in context.contract.document_types.items():
        if not document_type.properties:
            findings.add(
                f"{document_type_path(name)}.properties",
                ViolationKind.MISSING_PROPERTY,
                f"document type '{name}' declares no properties",
            )


def _check_identifiers(context: _ValidationContext, findings: _Findings) -> None:
    reserved = context.limits.reserved_words
    for name, document_type in context.contract.document_types.items():
        dt_path = document_type_path(name)
        _check_identifier(name, "document type", dt_path, reserved, findings)
        for visit in _walk(name, document_type):
            if not visit.is_item:
                _check_identifier(visit.prop.name, "property", visit.path, reserved, findings)
        for position, index in enumerate(document_type.indices):
            _check_identifier(
                index.name, "index", f"{dt_path}.indices[{position}].name", reserved, findings
            )


def _check_identifier(
    name: str, label: str, path: str, reserved: Sequence[str], findings: _Findings
) -> None:
    if not isinstance(name, str) or IDENTIFIER_PATTERN.fullmatch(name) is None:
        findings.add(
            path,
            ViolationKind.INVALID_IDENTIFIER,
            f"{label} name {name!r} must be 1-64 letters, digits, '_' or '-'",
        )
    elif name in reserved:
        findings.add(
            path, ViolationKind.INVALID_IDENTIFIER, f"{label} name '{name}' is a reserved word"
        )


def _check_index_limits(context: _ValidationContext, findings: _Findings) -> None:
    limits = context.limits
    for name, document_type in context.contract.document_types.items():
        indices_path = f"{document_type_path(name)}.indices"
        if len(document_type.indices) > limits.max_indices:
            findings.add(
                indices_path,
                ViolationKind.TOO_MANY_INDICES,
                f"{len(document_type.indices)} indices exceed the limit of {limits.max_indices}",
            )
        unique_count = sum(1 for index in document_type.indices if index.unique)
        if unique_count > limits.max_unique_indices:
            findings.add(
                indices_path,
                ViolationKind.TOO_MANY_INDICES,
                f"{unique_count} unique indices exceed the limit of "
                f"{limits.max_unique_indices}",
            )
        for position, index in enumerate(document_type.indices):
            if len(index.properties) > limits.max_index_properties:
                findings.add(
                    f"{indices_path}[{position}].properties",
                    ViolationKind.TOO_MANY_INDEX_PROPERTIES,
                    f"index '{index.name}' has {len(index.properties)} properties, "
                    f"the limit is {limits.max_index_properties}",
                )


def _check_duplicate_index_keys(context: _ValidationContext, findings: _Findings) -> None:
    for name, document_type in context.contract.document_types.items():
        first_by_key: dict[tuple[str, ...], str] = {}
        for position, index in enumerate(document_type.indices):
            key = index.paths()
            if not key:
                continue
            if key in first_by_key:
                findings.add(
                    f"{document_type_path(name)}.indices[{position}]",
                    ViolationKind.DUPLICATE_INDEX_KEY,
                    f"index '{index.name}' covers the same properties as "
                    f"index '{first_by_key[key]}'",
                )
            else:
                first_by_key[key] = index.name


def _check_constraints(context: _ValidationContext, findings: _Findings) -> None:
    for name, document_type in context.contract.document_types.items():
        for visit in _walk(name, document_type):
            for path, message in _constraint_problems(visit.prop, visit.path):
                findings.add(path, ViolationKind.INVALID_CONSTRAINT, message)


def _constraint_problems(prop: Property, path: str) -> Iterator[tuple[str, str]]:
    constraints = prop.constraints
    invalid: set[str] = set()
    for key, value in constraints.items():
        problem = constraint_value_problem(prop.kind, key, value)
        if problem is not None:
            invalid.add(key)
            yield f"{path}.{key}", problem

    for lower_key, upper_key in _BOUNDED_PAIRS:
        if lower_key in invalid or upper_key in invalid:
            continue
        lower = constraints.get(lower_key)
        upper = constraints.get(upper_key)
        if _is_number(lower) and _is_number(upper) and lower > upper:  # type: ignore[operator]
            yield f"{path}.{lower_key}", f"'{lower_key}' ({lower}) exceeds '{upper_key}' ({upper})"

    multiple_of = constraints.get("multipleOf")
    multiple_of_usable = "multipleOf" not in invalid and _is_number(multiple_of)
    if multiple_of_usable and multiple_of <= 0:  # type: ignore[operator]
        yield f"{path}.multipleOf", "'multipleOf' must be greater than zero"

    pattern = constraints.get("pattern")
    if "pattern" not in invalid and isinstance(pattern, str):
        try:
            re.compile(pattern)
        except re.error as exc:
            yield f"{path}.pattern", f"'pattern' does not compile: {exc}"


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_depth(context: _ValidationContext, findings: _Findings) -> None:
    max_depth = min(context.limits.max_depth, MAX_PROPERTY_NESTING)
    for name, document_type in context.contract.document_types.items():
        for visit in _walk(name, document_type, max_depth=max_depth):
            if visit.depth > max_depth:
                findings.add(
                    visit.path,
                    ViolationKind.DEPTH_LIMIT_EXCEEDED,
                    f"property nesting depth {visit.depth} exceeds the limit of {max_depth}",
                )


def _check_size(context: _ValidationContext, findings: _Findings) -> None:
    limits = context.limits
    too_deep = False
    for name, document_type in context.contract.document_types.items():
        count = 0
        for visit in _walk(name, document_type, max_depth=MAX_PROPERTY_NESTING):
            count += 1
            too_deep = too_deep or visit.depth > MAX_PROPERTY_NESTING
        if count > limits.max_properties:
            findings.add(
                document_type_path(name),
                ViolationKind.SIZE_LIMIT_EXCEEDED,
                f"{count} properties exceed the limit of {limits.max_properties}",
            )
    if too_deep:
        return
    size = serialized_size(context.contract)
    if size > limits.max_contract_size_bytes:
        findings.add(
            ROOT_PATH,
            ViolationKind.SIZE_LIMIT_EXCEEDED,
            f"serialized contract is {size} bytes, the limit is "
            f"{limits.max_contract_size_bytes}",
        )


def _walk(
    name: str, document_type: DocumentType, *, max_depth: int | None = None
) -> Iterator[_PropertyVisit]:
    """Yield every property depth-first in declaration order.

    With `max_depth`, properties deeper than the limit are yielded but not expanded.
    """
    dt_path = document_type_path(name)
    stack = [
        _PropertyVisit(prop, key, f"{dt_path}.properties.{key}", 1, False)
        for key, prop in reversed(document_type.properties.items())
    ]
    while stack:
        visit = stack.pop()
        yield visit
        if max_depth is not None and visit.depth > max_depth:
            continue
        stack.extend(reversed(list(_children(visit))))


def _children(visit: _PropertyVisit) -> Iterator[_PropertyVisit]:
    prop = visit.prop
    depth = visit.depth + 1
    if prop.kind == PropertyKind.OBJECT:
        for name, child in prop.properties.items():
            yield _PropertyVisit(child, name, f"{visit.path}.properties.{name}", depth, False)
    elif prop.kind == PropertyKind.ARRAY and isinstance(prop.items, Property):
        yield _PropertyVisit(prop.items, ITEMS_SEGMENT, f"{visit.path}.items", depth, True)
    elif prop.kind == PropertyKind.ARRAY and prop.items:
        for position, item in enumerate(prop.items):
            segment = tuple_item_segment(position)
            yield _PropertyVisit(item, segment, f"{visit.path}.{segment}", depth, True)


_STRUCTURAL_CHECKS: tuple[_Check, ...] = (
    _check_names_match_keys,
    _check_required_names,
    _check_index_references,
    _check_index_names,
    _check_container_shapes,
)
_POLICY_CHECKS: tuple[_Check, ...] = (
    _check_declares_properties,
    _check_identifiers,
    _check_index_limits,
    _check_duplicate_index_keys,
    _check_constraints,
    _check_depth,
    _check_size,
)
