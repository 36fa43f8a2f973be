"""Contract validator tests."""

from __future__ import annotations

import copy

import pytest
from data_contract_creator.configuration.runtime_settings import ValidationLimits
from data_contract_creator.contract_model import (
    MAX_PROPERTY_NESTING,
    Contract,
    DocumentType,
    Index,
    IndexProperty,
    Property,
    PropertyKind,
    new_property,
)
from data_contract_creator.contract_validation import (
    Violation,
    ViolationKind,
    is_valid_identifier,
    validate_contract,
    violations_for_document_type,
)


def _note_contract() -> Contract:
    contract = Contract()
    contract.add_document_type("note")
    contract.add_property("note", new_property("text"))
    contract.set_constraint("note", "text", "maxLength", 100)
    contract.set_required("note", "text", True)
    contract.add_index("note", "byText", unique=True)
    contract.add_index_property("note", "byText", "text")
    return contract


def _kinds(violations: tuple[Violation, ...]) -> list[ViolationKind]:
    return [violation.kind for violation in violations]


def test_note_contract_is_valid() -> None:
    assert validate_contract(_note_contract()) == ()


def test_validation_does_not_mutate_contract() -> None:
    contract = _note_contract()
    contract.document_type("note").required.append("ghost")
    before = copy.deepcopy(contract)

    validate_contract(contract)

    assert contract == before


def test_removing_only_required_property_reports_missing_property() -> None:
    contract = Contract()
    contract.add_document_type("note")
    contract.add_property("note", new_property("text"))
    contract.set_required("note", "text", True)

    contract.remove_property("note", "text")

    assert ViolationKind.MISSING_PROPERTY in _kinds(validate_contract(contract))


def test_unresolved_required_names_are_missing_properties() -> None:
    contract = _note_contract()
    contract.document_type("note").required.extend(["ghost", "text"])

    violations = validate_contract(contract)

    assert violations == (
        Violation(
            path="documentTypes.note.required[1]",
            kind=ViolationKind.MISSING_PROPERTY,
            message="required property 'ghost' is not declared",
        ),
        Violation(
            path="documentTypes.note.required[2]",
            kind=ViolationKind.DUPLICATE_NAME,
            message="'text' is listed as required twice",
        ),
    )


def test_nested_required_names_are_checked() -> None:
    contract = _note_contract()
    contract.add_property("note", new_property("meta", PropertyKind.OBJECT))
    contract.add_property("note", new_property("author"), parent_path="meta")
    contract.document_type("note").property_at("meta").required.append("editor")

    violations = validate_contract(contract)

    assert [violation.path for violation in violations] == [
        "documentTypes.note.properties.meta.required[0]"
    ]


def test_index_referencing_removed_property_is_unresolved() -> None:
    contract = _note_contract()
    contract.add_property("note", new_property("title"))
    contract.add_index("note", "byTitle")
    contract.add_index_property("note", "byTitle", "title")
    contract.remove_property("note", "title")

    violations = validate_contract(contract)

    assert _kinds(violations) == [ViolationKind.UNRESOLVED_REFERENCE]
    assert violations[0].path == "documentTypes.note.indices[1].properties[0]"


def test_duplicate_index_names_and_entries_are_reported() -> None:
    contract = _note_contract()
    note = contract.document_type("note")
    note.indices.append(
        Index(
            name="byText",
            properties=[IndexProperty(path="text"), IndexProperty(path="text")],
        )
    )

    violations = validate_contract(contract)

    assert (
        Violation(
            path="documentTypes.note.indices[1].properties[1]",
            kind=ViolationKind.DUPLICATE_NAME,
            message="index 'byText' lists 'text' twice",
        )
        in violations
    )
    assert any(
        violation.path == "documentTypes.note.indices[1].name"
        and violation.kind == ViolationKind.DUPLICATE_NAME
        for violation in violations
    )


def test_empty_document_type_object_and_index_are_missing_properties() -> None:
    contract = Contract()
    contract.add_document_type("blank")
    contract.add_document_type("shell")
    contract.add_property("shell", new_property("meta", PropertyKind.OBJECT))
    contract.add_index("shell", "byNothing")

    violations = validate_contract(contract)

    assert [(violation.path, violation.kind) for violation in violations] == [
        ("documentTypes.shell.indices[0].properties", ViolationKind.MISSING_PROPERTY),
        ("documentTypes.shell.properties.meta.properties", ViolationKind.MISSING_PROPERTY),
        ("documentTypes.blank.properties", ViolationKind.MISSING_PROPERTY),
    ]


def test_array_without_items_is_missing_property() -> None:
    contract = _note_contract()
    contract.document_type("note").properties["tags"] = Property(
        name="tags", kind=PropertyKind.ARRAY
    )

    violations = validate_contract(contract)

    assert [(violation.path, violation.kind) for violation in violations] == [
        ("documentTypes.note.properties.tags.items", ViolationKind.MISSING_PROPERTY)
    ]


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("note", True),
        ("note_v2-final", True),
        ("", False),
        ("has space", False),
        ("ünïcode", False),
        ("x" * 64, True),
        ("x" * 65, False),
        ("ownerId", False),
    ],
)
def test_identifier_grammar(name: str, expected: bool) -> None:
    assert is_valid_identifier(name, ValidationLimits().reserved_words) is expected


def test_invalid_and_reserved_identifiers_are_reported_for_every_name_kind() -> None:
    contract = Contract()
    contract.add_document_type("my note")
    contract.add_property("my note", new_property("id"))
    contract.add_index("my note", "by-id!")
    contract.add_index_property("my note", "by-id!", "id")

    violations = validate_contract(contract)

    assert [(violation.path, violation.kind) for violation in violations] == [
        ("documentTypes.my note", ViolationKind.INVALID_IDENTIFIER),
        ("documentTypes.my note.properties.id", ViolationKind.INVALID_IDENTIFIER),
        ("documentTypes.my note.indices[0].name", ViolationKind.INVALID_IDENTIFIER),
    ]
    assert "reserved word" in violations[1].message


def test_array_item_names_are_not_identifier_checked() -> None:
    contract = _note_contract()
    contract.add_property("note", new_property("tags", PropertyKind.ARRAY))
    contract.set_items("note", "tags", [new_property("a"), new_property("b")])

    assert validate_contract(contract) == ()


def test_index_limits_are_configurable() -> None:
    contract = _note_contract()
    contract.add_property("note", new_property("title"))
    contract.add_property("note", new_property("body"))
    contract.add_index("note", "byTitle", unique=True)
    contract.add_index_property("note", "byTitle", "title")
    contract.add_index("note", "byAll")
    for path in ("text", "title", "body"):
        contract.add_index_property("note", "byAll", path)
    limits = ValidationLimits(max_indices=2, max_unique_indices=1, max_index_properties=2)

    violations = validate_contract(contract, limits)

    assert [(violation.path, violation.kind) for violation in violations] == [
        ("documentTypes.note.indices", ViolationKind.TOO_MANY_INDICES),
        ("documentTypes.note.indices", ViolationKind.TOO_MANY_INDICES),
        ("documentTypes.note.indices[2].properties", ViolationKind.TOO_MANY_INDEX_PROPERTIES),
    ]


def test_indices_with_identical_ordered_paths_are_duplicate_keys() -> None:
    contract = _note_contract()
    contract.add_property("note", new_property("title"))
    contract.add_index("note", "byTextAgain")
    contract.add_index_property("note", "byTextAgain", "text", "desc")  # type: ignore[arg-type]
    contract.add_index("note", "byTextTitle")
    contract.add_index_property("note", "byTextTitle", "text")
    contract.add_index_property("note", "byTextTitle", "title")
    contract.add_index("note", "byTitleText")
    contract.add_index_property("note", "byTitleText", "title")
    contract.add_index_property("note", "byTitleText", "text")

    violations = validate_contract(contract)

    assert violations == (
        Violation(
            path="documentTypes.note.indices[1]",
            kind=ViolationKind.DUPLICATE_INDEX_KEY,
            message="index 'byTextAgain' covers the same properties as index 'byText'",
        ),
    )


def test_constraint_sanity_problems_are_invalid_constraints() -> None:
    contract = _note_contract()
    contract.set_constraint("note", "text", "minLength", 200)
    contract.add_property("note", new_property("code"))
    contract.document_type("note").property_at("code").constraints["pattern"] = "(["
    contract.add_property("note", new_property("step", PropertyKind.NUMBER))
    contract.document_type("note").property_at("step").constraints["multipleOf"] = 0
    contract.add_property("note", new_property("size", PropertyKind.INTEGER))
    contract.document_type("note").property_at("size").constraints["minimum"] = "1"

    violations = validate_contract(contract)

    assert [violation.path for violation in violations] == [
        "documentTypes.note.properties.text.minLength",
        "documentTypes.note.properties.code.pattern",
        "documentTypes.note.properties.step.multipleOf",
        "documentTypes.note.properties.size.minimum",
    ]
    assert set(_kinds(violations)) == {ViolationKind.INVALID_CONSTRAINT}


def _nested_contract(levels: int) -> Contract:
    contract = Contract()
    contract.add_document_type("tree")
    parent_path = None
    for level in range(levels):
        name = f"level{level}"
        contract.add_property("tree", new_property(name, PropertyKind.OBJECT), parent_path)
        parent_path = name if parent_path is None else f"{parent_path}.{name}"
    contract.add_property("tree", new_property("leaf"), parent_path)
    return contract


def test_depth_limit_reports_first_property_beyond_limit_once() -> None:
    contract = _nested_contract(4)

    assert validate_contract(contract, ValidationLimits(max_depth=5)) == ()

    violations = validate_contract(contract, ValidationLimits(max_depth=3))

    assert [(violation.path, violation.kind) for violation in violations] == [
        (
            "documentTypes.tree.properties.level0.properties.level1.properties.level2"
            ".properties.level3",
            ViolationKind.DEPTH_LIMIT_EXCEEDED,
        )
    ]


def test_depth_counts_array_items() -> None:
    contract = Contract()
    contract.add_document_type("grid")
    contract.add_property("grid", new_property("rows", PropertyKind.ARRAY))
    contract.set_items("grid", "rows", new_property("row", PropertyKind.ARRAY))

    violations = validate_contract(contract, ValidationLimits(max_depth=2))

    assert [violation.path for violation in violations] == [
        "documentTypes.grid.properties.rows.items.items"
    ]


def test_property_count_and_serialized_size_limits() -> None:
    contract = _note_contract()
    for position in range(5):
        contract.add_property("note", new_property(f"field{position}"))

    violations = validate_contract(
        contract, ValidationLimits(max_properties=3, max_contract_size_bytes=64)
    )

    assert [(violation.path, violation.kind) for violation in violations] == [
        ("documentTypes.note", ViolationKind.SIZE_LIMIT_EXCEEDED),
        ("documentTypes", ViolationKind.SIZE_LIMIT_EXCEEDED),
    ]


def test_checks_do_not_short_circuit_each_other() -> None:
    contract = Contract()
    contract.add_document_type("id")
    contract.document_types["id"].required.append("ghost")

    kinds = _kinds(validate_contract(contract))

    assert kinds == [
        ViolationKind.MISSING_PROPERTY,
        ViolationKind.MISSING_PROPERTY,
        ViolationKind.INVALID_IDENTIFIER,
    ]


def test_violations_for_document_type_include_contract_wide_findings() -> None:
    violations = (
        Violation("documentTypes.note.properties", ViolationKind.MISSING_PROPERTY, "m"),
        Violation("documentTypes.notebook", ViolationKind.INVALID_IDENTIFIER, "m"),
        Violation("documentTypes", ViolationKind.SIZE_LIMIT_EXCEEDED, "m"),
    )

    selected = violations_for_document_type(violations, "note")

    assert [violation.path for violation in selected] == [
        "documentTypes.note.properties",
        "documentTypes",
    ]


def test_document_type_built_directly_is_validated_like_added_ones() -> None:
    contract = Contract(document_types={"raw": DocumentType(name="raw")})

    assert _kinds(validate_contract(contract)) == [ViolationKind.MISSING_PROPERTY]


def test_names_that_disagree_with_their_keys_are_reported() -> None:
    contract = _note_contract()
    contract.document_type("note").properties["meta"] = Property(
        name="meta",
        kind=PropertyKind.OBJECT,
        properties={"author": Property(name="writer")},
    )
    contract.document_types["alias"] = DocumentType(
        name="other", properties={"body": Property(name="body")}
    )

    violations = validate_contract(contract)

    assert [(violation.path, violation.kind) for violation in violations] == [
        ("documentTypes.note.properties.meta.properties.author", ViolationKind.INVALID_IDENTIFIER),
        ("documentTypes.alias", ViolationKind.INVALID_IDENTIFIER),
    ]


def test_array_with_empty_tuple_items_is_missing_property() -> None:
    contract = _note_contract()
    contract.document_type("note").properties["pair"] = Property(
        name="pair", kind=PropertyKind.ARRAY, items=()
    )

    violations = validate_contract(contract)

    assert [(violation.path, violation.kind) for violation in violations] == [
        ("documentTypes.note.properties.pair.items", ViolationKind.MISSING_PROPERTY)
    ]


def test_very_deep_nesting_is_reported_instead_of_raising() -> None:
    root = Property(name="level0", kind=PropertyKind.OBJECT)
    current = root
    for level in range(1, 1200):
        child = Property(name=f"level{level}", kind=PropertyKind.OBJECT)
        current.properties[child.name] = child
        current = child
    current.properties["leaf"] = Property(name="leaf")
    contract = Contract(
        document_types={"deep": DocumentType(name="deep", properties={"level0": root})}
    )

    violations = validate_contract(contract, ValidationLimits(max_depth=5000))

    assert _kinds(violations) == [ViolationKind.DEPTH_LIMIT_EXCEEDED]
    assert violations[0].path.endswith(f".level{MAX_PROPERTY_NESTING}")
