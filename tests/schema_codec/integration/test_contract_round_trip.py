"""Serialize-then-import integration tests."""

from __future__ import annotations

import json

from data_contract_creator.contract_model import (
    Contract,
    Property,
    PropertyKind,
    SortDirection,
    new_property,
)
from data_contract_creator.contract_validation import validate_contract
from data_contract_creator.schema_codec import (
    parse_contract_json,
    render_contract_json,
    serialize_contract,
)


def _rich_contract() -> Contract:
    contract = Contract()
    contract.add_document_type("profile")
    contract.add_property("profile", new_property("handle"))
    contract.set_constraint("profile", "handle", "minLength", 3)
    contract.set_constraint("profile", "handle", "pattern", "^[a-z0-9_]+$")
    contract.set_required("profile", "handle", True)
    contract.add_property("profile", new_property("age", PropertyKind.INTEGER))
    contract.set_constraint("profile", "age", "minimum", 0)
    contract.set_constraint("profile", "age", "maximum", 150)
    contract.add_property("profile", new_property("score", PropertyKind.NUMBER))
    contract.set_constraint("profile", "score", "multipleOf", 0.5)
    contract.add_property("profile", new_property("verified", PropertyKind.BOOLEAN))
    contract.add_property("profile", new_property("avatar", PropertyKind.BYTE_ARRAY))
    contract.set_constraint("profile", "avatar", "maxItems", 2048)
    contract.add_property("profile", new_property("address", PropertyKind.OBJECT))
    contract.add_property("profile", new_property("city"), parent_path="address")
    contract.add_property("profile", new_property("zip"), parent_path="address")
    contract.set_required("profile", "address.city", True)
    contract.set_object_additional_properties("profile", "address", True)
    contract.add_property("profile", new_property("tags", PropertyKind.ARRAY))
    contract.set_constraint("profile", "tags", "uniqueItems", True)
    contract.add_property("profile", new_property("point", PropertyKind.ARRAY))
    contract.set_items(
        "profile",
        "point",
        [new_property("x", PropertyKind.NUMBER), new_property("y", PropertyKind.NUMBER)],
    )
    contract.set_property_description("profile", "handle", "Public handle")
    contract.set_property_comment("profile", "age", "years")
    contract.add_index("profile", "byHandle", unique=True)
    contract.add_index_property("profile", "byHandle", "handle")
    contract.add_index("profile", "byCityAge")
    contract.add_index_property("profile", "byCityAge", "address.city")
    contract.add_index_property("profile", "byCityAge", "age", SortDirection.DESC)
    contract.set_document_type_comment("profile", "registered people")

    contract.add_document_type("note")
    contract.add_property("note", new_property("text"))
    contract.set_additional_properties("note", True)
    return contract


def test_serialize_then_import_is_structurally_equal() -> None:
    contract = _rich_contract()

    restored = parse_contract_json(render_contract_json(contract))

    assert restored == contract
    assert list(restored.document_types) == ["profile", "note"]
    assert list(restored.document_type("profile").properties) == list(
        contract.document_type("profile").properties
    )


def test_indented_text_imports_to_the_same_contract() -> None:
    contract = _rich_contract()

    restored = parse_contract_json(render_contract_json(contract, indent=4))

    assert restored == contract


def test_reordered_input_keys_normalize_to_canonical_order() -> None:
    text = json.dumps(
        {
            "note": {
                "indices": [{"unique": True, "properties": [{"text": "asc"}], "name": "byText"}],
                "additionalProperties": False,
                "required": ["text"],
                "properties": {"text": {"maxLength": 100, "type": "string"}},
            }
        }
    )

    rendered = render_contract_json(parse_contract_json(text))

    assert rendered == (
        '{"note":{"properties":{"text":{"type":"string","maxLength":100}},'
        '"required":["text"],"additionalProperties":false,'
        '"indices":[{"name":"byText","properties":[{"text":"asc"}],"unique":true}]}}'
    )


def test_round_trip_of_serialized_value_is_stable() -> None:
    value = serialize_contract(_rich_contract())

    assert serialize_contract(parse_contract_json(json.dumps(value))) == value


def _prebuilt_contract() -> Contract:
    contract = Contract()
    contract.add_document_type("gallery")
    contract.add_property(
        "gallery",
        Property(
            name="meta",
            kind=PropertyKind.OBJECT,
            properties={
                "author": Property(name="writer", description=""),
                "labels": Property(
                    name="tags", kind=PropertyKind.ARRAY, items=Property(name="tag")
                ),
            },
            required=["author"],
        ),
    )
    contract.add_property(
        "gallery",
        Property(
            name="photos",
            kind=PropertyKind.ARRAY,
            items=(
                Property(name="thumb", kind=PropertyKind.BYTE_ARRAY, constraints={"maxItems": 64}),
                Property(name="caption", constraints={"maxLength": None}),
            ),
        ),
    )
    contract.add_property(
        "gallery", Property(name="grid", kind=PropertyKind.ARRAY, items=Property(name="row"))
    )
    contract.set_items(
        "gallery", "grid", Property(name="row", kind=PropertyKind.ARRAY, comment="cells")
    )
    return contract


def test_contract_built_from_prebuilt_properties_round_trips() -> None:
    contract = _prebuilt_contract()
    assert validate_contract(contract) == ()

    restored = parse_contract_json(render_contract_json(contract))

    assert restored == contract
    assert restored.document_type("gallery").property_at("grid.items.items").name == "items"
