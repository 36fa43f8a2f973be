"""Contract aggregate: the root of the mutation API."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from .document_types import DocumentType, seeded_document_type
from .index_models import Index, SortDirection
from .model_errors import DuplicateNameError, NotFoundError
from .property_models import ItemsDefinition, KindChange, Property, PropertyKind


@dataclass
class Contract:  # pylint: disable=too-many-public-methods
    """Ordered collection of document types addressed by name."""

    document_types: dict[str, DocumentType] = field(default_factory=dict)

    def document_type(self, name: str) -> DocumentType:
        """Return the document type named `name` or raise NotFoundError."""
        try:
            return self.document_types[name]
        except KeyError as exc:
            raise NotFoundError(f"Document type '{name}' does not exist.") from exc

    def add_document_type(self, name: str, *, seed_property: bool = False) -> DocumentType:
        """Append a new document type.

        The type starts without properties unless `seed_property` is set, in which
        case it holds one string property named `property`.
        """
        if name in self.document_types:
            raise DuplicateNameError(f"Document type '{name}' already exists.")
        created = seeded_document_type(name) if seed_property else DocumentType(name=name)
        self.document_types[name] = created
        return created

    def remove_document_type(self, name: str) -> DocumentType:
        removed = self.document_type(name)
        del self.document_types[name]
        return removed

    def rename_document_type(self, name: str, new_name: str) -> None:
        """Rename a document type, keeping its position."""
        target = self.document_type(name)
        if new_name == name:
            return
        if new_name in self.document_types:
            raise DuplicateNameError(f"Document type '{new_name}' already exists.")
        target.name = new_name
        self.document_types = {
            (new_name if key == name else key): value for key, value in self.document_types.items()
        }

    def clear(self) -> None:
        """Drop every document type."""
        self.document_types = {}

    # Document type flags

    def set_additional_properties(self, document_type: str, allowed: bool) -> None:
        self.document_type(document_type).additional_properties = bool(allowed)

    def set_document_type_comment(self, document_type: str, comment: str | None) -> None:
        self.document_type(document_type).comment = comment if comment else None

    # Properties

    def add_property(
        self, document_type: str, prop: Property, parent_path: str | None = None
    ) -> Property:
        return self.document_type(document_type).add_property(prop, parent_path)

    def remove_property(self, document_type: str, path: str) -> Property:
        return self.document_type(document_type).remove_property(path)

    def rename_property(self, document_type: str, path: str, new_name: str) -> None:
        self.document_type(document_type).rename_property(path, new_name)

    def set_property_kind(self, document_type: str, path: str, kind: PropertyKind) -> KindChange:
        return self.document_type(document_type).set_property_kind(path, kind)

    def set_constraint(self, document_type: str, path: str, key: str, value: object) -> None:
        self.document_type(document_type).set_constraint(path, key, value)

    def set_items(
        self, document_type: str, path: str, items: Property | Sequence[Property]
    ) -> ItemsDefinition | None:
        return self.document_type(document_type).set_items(path, items)

    def set_property_description(
        self, document_type: str, path: str, description: str | None
    ) -> None:
        self.document_type(document_type).set_property_description(path, description)

    def set_property_comment(self, document_type: str, path: str, comment: str | None) -> None:
        self.document_type(document_type).set_property_comment(path, comment)

    def set_object_additional_properties(
        self, document_type: str, path: str, allowed: bool
    ) -> None:
        self.document_type(document_type).set_object_additional_properties(path, allowed)

    def set_required(self, document_type: str, path: str, required: bool) -> None:
        self.document_type(document_type).set_required(path, required)

    # Indices

    def add_index(self, document_type: str, name: str, unique: bool = False) -> Index:
        return self.document_type(document_type).add_index(name, unique)

    def remove_index(self, document_type: str, name: str) -> Index:
        return self.document_type(document_type).remove_index(name)

    def rename_index(self, document_type: str, name: str, new_name: str) -> None:
        self.document_type(document_type).rename_index(name, new_name)

    def set_index_unique(self, document_type: str, name: str, unique: bool) -> None:
        self.document_type(document_type).set_index_unique(name, unique)

    def add_index_property(
        self,
        document_type: str,
        index_name: str,
        path: str,
        direction: SortDirection = SortDirection.ASC,
    ) -> None:
        self.document_type(document_type).add_index_property(index_name, path, direction)

    def remove_index_property(self, document_type: str, index_name: str, path: str) -> None:
        self.document_type(document_type).remove_index_property(index_name, path)

    def set_index_direction(
        self, document_type: str, index_name: str, path: str, direction: SortDirection
    ) -> None:
        self.document_type(document_type).set_index_direction(index_name, path, direction)
