"""Document type aggregate: properties, required list, indices, and type-level flags."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from . import property_tree
from .index_models import Index, IndexProperty, SortDirection
from .model_errors import DuplicateNameError, InvalidReferenceError, NotFoundError
from .property_models import ItemsDefinition, KindChange, Property, PropertyKind
from .property_paths import resolve_index_path

DEFAULT_PROPERTY_NAME = "property"


@dataclass
class DocumentType:  # pylint: disable=too-many-public-methods
    """One named entity type of a contract."""

    name: str
    properties: dict[str, Property] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)
    indices: list[Index] = field(default_factory=list)
    additional_properties: bool = False
    comment: str | None = None

    @property
    def is_empty(self) -> bool:
        """Return True when no property is declared."""
        return not self.properties

    # Properties

    def add_property(self, prop: Property, parent_path: str | None = None) -> Property:
        """Add a property at top level or under the object at `parent_path`."""
        return property_tree.add_child(self, parent_path, prop)

    def remove_property(self, path: str) -> Property:
        """Remove and return the property at `path`."""
        return property_tree.remove_child(self, path)

    def rename_property(self, path: str, new_name: str) -> None:
        property_tree.rename_child(self, path, new_name)

    def property_at(self, path: str) -> Property:
        """Return the property at `path` or raise NotFoundError."""
        return property_tree.resolve_property(self.properties, path)

    def set_property_kind(self, path: str, kind: PropertyKind) -> KindChange:
        """Change a property's kind; the result lists what was dropped."""
        return property_tree.set_kind(self, path, kind)

    def set_constraint(self, path: str, key: str, value: object) -> None:
        property_tree.set_constraint(self, path, key, value)

    def set_items(
        self, path: str, items: Property | Sequence[Property]
    ) -> ItemsDefinition | None:
        return property_tree.set_items(self, path, items)

    def set_property_description(self, path: str, description: str | None) -> None:
        property_tree.set_description(self, path, description)

    def set_property_comment(self, path: str, comment: str | None) -> None:
        property_tree.set_comment(self, path, comment)

    def set_object_additional_properties(self, path: str, allowed: bool) -> None:
        property_tree.set_additional_properties(self, path, allowed)

    def set_required(self, path: str, required: bool) -> None:
        """Mark a (possibly nested) property as required or optional."""
        property_tree.set_required(self, path, required)

    def is_required(self, path: str) -> bool:
        return property_tree.is_required(self, path)

    # Indices

    def index(self, name: str) -> Index:
        """Return the index named `name` or raise NotFoundError."""
        for candidate in self.indices:
            if candidate.name == name:
                return candidate
        raise NotFoundError(f"Index '{name}' does not exist on '{self.name}'.")

    def add_index(self, name: str, unique: bool = False) -> Index:
        """Append an empty index."""
        if any(candidate.name == name for candidate in self.indices):
            raise DuplicateNameError(f"Index '{name}' already exists on '{self.name}'.")
        created = Index(name=name, unique=bool(unique))
        self.indices.append(created)
        return created

    def remove_index(self, name: str) -> Index:
        target = self.index(name)
        self.indices.remove(target)
        return target

    def rename_index(self, name: str, new_name: str) -> None:
        target = self.index(name)
        if new_name == name:
            return
        if any(candidate.name == new_name for candidate in self.indices):
            raise DuplicateNameError(f"Index '{new_name}' already exists on '{self.name}'.")
        target.name = new_name

    def set_index_unique(self, name: str, unique: bool) -> None:
        self.index(name).unique = bool(unique)

    def add_index_property(
        self, index_name: str, path: str, direction: SortDirection = SortDirection.ASC
    ) -> None:
        """Append `path` to an index; the path must resolve right now."""
        target = self.index(index_name)
        direction = _coerce_direction(direction)
        if resolve_index_path(self.properties, path) is None:
            raise InvalidReferenceError(
                f"Index '{index_name}' cannot reference '{path}': "
                f"no such property on '{self.name}'."
            )
        if target.position_of(path) is not None:
            raise DuplicateNameError(f"Index '{index_name}' already covers '{path}'.")
        target.properties.append(IndexProperty(path=path, direction=direction))

    def remove_index_property(self, index_name: str, path: str) -> None:
        target = self.index(index_name)
        position = target.position_of(path)
        if position is None:
            raise NotFoundError(f"Index '{index_name}' does not cover '{path}'.")
        del target.properties[position]

    def set_index_direction(self, index_name: str, path: str, direction: SortDirection) -> None:
        target = self.index(index_name)
        direction = _coerce_direction(direction)
        position = target.position_of(path)
        if position is None:
            raise NotFoundError(f"Index '{index_name}' does not cover '{path}'.")
        target.properties[position] = IndexProperty(path=path, direction=direction)


def seeded_document_type(name: str) -> DocumentType:
    """Return a document type holding one default string property."""
    return DocumentType(
        name=name,
        properties={DEFAULT_PROPERTY_NAME: Property(name=DEFAULT_PROPERTY_NAME)},
    )


def _coerce_direction(direction: SortDirection | str) -> SortDirection:
    try:
        return SortDirection(direction)
    except ValueError as exc:
        raise InvalidReferenceError(f"Unknown sort direction: {direction!r}") from exc
