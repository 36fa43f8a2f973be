"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "contract-creator.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Configuration for data-contract-creator.
# Every setting is optional; remove a line to fall back to its default.

validation:
  # Maximum number of indices per document type.
  max_indices: 10
  # Maximum number of unique indices per document type.
  max_unique_indices: 3
  # Maximum number of property paths in one index.
  max_index_properties: 10
  # Maximum nesting depth of object/array properties (top-level properties are depth 1).
  max_depth: 8
  # Maximum number of properties (including nested ones) per document type.
  max_properties: 100
  # Maximum size of the compact canonical JSON in bytes.
  max_contract_size_bytes: 16384
  # Names that document types, properties, and indices must not use.
  reserved_words:
    - id
    - ownerId
    - revision
    - createdAt
    - updatedAt
    - dataContractId
    - protocolVersion

output:
  # Indentation of canonical JSON written by `format`; null writes compact JSON.
  indent: 2
"""


def build_placeholder_configuration() -> str:
    """Build a YAML configuration template holding the default settings and guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
