"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_RESERVED_WORDS: tuple[str, ...] = (
    "id",
    "ownerId",
    "revision",
    "createdAt",
    "updatedAt",
    "dataContractId",
    "protocolVersion",
)


@dataclass(frozen=True)
class ValidationLimits:  # pylint: disable=too-many-instance-attributes
    """Protocol policy ceilings applied by the validator."""

    max_indices: int = 10
    max_unique_indices: int = 3
    max_index_properties: int = 10
    max_depth: int = 8
    max_properties: int = 100
    max_contract_size_bytes: int = 16384
    reserved_words: tuple[str, ...] = DEFAULT_RESERVED_WORDS


@dataclass(frozen=True)
class OutputSettings:
    """Rendering options for canonical JSON written by the CLI."""

    indent: int | None = 2


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path | None
    limits: ValidationLimits = field(default_factory=ValidationLimits)
    output: OutputSettings = field(default_factory=OutputSettings)
