"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import fields, replace
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import Configuration, OutputSettings, ValidationLimits

_LIMIT_FIELDS = tuple(
    limit.name for limit in fields(ValidationLimits) if limit.name != "reserved_words"
)


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def default_configuration() -> Configuration:
    """Return the configuration used when no file is given."""
    return Configuration(path=None)


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    limits = _parse_validation_section(parsed.get("validation"))
    output = _parse_output_section(parsed.get("output"))
    return Configuration(path=path, limits=limits, output=output)


def _parse_validation_section(value: Any) -> ValidationLimits:
    section = _optional_mapping(value, "validation")
    defaults = ValidationLimits()
    overrides: dict[str, Any] = {}
    for name in _LIMIT_FIELDS:
        if name in section:
            overrides[name] = _require_positive_int(section[name], f"validation.{name}")
    if "reserved_words" in section:
        overrides["reserved_words"] = _normalize_string_sequence(
            section["reserved_words"], "validation.reserved_words"
        )
    unknown = sorted(set(section) - set(_LIMIT_FIELDS) - {"reserved_words"})
    if unknown:
        raise ConfigurationError(f"Unknown validation settings: {', '.join(unknown)}")
    if not overrides:
        return defaults
    return replace(defaults, **overrides)


def _parse_output_section(value: Any) -> OutputSettings:
    section = _optional_mapping(value, "output")
    if "indent" not in section:
        return OutputSettings()
    indent = section["indent"]
    if indent is None:
        return OutputSettings(indent=None)
    if isinstance(indent, bool) or not isinstance(indent, int) or indent < 0:
        raise ConfigurationError("output.indent must be a non-negative integer or null.")
    return OutputSettings(indent=indent)


def _normalize_string_sequence(value: Any, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        stripped = value.strip()
        return (stripped,) if stripped else ()
    if isinstance(value, Sequence):
        normalized = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError(f"{field_name} entries must be strings.")
            stripped = item.strip()
            if stripped:
                normalized.append(stripped)
        return tuple(normalized)
    raise ConfigurationError(f"{field_name} must be a string or list of strings.")


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
