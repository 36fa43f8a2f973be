"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import ConfigurationError, default_configuration, load_configuration
from .runtime_settings import (
    DEFAULT_RESERVED_WORDS,
    Configuration,
    OutputSettings,
    ValidationLimits,
)

__all__ = [
    "Configuration",
    "OutputSettings",
    "ValidationLimits",
    "DEFAULT_RESERVED_WORDS",
    "ConfigurationError",
    "default_configuration",
    "load_configuration",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
