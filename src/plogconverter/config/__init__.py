"""Configuration loading, schema, and defaults."""

from plogconverter.config.errors import ConfigError
from plogconverter.config.loader import load_config
from plogconverter.config.schema import (
    ConverterConfig,
    RunOptions,
    parse_level_filters,
    parse_mappings,
    parse_render_types,
)
from plogconverter.config.settings import load_disabled_codes

__all__ = [
    "ConfigError",
    "ConverterConfig",
    "RunOptions",
    "load_config",
    "load_disabled_codes",
    "parse_level_filters",
    "parse_mappings",
    "parse_render_types",
]
