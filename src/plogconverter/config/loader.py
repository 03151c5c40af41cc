"""Load and merge configuration from .plogconverter.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from plogconverter.config.errors import ConfigError
from plogconverter.config.schema import (
    ConverterConfig,
    FilterConfig,
    InputConfig,
    MappingConfig,
    OutputConfig,
)

CONFIG_FILE_NAME = ".plogconverter.toml"
ENV_PREFIX = "PLOGCONVERTER_"

_TRUE_VALUES = ("1", "true", "yes", "on")


def find_config_file(directory: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = directory / CONFIG_FILE_NAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    # a bare string is accepted wherever a list is expected
    for f in dataclasses.fields(cls):
        if f.name in filtered and isinstance(filtered[f.name], str) and f.default_factory is list:
            filtered[f.name] = [filtered[f.name]]
    return cls(**filtered)


def _env(name: str) -> Optional[str]:
    value = os.environ.get(ENV_PREFIX + name)
    return value if value and value.strip() else None


def _merge_env_overrides(cfg: ConverterConfig) -> None:
    """Apply PLOGCONVERTER_* environment variable overrides."""
    if val := _env("RENDER_TYPES"):
        cfg.output.render_types = [val]
    if val := _env("OUTPUT_DIR"):
        cfg.output.output_dir = val
    if val := _env("NAME_TEMPLATE"):
        cfg.output.name_template = val
    if val := _env("SRC_ROOT"):
        cfg.output.src_root = val
    if val := _env("PATH_MODE"):
        cfg.output.path_mode = val
    if val := _env("ANALYZERS"):
        cfg.filter.analyzers = [val]
    if val := _env("DISABLED_CODES"):
        cfg.filter.disabled_codes.extend(c.strip() for c in val.split(",") if c.strip())
    if val := _env("ERROR_CODE_MAPPING"):
        cfg.mapping.error_codes = [val]
    if val := _env("SETTINGS"):
        cfg.input.settings = val
    if val := _env("INDICATE_WARNINGS"):
        cfg.output.indicate_warnings = val.strip().lower() in _TRUE_VALUES


def load_config(
    directory: Path,
    config_override: Optional[str] = None,
) -> ConverterConfig:
    """Load and return a ConverterConfig; values are validated later by freeze()."""
    config_path = find_config_file(directory, config_override)

    if config_path is None:
        cfg = ConverterConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = ConverterConfig(
            version=str(raw.get("version", "1.0")),
            input=_build_section(raw, InputConfig, "input"),
            output=_build_section(raw, OutputConfig, "output"),
            filter=_build_section(raw, FilterConfig, "filter"),
            mapping=_build_section(raw, MappingConfig, "mapping"),
        )

    _merge_env_overrides(cfg)
    return cfg
