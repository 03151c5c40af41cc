"""Read extra disabled error codes from a settings file.

Two shapes are accepted:

* YAML (``.yaml``/``.yml``) with a ``disabled_codes`` list or comma/space
  separated string;
* the analyzer's XML settings file, whose ``DisableDetectableErrors``
  element holds space separated codes. Every other setting is ignored.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, List

import yaml

from plogconverter.config.errors import ConfigError

YAML_SUFFIXES = (".yaml", ".yml")
DISABLED_CODES_KEY = "disabled_codes"
XML_DISABLED_ELEMENT = "DisableDetectableErrors"

_CODE_SEPARATORS = re.compile(r"[\s,]+")


def _split_codes(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [c for c in _CODE_SEPARATORS.split(value) if c]
    if isinstance(value, (list, tuple)):
        return [str(c).strip() for c in value if str(c).strip()]
    raise ConfigError(f"'{DISABLED_CODES_KEY}' must be a list or a string, got {type(value).__name__}")


def _load_yaml(path: Path) -> List[str]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse settings file {path}: {exc}") from exc
    if data is None:
        return []
    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")
    return _split_codes(data.get(DISABLED_CODES_KEY))


def _load_xml(path: Path) -> List[str]:
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as exc:
        raise ConfigError(f"Failed to parse settings file {path}: {exc}") from exc
    element = root if root.tag == XML_DISABLED_ELEMENT else root.find(f".//{XML_DISABLED_ELEMENT}")
    if element is None or not element.text:
        return []
    return element.text.split()


def load_disabled_codes(path: Path) -> List[str]:
    """Return the disabled error codes listed in *path*."""
    if not path.is_file():
        raise ConfigError(f"Settings file '{path}' does not exist.")
    if path.suffix.lower() in YAML_SUFFIXES:
        return _load_yaml(path)
    return _load_xml(path)
