"""SARIF v2.1.0 reporter for code-scanning services."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence, Set

from plogconverter import __version__
from plogconverter.diagnostics.models import DiagnosticRecord
from plogconverter.paths import PathMode
from plogconverter.render.base import RenderOptions
from plogconverter.render.text import docs_url

SARIF_SCHEMA = "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/main/sarif-2.1/schema/sarif-schema-2.1.0.json"

_LEVEL_MAP = {
    1: "error",
    2: "warning",
    3: "note",
}

# uriBaseId that relative artifact locations resolve against
SRC_ROOT_ID = "SRCROOT"


def _artifact(path: str, options: RenderOptions) -> Dict[str, Any]:
    uri = options.convert(path).replace("\\", "/")
    location: Dict[str, Any] = {"uri": uri}
    if options.path_mode is PathMode.RELATIVE and options.src_root and uri != path.replace("\\", "/"):
        location["uriBaseId"] = SRC_ROOT_ID
    return location


def _location(path: str, line: int, options: RenderOptions) -> Dict[str, Any]:
    return {
        "physicalLocation": {
            "artifactLocation": _artifact(path, options),
            "region": {"startLine": max(line, 1)},
        }
    }


def to_dict(records: Sequence[DiagnosticRecord], options: RenderOptions) -> Dict[str, Any]:
    """Convert records to a SARIF v2.1.0 dict."""
    rules: List[Dict[str, Any]] = []
    seen_rules: Set[str] = set()
    results: List[Dict[str, Any]] = []

    for r in records:
        # Rule definition (only once per error code)
        if r.error_code not in seen_rules:
            seen_rules.add(r.error_code)
            rules.append({
                "id": r.error_code,
                "name": r.error_code,
                "helpUri": docs_url(r.error_code),
                "defaultConfiguration": {"level": _LEVEL_MAP.get(r.level, "error")},
            })

        result: Dict[str, Any] = {
            "ruleId": r.error_code,
            "level": _LEVEL_MAP.get(r.level, "error"),
            "message": {"text": r.message},
            "locations": [_location(r.file_name, r.line_number, options)],
        }
        if r.positions:
            result["relatedLocations"] = [
                _location(p.file_path, p.line_number, options) for p in r.positions
            ]
        tags = options.security_codes(r)
        if tags:
            result["properties"] = {"tags": tags}
        if r.false_alarm:
            result["suppressions"] = [{"kind": "inSource"}]
        results.append(result)

    run: Dict[str, Any] = {
        "tool": {
            "driver": {
                "name": "plogconverter",
                "version": __version__,
                "rules": rules,
            }
        },
        "results": results,
    }
    if options.path_mode is PathMode.RELATIVE and options.src_root:
        root = options.src_root.replace("\\", "/").rstrip("/") + "/"
        run["originalUriBaseIds"] = {SRC_ROOT_ID: {"uri": "file:///" + root.lstrip("/")}}

    return {
        "$schema": SARIF_SCHEMA,
        "version": "2.1.0",
        "runs": [run],
    }


def render(records: Sequence[DiagnosticRecord], options: RenderOptions) -> str:
    """Return SARIF JSON string."""
    return json.dumps(to_dict(records, options), indent=2)
