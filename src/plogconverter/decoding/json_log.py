"""Structured JSON report decoder and the shared warning field mapping."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from plogconverter.decoding.models import DecodeResult, LogDecodeError, LogFormat
from plogconverter.diagnostics.models import (
    AnalyzerType,
    DiagnosticRecord,
    SourcePosition,
)

logger = logging.getLogger(__name__)

JSON_REPORT_VERSION = 2


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise ValueError(f"not a boolean: {value!r}")


def _as_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValueError(f"not an integer: {value!r}")
    return int(value)


def _as_analyzer(value: Any) -> AnalyzerType:
    if isinstance(value, int) and not isinstance(value, bool):
        return AnalyzerType(value)
    if isinstance(value, str):
        return AnalyzerType.parse(value)
    raise ValueError(f"not an analyzer type: {value!r}")


def _as_strings(value: Any) -> tuple:
    if not isinstance(value, list):
        raise ValueError(f"not a list: {value!r}")
    return tuple(str(item) for item in value if item)


def _as_positions(value: Any) -> tuple:
    if not isinstance(value, list):
        raise ValueError(f"not a list: {value!r}")
    return tuple(
        SourcePosition(str(item["File"]), _as_int(item["Line"])) for item in value
    )


def _as_cwe(value: Any) -> Optional[int]:
    cwe = _as_int(value)
    return cwe or None


# JSON warning key -> (record field, converter)
WARNING_FIELDS = {
    "Analyzer": ("analyzer_type", _as_analyzer),
    "Code": ("error_code", str),
    "Level": ("level", _as_int),
    "Message": ("message", str),
    "File": ("file_name", str),
    "Line": ("line_number", _as_int),
    "Positions": ("positions", _as_positions),
    "FalseAlarm": ("false_alarm", _as_bool),
    "Trial": ("trial_mode", _as_bool),
    "Retired": ("is_retired", _as_bool),
    "CWE": ("cwe_id", _as_cwe),
    "SastId": ("sast_id", str),
    "Projects": ("project_names", _as_strings),
    "AnalyzedSourceFiles": ("analyzed_source_files", _as_strings),
    "Order": ("default_order", _as_int),
    "Favorite": ("fav_icon", _as_bool),
}


def warning_to_record(warning: Dict[str, Any]) -> DiagnosticRecord:
    fields: Dict[str, Any] = {"error_code": "", "message": "", "file_name": ""}
    for key, value in warning.items():
        spec = WARNING_FIELDS.get(key)
        if spec is None or value is None:
            continue
        name, convert = spec
        try:
            fields[name] = convert(value)
        except (KeyError, TypeError, ValueError) as exc:
            raise LogDecodeError(f"Bad value for warning field '{key}': {exc}") from exc
    return DiagnosticRecord(**fields)


def record_to_warning(record: DiagnosticRecord) -> Dict[str, Any]:
    """Inverse of warning_to_record (used by the JSON renderer)."""
    return {
        "Analyzer": record.analyzer_type.log_name,
        "Code": record.error_code,
        "Level": record.level,
        "Message": record.message,
        "File": record.file_name,
        "Line": record.line_number,
        "Positions": [
            {"File": p.file_path, "Line": p.line_number} for p in record.positions
        ],
        "FalseAlarm": record.false_alarm,
        "Trial": record.trial_mode,
        "Retired": record.is_retired,
        "CWE": record.cwe_id or 0,
        "SastId": record.sast_id or "",
        "Projects": list(record.project_names),
        "AnalyzedSourceFiles": list(record.analyzed_source_files),
        "Order": record.default_order,
        "Favorite": record.fav_icon,
    }


def decode_json_text(text: str, path: Optional[Path] = None) -> DecodeResult:
    try:
        report = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.debug("JSON parse failure in %s: %s", path, exc)
        return DecodeResult.malformed(path, LogFormat.JSON, f"Malformed JSON log: {exc}")

    warnings = report.get("Warnings") if isinstance(report, dict) else None
    if not isinstance(warnings, list):
        return DecodeResult.malformed(
            path, LogFormat.JSON, "Malformed JSON log: missing 'Warnings' array"
        )

    records: List[DiagnosticRecord] = []
    for warning in warnings:
        if not isinstance(warning, dict):
            raise LogDecodeError(f"Warning entry is not an object: {warning!r}")
        records.append(warning_to_record(warning))
    return DecodeResult(path=path, format=LogFormat.JSON, records=records)


def decode_json_file(path: Path) -> DecodeResult:
    try:
        text = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        return DecodeResult.malformed(path, LogFormat.JSON, f"Log is not UTF-8: {exc}")
    return decode_json_text(text, path)
