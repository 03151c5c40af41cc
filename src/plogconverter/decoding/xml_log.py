"""Structured XML (``.plog``) decoder."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from plogconverter.decoding import table as t
from plogconverter.decoding.models import (
    DecodeResult,
    LogDecodeError,
    LogFormat,
    LogMetadata,
)
from plogconverter.diagnostics.models import (
    CWE_PREFIX,
    AnalyzerType,
    DiagnosticRecord,
    SourcePosition,
)

logger = logging.getLogger(__name__)


def parse_bool(text: str) -> bool:
    value = text.strip().lower()
    if value == "true":
        return True
    if value == "false":
        return False
    raise ValueError(f"not a boolean: {text!r}")


def parse_cwe(text: str) -> Optional[int]:
    """``CWE-570`` -> 570; anything without the prefix maps to no CWE."""
    if text.startswith(CWE_PREFIX) and len(text) > len(CWE_PREFIX):
        return int(text[len(CWE_PREFIX):])
    return None


def _split(text: str, separator: str) -> Tuple[str, ...]:
    return tuple(part for part in text.split(separator) if part)


def _parse_positions(element: ET.Element) -> Tuple[SourcePosition, ...]:
    positions: List[SourcePosition] = []
    for item in element.findall(t.COL_POSITION):
        path = item.text or ""
        lines = item.get("lines", "")
        for line in _split(lines, ","):
            positions.append(SourcePosition(path, int(line)))
    return tuple(positions)


# column -> (record field, converter)
_COLUMNS: Dict[str, Tuple[str, Callable[[str], Any]]] = {
    t.COL_ANALYZER: ("analyzer_type", AnalyzerType.parse),
    t.COL_ERROR_CODE: ("error_code", str),
    t.COL_MESSAGE: ("message", str),
    t.COL_FILE: ("file_name", str),
    t.COL_LINE: ("line_number", int),
    t.COL_LEVEL: ("level", int),
    t.COL_FALSE_ALARM: ("false_alarm", parse_bool),
    t.COL_TRIAL: ("trial_mode", parse_bool),
    t.COL_RETIRED: ("is_retired", parse_bool),
    t.COL_CWE: ("cwe_id", parse_cwe),
    t.COL_SAST: ("sast_id", str),
    t.COL_MISRA: ("sast_id", str),
    t.COL_PROJECT: ("project_names", lambda s: _split(s, t.PROJECT_SEPARATOR)),
    t.COL_ANALYZED_SOURCE_FILES: (
        "analyzed_source_files",
        lambda s: _split(s, t.ANALYZED_SOURCE_FILE_SEPARATOR),
    ),
    t.COL_ORDER: ("default_order", int),
    t.COL_FAV_ICON: ("fav_icon", parse_bool),
}


def element_to_record(row: ET.Element) -> DiagnosticRecord:
    """Convert one ``<Messages>`` row. Raises LogDecodeError on a bad column."""
    fields: Dict[str, Any] = {"error_code": "", "message": "", "file_name": ""}
    for column in row:
        try:
            if column.tag == t.COL_POSITIONS:
                fields["positions"] = _parse_positions(column)
                continue
            spec = _COLUMNS.get(column.tag)
            if spec is None:
                continue
            name, convert = spec
            fields[name] = convert(column.text or "")
        except ValueError as exc:
            raise LogDecodeError(f"Bad value in column '{column.tag}': {exc}") from exc
    return DiagnosticRecord(**fields)


def _read_metadata(root: ET.Element) -> LogMetadata:
    solution = root.find(t.SOLUTION_TABLE)
    if solution is None:
        return LogMetadata()

    def _text(tag: str) -> str:
        node = solution.find(tag)
        return (node.text or "") if node is not None else ""

    return LogMetadata(
        solution_path=_text(t.SOLUTION_PATH),
        solution_version=_text(t.SOLUTION_VERSION),
        plog_version=_text(t.SOLUTION_PLOG_VERSION),
        modification_date=_text(t.MODIFICATION_DATE),
    )


def decode_xml_text(text: str, path: Optional[Path] = None) -> DecodeResult:
    """Decode a plog XML document.

    Returns a MALFORMED result when the document cannot be parsed at all.
    Raises LogDecodeError when a message row carries an unreadable column.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        logger.debug("XML parse failure in %s: %s", path, exc)
        return DecodeResult.malformed(path, LogFormat.XML, f"Malformed XML log: {exc}")

    records = [element_to_record(row) for row in root.findall(t.MESSAGE_TABLE)]
    return DecodeResult(
        path=path,
        format=LogFormat.XML,
        records=records,
        metadata=_read_metadata(root),
    )


def decode_xml_file(path: Path) -> DecodeResult:
    try:
        text = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        return DecodeResult.malformed(path, LogFormat.XML, f"Log is not UTF-8: {exc}")
    return decode_xml_text(text, path)
