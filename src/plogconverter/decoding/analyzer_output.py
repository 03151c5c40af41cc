"""Default decoder for raw analyzer output lines.

Recognised line shapes::

    src/file.cpp(10): error V501: Identical sub-expressions ...
    src/file.cpp:10:5: warning: V547 Expression is always true.

After the encode marker every line is base64 of its UTF-8 text.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from typing import List

from plogconverter.diagnostics.models import AnalyzerType, DiagnosticRecord

logger = logging.getLogger(__name__)

ENCODE_MARKER = "@@ENCODED@@"

_MSVC_RE = re.compile(
    r"^(?P<file>.+?)\((?P<line>\d+)\):\s+(?P<kind>error|warning|note)\s+"
    r"(?P<code>V\d+):\s*(?P<message>.*)$",
    re.IGNORECASE,
)
_GCC_RE = re.compile(
    r"^(?P<file>.+?):(?P<line>\d+):(?:\d+:)?\s*(?P<kind>error|warning|note):\s+"
    r"(?P<code>V\d+)\s+(?P<message>.*)$",
    re.IGNORECASE,
)

_LEVELS = {"error": 1, "warning": 2, "note": 3}

# (first code, last code, analyzer type); anything else is general analysis
_CODE_RANGES = (
    (1, 99, AnalyzerType.UNKNOWN),
    (100, 499, AnalyzerType.VIVA64),
    (800, 999, AnalyzerType.OPTIMIZATION),
    (2000, 2499, AnalyzerType.CUSTOMER_SPECIFIC),
    (2500, 2999, AnalyzerType.MISRA),
    (3500, 3599, AnalyzerType.AUTOSAR),
    (5000, 5999, AnalyzerType.OWASP),
)


def analyzer_type_for(code: str) -> AnalyzerType:
    """Infer the analyzer type from a ``V<number>`` code."""
    digits = code[1:] if code[:1] in ("V", "v") else code
    if not digits.isdigit():
        return AnalyzerType.UNKNOWN
    number = int(digits)
    for first, last, analyzer in _CODE_RANGES:
        if first <= number <= last:
            return analyzer
    return AnalyzerType.GENERAL


def decode_line(line: str, encoded: bool = False) -> str:
    if not encoded:
        return line
    try:
        return base64.b64decode(line.strip(), validate=True).decode("utf-8")
    except binascii.Error as exc:
        raise ValueError(f"Invalid encoded analyzer line: {exc}") from exc


def decode_analyzer_output(text: str, encoded: bool = False) -> List[DiagnosticRecord]:
    """Turn a block of analyzer output lines into records."""
    records: List[DiagnosticRecord] = []
    for raw in text.splitlines():
        line = decode_line(raw, encoded).rstrip()
        m = _MSVC_RE.match(line) or _GCC_RE.match(line)
        if m is None:
            logger.debug("Skipping unrecognised analyzer line: %.80s", line)
            continue
        code = m.group("code").upper()
        records.append(
            DiagnosticRecord(
                error_code=code,
                message=m.group("message").strip(),
                file_name=m.group("file").strip(),
                line_number=int(m.group("line")),
                analyzer_type=analyzer_type_for(code),
                level=_LEVELS[m.group("kind").lower()],
            )
        )
    return records
