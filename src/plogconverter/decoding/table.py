"""In-memory plog table and its XML dataset serialisation.

The dataset layout is the one the analyzer writes to ``.plog`` files::

    <NewDataSet>
      <Solution_Path>
        <SolutionPath/><SolutionVersion/><PlogVersion/><ModificationDate/>
      </Solution_Path>
      <Messages> ...one element per record column... </Messages>
      ...
    </NewDataSet>
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import Iterable, List, Optional

from plogconverter.decoding.models import LogMetadata
from plogconverter.diagnostics.models import DiagnosticRecord

PLOG_VERSION = "8"

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>\n'

# XML 1.0 cannot carry control characters such as ANSI escapes or NUL
_INVALID_XML_CHARS = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")

# --- table and column names ---

DATASET = "NewDataSet"
SOLUTION_TABLE = "Solution_Path"
MESSAGE_TABLE = "Messages"

SOLUTION_PATH = "SolutionPath"
SOLUTION_VERSION = "SolutionVersion"
SOLUTION_PLOG_VERSION = "PlogVersion"
MODIFICATION_DATE = "ModificationDate"

COL_ANALYZER = "Analyzer"
COL_ERROR_CODE = "ErrorCode"
COL_MESSAGE = "Message"
COL_LEVEL = "Level"
COL_FILE = "File"
COL_LINE = "Line"
COL_POSITIONS = "Positions"
COL_POSITION = "Position"
COL_FALSE_ALARM = "FalseAlarm"
COL_TRIAL = "Trial"
COL_RETIRED = "Retired"
COL_CWE = "CWECode"
COL_SAST = "SAST"
COL_MISRA = "MISRA"  # plog version 6 and below
COL_PROJECT = "Project"
COL_ANALYZED_SOURCE_FILES = "AnalyzedSourceFiles"
COL_ORDER = "Order"
COL_FAV_ICON = "FavIcon"

PROJECT_SEPARATOR = "%"
ANALYZED_SOURCE_FILE_SEPARATOR = "|"


def _bool_text(value: bool) -> str:
    return "true" if value else "false"


def _sub(parent: ET.Element, tag: str, text: str) -> ET.Element:
    child = ET.SubElement(parent, tag)
    child.text = _INVALID_XML_CHARS.sub("", text)
    return child


def record_to_element(record: DiagnosticRecord) -> ET.Element:
    """Build one ``<Messages>`` row."""
    row = ET.Element(MESSAGE_TABLE)
    _sub(row, COL_PROJECT, PROJECT_SEPARATOR.join(record.project_names))
    _sub(row, COL_ERROR_CODE, record.error_code)
    _sub(row, COL_MESSAGE, record.message)
    _sub(row, COL_LINE, str(record.line_number))
    _sub(row, COL_FILE, record.file_name)
    if record.positions:
        positions = ET.SubElement(row, COL_POSITIONS)
        for position in record.positions:
            item = _sub(positions, COL_POSITION, position.file_path)
            item.set("lines", str(position.line_number))
    _sub(row, COL_FALSE_ALARM, _bool_text(record.false_alarm))
    _sub(row, COL_LEVEL, str(record.level))
    _sub(row, COL_ANALYZER, str(int(record.analyzer_type)))
    if record.cwe_id:
        _sub(row, COL_CWE, record.cwe_text)
    if record.sast_id:
        _sub(row, COL_SAST, record.sast_id)
    _sub(row, COL_RETIRED, _bool_text(record.is_retired))
    if record.analyzed_source_files:
        _sub(
            row,
            COL_ANALYZED_SOURCE_FILES,
            ANALYZED_SOURCE_FILE_SEPARATOR.join(record.analyzed_source_files),
        )
    _sub(row, COL_ORDER, str(record.default_order))
    _sub(row, COL_FAV_ICON, _bool_text(record.fav_icon))
    _sub(row, COL_TRIAL, _bool_text(record.trial_mode))
    return row


class PlogTable:
    """Append-only message table plus its solution metadata row.

    Not thread-safe: the raw-log consumer is the only writer.
    """

    def __init__(self, metadata: Optional[LogMetadata] = None) -> None:
        self.metadata = metadata or LogMetadata(plog_version=PLOG_VERSION)
        self._rows: List[DiagnosticRecord] = []

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def rows(self) -> List[DiagnosticRecord]:
        return list(self._rows)

    def append(self, record: DiagnosticRecord) -> None:
        self._rows.append(record)

    def extend(self, records: Iterable[DiagnosticRecord]) -> None:
        self._rows.extend(records)

    def to_element(self) -> ET.Element:
        root = ET.Element(DATASET)
        solution = ET.SubElement(root, SOLUTION_TABLE)
        _sub(solution, SOLUTION_PATH, self.metadata.solution_path)
        _sub(solution, SOLUTION_VERSION, self.metadata.solution_version)
        _sub(solution, SOLUTION_PLOG_VERSION, self.metadata.plog_version or PLOG_VERSION)
        _sub(solution, MODIFICATION_DATE, self.metadata.modification_date)
        for record in self._rows:
            root.append(record_to_element(record))
        return root

    def to_xml(self, *, pretty: bool = False) -> str:
        root = self.to_element()
        if not pretty:
            return ET.tostring(root, encoding="unicode")
        # tostring would declare the locale encoding; the files are always UTF-8
        ET.indent(root)
        return XML_DECLARATION + ET.tostring(root, encoding="unicode") + "\n"
