"""Semicolon separated CSV renderer."""

from __future__ import annotations

import csv
import io
import ntpath
from typing import List, Sequence

from plogconverter.decoding.table import PROJECT_SEPARATOR
from plogconverter.diagnostics.models import DiagnosticRecord
from plogconverter.paths import remove_marker
from plogconverter.render.base import RenderOptions

DELIMITER = ";"


def short_name(path: str) -> str:
    """Last path component; handles both separator styles."""
    return ntpath.basename(remove_marker(path))


def _header(options: RenderOptions) -> List[str]:
    header = ["FavIcon", "Default order", "Level", "Error code"]
    if options.has_cwe:
        header.append("CWE")
    if options.has_sast:
        header.append("SAST")
    header += [
        "Message",
        "Project",
        "Short file",
        "Line",
        "False alarm",
        "File",
        "Analyzer",
        "Analyzed source file(s)",
    ]
    return header


def _row(record: DiagnosticRecord, options: RenderOptions) -> List[str]:
    row = [str(record.fav_icon), str(record.default_order), str(record.level), record.error_code]
    if options.has_cwe:
        row.append(record.cwe_text)
    if options.has_sast:
        row.append(record.sast_id or "")
    row += [
        record.message,
        PROJECT_SEPARATOR.join(record.project_names),
        short_name(record.file_name),
        str(record.line_number),
        str(record.false_alarm),
        options.convert(record.file_name),
        record.analyzer_type.log_name,
        "|".join(short_name(f) for f in record.analyzed_source_files if f.strip()),
    ]
    return row


def render(records: Sequence[DiagnosticRecord], options: RenderOptions) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, delimiter=DELIMITER, lineterminator="\n")
    writer.writerow(_header(options))
    for record in records:
        writer.writerow(_row(record, options))
    return buf.getvalue()
