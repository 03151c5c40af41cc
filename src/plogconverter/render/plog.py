"""Filtered plog (XML dataset) renderer."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from plogconverter.decoding.models import LogMetadata
from plogconverter.decoding.table import PLOG_VERSION, PlogTable
from plogconverter.diagnostics.models import DiagnosticRecord
from plogconverter.render.base import RenderOptions, rebase_records

NO_VERSION_SOLUTION = "Independent"


def merge_metadata(options: RenderOptions) -> LogMetadata:
    """One solution row for all input logs.

    The solution path survives only when every log names the same one
    (case-insensitive); the version is the highest numeric one seen.
    """
    paths = [options.convert(m.solution_path, keep_marker=True) for m in options.metadata]
    solution_path = ""
    if paths and all(p.casefold() == paths[0].casefold() for p in paths):
        solution_path = paths[0]

    versions = [m.solution_version for m in options.metadata if m.solution_version.strip()]
    try:
        solution_version = (
            f"{max(float(v) for v in versions):.1f}" if versions else NO_VERSION_SOLUTION
        )
    except ValueError:
        solution_version = NO_VERSION_SOLUTION

    return LogMetadata(
        solution_path=solution_path,
        solution_version=solution_version,
        plog_version=PLOG_VERSION,
        modification_date=datetime.now(timezone.utc).isoformat(),
    )


def render(records: Sequence[DiagnosticRecord], options: RenderOptions) -> str:
    table = PlogTable(merge_metadata(options))
    table.extend(rebase_records(records, options))
    return table.to_xml(pretty=True)
