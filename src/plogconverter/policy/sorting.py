"""Deterministic record ordering."""

from __future__ import annotations

from typing import Iterable, List, Tuple

from plogconverter.diagnostics.models import DiagnosticRecord


def sort_key(record: DiagnosticRecord) -> Tuple[int, int, str, int, str, str]:
    """Analyzer type, level, file name; then line, code and message.

    The trailing keys make the order total: two records only tie when they
    are the same diagnostic.
    """
    return (
        int(record.analyzer_type),
        record.level,
        record.file_name.casefold(),
        record.line_number,
        record.error_code.casefold(),
        record.message.casefold(),
    )


def sort_records(records: Iterable[DiagnosticRecord]) -> List[DiagnosticRecord]:
    return sorted(records, key=sort_key)
