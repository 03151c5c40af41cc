"""Record union, string interning and trial-mode rewrite."""

from __future__ import annotations

import sys
from dataclasses import replace
from typing import Iterable, List, Optional, Set

from plogconverter.diagnostics.models import (
    TRIAL_RESTRICTION,
    DiagnosticRecord,
    SourcePosition,
)


def union(record_groups: Iterable[Iterable[DiagnosticRecord]]) -> Set[DiagnosticRecord]:
    """Union records from several logs into one deduplicated set.

    Dedup key: (error_code, message, line_number, file_name), case-insensitive.
    The first record seen for a key wins; later duplicates are dropped even
    when their metadata (analyzer type, CWE, positions) differs.
    """
    merged: Set[DiagnosticRecord] = set()
    for group in record_groups:
        for record in group:
            if record not in merged:
                merged.add(record)
    return merged


def _intern_optional(value: Optional[str]) -> Optional[str]:
    return sys.intern(value) if value else value


def intern_fields(record: DiagnosticRecord) -> DiagnosticRecord:
    """Return *record* with every string field interned."""
    return replace(
        record,
        error_code=sys.intern(record.error_code),
        message=sys.intern(record.message),
        file_name=sys.intern(record.file_name),
        positions=tuple(
            SourcePosition(sys.intern(p.file_path), p.line_number)
            for p in record.positions
        ),
        project_names=tuple(sys.intern(p) for p in record.project_names),
        analyzed_source_files=tuple(
            sys.intern(f) for f in record.analyzed_source_files
        ),
        sast_id=_intern_optional(record.sast_id),
    )


def fix_trial_messages(records: Iterable[DiagnosticRecord]) -> List[DiagnosticRecord]:
    """Hide the location of trial-mode diagnostics."""
    return [
        replace(r, file_name=TRIAL_RESTRICTION) if r.trial_mode else r
        for r in records
    ]


def canonicalize(records: Iterable[DiagnosticRecord]) -> List[DiagnosticRecord]:
    """Intern string fields, then apply the trial-mode rewrite (exactly once)."""
    return fix_trial_messages(intern_fields(r) for r in records)
