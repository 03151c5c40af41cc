"""Record filters: analyzer type/level map, disabled codes, false alarms."""

from __future__ import annotations

from typing import AbstractSet, Iterable, List, Mapping, Optional

from plogconverter.diagnostics.models import (
    RENEW_LICENSE_CODE,
    AnalyzerType,
    DiagnosticRecord,
)

LevelMap = Mapping[AnalyzerType, AbstractSet[int]]


def _is_renew_notice(record: DiagnosticRecord) -> bool:
    return (
        record.analyzer_type is AnalyzerType.UNKNOWN
        and record.error_code == RENEW_LICENSE_CODE
    )


def filter_by_levels(
    records: Iterable[DiagnosticRecord], level_map: LevelMap
) -> List[DiagnosticRecord]:
    """Keep records whose analyzer type is mapped and whose level is allowed.

    The renew-license notice is a system message, not a diagnostic, and is
    always kept.
    """
    kept: List[DiagnosticRecord] = []
    for record in records:
        allowed = level_map.get(record.analyzer_type)
        if allowed is not None and record.level in allowed:
            kept.append(record)
        elif _is_renew_notice(record):
            kept.append(record)
    return kept


def filter_disabled_codes(
    records: Iterable[DiagnosticRecord], disabled_codes: Iterable[str]
) -> List[DiagnosticRecord]:
    """Drop records whose error code matches a disabled code (case-insensitive)."""
    disabled = {code.strip().casefold() for code in disabled_codes if code.strip()}
    return [r for r in records if r.error_code.casefold() not in disabled]


def exclude_false_alarms(
    records: Iterable[DiagnosticRecord], *, keep_false_alarms: bool = False
) -> List[DiagnosticRecord]:
    """Drop false alarms unless the consumer needs them (compliance reports)."""
    if keep_false_alarms:
        return list(records)
    return [r for r in records if not r.false_alarm]


def apply_filters(
    records: Iterable[DiagnosticRecord],
    level_map: Optional[LevelMap] = None,
    disabled_codes: Optional[Iterable[str]] = None,
) -> List[DiagnosticRecord]:
    """Type/level filter, then disabled-code filter; each is skipped when empty."""
    result = list(records)
    if level_map:
        result = filter_by_levels(result, level_map)
    codes = list(disabled_codes or [])
    if codes:
        result = filter_disabled_codes(result, codes)
    return result
