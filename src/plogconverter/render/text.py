"""Plain-text renderers: Txt, Tasks, Totals and TeamCity service messages."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from plogconverter.diagnostics.models import AnalyzerType, DiagnosticRecord
from plogconverter.render.base import NO_MESSAGES, RenderOptions

DOCS_URL = "https://pvs-studio.com/en/docs/warnings/{code}/"

_SECTION_FILLER = "=" * 15

_TASK_LEVELS = {1: "err", 2: "warn", 3: "note"}

_TEAMCITY_CATEGORIES = {1: "High", 2: "Medium", 3: "Low"}

# Unknown is left out of the totals
_TOTALS_TYPES = (
    AnalyzerType.GENERAL,
    AnalyzerType.OPTIMIZATION,
    AnalyzerType.VIVA64,
    AnalyzerType.CUSTOMER_SPECIFIC,
    AnalyzerType.MISRA,
    AnalyzerType.AUTOSAR,
    AnalyzerType.OWASP,
)


def docs_url(code: str) -> str:
    return DOCS_URL.format(code=code.lower())


def _security_prefix(record: DiagnosticRecord, options: RenderOptions) -> str:
    """``"[CWE-476] [MISRA-C-1.1] "`` or ``""``."""
    codes = options.security_codes(record)
    if not codes:
        return ""
    return " ".join(f"[{code}]" for code in codes) + " "


# ---- Txt ----


def _txt_line(record: DiagnosticRecord, options: RenderOptions) -> str:
    if not record.has_severity:
        return record.message
    return (
        f"{options.convert(record.file_name)} ({record.line_number}): "
        f"error {record.error_code}: {_security_prefix(record, options)}{record.message}"
    )


def render_txt(records: Sequence[DiagnosticRecord], options: RenderOptions) -> str:
    if not records:
        return NO_MESSAGES + "\n"
    lines: List[str] = []
    current: Optional[AnalyzerType] = None
    for record in records:
        if record.analyzer_type is not current:
            if current is not None:
                lines.append("")
            current = record.analyzer_type
            lines.append(f"{_SECTION_FILLER}{current.title}{_SECTION_FILLER}")
        lines.append(_txt_line(record, options))
    return "\n".join(lines) + "\n"


# ---- Tasks ----


def render_tasks(records: Sequence[DiagnosticRecord], options: RenderOptions) -> str:
    """Tab separated task list: file, line, err|warn|note, code and message."""
    if not records:
        return f"-\t1\terr\t{NO_MESSAGES}\n"
    lines = []
    for record in records:
        level = _TASK_LEVELS.get(record.level, "err")
        lines.append(
            f"{options.convert(record.file_name)}\t{record.line_number}\t{level}\t"
            f"{record.error_code} {_security_prefix(record, options)}{record.message}"
        )
    return "\n".join(lines) + "\n"


# ---- Totals ----


def count_levels(records: Sequence[DiagnosticRecord]) -> Dict[AnalyzerType, List[int]]:
    """Per analyzer type [L1, L2, L3] counts of non-false-alarm records."""
    stats: Dict[AnalyzerType, List[int]] = {t: [0, 0, 0] for t in AnalyzerType}
    for record in records:
        if record.false_alarm or not record.has_severity:
            continue
        stats[record.analyzer_type][record.level - 1] += 1
    return stats


def _totals_line(title: str, levels: Sequence[int]) -> str:
    l1, l2, l3 = levels
    return f"{title} L1:{l1} + L2:{l2} + L3:{l3} = {l1 + l2 + l3}"


def render_totals(records: Sequence[DiagnosticRecord], options: RenderOptions) -> str:
    if not records:
        return NO_MESSAGES + "\n"
    stats = count_levels(records)
    lines = ["PVS - Studio analysis results"]
    overall = [0, 0, 0]
    for analyzer in _TOTALS_TYPES:
        levels = stats[analyzer]
        lines.append(_totals_line(analyzer.title, levels))
        overall = [a + b for a, b in zip(overall, levels)]
    lines.append(_totals_line("Total", overall))
    return "\n".join(lines) + "\n"


# ---- TeamCity ----


def escape_teamcity(value: str) -> str:
    """Escape a value for a ``##teamcity[...]`` service message."""
    return (
        value.replace("|", "||")
        .replace("'", "|'")
        .replace("[", "|[")
        .replace("]", "|]")
        .replace("\r", "|r")
        .replace("\n", "|n")
    )


def render_teamcity(records: Sequence[DiagnosticRecord], options: RenderOptions) -> str:
    if not records:
        return NO_MESSAGES + "\n"
    lines: List[str] = []
    seen_codes = set()
    for record in records:
        code = escape_teamcity(record.error_code)
        if record.error_code not in seen_codes:
            seen_codes.add(record.error_code)
            category = _TEAMCITY_CATEGORIES.get(record.level, "Fails")
            lines.append(
                f"##teamcity[inspectionType id='{code}' name='{code}' "
                f"description='{escape_teamcity(docs_url(record.error_code))}' "
                f"category='{category}']"
            )
        security = ", ".join(options.security_codes(record))
        message = f"{security} {record.message}" if security else record.message
        path = options.convert(record.file_name)
        lines.append(
            f"##teamcity[inspection typeId='{code}' message='{escape_teamcity(message)}' "
            f"file='{escape_teamcity(path)}' line='{record.line_number}' SEVERITY='ERROR']"
        )
    return "\n".join(lines) + "\n"
