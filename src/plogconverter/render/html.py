"""HTML renderers: message table, full report and MISRA compliance summary."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import jinja2

from plogconverter.diagnostics.models import AnalyzerType, DiagnosticRecord
from plogconverter.render.base import NO_MESSAGES, RenderOptions, RenderTarget
from plogconverter.render.csv_report import short_name
from plogconverter.render.text import count_levels, docs_url

MAX_PROJECT_NAMES = 5
MAX_ANALYZED_SOURCE_FILES = 5

CWE_COLUMN_WIDTH = 6
SAST_COLUMN_WIDTH = 9
MESSAGE_COLUMN_WIDTH = 45

CWE_URL = "https://cwe.mitre.org/data/definitions/{cwe_id}.html"

_ENV = jinja2.Environment(autoescape=True, trim_blocks=True, lstrip_blocks=True)

_EMPTY_TEMPLATE = _ENV.from_string(
    """<!DOCTYPE html>
<html>
<body>
<h3>{{ notice }}</h3>
</body>
</html>
"""
)

_HTML_TEMPLATE = _ENV.from_string(
    """<!DOCTYPE html>
<html lang="en">
<head>
<title>Messages</title>
<meta charset="utf-8"/>
<style type="text/css">
td { padding: 0; text-align: left; vertical-align: top; }
caption { text-align: left; }
</style>
</head>
<body>
<table style="width: 100%; font: 12pt normal Century Gothic;">
<caption style="font-weight: bold;">MESSAGES</caption>
<tr style="background: black; color: white;">
<th style="width: 5%;">Code</th>
{% if has_cwe %}
<th style="width: {{ cwe_width }}%;">CWE</th>
{% endif %}
{% if has_sast %}
<th style="width: {{ sast_width }}%;">SAST</th>
{% endif %}
<th style="width: {{ message_width }}%;">Message</th>
<th style="width: 10%;">Project</th>
<th style="width: 20%;">File</th>
<th style="width: 20%;">Analyzed Source File(s)</th>
</tr>
{% for title, rows in groups.items() %}
<tr style="background: lightcyan;">
<td colspan="{{ colspan }}" style="color: red; text-align: center; font-size: 1.2em;">{{ title }}</td>
</tr>
{% for row in rows %}
<tr>
<td style="width: 5%;"><a href="{{ row.url }}">{{ row.code }}</a></td>
{% if has_cwe %}
<td style="width: {{ cwe_width }}%;">{% if row.cwe %}<a href="{{ row.cwe_url }}">{{ row.cwe }}</a>{% endif %}</td>
{% endif %}
{% if has_sast %}
<td style="width: {{ sast_width }}%;">{{ row.sast }}</td>
{% endif %}
<td style="width: {{ message_width }}%;">{{ row.message }}</td>
<td style="width: 10%;">{{ row.projects }}</td>
<td style="width: 20%;">{% if row.file %}<a href="file:///{{ row.file_url }}">{{ row.short_file }} ({{ row.line }})</a>{% endif %}</td>
<td style="width: 20%;">{% for f in row.sources %}{% if not loop.first %}, {% endif %}<a href="file:///{{ f.url }}">{{ f.name }}</a>{% endfor %}{% if row.more_sources %}, ...{% endif %}</td>
</tr>
{% endfor %}
{% endfor %}
</table>
</body>
</html>
"""
)

_FULL_HTML_TEMPLATE = _ENV.from_string(
    """<!DOCTYPE html>
<html lang="en">
<head>
<title>{{ title }}</title>
<meta charset="utf-8"/>
<style type="text/css">
body { font-family: sans-serif; }
table { border-collapse: collapse; width: 100%; }
th, td { border: 1px solid #ccc; padding: 2px 6px; text-align: left; vertical-align: top; }
th { background: #222; color: #fff; }
tr.false-alarm { color: #888; }
</style>
</head>
<body>
<h1>{{ title }}</h1>
<table class="summary">
<tr><th>Analyzer</th><th>Level 1</th><th>Level 2</th><th>Level 3</th><th>Total</th></tr>
{% for item in summary %}
<tr><td>{{ item.title }}</td><td>{{ item.levels[0] }}</td><td>{{ item.levels[1] }}</td><td>{{ item.levels[2] }}</td><td>{{ item.total }}</td></tr>
{% endfor %}
</table>
{% for title, rows in groups.items() %}
<h2>{{ title }}</h2>
<table>
<tr><th>Level</th><th>Code</th>{% if has_cwe %}<th>CWE</th>{% endif %}{% if has_sast %}<th>SAST</th>{% endif %}<th>Message</th><th>File</th><th>Line</th><th>Positions</th><th>Project</th><th>False alarm</th></tr>
{% for row in rows %}
<tr{% if row.false_alarm %} class="false-alarm"{% endif %}>
<td>{{ row.level }}</td>
<td><a href="{{ row.url }}">{{ row.code }}</a></td>
{% if has_cwe %}<td>{{ row.cwe }}</td>{% endif %}
{% if has_sast %}<td>{{ row.sast }}</td>{% endif %}
<td>{{ row.message }}</td>
<td>{{ row.file }}</td>
<td>{{ row.line }}</td>
<td>{% for path, line in row.positions %}{{ path }}:{{ line }}{% if not loop.last %}<br/>{% endif %}{% endfor %}</td>
<td>{{ row.projects }}</td>
<td>{{ "yes" if row.false_alarm else "" }}</td>
</tr>
{% endfor %}
</table>
{% endfor %}
</body>
</html>
"""
)

_MISRA_TEMPLATE = _ENV.from_string(
    """<!DOCTYPE html>
<html lang="en">
<head>
<title>MISRA Compliance</title>
<meta charset="utf-8"/>
<style type="text/css">
body { font-family: sans-serif; }
table { border-collapse: collapse; }
th, td { border: 1px solid #ccc; padding: 2px 8px; text-align: left; }
th { background: #222; color: #fff; }
.violations { color: #b00; }
.deviations { color: #a60; }
.compliant { color: #070; }
</style>
</head>
<body>
<h1>MISRA Compliance</h1>
<p>Summary: <span class="{{ verdict_class }}">{{ verdict }}</span></p>
<table>
<tr><th>Guideline</th><th>Violations</th><th>Deviations</th><th>Compliance</th></tr>
{% for item in guidelines %}
<tr><td>{{ item.name }}</td><td>{{ item.violations }}</td><td>{{ item.deviations }}</td><td class="{{ item.css }}">{{ item.status }}</td></tr>
{% endfor %}
</table>
</body>
</html>
"""
)


def _link_path(path: str) -> str:
    return path.replace("\\", "/")


def _projects(record: DiagnosticRecord) -> str:
    names = list(record.project_names[:MAX_PROJECT_NAMES])
    if len(record.project_names) > MAX_PROJECT_NAMES:
        names.append("...")
    return ", ".join(names)


def _row(record: DiagnosticRecord, options: RenderOptions) -> Dict[str, object]:
    file_name = options.convert(record.file_name)
    sources = []
    for source in record.analyzed_source_files[:MAX_ANALYZED_SOURCE_FILES]:
        if source.strip():
            converted = options.convert(source)
            sources.append({"url": _link_path(converted), "name": short_name(converted)})
    return {
        "code": record.error_code,
        "url": docs_url(record.error_code),
        "cwe": record.cwe_text,
        "cwe_url": CWE_URL.format(cwe_id=record.cwe_id) if record.cwe_id else "",
        "sast": record.sast_id or "",
        "message": record.message,
        "projects": _projects(record),
        "file": file_name,
        "file_url": _link_path(file_name),
        "short_file": short_name(file_name),
        "line": record.line_number,
        "level": record.level,
        "false_alarm": record.false_alarm,
        "positions": [(options.convert(p.file_path), p.line_number) for p in record.positions],
        "sources": sources,
        "more_sources": len(record.analyzed_source_files) > MAX_ANALYZED_SOURCE_FILES,
    }


def _group(
    records: Sequence[DiagnosticRecord], options: RenderOptions
) -> "OrderedDict[str, List[Dict[str, object]]]":
    """Rows keyed by analyzer title, in analyzer order; empty groups omitted."""
    by_type: Dict[AnalyzerType, List[Dict[str, object]]] = {}
    for record in records:
        by_type.setdefault(record.analyzer_type, []).append(_row(record, options))
    return OrderedDict((t.title, by_type[t]) for t in sorted(by_type))


def _empty() -> str:
    return _EMPTY_TEMPLATE.render(notice=NO_MESSAGES)


def render_html(records: Sequence[DiagnosticRecord], options: RenderOptions) -> str:
    if not records:
        return _empty()
    message_width = MESSAGE_COLUMN_WIDTH
    colspan = 5
    if options.has_cwe:
        message_width -= CWE_COLUMN_WIDTH
        colspan += 1
    if options.has_sast:
        message_width -= SAST_COLUMN_WIDTH
        colspan += 1
    return _HTML_TEMPLATE.render(
        groups=_group(records, options),
        has_cwe=options.has_cwe,
        has_sast=options.has_sast,
        cwe_width=CWE_COLUMN_WIDTH,
        sast_width=SAST_COLUMN_WIDTH,
        message_width=message_width,
        colspan=colspan,
    )


def render_full_html(records: Sequence[DiagnosticRecord], options: RenderOptions) -> str:
    """Single-page report with a level summary and every record column."""
    if not records:
        return _empty()
    stats = count_levels(records)
    summary = [
        {"title": t.title, "levels": stats[t], "total": sum(stats[t])}
        for t in AnalyzerType
        if t is not AnalyzerType.UNKNOWN and sum(stats[t])
    ]
    return _FULL_HTML_TEMPLATE.render(
        title=options.base_name(RenderTarget.FULL_HTML),
        summary=summary,
        groups=_group(records, options),
        has_cwe=options.has_cwe,
        has_sast=options.has_sast,
    )


@dataclass
class _Guideline:
    name: str
    violations: int = 0
    deviations: int = 0

    @property
    def status(self) -> str:
        if self.violations:
            return "Violations"
        if self.deviations:
            return "Deviations"
        return "Compliant"

    @property
    def css(self) -> str:
        return self.status.lower()


@dataclass
class ComplianceSummary:
    guidelines: List[_Guideline] = field(default_factory=list)

    @property
    def compliant(self) -> bool:
        return not any(g.violations for g in self.guidelines)


def misra_compliance(records: Sequence[DiagnosticRecord]) -> ComplianceSummary:
    """Count MISRA violations and deviations (false alarms) per guideline."""
    guidelines: Dict[str, _Guideline] = {}
    for record in records:
        if record.analyzer_type is not AnalyzerType.MISRA:
            continue
        name = record.sast_id or record.error_code
        guideline = guidelines.setdefault(name, _Guideline(name))
        if record.false_alarm:
            guideline.deviations += 1
        else:
            guideline.violations += 1
    return ComplianceSummary([guidelines[k] for k in sorted(guidelines)])


def render_misra_compliance(records: Sequence[DiagnosticRecord], options: RenderOptions) -> str:
    summary = misra_compliance(records)
    if not summary.guidelines:
        return _empty()
    return _MISRA_TEMPLATE.render(
        guidelines=summary.guidelines,
        verdict="Compliant" if summary.compliant else "Not compliant",
        verdict_class="compliant" if summary.compliant else "violations",
    )
