"""Render targets, options, and job/outcome value types."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Callable, FrozenSet, List, Optional, Sequence, Tuple

from plogconverter.decoding.models import LogMetadata
from plogconverter.diagnostics.models import DiagnosticRecord, ErrorCodeMapping
from plogconverter.paths import PathMode, convert_path, convert_positions
from plogconverter.render.logger import RenderLogger

NO_MESSAGES = "No Messages Generated"
MERGED_REPORT_NAME = "MergedReport"
FILTERED_SUFFIX = "_filtered"


class RenderTarget(str, Enum):
    HTML = "Html"
    FULL_HTML = "FullHtml"
    TOTALS = "Totals"
    TXT = "Txt"
    CSV = "Csv"
    TASKS = "Tasks"
    PLOG = "Plog"
    TEAMCITY = "TeamCity"
    SARIF = "Sarif"
    JSON = "JSON"
    MISRA_COMPLIANCE = "MisraCompliance"

    @property
    def suffix(self) -> str:
        return _SUFFIXES[self]

    @classmethod
    def parse(cls, name: str) -> "RenderTarget":
        wanted = name.strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        raise ValueError(f"Cannot parse render type with a name {name}")


_SUFFIXES = {
    RenderTarget.HTML: ".html",
    RenderTarget.FULL_HTML: ".full.html",
    RenderTarget.TOTALS: ".totals",
    RenderTarget.TXT: ".txt",
    RenderTarget.CSV: ".csv",
    RenderTarget.TASKS: ".tasks",
    RenderTarget.PLOG: ".plog",
    RenderTarget.TEAMCITY: ".teamcity",
    RenderTarget.SARIF: ".sarif",
    RenderTarget.JSON: ".json",
    RenderTarget.MISRA_COMPLIANCE: ".misra.html",
}

_SAST_MAPPINGS = frozenset(
    {ErrorCodeMapping.MISRA, ErrorCodeMapping.OWASP, ErrorCodeMapping.AUTOSAR}
)


@dataclass(frozen=True)
class RenderOptions:
    """Immutable settings shared by every render job of a run."""

    output_dir: Path = Path(".")
    name_template: str = ""
    log_paths: Tuple[Path, ...] = ()
    src_root: str = ""
    path_mode: PathMode = PathMode.ABSOLUTE
    mappings: FrozenSet[ErrorCodeMapping] = frozenset()
    metadata: Tuple[LogMetadata, ...] = ()

    @property
    def has_cwe(self) -> bool:
        return ErrorCodeMapping.CWE in self.mappings

    @property
    def has_sast(self) -> bool:
        return bool(self.mappings & _SAST_MAPPINGS)

    def convert(self, path: str, *, keep_marker: bool = False) -> str:
        return convert_path(path, self.src_root, self.path_mode, keep_marker=keep_marker)

    def base_name(self, target: RenderTarget) -> str:
        """Template, else the single input log's file name, else ``MergedReport``."""
        if self.name_template.strip():
            return self.name_template.strip()
        if len(self.log_paths) == 1:
            log = self.log_paths[0]
            if target is RenderTarget.PLOG:
                return log.stem + FILTERED_SUFFIX
            return log.name
        return MERGED_REPORT_NAME

    def output_path(self, target: RenderTarget) -> Path:
        return self.output_dir / f"{self.base_name(target)}{target.suffix}"

    def security_codes(self, record: DiagnosticRecord) -> List[str]:
        """Enabled CWE / SAST identifiers of *record*, in that order."""
        codes: List[str] = []
        if self.has_cwe and record.cwe_id:
            codes.append(record.cwe_text)
        if self.has_sast and record.sast_id:
            codes.append(record.sast_id)
        return codes


def rebase_records(
    records: Sequence[DiagnosticRecord], options: RenderOptions
) -> List[DiagnosticRecord]:
    """Copies of *records* with file and position paths rewritten, marker kept."""
    return [
        replace(
            r,
            file_name=options.convert(r.file_name, keep_marker=True),
            positions=convert_positions(r.positions, options.src_root, options.path_mode),
        )
        for r in records
    ]


Renderer = Callable[[Sequence[DiagnosticRecord], RenderOptions], str]


@dataclass(frozen=True)
class RendererSpec:
    """A renderer function and the capabilities the dispatcher checks."""

    render: Renderer
    supports_relative_paths: bool = False
    shows_false_alarms: bool = False


@dataclass(frozen=True)
class RenderJob:
    target: RenderTarget
    records: Tuple[DiagnosticRecord, ...]
    options: RenderOptions
    logger: RenderLogger = field(compare=False, repr=False)


@dataclass
class JobOutcome:
    """What one render job reported back to the dispatcher."""

    target: RenderTarget
    count: int = 0
    error_code: int = 0
    refused_path_transform: bool = False
    path: Optional[Path] = None
    error: Optional[str] = None
    exception: Optional[BaseException] = field(default=None, repr=False)

    @property
    def ok(self) -> bool:
        return self.error_code == 0 and not self.refused_path_transform and self.exception is None
