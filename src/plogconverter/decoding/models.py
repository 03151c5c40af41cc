"""Decode result models and errors."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from plogconverter.diagnostics.models import DiagnosticRecord


class LogFormat(str, Enum):
    XML = "xml"
    JSON = "json"
    RAW = "raw"


class DecodeErrorKind(str, Enum):
    MALFORMED = "malformed"  # recoverable: the log is skipped


class LogDecodeError(Exception):
    """Raised when a structured log is well-formed but a column cannot be extracted."""


@dataclass(frozen=True)
class LogMetadata:
    """Solution metadata table of a structured XML log."""

    solution_path: str = ""
    solution_version: str = ""
    plog_version: str = ""
    modification_date: str = ""


@dataclass
class DecodeResult:
    """Outcome of decoding one log file."""

    path: Optional[Path] = None
    format: LogFormat = LogFormat.XML
    records: List[DiagnosticRecord] = field(default_factory=list)
    metadata: Optional[LogMetadata] = None
    error_kind: Optional[DecodeErrorKind] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @property
    def solution_name(self) -> str:
        return self.metadata.solution_path if self.metadata else ""

    @classmethod
    def malformed(cls, path: Optional[Path], fmt: LogFormat, error: str) -> "DecodeResult":
        return cls(
            path=path,
            format=fmt,
            error_kind=DecodeErrorKind.MALFORMED,
            error=error,
        )
