"""Diagnostic record data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional, Tuple

SOURCE_TREE_ROOT_MARKER = "|?|"
TRIAL_RESTRICTION = "TRIAL RESTRICTION"
RENEW_LICENSE_CODE = "Renew"
CWE_PREFIX = "CWE-"


class AnalyzerType(IntEnum):
    """Analysis pass that produced a diagnostic. Ordinal is the primary sort key."""

    UNKNOWN = 0
    GENERAL = 1
    OPTIMIZATION = 2
    VIVA64 = 3
    CUSTOMER_SPECIFIC = 4
    MISRA = 5
    AUTOSAR = 6
    OWASP = 7

    @property
    def short_name(self) -> str:
        return _SHORT_NAMES[self]

    @property
    def title(self) -> str:
        return _TITLES[self]

    @property
    def log_name(self) -> str:
        """Name used in the structured log formats."""
        return _LOG_NAMES[self]

    @classmethod
    def from_short_name(cls, name: str) -> Optional["AnalyzerType"]:
        wanted = name.strip().lower()
        for member, short in _SHORT_NAMES.items():
            if short.lower() == wanted:
                return member
        return None

    @classmethod
    def parse(cls, value: str) -> "AnalyzerType":
        """Parse a log column value: enum name (``General``) or ordinal (``1``)."""
        text = value.strip()
        if text.lstrip("-").isdigit():
            return cls(int(text))
        wanted = text.lower()
        for member, log_name in _LOG_NAMES.items():
            if log_name.lower() == wanted:
                return member
        raise ValueError(f"Unknown analyzer type: {value!r}")


_SHORT_NAMES = {
    AnalyzerType.UNKNOWN: "Fail",
    AnalyzerType.GENERAL: "GA",
    AnalyzerType.OPTIMIZATION: "OP",
    AnalyzerType.VIVA64: "64",
    AnalyzerType.CUSTOMER_SPECIFIC: "CS",
    AnalyzerType.MISRA: "MISRA",
    AnalyzerType.AUTOSAR: "AUTOSAR",
    AnalyzerType.OWASP: "OWASP",
}

_TITLES = {
    AnalyzerType.UNKNOWN: "Fails",
    AnalyzerType.GENERAL: "General Analysis",
    AnalyzerType.OPTIMIZATION: "Optimization",
    AnalyzerType.VIVA64: "64-bit issues",
    AnalyzerType.CUSTOMER_SPECIFIC: "Customer Specific",
    AnalyzerType.MISRA: "MISRA",
    AnalyzerType.AUTOSAR: "AUTOSAR",
    AnalyzerType.OWASP: "OWASP",
}

_LOG_NAMES = {
    AnalyzerType.UNKNOWN: "Unknown",
    AnalyzerType.GENERAL: "General",
    AnalyzerType.OPTIMIZATION: "Optimization",
    AnalyzerType.VIVA64: "Viva64",
    AnalyzerType.CUSTOMER_SPECIFIC: "CustomerSpecific",
    AnalyzerType.MISRA: "MISRA",
    AnalyzerType.AUTOSAR: "AUTOSAR",
    AnalyzerType.OWASP: "OWASP",
}


class ErrorCodeMapping(str, Enum):
    CWE = "CWE"
    MISRA = "MISRA"
    OWASP = "OWASP"
    AUTOSAR = "AUTOSAR"


@dataclass(frozen=True)
class SourcePosition:
    """Secondary location of a multi-file diagnostic."""

    file_path: str
    line_number: int


@dataclass(frozen=True, eq=False)
class DiagnosticRecord:
    """A single analyzer diagnostic.

    Two records are the *same diagnostic* when error code, message, line and
    file name match (strings compared case-insensitively). Every other field
    is metadata and does not take part in ``==`` or ``hash()``.
    """

    error_code: str
    message: str
    file_name: str
    line_number: int = 0
    analyzer_type: AnalyzerType = AnalyzerType.UNKNOWN
    level: int = 0
    positions: Tuple[SourcePosition, ...] = ()
    false_alarm: bool = False
    trial_mode: bool = False
    is_retired: bool = False
    project_names: Tuple[str, ...] = ()
    analyzed_source_files: Tuple[str, ...] = ()
    cwe_id: Optional[int] = None
    sast_id: Optional[str] = None
    fav_icon: bool = False
    default_order: int = 0
    _key: Tuple[str, str, int, str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # frozen: go through object.__setattr__ for the normalised fields
        for name in ("error_code", "message", "file_name"):
            if getattr(self, name) is None:
                object.__setattr__(self, name, "")
        object.__setattr__(
            self,
            "_key",
            (
                self.error_code.casefold(),
                self.message.casefold(),
                self.line_number,
                self.file_name.casefold(),
            ),
        )

    @property
    def identity(self) -> Tuple[str, str, int, str]:
        """Case-folded (code, message, line, file) dedup key."""
        return self._key

    @property
    def cwe_text(self) -> str:
        return f"{CWE_PREFIX}{self.cwe_id}" if self.cwe_id else ""

    @property
    def has_severity(self) -> bool:
        """True for levels 1..3; level 0 is reserved for unknown/fail."""
        return 1 <= self.level <= 3

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DiagnosticRecord):
            return NotImplemented
        return self._key == other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def __str__(self) -> str:
        return f"{self.error_code} {self.file_name}"
