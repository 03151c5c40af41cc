"""Two-log difference with provenance marks."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import AbstractSet, Iterable, List, Set

from plogconverter.diagnostics.models import DiagnosticRecord

MISSING_MARK = " - MISSING IN CURRENT"
ADDITIONAL_MARK = " - ADDITIONAL IN CURRENT"


@dataclass(frozen=True)
class DiffResult:
    missing: List[DiagnosticRecord] = field(default_factory=list)
    additional: List[DiagnosticRecord] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.missing and not self.additional

    def combined(self) -> List[DiagnosticRecord]:
        """Missing records followed by additional ones."""
        return [*self.missing, *self.additional]


def _mark(records: Iterable[DiagnosticRecord], mark: str) -> List[DiagnosticRecord]:
    return [replace(r, message=r.message + mark) for r in records]


def diff(
    *,
    baseline: AbstractSet[DiagnosticRecord],
    current: AbstractSet[DiagnosticRecord],
) -> DiffResult:
    """Return diagnostics present on only one side.

    ``missing`` = baseline - current, ``additional`` = current - baseline.
    Diagnostics present on both sides are dropped. Marks are applied to
    copies, so the input sets are left untouched.
    """
    missing: Set[DiagnosticRecord] = set(baseline) - set(current)
    additional: Set[DiagnosticRecord] = set(current) - set(baseline)

    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="log-diff") as executor:
        missing_future = executor.submit(_mark, missing, MISSING_MARK)
        additional_future = executor.submit(_mark, additional, ADDITIONAL_MARK)
        return DiffResult(
            missing=missing_future.result(),
            additional=additional_future.result(),
        )
