"""Filtering, ordering and differencing of diagnostic records."""

from plogconverter.policy.differ import ADDITIONAL_MARK, MISSING_MARK, DiffResult, diff
from plogconverter.policy.filters import (
    LevelMap,
    apply_filters,
    exclude_false_alarms,
    filter_by_levels,
    filter_disabled_codes,
)
from plogconverter.policy.sorting import sort_key, sort_records

__all__ = [
    "ADDITIONAL_MARK",
    "MISSING_MARK",
    "DiffResult",
    "LevelMap",
    "apply_filters",
    "diff",
    "exclude_false_alarms",
    "filter_by_levels",
    "filter_disabled_codes",
    "sort_key",
    "sort_records",
]
