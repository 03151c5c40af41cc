"""Diagnostic record model and aggregation."""

from plogconverter.diagnostics.aggregator import canonicalize, fix_trial_messages, union
from plogconverter.diagnostics.models import (
    AnalyzerType,
    DiagnosticRecord,
    ErrorCodeMapping,
    SourcePosition,
)

__all__ = [
    "AnalyzerType",
    "DiagnosticRecord",
    "ErrorCodeMapping",
    "SourcePosition",
    "canonicalize",
    "fix_trial_messages",
    "union",
]
