"""JSON reporter: the same report shape the JSON decoder reads back."""

from __future__ import annotations

import json
from typing import Any, Dict, Sequence

from plogconverter.decoding.json_log import JSON_REPORT_VERSION, record_to_warning
from plogconverter.diagnostics.models import DiagnosticRecord
from plogconverter.render.base import RenderOptions, rebase_records


def to_dict(records: Sequence[DiagnosticRecord], options: RenderOptions) -> Dict[str, Any]:
    return {
        "Version": JSON_REPORT_VERSION,
        "Warnings": [record_to_warning(r) for r in rebase_records(records, options)],
    }


def render(records: Sequence[DiagnosticRecord], options: RenderOptions) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(records, options), indent=2, ensure_ascii=False)
