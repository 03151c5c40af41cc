"""Render target -> renderer lookup."""

from __future__ import annotations

from typing import Dict, List

from plogconverter.render import csv_report, html, json_report, plog, sarif, text
from plogconverter.render.base import RendererSpec, RenderTarget

RENDERERS: Dict[RenderTarget, RendererSpec] = {
    RenderTarget.HTML: RendererSpec(html.render_html),
    RenderTarget.FULL_HTML: RendererSpec(html.render_full_html),
    RenderTarget.TOTALS: RendererSpec(text.render_totals),
    RenderTarget.TXT: RendererSpec(text.render_txt),
    RenderTarget.CSV: RendererSpec(csv_report.render),
    RenderTarget.TASKS: RendererSpec(text.render_tasks),
    RenderTarget.PLOG: RendererSpec(plog.render, supports_relative_paths=True),
    RenderTarget.TEAMCITY: RendererSpec(text.render_teamcity),
    RenderTarget.SARIF: RendererSpec(sarif.render, supports_relative_paths=True),
    RenderTarget.JSON: RendererSpec(json_report.render, supports_relative_paths=True),
    RenderTarget.MISRA_COMPLIANCE: RendererSpec(
        html.render_misra_compliance, shows_false_alarms=True
    ),
}


def get_renderer(target: RenderTarget) -> RendererSpec:
    return RENDERERS[target]


def all_targets() -> List[RenderTarget]:
    """Every render target, in declaration order."""
    return list(RenderTarget)
