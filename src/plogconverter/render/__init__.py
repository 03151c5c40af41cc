"""Report renderers and the concurrent render dispatcher."""

from plogconverter.render.base import (
    JobOutcome,
    RendererSpec,
    RenderJob,
    RenderOptions,
    RenderTarget,
)
from plogconverter.render.dispatcher import DispatchResult, Dispatcher, RunStatus, compute_status
from plogconverter.render.logger import RenderLogger
from plogconverter.render.registry import RENDERERS, get_renderer

__all__ = [
    "RENDERERS",
    "DispatchResult",
    "Dispatcher",
    "JobOutcome",
    "RenderJob",
    "RenderLogger",
    "RenderOptions",
    "RenderTarget",
    "RendererSpec",
    "RunStatus",
    "compute_status",
    "get_renderer",
]
