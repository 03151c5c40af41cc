"""Concurrent render dispatch and run-status aggregation."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from plogconverter.diagnostics.models import DiagnosticRecord
from plogconverter.paths import PathMode
from plogconverter.policy.filters import exclude_false_alarms
from plogconverter.render.base import (
    JobOutcome,
    RendererSpec,
    RenderJob,
    RenderOptions,
    RenderTarget,
)
from plogconverter.render.logger import RenderLogger
from plogconverter.render.registry import RENDERERS, all_targets

logger = logging.getLogger(__name__)


class RunStatus(IntEnum):
    """Process exit codes."""

    SUCCESS = 0
    RENDER_FAILURE = 1
    NON_EMPTY_OUTPUT_WARNING = 2
    GENERAL_FAILURE = 3
    BAD_ARGUMENTS = 4
    UNSUPPORTED_PATH_TRANSFORM = 5


@dataclass
class DispatchResult:
    outcomes: List[JobOutcome] = field(default_factory=list)
    status: RunStatus = RunStatus.SUCCESS


def root_cause(exc: BaseException) -> BaseException:
    """Follow explicit ``raise ... from`` chaining to the innermost exception."""
    seen = set()
    while id(exc) not in seen:
        seen.add(id(exc))
        nested = exc.__cause__
        if nested is None:
            break
        exc = nested
    return exc


def compute_status(outcomes: Iterable[JobOutcome], indicate_warnings: bool = False) -> RunStatus:
    outcomes = list(outcomes)
    if any(o.exception is not None for o in outcomes):
        return RunStatus.GENERAL_FAILURE
    if any(o.error_code and not o.refused_path_transform for o in outcomes):
        return RunStatus.RENDER_FAILURE
    if any(o.refused_path_transform for o in outcomes):
        return RunStatus.UNSUPPORTED_PATH_TRANSFORM
    if indicate_warnings and any(o.count for o in outcomes):
        return RunStatus.NON_EMPTY_OUTPUT_WARNING
    return RunStatus.SUCCESS


def run_job(job: RenderJob, spec: RendererSpec) -> JobOutcome:
    """Render one target and write it; I/O failures are reported, not raised."""
    outcome = JobOutcome(job.target, count=len(job.records))
    options = job.options

    if options.path_mode is PathMode.RELATIVE and not spec.supports_relative_paths:
        outcome.refused_path_transform = True
        outcome.error_code = int(RunStatus.UNSUPPORTED_PATH_TRANSFORM)
        outcome.error = f"{job.target.value} output does not support relative paths"
        job.logger.error(outcome.error, code=outcome.error_code)
        return outcome

    content = spec.render(job.records, options)
    path = options.output_path(job.target)
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        outcome.error_code = 1
        outcome.error = str(exc)
        job.logger.error(str(exc), code=1)
        return outcome

    outcome.path = path
    job.logger.info(f"{job.target.value} output was saved to {path}")
    return outcome


class Dispatcher:
    """Runs one render job per target on a thread pool."""

    def __init__(
        self,
        renderers: Optional[Mapping[RenderTarget, RendererSpec]] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        if max_workers is not None and max_workers <= 0:
            raise ValueError("max_workers must be > 0")
        self._renderers = dict(renderers) if renderers is not None else dict(RENDERERS)
        self._max_workers = max_workers

    def build_jobs(
        self,
        records: Sequence[DiagnosticRecord],
        targets: Sequence[RenderTarget],
        options: RenderOptions,
        render_logger: RenderLogger,
    ) -> List[RenderJob]:
        jobs = []
        for target in dict.fromkeys(targets or all_targets()):
            spec = self._renderers[target]
            view = exclude_false_alarms(records, keep_false_alarms=spec.shows_false_alarms)
            jobs.append(RenderJob(target, tuple(view), options, render_logger))
        return jobs

    def dispatch(
        self,
        records: Sequence[DiagnosticRecord],
        targets: Sequence[RenderTarget],
        options: RenderOptions,
        render_logger: Optional[RenderLogger] = None,
        *,
        indicate_warnings: bool = False,
    ) -> DispatchResult:
        render_logger = render_logger or RenderLogger()
        jobs = self.build_jobs(records, targets, options, render_logger)
        order = {job.target: index for index, job in enumerate(jobs)}
        outcomes: List[JobOutcome] = []

        with ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix="render"
        ) as executor:
            futures: Dict[Future, RenderJob] = {
                executor.submit(run_job, job, self._renderers[job.target]): job for job in jobs
            }
            for future in as_completed(futures):
                job = futures[future]
                try:
                    outcomes.append(future.result())
                except Exception as exc:
                    cause = root_cause(exc)
                    logger.debug("Render job %s failed", job.target.value, exc_info=exc)
                    render_logger.error(
                        f"{job.target.value} render failed: {cause}",
                        code=int(RunStatus.GENERAL_FAILURE),
                    )
                    outcomes.append(
                        JobOutcome(job.target, count=len(job.records), error=str(cause), exception=cause)
                    )

        outcomes.sort(key=lambda o: order[o.target])
        status = compute_status(outcomes, indicate_warnings)
        logger.debug("Dispatched %d render jobs, status %s", len(jobs), status.name)
        return DispatchResult(outcomes, status)
