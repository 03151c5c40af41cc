"""End-to-end conversion: decode, aggregate, diff, filter, sort, dispatch."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from plogconverter.config.errors import ConfigError
from plogconverter.config.schema import RunOptions
from plogconverter.decoding import DecodeResult, LogFormat, LogMetadata, RawLogDecoder, decode
from plogconverter.diagnostics import DiagnosticRecord, canonicalize, union
from plogconverter.policy import apply_filters, diff, sort_records
from plogconverter.render import DispatchResult, Dispatcher, RenderLogger, RunStatus

logger = logging.getLogger(__name__)


@dataclass
class Aggregate:
    """Deduplicated, canonical records of one or more logs."""

    records: List[DiagnosticRecord] = field(default_factory=list)
    metadata: List[LogMetadata] = field(default_factory=list)
    skipped: List[DecodeResult] = field(default_factory=list)

    @property
    def solution_names(self) -> List[str]:
        return [m.solution_path for m in self.metadata if m.solution_path]


@dataclass
class ConversionResult:
    records: List[DiagnosticRecord]
    dispatch: DispatchResult

    @property
    def status(self) -> RunStatus:
        return self.dispatch.status


def check_logs(paths: Sequence[Path]) -> None:
    """Raise ConfigError unless every input log exists."""
    if not paths:
        raise ConfigError("No input target was specified.")
    for path in paths:
        if not path.is_file():
            raise ConfigError(f"File '{path}' does not exist.")


def aggregate(paths: Sequence[Path], raw_decoder: Optional[RawLogDecoder] = None) -> Aggregate:
    """Decode every log, skip malformed ones, then union and canonicalize.

    LogDecodeError, raw batch failures and OSError propagate.
    """
    result = Aggregate()
    groups: List[List[DiagnosticRecord]] = []
    for path in paths:
        decoded = decode(path, raw_decoder)
        if not decoded.ok:
            logger.warning("Skipping malformed log %s: %s", path, decoded.error)
            result.skipped.append(decoded)
            continue
        groups.append(decoded.records)
        if decoded.format is LogFormat.XML and decoded.metadata is not None:
            result.metadata.append(decoded.metadata)
        logger.debug("Decoded %d records from %s", len(decoded.records), path)
    result.records = canonicalize(union(groups))
    return result


def prepare_records(
    paths: Sequence[Path],
    options: RunOptions,
    raw_decoder: Optional[RawLogDecoder] = None,
) -> Aggregate:
    """Aggregate, optionally diff against ``options.diff_log``, filter and sort."""
    inputs = aggregate(paths, raw_decoder)
    records = inputs.records
    if options.diff_log is not None:
        current = aggregate([options.diff_log], raw_decoder)
        result = diff(baseline=set(records), current=set(current.records))
        logger.info(
            "Diff against %s: %d missing, %d additional",
            options.diff_log,
            len(result.missing),
            len(result.additional),
        )
        records = result.combined()

    records = apply_filters(records, options.level_map, options.disabled_codes)
    inputs.records = sort_records(records)
    return inputs


def convert(
    paths: Sequence[Path],
    options: RunOptions,
    *,
    render_logger: Optional[RenderLogger] = None,
    raw_decoder: Optional[RawLogDecoder] = None,
    dispatcher: Optional[Dispatcher] = None,
) -> ConversionResult:
    """Run a full conversion and return the records and dispatch outcome."""
    paths = [Path(p) for p in paths]
    check_logs(paths)
    prepared = prepare_records(paths, options, raw_decoder)
    render_options = options.render_options(paths, prepared.metadata)
    dispatch_result = (dispatcher or Dispatcher()).dispatch(
        prepared.records,
        options.render_targets,
        render_options,
        render_logger,
        indicate_warnings=options.indicate_warnings,
    )
    return ConversionResult(prepared.records, dispatch_result)
