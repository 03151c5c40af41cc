"""Log format detection and decode entry point."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from plogconverter.decoding.json_log import decode_json_file
from plogconverter.decoding.models import DecodeResult, LogFormat
from plogconverter.decoding.raw_log import RawLogDecoder
from plogconverter.decoding.xml_log import decode_xml_file

logger = logging.getLogger(__name__)

PLOG_EXTENSION = ".plog"
JSON_EXTENSION = ".json"


def detect_format(path: Union[str, Path]) -> LogFormat:
    """Infer the log format from the file extension only."""
    suffix = Path(path).suffix.lower()
    if suffix == PLOG_EXTENSION:
        return LogFormat.XML
    if suffix == JSON_EXTENSION:
        return LogFormat.JSON
    return LogFormat.RAW


def decode(
    path: Union[str, Path],
    raw_decoder: Optional[RawLogDecoder] = None,
) -> DecodeResult:
    """Decode one log file into records.

    A structurally corrupt XML/JSON log yields a MALFORMED result instead of
    raising. ``OSError`` (unreadable file), ``LogDecodeError`` (bad column)
    and raw batch failures propagate.
    """
    log_path = Path(path)
    fmt = detect_format(log_path)
    logger.debug("Decoding %s as %s", log_path, fmt.value)

    if fmt is LogFormat.XML:
        return decode_xml_file(log_path)
    if fmt is LogFormat.JSON:
        return decode_json_file(log_path)
    return (raw_decoder or RawLogDecoder()).decode(log_path)
