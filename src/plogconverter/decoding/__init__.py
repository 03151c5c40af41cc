"""Log decoding: structured XML, structured JSON and raw analyzer output."""

from plogconverter.decoding.decoder import decode, detect_format
from plogconverter.decoding.models import (
    DecodeErrorKind,
    DecodeResult,
    LogDecodeError,
    LogFormat,
    LogMetadata,
)
from plogconverter.decoding.raw_log import RawLogDecoder
from plogconverter.decoding.table import PlogTable

__all__ = [
    "DecodeErrorKind",
    "DecodeResult",
    "LogDecodeError",
    "LogFormat",
    "LogMetadata",
    "PlogTable",
    "RawLogDecoder",
    "decode",
    "detect_format",
]
