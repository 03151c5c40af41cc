"""Raw analyzer output decoder: bounded concurrent batch decoding.

The file is read line by line on the calling thread (the producer). Every
``batch_lines`` lines are handed to a thread pool for decoding while reading
continues. One consumer thread drains finished batches in completion order and
is the only writer of the result table. At most ``max_in_flight`` batches may
be submitted but not yet consumed; the producer blocks on a semaphore when the
cap is reached.

The first batch failure stops the producer and is re-raised once both sides
have finished. Nothing decoded so far is returned in that case.
"""

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Generator, Iterable, List, Optional, Tuple

from plogconverter.decoding.analyzer_output import ENCODE_MARKER, decode_analyzer_output
from plogconverter.decoding.models import DecodeResult, LogFormat
from plogconverter.decoding.table import PlogTable
from plogconverter.decoding.xml_log import decode_xml_text
from plogconverter.diagnostics.models import DiagnosticRecord

logger = logging.getLogger(__name__)

BATCH_LINES = 10_000
MAX_LINES_IN_FLIGHT = 1_000_000
MAX_IN_FLIGHT = MAX_LINES_IN_FLIGHT // BATCH_LINES

LineDecoder = Callable[[str, bool], Iterable[DiagnosticRecord]]


class _InputExhausted:
    """Producer -> consumer message: no more batches after *submitted*."""

    __slots__ = ("submitted",)

    def __init__(self, submitted: int) -> None:
        self.submitted = submitted


class RawLogDecoder:
    """Decode raw analyzer output into records without buffering the whole file."""

    def __init__(
        self,
        line_decoder: LineDecoder = decode_analyzer_output,
        batch_lines: int = BATCH_LINES,
        max_in_flight: int = MAX_IN_FLIGHT,
        max_workers: Optional[int] = None,
    ) -> None:
        if batch_lines <= 0:
            raise ValueError("batch_lines must be > 0")
        if max_in_flight <= 0:
            raise ValueError("max_in_flight must be > 0")
        if max_workers is not None and max_workers <= 0:
            raise ValueError("max_workers must be > 0")
        self._line_decoder = line_decoder
        self._batch_lines = batch_lines
        self._max_in_flight = max_in_flight
        self._max_workers = max_workers

    # ---- public API ----

    def decode(self, path: Path) -> DecodeResult:
        """Decode *path* and normalise it through the XML table path."""
        table = self.decode_table(path)
        result = decode_xml_text(table.to_xml(), path)
        result.format = LogFormat.RAW
        return result

    def decode_table(self, path: Path) -> PlogTable:
        table = PlogTable()
        completed: "queue.Queue[object]" = queue.Queue()
        slots = threading.BoundedSemaphore(self._max_in_flight)
        failed = threading.Event()
        failures: List[BaseException] = []

        def _consume() -> None:
            expected: Optional[int] = None
            consumed = 0
            while expected is None or consumed < expected:
                item = completed.get()
                if isinstance(item, _InputExhausted):
                    expected = item.submitted
                    continue
                consumed += 1
                try:
                    if not failed.is_set():
                        table.extend(item.result())
                except Exception as exc:
                    # keep draining so the producer never waits on a dead consumer
                    if not failures:
                        failures.append(exc)
                    failed.set()
                finally:
                    slots.release()

        consumer = threading.Thread(target=_consume, name="raw-log-consumer", daemon=True)
        consumer.start()

        submitted = 0
        try:
            with ThreadPoolExecutor(
                max_workers=self._max_workers, thread_name_prefix="raw-log-batch"
            ) as executor:
                for text, encoded in self._read_batches(path, failed):
                    slots.acquire()
                    if failed.is_set():
                        slots.release()
                        break
                    future = executor.submit(self._decode_batch, text, encoded)
                    future.add_done_callback(completed.put)
                    submitted += 1
        finally:
            completed.put(_InputExhausted(submitted))
            consumer.join()

        if failures:
            logger.debug("Raw log decode of %s failed after %d batches", path, submitted)
            raise failures[0]

        logger.debug("Decoded %d records from %d batches of %s", len(table), submitted, path)
        return table

    # ---- internals ----

    def _decode_batch(self, text: str, encoded: bool) -> List[DiagnosticRecord]:
        return list(self._line_decoder(text, encoded))

    def _read_batches(
        self, path: Path, failed: threading.Event
    ) -> Generator[Tuple[str, bool], None, None]:
        """Yield (batch text, encoded flag); a batch never straddles the encode marker."""
        lines: List[str] = []
        encoded = False
        with open(path, encoding="utf-8", errors="replace") as stream:
            for raw in stream:
                if failed.is_set():
                    return
                line = raw.rstrip("\r\n")
                if not line.strip() or line.startswith("#"):
                    continue
                if line.startswith(ENCODE_MARKER):
                    if lines:
                        yield "\n".join(lines), encoded
                        lines = []
                    encoded = True
                    continue
                lines.append(line)
                if len(lines) >= self._batch_lines:
                    yield "\n".join(lines), encoded
                    lines = []
        if lines and not failed.is_set():
            yield "\n".join(lines), encoded


def decode_raw_file(path: Path, decoder: Optional[RawLogDecoder] = None) -> DecodeResult:
    return (decoder or RawLogDecoder()).decode(path)
