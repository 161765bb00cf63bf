"""Row driver: decode → parse → dedup → write → encode, one line at a time.

Input and output are byte streams. Each input line yields exactly one output
line, newline-terminated iff the input line was. The first bad row stops the
stream with LineFailure; rows already written stay written.
"""
from __future__ import annotations

import logging
from typing import BinaryIO, Iterator

from .codec.tsv import decode, encode
from .dedup.engine import DedupStats, dedup
from .document.parser import DEFAULT_MAX_DEPTH, parse
from .document.writer import write
from .errors import DedupError, LineFailure

logger = logging.getLogger(__name__)


def process_line(
    line: str,
    *,
    strict_escapes: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
    stats: DedupStats | None = None,
) -> str:
    """Transform one TSV-encoded JSON field. Raises DedupError subclasses."""
    document = parse(decode(line, strict=strict_escapes), max_depth=max_depth)
    result = encode(write(dedup(document, stats)))
    if stats is not None:
        stats.lines += 1
    return result


def split_record(raw: bytes) -> tuple[str, bool]:
    """Strip the line terminator (LF, and a CR before it) and decode UTF-8.

    Returns (text, terminated). Invalid UTF-8 becomes U+FFFD.
    """
    terminated = raw.endswith(b"\n")
    if terminated:
        raw = raw[:-1]
    if raw.endswith(b"\r"):
        raw = raw[:-1]
    return raw.decode("utf-8", errors="replace"), terminated


def _records(source: BinaryIO) -> Iterator[tuple[str, bool]]:
    for raw in source:
        yield split_record(raw)


def run_stream(
    source: BinaryIO,
    sink: BinaryIO,
    *,
    workers: int = 1,
    chunk_size: int = 256,
    strict_escapes: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
    stats: DedupStats | None = None,
) -> int:
    """Transform every line of ``source`` into ``sink``.

    Args:
        source:     Binary input stream, one encoded document per line.
        sink:       Binary output stream.
        workers:    1 for in-process; 0 for one per CPU; N for a pool of N.
                    Output order is the input order either way.
        chunk_size: Lines per pool task.
        stats:      Counters to update. Only honoured in-process.

    Returns:
        Number of lines written.

    Raises:
        LineFailure: For the first line that fails to decode or parse.
    """
    if workers == 1:
        results: Iterator[tuple[str, bool]] = (
            (
                process_line(text, strict_escapes=strict_escapes, max_depth=max_depth, stats=stats),
                terminated,
            )
            for text, terminated in _records(source)
        )
    else:
        from .perf.parallel import dedup_records_parallel

        if stats is not None:
            logger.debug("Stats are not collected with workers=%d", workers)
        results = dedup_records_parallel(
            _records(source),
            workers=workers or None,
            chunk_size=chunk_size,
            strict_escapes=strict_escapes,
            max_depth=max_depth,
        )

    written = 0
    try:
        for output, terminated in results:
            sink.write(output.encode("utf-8"))
            if terminated:
                sink.write(b"\n")
            written += 1
    except DedupError as exc:
        raise LineFailure(written + 1, exc) from exc
    finally:
        sink.flush()

    logger.debug("Wrote %d lines", written)
    return written
