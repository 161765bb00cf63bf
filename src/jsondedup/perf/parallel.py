"""Multiprocessing row driver for large inputs.

Strategy:
    1. Lines are fed to a Pool in chunks of ``chunk_size``.
    2. Each worker runs ``process_line`` on its chunk independently; a
       record's terminator flag rides along with its text.
    3. ``Pool.imap`` hands results back in input order, so the caller can
       write them as they arrive.

A failing line re-raises its DedupError in the parent at that line's
position, after every earlier result has been yielded. Later results are
discarded when the pool is torn down.

Usage::

    from jsondedup.perf.parallel import dedup_lines_parallel

    for out in dedup_lines_parallel(lines, workers=8):
        sink.write(out)
"""
from __future__ import annotations

import logging
import os
from functools import partial
from multiprocessing import Pool
from typing import Iterable, Iterator

from ..document.parser import DEFAULT_MAX_DEPTH
from ..errors import DedupError
from ..pipeline import process_line

logger = logging.getLogger(__name__)


def _process(
    record: tuple[str, bool], strict_escapes: bool, max_depth: int
) -> tuple[str | None, bool, DedupError | None]:
    # Returned rather than raised so the rest of the chunk still comes back.
    line, terminated = record
    try:
        return process_line(line, strict_escapes=strict_escapes, max_depth=max_depth), terminated, None
    except DedupError as exc:
        return None, terminated, exc


def dedup_records_parallel(
    records: Iterable[tuple[str, bool]],
    workers: int | None = None,
    chunk_size: int = 256,
    strict_escapes: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Iterator[tuple[str, bool]]:
    """Yield ``(process_line(text), terminated)`` for every record, in order.

    Args:
        records:    ``(text, terminated)`` pairs as produced by
                    ``split_record``. The flag travels through the worker
                    untouched.
        workers:    Number of worker processes. Defaults to os.cpu_count().
        chunk_size: Records per task sent to a worker.

    Raises:
        DedupError: The first failing record's error, once every earlier
            result has been yielded.
    """
    n = workers or os.cpu_count() or 4
    worker = partial(_process, strict_escapes=strict_escapes, max_depth=max_depth)
    logger.debug("Starting pool of %d workers (chunk size %d)", n, chunk_size)

    with Pool(processes=n) as pool:
        for output, terminated, error in pool.imap(worker, records, chunksize=chunk_size):
            if error is not None:
                raise error
            yield output, terminated


def dedup_lines_parallel(
    lines: Iterable[str],
    workers: int | None = None,
    chunk_size: int = 256,
    strict_escapes: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Iterator[str]:
    """Yield ``process_line(line)`` for every line, in order.

    Raises:
        DedupError: The first failing line's error, once every earlier
            result has been yielded.
    """
    records = ((line, False) for line in lines)
    for output, _ in dedup_records_parallel(
        records,
        workers=workers,
        chunk_size=chunk_size,
        strict_escapes=strict_escapes,
        max_depth=max_depth,
    ):
        yield output
