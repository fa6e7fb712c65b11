"""Scan engine and parallel executor

Each workload is scanned by one worker thread:

    Open -> Decode -> ReadLines -> Done
      |        |
      +--------+--> Failed

A scan never writes to its workload. The worker returns a ScanResult
and the executor stores all results once every task has joined, so no
workload is ever touched by two threads.
"""

import logging
import os
import threading
import time
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import BinaryIO

from zg.compression import DECOMPRESSION_ERRORS, open_decoded
from zg.exceptions import ArchiveError, FileOpenError, ScanError
from zg.matcher import Matcher
from zg.utils import get_int_env, strip_line_ending
from zg.workload import Workload


logger = logging.getLogger(__name__)


MAX_WORKERS = get_int_env('ZG_MAX_WORKERS') or os.cpu_count() or 1


@dataclass
class ScanResult:
    """Outcome of a successful scan"""

    matches: list[str] = field(default_factory=list)
    elapsed: float = 0.0


def match_lines(lines: Iterable[bytes], matcher: Matcher) -> list[str]:
    """
    Collect matching lines in the order they appear.

    Reading stops at the first line that is not valid UTF-8; matches
    found before it are kept.

    Args:
        lines: Raw lines, terminators included
        matcher: Predicate applied to each decoded line

    Returns:
        Matched lines without their line terminators
    """
    matches = []
    for line_number, raw in enumerate(lines, start=1):
        try:
            line = strip_line_ending(raw).decode('utf-8')
        except UnicodeDecodeError as e:
            logger.debug(f'[SCAN] Stopping at undecodable line {line_number}: {e}')
            break

        if matcher.match_line(line):
            matches.append(line)
    return matches


def _read_matches(stream: BinaryIO, workload: Workload) -> list[str]:
    try:
        return match_lines(stream, workload.matcher)
    except DECOMPRESSION_ERRORS as e:
        raise ArchiveError(workload.file_path, f'cannot decompress {workload.file_kind}: {e}') from e


def scan(workload: Workload) -> ScanResult:
    """
    Scan one file for matching lines.

    Args:
        workload: Workload to scan; it is not modified

    Returns:
        ScanResult with matched lines and the time spent

    Raises:
        FileOpenError: If the file cannot be opened
        ArchiveError: If the archive or compressed stream cannot be read
    """
    start_time = time.time()
    thread_id = threading.current_thread().name
    logger.debug(f'[SCAN {thread_id}] {workload} is starting')

    try:
        raw = open(workload.file_path, 'rb')
    except OSError as e:
        raise FileOpenError(workload.file_path, f'cannot open file: {e.strerror or e}') from e

    with raw:
        with open_decoded(raw, workload.file_kind, workload.file_path) as stream:
            matches = _read_matches(stream, workload)

    elapsed = time.time() - start_time
    logger.debug(f'[SCAN {thread_id}] {workload} took {elapsed:.3f}s, {len(matches)} match(es)')
    return ScanResult(matches=matches, elapsed=elapsed)


def execute(workloads: Iterable[Workload], max_workers: int | None = None) -> None:
    """
    Scan all workloads in parallel.

    A failing scan is logged and recorded on its workload; it never
    affects the other scans. Returns after every scan has finished or
    failed.

    Args:
        workloads: Workload set from discover()
        max_workers: Thread pool size (default MAX_WORKERS)
    """
    workloads = list(workloads)
    if not workloads:
        logger.info('[EXECUTE] Nothing to scan')
        return

    if max_workers is None:
        max_workers = MAX_WORKERS
    max_workers = max(1, min(max_workers, len(workloads)))

    start_time = time.time()
    logger.info(f'[EXECUTE] Scanning {len(workloads)} file(s) with {max_workers} worker(s)')

    results: dict[int, ScanResult] = {}
    errors: dict[int, str] = {}

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='Scanner') as executor:
        future_to_index = {executor.submit(scan, workload): index for index, workload in enumerate(workloads)}

        for future in as_completed(future_to_index):
            index = future_to_index[future]
            try:
                results[index] = future.result()
            except Exception as e:
                reason = e.reason if isinstance(e, ScanError) else e
                logger.error(f'[EXECUTE] Scan failed for {workloads[index].file_path}: {reason}')
                errors[index] = str(e)

    for index, workload in enumerate(workloads):
        if index in results:
            workload.matches = results[index].matches
            workload.scan_time = results[index].elapsed
        else:
            workload.error = errors[index]

    logger.info(
        f'[EXECUTE] Completed: {len(results)} scanned, {len(errors)} failed in {time.time() - start_time:.3f}s'
    )


__all__ = ['MAX_WORKERS', 'ScanResult', 'execute', 'match_lines', 'scan']
