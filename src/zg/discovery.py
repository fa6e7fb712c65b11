"""Workload discovery

Expands a glob rooted at the source directory into the ordered workload
set: newest files first, optionally cut down to the N most recently
modified.
"""

import glob
import logging
import os
from pathlib import Path

from zg.compression import detect_file_kind
from zg.exceptions import GlobExpansionError, MetadataError
from zg.matcher import Matcher
from zg.workload import Workload


logger = logging.getLogger(__name__)

DEFAULT_GLOB = '*'


def validate_glob(pattern: str) -> None:
    """Reject glob patterns that cannot be expanded.

    Python's glob treats these as literal text, so they would match
    nothing instead of failing.

    Raises:
        GlobExpansionError: On an unclosed character class, or `**` mixed
            with other characters in one path component
    """
    in_class = False
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == '[' and not in_class:
            in_class = True
            # a ']' right after '[' or '[!' is a literal member of the class
            if pattern[i + 1 : i + 2] == '!':
                i += 1
            if pattern[i + 1 : i + 2] == ']':
                i += 1
        elif char == ']' and in_class:
            in_class = False
        i += 1
    if in_class:
        raise GlobExpansionError(f"Could not parse file glob '{pattern}': unclosed character class")

    for component in pattern.replace(os.sep, '/').split('/'):
        if '**' in component and component != '**':
            raise GlobExpansionError(
                f"Could not parse file glob '{pattern}': recursive wildcard '**' must form a whole path component"
            )


def build_search_pattern(source_path: str, glob_pattern: str | None = None) -> str:
    """Join the source directory and the glob into one search pattern."""
    if glob_pattern is None:
        glob_pattern = DEFAULT_GLOB
    return f"{source_path.rstrip('/')}/{glob_pattern}"


def expand_glob(source_path: str, glob_pattern: str | None = None) -> list[Path]:
    """
    Expand the glob under source_path into regular files.

    Args:
        source_path: Directory the glob is rooted at
        glob_pattern: Glob relative to source_path (default `*`)

    Returns:
        Matching regular files, sorted by path

    Raises:
        GlobExpansionError: If the glob is malformed or source_path is not a readable directory
    """
    if glob_pattern is None:
        glob_pattern = DEFAULT_GLOB
    validate_glob(glob_pattern)

    if not os.path.isdir(source_path):
        raise GlobExpansionError(f'Source path is not a directory: {source_path}')
    if not os.access(source_path, os.R_OK | os.X_OK):
        raise GlobExpansionError(f'Source directory is not readable: {source_path}')

    search_pattern = build_search_pattern(source_path, glob_pattern)
    logger.debug(f'[DISCOVER] Expanding {search_pattern}')

    candidates = []
    for entry in sorted(glob.glob(search_pattern, recursive=True, include_hidden=True)):
        # entries can disappear between expansion and this check
        if not os.path.isfile(entry):
            logger.debug(f'[DISCOVER] Skipping non-file: {entry}')
            continue
        candidates.append(Path(entry))

    return candidates


def discover(
    source_path: str,
    glob_pattern: str | None = None,
    take: int | None = None,
    *,
    matcher: Matcher,
) -> tuple[Workload, ...]:
    """
    Build the workload set for a search.

    Args:
        source_path: Directory to search
        glob_pattern: Glob relative to source_path (default `*`)
        take: Keep only this many most recently modified files
        matcher: Matcher cloned into every workload

    Returns:
        Workloads ordered by modification time, newest first

    Raises:
        GlobExpansionError: If the glob cannot be expanded
        MetadataError: If a matched file cannot be stat'ed
    """
    workloads = []
    for path in expand_glob(source_path, glob_pattern):
        logger.debug(f"[DISCOVER] Adding file: '{path.name}'")
        try:
            last_modified = path.stat().st_mtime
        except OSError as e:
            raise MetadataError(f'Could not read metadata of {path}: {e}') from e

        workloads.append(
            Workload(
                file_path=path,
                file_kind=detect_file_kind(path),
                last_modified=last_modified,
                matcher=matcher.clone(),
            )
        )

    # stable: equal timestamps keep path order
    workloads.sort(key=lambda wl: wl.last_modified, reverse=True)

    if take is not None and take < len(workloads):
        logger.debug(f'[DISCOVER] Keeping {take} of {len(workloads)} files')
        workloads = workloads[:take]

    logger.info(f'[DISCOVER] {len(workloads)} workload(s) under {source_path}')
    return tuple(workloads)


__all__ = ['DEFAULT_GLOB', 'build_search_pattern', 'discover', 'expand_glob', 'validate_glob']
