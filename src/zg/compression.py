"""File kind detection and decoders.

This module classifies discovered files by extension and opens a
binary line stream for each kind.

Supported kinds:
- plain files (anything not listed below)
- zip archives (.zip), only the first entry is read
- gzip streams (.gz)
"""

import gzip
import zipfile
import zlib
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import BinaryIO

from zg.exceptions import ArchiveError


class FileKind(Enum):
    """How a file's bytes are turned into lines."""

    PLAIN = 'Plain'
    ZIP = 'ZipArchive'
    GZIP = 'GZipArchive'

    def __str__(self) -> str:
        return self.value


# Extension to kind mapping
EXTENSION_MAP = {
    '.zip': FileKind.ZIP,
    '.gz': FileKind.GZIP,
}

# Errors a compressed stream can raise while it is being read
DECOMPRESSION_ERRORS = (gzip.BadGzipFile, zipfile.BadZipFile, zlib.error, EOFError)


def detect_file_kind(filepath: str | Path) -> FileKind:
    """Detect file kind by extension (case-sensitive).

    Args:
        filepath: Path to the file

    Returns:
        Matching FileKind, PLAIN when the extension is unknown or missing
    """
    return EXTENSION_MAP.get(Path(filepath).suffix, FileKind.PLAIN)


@contextmanager
def _open_zip_first_entry(raw: BinaryIO, filepath: Path) -> Iterator[BinaryIO]:
    try:
        archive = zipfile.ZipFile(raw)
    except (zipfile.BadZipFile, OSError) as e:
        raise ArchiveError(filepath, f'cannot open zip archive: {e}') from e

    with archive:
        entries = archive.infolist()
        if not entries:
            raise ArchiveError(filepath, 'zip archive has no entries')
        try:
            entry = archive.open(entries[0])
        except (zipfile.BadZipFile, NotImplementedError, RuntimeError, OSError) as e:
            raise ArchiveError(filepath, f"cannot open entry '{entries[0].filename}': {e}") from e
        with entry:
            yield entry


@contextmanager
def open_decoded(raw: BinaryIO, file_kind: FileKind, filepath: str | Path) -> Iterator[BinaryIO]:
    """Wrap an open binary file in the decoder for its kind.

    Args:
        raw: File opened in binary mode
        file_kind: Kind detected at discovery time
        filepath: Path used in error messages

    Yields:
        Binary stream producing the decoded content

    Raises:
        ArchiveError: If the archive container or entry cannot be opened
    """
    filepath = Path(filepath)

    if file_kind == FileKind.ZIP:
        with _open_zip_first_entry(raw, filepath) as entry:
            yield entry
    elif file_kind == FileKind.GZIP:
        with gzip.GzipFile(fileobj=raw, mode='rb') as stream:
            yield stream
    else:
        yield raw


__all__ = ['FileKind', 'EXTENSION_MAP', 'DECOMPRESSION_ERRORS', 'detect_file_kind', 'open_decoded']
