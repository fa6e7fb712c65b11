"""Shared fixtures for zg tests"""

import gzip
import os
import zipfile

import pytest


@pytest.fixture
def make_file(tmp_path):
    """Create a file under tmp_path with the given content and mtime."""

    def _make_file(name: str, content: str | bytes = '', mtime: float | None = None):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        data = content.encode('utf-8') if isinstance(content, str) else content

        if name.endswith('.gz'):
            with gzip.open(path, 'wb') as gz:
                gz.write(data)
        else:
            path.write_bytes(data)

        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return _make_file


@pytest.fixture
def make_zip(tmp_path):
    """Create a zip archive under tmp_path from (entry_name, content) pairs."""

    def _make_zip(name: str, entries: list[tuple[str, str]], mtime: float | None = None):
        path = tmp_path / name
        with zipfile.ZipFile(path, 'w') as archive:
            for entry_name, content in entries:
                archive.writestr(entry_name, content)

        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return _make_zip
