"""Exceptions raised by zg"""


class ZgError(Exception):
    """Base class for all zg errors"""


class InvalidPatternError(ZgError):
    """Search pattern is not a valid regular expression"""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid regex pattern '{pattern}': {reason}")


class DiscoveryError(ZgError):
    """Building the workload set failed; nothing was scanned"""


class GlobExpansionError(DiscoveryError):
    """File glob is malformed or could not be expanded"""


class MetadataError(DiscoveryError):
    """Filesystem metadata of a matched path could not be read"""


class ScanError(ZgError):
    """Scanning a single file failed

    Recovered by the executor: the file contributes no matches and
    the rest of the batch is unaffected.
    """

    def __init__(self, filepath, message: str):
        self.filepath = filepath
        self.reason = message
        super().__init__(f'{filepath}: {message}')


class FileOpenError(ScanError):
    """File could not be opened for reading"""


class ArchiveError(ScanError):
    """Archive container or compressed stream could not be read"""
