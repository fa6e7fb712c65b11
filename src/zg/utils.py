"""Small shared helpers"""

import logging
import os


logger = logging.getLogger(__name__)

NEWLINE_SYMBOL_BYTES = b'\n'


def get_int_env(name: str, default: int | None = None) -> int | None:
    """Read an integer from the environment.

    Returns `default` when the variable is unset, empty or not an integer.
    """
    value = os.getenv(name)
    if value is None or value.strip() == '':
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f'Invalid {name} value {value!r}, using default {default}')
        return default


def strip_line_ending(line: bytes) -> bytes:
    """Remove a trailing LF or CRLF from a raw line."""
    if line.endswith(NEWLINE_SYMBOL_BYTES):
        line = line[:-1]
        if line.endswith(b'\r'):
            line = line[:-1]
    return line
