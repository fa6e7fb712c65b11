"""Report emitter

Writes every workload that has matches as a header line followed by
the matched lines. The two destinations use opposite orders:

- output file: discovery order, newest file first
- terminal: reverse order, so the newest file ends up right above the prompt
"""

from collections.abc import Sequence
from typing import TextIO

import click

from zg.workload import Workload


# ANSI color codes
RED = '\033[31m'
DEFAULT_FG = '\033[39m'


def format_header(workload: Workload, colorize: bool = False) -> str:
    """Format the header line for a workload's matches."""
    if colorize:
        return f'{RED}{workload.header()}{DEFAULT_FG}'
    return workload.header()


def emit_to_file(workloads: Sequence[Workload], output: TextIO) -> None:
    """
    Write reports to an open text file in discovery order.

    Raises:
        OSError: If writing or flushing fails
    """
    for workload in workloads:
        if not workload.any():
            continue

        output.write(format_header(workload) + '\n')
        for line in workload.matches:
            output.write(line + '\n')

    output.flush()


def emit_to_terminal(workloads: Sequence[Workload], colorize: bool = True) -> None:
    """Print reports to standard output, oldest selected file first.

    Lines are echoed verbatim; ANSI codes are only added to headers and
    only when colorize is set.
    """
    for workload in reversed(workloads):
        if not workload.any():
            continue

        click.echo(format_header(workload, colorize), color=True)
        for line in workload.matches:
            click.echo(line, color=True)


def emit(workloads: Sequence[Workload], output: TextIO | None = None, colorize: bool = True) -> None:
    """
    Render completed workloads.

    Args:
        workloads: Scanned workload set, in discovery order
        output: Destination file; standard output when None
        colorize: Highlight headers on standard output
    """
    if output is not None:
        emit_to_file(workloads, output)
    else:
        emit_to_terminal(workloads, colorize)


__all__ = ['emit', 'emit_to_file', 'emit_to_terminal', 'format_header']
