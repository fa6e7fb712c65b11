"""CLI search command for zg"""

import logging
import os
import sys
from time import time
from typing import TextIO

import click
from pydantic import ValidationError

from zg.__version__ import __version__
from zg.discovery import discover
from zg.exceptions import ZgError
from zg.matcher import Matcher, build_matcher
from zg.models import SearchOptions, SearchResponse
from zg.report import emit
from zg.scan import execute


logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(verbose: bool) -> None:
    """Set up logging once for the process.

    ZG_LOG_LEVEL picks the level (default WARNING); --verbose forces DEBUG.
    Diagnostics go to stderr so they never mix with the report.
    """
    if verbose:
        log_level = logging.DEBUG
    else:
        log_level_name = os.getenv('ZG_LOG_LEVEL', 'WARNING').upper()
        log_level = getattr(logging, log_level_name, logging.WARNING)
    logging.basicConfig(level=log_level, format=LOG_FORMAT, stream=sys.stderr)


def run_search(options: SearchOptions, output_json: bool = False, colorize: bool = True) -> None:
    """
    Run discovery, scanning and reporting for one search.

    Raises:
        ZgError: On configuration or discovery errors
        OSError: If the output file cannot be opened or written
    """
    # fails on a bad regex before any file is touched
    matcher = build_matcher(options.pattern, options.use_regex)

    if options.output:
        # opened before discovery so a bad destination fails before scanning
        with open(options.output, 'w', encoding='utf-8') as output_file:
            search_and_report(options, matcher, output_file, output_json, colorize)
    else:
        search_and_report(options, matcher, None, output_json, colorize)


def search_and_report(
    options: SearchOptions, matcher: Matcher, output: TextIO | None, output_json: bool, colorize: bool
) -> None:
    time_before = time()

    logger.debug('Generating workloads')
    workloads = discover(options.source_path, options.glob, options.take, matcher=matcher)

    logger.debug('Starting to scan')
    execute(workloads, max_workers=options.max_workers)
    elapsed = time() - time_before
    logger.debug(f'Done in {elapsed:.3f}s')

    if output_json:
        payload = SearchResponse.from_workloads(options, workloads, elapsed).model_dump_json(indent=2)
        if output is not None:
            output.write(payload + '\n')
            output.flush()
        else:
            click.echo(payload)
        return

    emit(workloads, output, colorize=colorize)


@click.command('zg')
@click.version_option(version=__version__, prog_name='zg')
@click.argument('source_path', type=str)
@click.argument('pattern', type=str)
@click.option('-g', '--glob', 'glob_pattern', type=str, help='Glob pattern to search for (default "*")')
@click.option(
    '-t', '--take', type=click.IntRange(min=1), help='Number of files to search, ordered by modification date'
)
@click.option('-o', '--output', type=click.Path(dir_okay=False), help='Write the report to this file')
@click.option('-r', '--regex', 'use_regex', is_flag=True, help='Treat PATTERN as a regular expression')
@click.option(
    '-w', '--workers', type=click.IntRange(min=1), help='Number of scanner threads (default: ZG_MAX_WORKERS or CPU count)'
)
@click.option('-v', '--verbose', is_flag=True, help='Verbose logging')
@click.option('--json', 'output_json', is_flag=True, help='Output results as JSON')
@click.option('--no-color', is_flag=True, help='Disable colored headers')
def search_command(
    source_path, pattern, glob_pattern, take, output, use_regex, workers, verbose, output_json, no_color
):
    """
    Search the newest files under SOURCE_PATH for lines containing PATTERN.

    Files are picked by glob, ordered by modification time and scanned in
    parallel. Zip archives (first entry only) and gzip files are
    decompressed before matching.

    \b
    On the terminal the most recently modified file is printed last.
    With --output the most recently modified file comes first.

    \b
    Examples:
        zg /var/log error                       # All files directly in /var/log
        zg /var/log error -g "*.log" -t 5       # Five newest .log files
        zg /var/log "time(out|d)" -r            # Regex search
        zg /var/log error -w 4                  # Four scanner threads
        zg ./logs error -g "**/*.gz" -o out.txt # Write report to a file
        zg ./logs error -g "**/*" --json        # JSON output
    """
    configure_logging(verbose)

    try:
        options = SearchOptions(
            source_path=source_path,
            pattern=pattern,
            glob=glob_pattern,
            take=take,
            output=output,
            use_regex=use_regex,
            verbose=verbose,
            max_workers=workers,
        )
    except ValidationError as e:
        click.echo(f'❌ Error: {e}', err=True)
        sys.exit(1)

    logger.debug(f'Options: {options!r}')

    try:
        run_search(options, output_json=output_json, colorize=not no_color)
    except ZgError as e:
        click.echo(f'❌ Error: {e}', err=True)
        sys.exit(1)
    except OSError as e:
        click.echo(f'❌ Output error: {e}', err=True)
        sys.exit(1)


if __name__ == '__main__':
    search_command()
