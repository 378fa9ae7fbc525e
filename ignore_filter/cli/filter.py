"""
Filter CLI implementation - reads paths, prints the ones rule files do not exclude.

Example:
    find . -type f | ignore-filter -f .ignore -f .buildignore
"""
import argparse
import asyncio
import json
import sys
from typing import Iterator, List, Optional, TextIO

from ignore_filter import __version__
from ignore_filter.config import FileRecord, FilterError, FilterOptions, filenames_from_env
from ignore_filter.stream import FileFilterStage, filter_files
from ignore_filter.ignore.constants import DEFAULT_CONCURRENCY
from ignore_filter.utils import configure_logging, get_logger

logger = get_logger("cli-filter")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='ignore-filter',
        description='Print the given paths that are not excluded by ignore files '
                    'in their directory or any parent directory up to --max-parent.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='Paths are read from stdin, one per line, when none are given.',
    )
    parser.add_argument('paths', nargs='*', help='Paths to filter')
    parser.add_argument('-f', '--filename', action='append', dest='filenames', metavar='NAME',
                        help='Ignore file name to look for (repeatable, default: .ignore '
                             'or $IGNORE_FILTER_FILENAMES)')
    parser.add_argument('--max-parent', metavar='DIR',
                        help='Highest directory whose ignore files count (default: current directory)')
    parser.add_argument('--keep-ignore-files', action='store_true',
                        help='Do not drop the ignore files themselves')
    parser.add_argument('-0', '--null', action='store_true',
                        help='Input and output paths are NUL separated')
    parser.add_argument('-j', '--concurrency', type=int, default=DEFAULT_CONCURRENCY,
                        help='Number of paths checked at once (default: %(default)s)')
    parser.add_argument('--stats', action='store_true',
                        help='Print resolver statistics as JSON on stderr when done')
    parser.add_argument('--log-level', help='Log level (TRACE, DEBUG, INFO, WARNING, ERROR)')
    parser.add_argument('--log-file', help='Also write logs to this rotating file')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser.parse_args(argv)


def read_paths(stream: TextIO, null_separated: bool = False) -> Iterator[str]:
    """Split stdin into paths, skipping empty entries"""
    if null_separated:
        entries = stream.read().split('\0')
    else:
        entries = (line.rstrip('\r\n') for line in stream)
    for entry in entries:
        if entry:
            yield entry


async def run_filter(raw_paths: List[str], options: FilterOptions, concurrency: int,
                     out: TextIO, terminator: str = '\n') -> FileFilterStage:
    """Filter `raw_paths` and write the included ones, as given, to `out`"""
    records = [
        FileRecord.from_path(raw, cwd=options.cwd, payload=raw)
        for raw in raw_paths
    ]
    stage = FileFilterStage(options)
    async for record in filter_files(records, concurrency=concurrency, stage=stage):
        out.write(f"{record.payload}{terminator}")
    return stage


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(log_level=args.log_level, log_file=args.log_file)

    try:
        options = FilterOptions.from_options(
            filename=args.filenames or list(filenames_from_env()),
            max_parent=args.max_parent,
            exclude_ignore_file=not args.keep_ignore_files,
        )
        raw_paths = args.paths or list(read_paths(sys.stdin, args.null))
        logger.info(f"Filtering {len(raw_paths)} paths with {', '.join(options.filenames)}")
        stage = asyncio.run(run_filter(
            raw_paths, options, args.concurrency, sys.stdout,
            terminator='\0' if args.null else '\n',
        ))
    except FilterError as e:
        logger.debug(f"Filter failed: {e!r}")
        print(str(e), file=sys.stderr)
        return 1

    if args.stats:
        stats = stage.resolver.get_stats()
        stats.update({'forwarded': stage.forwarded, 'dropped': stage.dropped})
        print(json.dumps(stats, indent=2), file=sys.stderr)
    return 0


if __name__ == '__main__':
    sys.exit(main())
