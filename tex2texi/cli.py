"""Command-line interface: convert dialect files to Texinfo on stdout."""

import argparse
import io
import logging
import sys
from typing import List, Optional, TextIO

from . import __version__
from .converter import TexinfoConverter
from .errors import UnbalancedDelimiterError
from .registry import DiagnosticsRegistry

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_SKIPPED = 1
EXIT_MALFORMED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='tex2texi',
        description='Translate LaTeX-like standard draft sources into Texinfo.',
    )
    parser.add_argument(
        'files',
        nargs='+',
        help='input files, converted in order',
    )
    parser.add_argument(
        '-I', '--include-dir',
        default='',
        help='directory that \\include{name} is resolved against',
    )
    parser.add_argument(
        '-o', '--output',
        help='write Texinfo here instead of stdout',
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='log every token to stderr',
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}',
    )
    return parser


def convert_files(files: List[str], output: TextIO, include_dir: str = '') -> int:
    """
    Convert each file into output, sharing one diagnostics registry.

    Unreadable files are reported and skipped. An unbalanced argument
    aborts the whole run, since the output is already partially written.

    Returns:
        Process exit status
    """
    diagnostics = DiagnosticsRegistry()
    status = EXIT_OK

    for path in files:
        try:
            with open(path, encoding='utf-8') as source:
                text = source.read()
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("%s: Error: cannot read input: %s", path, exc)
            status = EXIT_SKIPPED
            continue

        try:
            TexinfoConverter(diagnostics, include_dir).convert(io.StringIO(text), output, path)
        except UnbalancedDelimiterError as exc:
            logger.error("Error: %s", exc)
            return EXIT_MALFORMED

    return status


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.debug else logging.WARNING,
        format='%(message)s',
    )

    if args.output is None:
        return convert_files(args.files, sys.stdout, args.include_dir)

    with open(args.output, 'w', encoding='utf-8') as output:
        return convert_files(args.files, output, args.include_dir)
