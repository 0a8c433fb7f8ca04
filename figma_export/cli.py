#!/usr/bin/env python3
"""
Export every node flagged for export in a Figma page to local image files.

Usage:
  figma-export --file 1LktYuGGSqZ5zwyDnXJmCA --page Icons --output assets/icons --compress
"""
import argparse
import logging
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from .models import ExportOptions
from .pipeline import run_pipeline
from .utils import extract_file_key

logger = logging.getLogger('figma_export')


def _env_number(name: str, default, cast=int):
    try:
        return cast(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)
    if not logger.handlers:
        ch = logging.StreamHandler()
        ch.setLevel(level)
        ch.setFormatter(logging.Formatter('[%(asctime)s] [%(levelname)s] %(message)s'))
        logger.addHandler(ch)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Export assets marked for export in a Figma file',
        epilog='Example: figma-export --file 1LktYuGGSqZ5zwyDnXJmCA --page Icons --compress',
    )
    parser.add_argument('--token', '-t', default=None,
                        help='Figma personal access token (defaults to FIGMA_TOKEN from .env)')
    parser.add_argument('--file', '-f', dest='file', required=True,
                        help='Figma file key or file URL')
    parser.add_argument('--page', '-p', default=None,
                        help='Page name or node id (e.g. "453:89") to look for exportable assets in')
    parser.add_argument('--output', '-o', default='assets/icons', help='Destination directory')
    parser.add_argument('--compress', action='store_true', help='Minify exported svg/png/jpg files')
    parser.add_argument('--debug', action='store_true',
                        help='Save the Figma API response as figma-debug-<file>.json')
    parser.add_argument('--workers', type=int, default=None, help='Parallel downloads (default 8)')
    parser.add_argument('--verbose', action='store_true', help='Enable verbose logging')
    return parser


def options_from_args(args: argparse.Namespace) -> ExportOptions:
    return ExportOptions(
        token=args.token or os.getenv('FIGMA_TOKEN', ''),
        file_id=extract_file_key(args.file),
        page=args.page or None,
        output=args.output,
        compress=args.compress,
        debug=args.debug,
        timeout=_env_number('FIGMA_TIMEOUT_SEC', 60, float),
        download_workers=args.workers or _env_number('FIGMA_DOWNLOAD_WORKERS', 8),
        render_workers=_env_number('FIGMA_RENDER_WORKERS', 1),
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    load_dotenv()
    setup_logging(args.verbose)

    try:
        options = options_from_args(args)
    except (ValueError, ValidationError) as e:
        print(f'Invalid options: {e}', file=sys.stderr)
        return 1

    result = run_pipeline(options)
    if not result.ok:
        if result.completed:
            print(f'Last completed: {result.completed[-1]}', file=sys.stderr)
        print(f'{result.failed_stage} failed:\n{result.error}', file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
