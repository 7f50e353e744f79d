#!/usr/bin/env python3
"""Color plate extractor for bitmap tags.

Pulls the zlib-compressed source artwork out of ``.bitmap`` tag files and
writes it to the data directory as an uncompressed RGBA TIFF, keeping the
tag's relative path and swapping the extension for ``.tif``.

Usage:
  python -m colorplate <tags> <data> characters/elite/bitmaps/elite.bitmap
  python -m colorplate <tags> <data> all
  python -m colorplate <tags> <data> all-overwrite --jobs 4

Single tags never overwrite an existing image. ``all`` skips tags whose
image already exists; ``all-overwrite`` regenerates them.
"""

import argparse
import os
import sys

from colorplate.batch import format_summary, run_batch
from colorplate.common.console import Console, ExtractContext
from colorplate.pipeline import dump_tag

ALL = 'all'
ALL_OVERWRITE = 'all-overwrite'


def build_parser():
    parser = argparse.ArgumentParser(
        prog='colorplate-extract',
        description='Extract color plates from bitmap tags as RGBA TIFF images.',
    )
    parser.add_argument('tags', help='Tags directory')
    parser.add_argument('data', help='Data directory to write .tif images into')
    parser.add_argument('tag_path',
                        help=f'Tag path relative to <tags>, "{ALL}" or "{ALL_OVERWRITE}"')
    parser.add_argument('--jobs', '-j', type=int, default=None,
                        help='Worker threads for batch mode (default: CPU count)')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Only print failures and the final summary')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    context = ExtractContext(Console(quiet=args.quiet))
    console = context.console

    for root in (args.tags, args.data):
        if not os.path.exists(root):
            console.error(f"{root} does not exist")
            return 1

    if args.tag_path in (ALL, ALL_OVERWRITE):
        if args.jobs is not None and args.jobs < 1:
            parser.error('--jobs must be at least 1')
        report = run_batch(args.tags, args.data,
                           overwrite=args.tag_path == ALL_OVERWRITE,
                           context=context, workers=args.jobs)
        console.summary(format_summary(report))
        return 0

    outcome = dump_tag(args.tags, args.data, args.tag_path, context)
    return 0 if outcome.success else 1


if __name__ == '__main__':
    sys.exit(main())
