"""
Command line entry point for tiddlymd

Usage:
    tiddlymd export.json notes.md
    tiddlymd export.json notes/ --split --category Work --category Ideas
    tiddlymd export.json notes.md --keep-drafts --highlight-links
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from tiddlymd import __version__
from tiddlymd.config import get_settings
from tiddlymd.tiddlers import (
    ConversionResult,
    TiddlyConverterError,
    apply_flags,
    convert,
    load_tiddlers,
)
from tiddlymd.tiddlers.options import FLAG_HELP, OPTION_FLAGS, with_categories
from tiddlymd.utils import get_logger, setup_logging
from tiddlymd.writer import MarkdownWriter

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

    from tiddlymd.tiddlers.models import ConversionOptions


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tiddlymd",
        description="Convert a TiddlyWiki JSON export to Markdown.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("input_file", type=Path, help="TiddlyWiki JSON export")
    parser.add_argument(
        "output",
        type=Path,
        help="Output Markdown file, or a directory with --split",
    )
    parser.add_argument(
        "--split",
        "-s",
        action="store_true",
        help="Write one file per tiddler, in one folder per category",
    )
    parser.add_argument(
        "--category",
        "-c",
        dest="categories",
        action="append",
        default=None,
        metavar="TAG",
        help="Group output by this tag (repeatable, first match wins)",
    )
    parser.add_argument(
        "--no-summary",
        dest="summary",
        action="store_false",
        help="Do not write the run summary",
    )
    parser.add_argument("--log-level", default=None, help="Override the log level")

    for flag in OPTION_FLAGS:
        parser.add_argument(
            flag, dest="flags", action="append_const", const=flag, help=FLAG_HELP[flag]
        )

    return parser


def resolve_options(args: argparse.Namespace) -> "ConversionOptions":
    """Settings first, then command line flags"""
    options = get_settings().to_options()
    options = apply_flags(options, args.flags or [])
    if args.categories:
        options = with_categories(options, args.categories)
    return options


def report_ignored(result: ConversionResult, logger: "BoundLogger") -> None:
    for item in result.ignored:
        logger.warning("Ignored draft", title=item.title, text=item.snippet)


async def run(args: argparse.Namespace, logger: "BoundLogger") -> None:
    options = resolve_options(args)

    tiddlers = load_tiddlers(args.input_file)
    logger.info("Export loaded", path=str(args.input_file), tiddlers=len(tiddlers))

    result = convert(tiddlers, options)
    report_ignored(result, logger)
    logger.info(
        "Conversion finished",
        converted=result.summary.converted,
        ignored=result.summary.ignored,
        tags=result.summary.unique_tags,
    )

    writer = MarkdownWriter(frontmatter=options.frontmatter)
    summary = result.summary if args.summary else None
    if args.split:
        report = await writer.write_split(args.output, result.groups, summary)
        for failure in report.lost:
            logger.error("Document not written", title=failure.title, error=failure.error)
    else:
        await writer.write_single(args.output, result.groups, summary)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(args.log_level)
    logger = get_logger("tiddlymd")

    try:
        asyncio.run(run(args, logger))
    except TiddlyConverterError as e:
        logger.error("Conversion failed", error=str(e))
        return 1

    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
