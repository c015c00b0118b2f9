"""Command-line interface for conceptzoom."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from conceptzoom.concepts import Category
from conceptzoom.errors import ConceptzoomError
from conceptzoom.pipeline import FORMATS, run

logger = logging.getLogger("conceptzoom")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="conceptzoom",
        description="Show which jMolecules concepts the elements of a Java project express.",
    )
    parser.add_argument(
        "snapshot",
        type=Path,
        help="Path to the JSON snapshot of the project's source model",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the report to this file instead of stdout",
    )
    parser.add_argument(
        "--format",
        choices=FORMATS,
        default="text",
        dest="fmt",
        help="Report format (default: text)",
    )
    parser.add_argument(
        "--select",
        default=None,
        metavar="HANDLE",
        help="Handle of an element to locate in the tree",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Fail on the first element the source model cannot answer for",
    )
    parser.add_argument(
        "--category",
        action="append",
        dest="categories",
        choices=[c.label for c in Category],
        help="Only detect concepts of this category (repeatable)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) output",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(message)s")
    if args.verbose:
        logging.getLogger("conceptzoom").setLevel(logging.DEBUG)

    categories = (
        [Category.from_label(label) for label in args.categories] if args.categories else None
    )

    try:
        report = run(
            args.snapshot,
            output=args.output,
            fmt=args.fmt,
            select=args.select,
            strict=args.strict,
            categories=categories,
        )
    except ConceptzoomError as e:
        logger.error("%s", e)
        sys.exit(1)

    if args.output is None:
        print(report)
