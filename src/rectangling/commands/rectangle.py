"""Command line interface for rectangling JSON files.

This module provides a command line interface to load nested data
from JSON files through :class:`rectangling.compute.JSONDataSource`,
widen and lengthen its columns, and print the resulting table
in a tabular format using the :mod:`rectangling.utils.tabulate` module.
"""

import argparse
import json
import logging
import sys

from rectangling.compute import RectanglingError, describe
from rectangling.dataframe import Dataframe
from rectangling.utils import tabulate

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the parser for the command line arguments."""
    parser = argparse.ArgumentParser(description="Turn nested JSON data into a table.")
    parser.add_argument("filename", type=str, help="The JSON file to load.")
    parser.add_argument(
        "--lines", action="store_true", help="Read the file as JSON Lines."
    )
    parser.add_argument(
        "--column",
        default="json",
        help="Name of the column holding the loaded documents.",
    )
    parser.add_argument(
        "--widen",
        dest="steps",
        action="append",
        type=lambda column: ("widen", column),
        help="Widen a column of records. Can be provided multiple times.",
    )
    parser.add_argument(
        "--lengthen",
        dest="steps",
        action="append",
        type=lambda column: ("lengthen", column),
        help="Lengthen a column of sequences. Can be provided multiple times.",
    )
    parser.add_argument(
        "--names-sep",
        default=None,
        help="Prefix widened columns with the original column name and this separator.",
    )
    parser.add_argument(
        "--keep-empty",
        action="store_true",
        help="Keep rows with empty sequences when lengthening.",
    )
    parser.add_argument(
        "--describe",
        action="store_true",
        help="Print the shape of each column instead of the data.",
    )
    parser.add_argument(
        "--max-rows", type=int, default=20, help="Maximum number of rows to print."
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log each flattening step."
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse the command line arguments and rectangle the requested file."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    df = Dataframe.open_json(args.filename, column=args.column, lines=args.lines)
    if args.steps:
        for operation, column in args.steps:
            if operation == "widen":
                df = df.widen(column, names_sep=args.names_sep)
            else:
                df = df.lengthen(column, keep_empty=args.keep_empty)
    else:
        df = df.flatten(names_sep=args.names_sep, keep_empty=args.keep_empty)

    try:
        result = df.to_arrow()
    except RectanglingError as e:
        print(f"Unable to rectangle column {e.column}: {e}")
        return 1
    except (OSError, json.JSONDecodeError) as e:
        print(f"Unable to read {args.filename}: {e}")
        return 1

    logger.debug("Rectangled %s into %d rows", args.filename, result.num_rows)
    if args.describe:
        print(tabulate.describe_shapes(describe(result)))
    else:
        print(tabulate.tabulate(result, max_rows=args.max_rows))
    return 0


if __name__ == "__main__":
    sys.exit(main())
