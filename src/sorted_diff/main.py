import argparse
import importlib.metadata as importlib_metadata
import logging
import sys
from typing import NoReturn

from pydantic import ValidationError
from tqdm import tqdm

from src.clients.duckdb import DuckDBClient
from src.sorted_diff.constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_ENGINE,
    DEFAULT_SEPARATOR,
    ExitCode,
)
from src.sorted_diff.exceptions import SourceError
from src.sorted_diff.models import ComparisonSettings, Verdict
from src.sorted_diff.sources import load_source
from src.sorted_diff.utils.comparison import compare_sources
from src.sorted_diff.utils.results import print_comparison_header, print_verdict
from src.utils.logging_setup import init_logging

logger = logging.getLogger(__name__)


class ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with the input-error code on bad arguments.

    argparse's own exit status for usage errors is 2, which is the schema-mismatch code.
    """

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(ExitCode.INPUT_ERROR, f"{self.prog}: error: {message}\n")


def _version() -> str:
    try:
        return importlib_metadata.version("sorted-diff")
    except importlib_metadata.PackageNotFoundError:
        return "unknown"


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="sorted-diff",
        description=(
            "Check whether two delimited files hold the same data regardless of "
            "row order, by sorting both on the first column of the first file."
        ),
    )
    parser.add_argument("file1", help="First file to compare")
    parser.add_argument("file2", help="Second file to compare")
    parser.add_argument(
        "-s",
        "--strict-column-order",
        action="store_true",
        help="Require both files to have the columns in the same order (default: allow unordered)",
    )
    parser.add_argument(
        "-n",
        "--number-of-columns",
        type=int,
        default=DEFAULT_BATCH_SIZE,
        help="Number of columns compared per sort (default: %(default)s)",
    )
    parser.add_argument(
        "-p",
        "--separator",
        default=DEFAULT_SEPARATOR,
        help="Field separator used by both files (default: %(default)r)",
    )
    parser.add_argument(
        "-e",
        "--engine",
        choices=["polars", "duckdb"],
        default=DEFAULT_ENGINE,
        help="Tabular engine used to read and sort the files (default: %(default)s)",
    )
    parser.add_argument(
        "-u",
        "--require-unique-key",
        action="store_true",
        help="Fail when the key column contains duplicate values",
    )
    parser.add_argument(
        "-q", "--no-progress", action="store_true", help="Hide the progress bar"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug details to stderr"
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"%(prog)s {_version()}"
    )
    return parser


def run_comparison(
    file1: str, file2: str, settings: ComparisonSettings, show_progress: bool = True
) -> Verdict:
    """
    Open both files, compare them and print progress and the verdict.

    Args:
        file1: Path to the first file
        file2: Path to the second file
        settings: Comparison options
        show_progress: Whether to display a progress bar over column groups

    Returns:
        Verdict: Result of the comparison

    Raises:
        SourceError: If either file cannot be opened or read
    """
    duckdb_client = DuckDBClient() if settings.engine == "duckdb" else None
    progress_bar: tqdm | None = None

    def on_start(key_column: str, groups: list[list[str]]) -> None:
        nonlocal progress_bar
        print_comparison_header(key_column, settings.strict_column_order)
        progress_bar = tqdm(
            total=len(groups), unit="group", disable=not show_progress, file=sys.stderr
        )

    def on_progress(group_index: int, group: list[str]) -> None:
        if progress_bar is not None:
            progress_bar.update(1)

    try:
        source1 = load_source(file1, settings.separator, settings.engine, duckdb_client)
        source2 = load_source(file2, settings.separator, settings.engine, duckdb_client)
        verdict = compare_sources(
            source1,
            source2,
            settings=settings,
            on_start=on_start,
            on_progress=on_progress,
        )
    finally:
        if progress_bar is not None:
            progress_bar.close()
        if duckdb_client is not None:
            duckdb_client.close()

    print_verdict(verdict)
    return verdict


def main(argv: list[str] | None = None) -> int:
    """
    Command line entry point.

    Args:
        argv: Arguments to parse, defaults to ``sys.argv[1:]``

    Returns:
        int: Process exit code
    """
    args = build_parser().parse_args(argv)
    init_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        settings = ComparisonSettings(
            strict_column_order=args.strict_column_order,
            batch_size=args.number_of_columns,
            separator=args.separator,
            engine=args.engine,
            require_unique_key=args.require_unique_key,
        )
    except ValidationError as e:
        print(f"Invalid options: {e}")
        return ExitCode.INPUT_ERROR

    try:
        verdict = run_comparison(
            args.file1, args.file2, settings, show_progress=not args.no_progress
        )
    except SourceError as e:
        logger.debug("Input error", exc_info=True)
        print(f"ERROR: {e}")
        return ExitCode.INPUT_ERROR
    except KeyboardInterrupt:
        print("Interrupted")
        return ExitCode.INTERRUPTED

    return verdict.exit_code


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
