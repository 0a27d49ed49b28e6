from enum import IntEnum
from typing import Literal

EngineName = Literal["polars", "duckdb"]

DEFAULT_SEPARATOR: str = ","
DEFAULT_BATCH_SIZE: int = 1
DEFAULT_ENGINE: EngineName = "polars"

# Appended to DuckDB projections to keep the sort stable on duplicate keys.
ROW_NUMBER_COLUMN: str = "__sorted_diff_row_number"


class ExitCode(IntEnum):
    """Process exit codes. Other tools depend on these values."""

    IDENTICAL = 0
    INPUT_ERROR = 1
    SCHEMA_MISMATCH = 2
    CONTENT_MISMATCH = 3
    ROW_COUNT_MISMATCH = 4
    DUPLICATE_KEYS = 5
    INTERRUPTED = 130
