from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.sorted_diff.constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_ENGINE,
    DEFAULT_SEPARATOR,
    EngineName,
    ExitCode,
)


class ComparisonSettings(BaseModel):
    """
    Options controlling a single comparison run.

    Attributes:
        strict_column_order: Require both files to list their columns in the same order
        batch_size: Number of non-key columns projected, sorted and compared together
        separator: Single-byte character delimiting fields in both files
        engine: Tabular engine used to scan, sort and compare the files
        require_unique_key: Fail with a dedicated verdict when the key column has duplicates
    """

    model_config = ConfigDict(frozen=True)

    strict_column_order: bool = False
    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, ge=1)
    separator: str = Field(default=DEFAULT_SEPARATOR, min_length=1, max_length=1)
    engine: EngineName = DEFAULT_ENGINE
    require_unique_key: bool = False

    @field_validator("separator")
    @classmethod
    def separator_is_single_byte(cls, value: str) -> str:
        if len(value.encode("utf-8")) != 1:
            raise ValueError("separator must be a single-byte character")
        return value


class ReconciliationResult(BaseModel):
    """
    Outcome of comparing the column names of two files.

    Attributes:
        comparable: Whether the two schemas are compatible under the active mode
        strict: Whether ordered (strict) or set-based (permissive) comparison was used
        columns1: Column names of the first file, verbatim
        columns2: Column names of the second file, verbatim
    """

    model_config = ConfigDict(frozen=True)

    comparable: bool
    strict: bool
    columns1: list[str]
    columns2: list[str]


class Verdict(BaseModel):
    """Terminal result of a comparison run."""

    model_config = ConfigDict(frozen=True)

    exit_code: ClassVar[ExitCode]

    @property
    def passed(self) -> bool:
        return self.exit_code == ExitCode.IDENTICAL


class RowCountMismatch(Verdict):
    kind: Literal["row_count_mismatch"] = "row_count_mismatch"
    exit_code: ClassVar[ExitCode] = ExitCode.ROW_COUNT_MISMATCH

    rows1: int
    rows2: int


class SchemaMismatch(Verdict):
    kind: Literal["schema_mismatch"] = "schema_mismatch"
    exit_code: ClassVar[ExitCode] = ExitCode.SCHEMA_MISMATCH

    columns1: list[str]
    columns2: list[str]
    strict: bool


class DuplicateKeyMismatch(Verdict):
    """Key column holds repeated values, so sorted rows cannot be aligned reliably."""

    kind: Literal["duplicate_keys"] = "duplicate_keys"
    exit_code: ClassVar[ExitCode] = ExitCode.DUPLICATE_KEYS

    key_column: str
    duplicates1: int
    duplicates2: int


class ContentMismatch(Verdict):
    kind: Literal["content_mismatch"] = "content_mismatch"
    exit_code: ClassVar[ExitCode] = ExitCode.CONTENT_MISMATCH

    group: list[str]


class Identical(Verdict):
    kind: Literal["identical"] = "identical"
    exit_code: ClassVar[ExitCode] = ExitCode.IDENTICAL

    key_column: str
