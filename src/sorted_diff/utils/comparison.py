import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from src.sorted_diff.models import (
    ComparisonSettings,
    ContentMismatch,
    DuplicateKeyMismatch,
    Identical,
    RowCountMismatch,
    SchemaMismatch,
    Verdict,
)
from src.sorted_diff.sources import TabularSource
from src.sorted_diff.utils.planning import columns_without_key, plan_column_groups
from src.sorted_diff.utils.schema import reconcile_schemas

logger = logging.getLogger(__name__)

StartCallback = Callable[[str, list[list[str]]], None]
ProgressCallback = Callable[[int, list[str]], None]


class ComparisonStage(Enum):
    INIT = "init"
    ROW_COUNT_CHECKED = "row_count_checked"
    SCHEMA_RECONCILED = "schema_reconciled"
    COMPARING = "comparing"
    IDENTICAL = "identical"
    MISMATCH = "mismatch"


def _log_stage(stage: ComparisonStage, detail: str = "") -> None:
    logger.debug("Comparison stage: %s %s", stage.value, detail)


def same_row_count(
    source1: TabularSource, source2: TabularSource
) -> tuple[bool, int, int]:
    """Compare the number of rows of two sources.

    Args:
        source1: First source
        source2: Second source

    Returns:
        tuple: (counts_match, rows_in_source1, rows_in_source2)
    """
    rows1 = source1.row_count()
    rows2 = source2.row_count()
    return rows1 == rows2, rows1, rows2


def compare_group(
    source: TabularSource, group: list[str], key_column: str
) -> Any:
    """Project the key column plus a group of columns and sort by the key.

    Args:
        source: Source to read from
        group: Non-key columns to compare, in first-file order
        key_column: Column establishing row correspondence

    Returns:
        The engine-specific sorted projection, key column first
    """
    return source.sorted_projection([key_column, *group], key_column)


def groups_equal(source: TabularSource, normalized1: Any, normalized2: Any) -> bool:
    """Check two sorted projections for row-position-wise equality.

    Both projections must come from sources of the same engine as ``source``.
    """
    return source.equals(normalized1, normalized2)


def compare_sources(
    source1: TabularSource,
    source2: TabularSource,
    settings: ComparisonSettings | None = None,
    on_start: StartCallback | None = None,
    on_progress: ProgressCallback | None = None,
) -> Verdict:
    """
    Decide whether two sources hold the same rows regardless of row order.

    Checks run in a fixed order and the first failure is final:
    1. Row counts must match
    2. Column names must reconcile (ordered in strict mode, as sets otherwise)
    3. Optionally, the key column must hold unique values
    4. Each group of non-key columns, sorted by the key column, must match

    The key column is the first column of the first source. Groups are compared
    one at a time in first-file column order, and ``on_start`` receives the key column
    and the group plan before the first group is compared. ``on_progress`` is called
    once after each group that matches.

    Args:
        source1: First source
        source2: Second source
        settings: Comparison options, defaults used if omitted
        on_start: Called with (key_column, groups) once the groups are planned
        on_progress: Called with (group_index, group) after each matching group

    Returns:
        Verdict: The first mismatch found, or Identical

    Raises:
        TypeError: If the two sources use different tabular engines
    """
    if type(source1) is not type(source2):
        raise TypeError(
            "Both sources must use the same engine, got "
            f"{type(source1).__name__} and {type(source2).__name__}"
        )
    settings = settings or ComparisonSettings()
    _log_stage(ComparisonStage.INIT, f"{source1.path} vs {source2.path}")

    counts_match, rows1, rows2 = same_row_count(source1, source2)
    if not counts_match:
        _log_stage(ComparisonStage.MISMATCH, f"rows {rows1} <> {rows2}")
        return RowCountMismatch(rows1=rows1, rows2=rows2)
    _log_stage(ComparisonStage.ROW_COUNT_CHECKED, f"{rows1} rows")

    reconciliation = reconcile_schemas(
        source1.column_names(),
        source2.column_names(),
        strict=settings.strict_column_order,
    )
    if not reconciliation.comparable:
        _log_stage(ComparisonStage.MISMATCH, "columns differ")
        return SchemaMismatch(
            columns1=reconciliation.columns1,
            columns2=reconciliation.columns2,
            strict=reconciliation.strict,
        )

    key_column = reconciliation.columns1[0]
    _log_stage(ComparisonStage.SCHEMA_RECONCILED, f"key column {key_column!r}")

    if settings.require_unique_key:
        duplicates1 = source1.duplicate_count(key_column)
        duplicates2 = source2.duplicate_count(key_column)
        if duplicates1 or duplicates2:
            _log_stage(ComparisonStage.MISMATCH, "duplicate keys")
            return DuplicateKeyMismatch(
                key_column=key_column,
                duplicates1=duplicates1,
                duplicates2=duplicates2,
            )

    groups = plan_column_groups(
        columns_without_key(reconciliation.columns1, key_column),
        settings.batch_size,
    )
    logger.info(
        "Comparing %d column group(s) of up to %d column(s) sorted by %r",
        len(groups),
        settings.batch_size,
        key_column,
    )
    if on_start is not None:
        on_start(key_column, groups)

    for group_index, group in enumerate(groups):
        _log_stage(ComparisonStage.COMPARING, f"group {group_index}: {group}")
        normalized1 = compare_group(source1, group, key_column)
        normalized2 = compare_group(source2, group, key_column)

        if not groups_equal(source1, normalized1, normalized2):
            _log_stage(ComparisonStage.MISMATCH, f"group {group_index} differs")
            return ContentMismatch(group=group)

        if on_progress is not None:
            on_progress(group_index, group)

    _log_stage(ComparisonStage.IDENTICAL)
    return Identical(key_column=key_column)
