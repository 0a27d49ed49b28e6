def columns_without_key(columns: list[str], key_column: str) -> list[str]:
    """Return every column except the key column, keeping file order."""
    return [column for column in columns if column != key_column]


def plan_column_groups(columns: list[str], batch_size: int) -> list[list[str]]:
    """Split columns into consecutive groups of at most ``batch_size`` names.

    Larger groups mean fewer sorts per file but a coarser diagnostic: on a
    mismatch only the whole group is reported.

    Args:
        columns: Columns to compare, in first-file order
        batch_size: Maximum number of columns per group

    Returns:
        list[list[str]]: Groups which, concatenated, reproduce ``columns``

    Raises:
        ValueError: If ``batch_size`` is lower than 1
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be at least 1, got {batch_size}")

    return [columns[i : i + batch_size] for i in range(0, len(columns), batch_size)]
