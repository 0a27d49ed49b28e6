from src.sorted_diff.models import ReconciliationResult


def reconcile_schemas(
    columns1: list[str], columns2: list[str], strict: bool = False
) -> ReconciliationResult:
    """Check whether two files expose comparable columns.

    In strict mode both files must list the same names in the same positions.
    In permissive mode only the set of names matters, so order is ignored and a
    name repeated a different number of times in each file goes unnoticed.

    Args:
        columns1: Column names of the first file
        columns2: Column names of the second file
        strict: Whether column order must match

    Returns:
        ReconciliationResult: Whether the columns are comparable, with both inputs kept verbatim
    """
    if strict:
        comparable = columns1 == columns2
    else:
        comparable = set(columns1) == set(columns2)

    return ReconciliationResult(
        comparable=comparable,
        strict=strict,
        columns1=list(columns1),
        columns2=list(columns2),
    )
