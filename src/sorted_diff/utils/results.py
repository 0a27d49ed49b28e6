from src.sorted_diff.models import (
    ContentMismatch,
    DuplicateKeyMismatch,
    Identical,
    RowCountMismatch,
    SchemaMismatch,
    Verdict,
)

DIFFERENT = "❌ FILES ARE DIFFERENT"


def describe_verdict(verdict: Verdict) -> list[str]:
    """Build the human-readable lines reporting a verdict.

    Args:
        verdict: Verdict produced by the comparison

    Returns:
        list[str]: Lines to print, in order
    """
    if isinstance(verdict, Identical):
        return [f"✅ FILES ARE IDENTICAL WHEN SORTED BY COLUMN: {verdict.key_column}"]

    if isinstance(verdict, RowCountMismatch):
        return [
            f"{DIFFERENT}: Different number of rows {verdict.rows1} <> {verdict.rows2}"
        ]

    if isinstance(verdict, SchemaMismatch):
        lines = [
            f"{DIFFERENT}: Different columns => "
            f"[{','.join(verdict.columns1)}] != [{','.join(verdict.columns2)}]"
        ]
        if verdict.strict:
            lines.append("Hint: --strict-column-order flag is active")
        return lines

    if isinstance(verdict, DuplicateKeyMismatch):
        return [
            f"{DIFFERENT}: Key column {verdict.key_column} is not unique "
            f"({verdict.duplicates1} duplicate(s) in first file, "
            f"{verdict.duplicates2} in second file)"
        ]

    if isinstance(verdict, ContentMismatch):
        noun = "column" if len(verdict.group) == 1 else "columns"
        return [f"{DIFFERENT}: Values for {noun} {', '.join(verdict.group)} are different"]

    raise TypeError(f"Unknown verdict type: {type(verdict).__name__}")


def print_verdict(verdict: Verdict) -> None:
    """Print a verdict to stdout."""
    for line in describe_verdict(verdict):
        print(line)


def print_comparison_header(key_column: str, strict_column_order: bool) -> None:
    """Announce which column the files are sorted by before comparing groups."""
    strict_note = ". Strict order of columns enforced" if strict_column_order else ""
    print(
        "Comparing content of each column in both files when sorted by column "
        f'"{key_column}"{strict_note}...'
    )
