from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """
    Fixture that writes delimited files into a temporary directory.

    Args:
        tmp_path: Pytest fixture providing a temporary directory

    Returns:
        Function taking a file name, a header and rows, returning the written path
    """

    def _write(
        name: str,
        header: list[str],
        rows: list[list[str]],
        separator: str = ",",
    ) -> Path:
        path = tmp_path / name
        lines = [separator.join(header)] + [separator.join(row) for row in rows]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write
