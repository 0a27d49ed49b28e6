import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import duckdb
import polars as pl

from src.clients.duckdb import DuckDBClient
from src.sorted_diff.constants import (
    DEFAULT_ENGINE,
    DEFAULT_SEPARATOR,
    ROW_NUMBER_COLUMN,
    EngineName,
)
from src.sorted_diff.exceptions import SourceError

logger = logging.getLogger(__name__)


class TabularSource(ABC):
    """
    A delimited file with a header row, read lazily and with every value kept as text.

    Nothing is read when a source is created; every query re-scans the file.
    Subclasses adapt a specific tabular engine to the operations the comparison needs.

    Attributes:
        path: Path of the underlying file
        separator: Single character delimiting fields
    """

    def __init__(self, path: str | Path, separator: str = DEFAULT_SEPARATOR) -> None:
        self.path = str(path)
        self.separator = separator

    @abstractmethod
    def column_names(self) -> list[str]:
        """Return the header-derived column names in file order."""

    @abstractmethod
    def sorted_projection(self, columns: list[str], sort_key: str) -> Any:
        """
        Materialize ``columns`` sorted ascending by the raw text of ``sort_key``.

        The sort is stable (ties keep their original row order) and missing
        keys sort first.

        Args:
            columns: Columns to project, in output order
            sort_key: Column to sort by

        Returns:
            An engine-specific table accepted by :meth:`equals`
        """

    @abstractmethod
    def count_rows(self, column: str) -> int:
        """Return the number of rows in the projection of a single column."""

    @abstractmethod
    def duplicate_count(self, column: str) -> int:
        """Return how many rows repeat a value already seen in ``column``."""

    @abstractmethod
    def equals(self, left: Any, right: Any) -> bool:
        """Compare two materialized projections row by row; missing values equal each other."""

    def row_count(self) -> int:
        """Count rows by materializing only the first column."""
        columns = self.column_names()
        if not columns:
            raise SourceError(self.path, "no header row found")
        return self.count_rows(columns[0])

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.path!r}, separator={self.separator!r})"


class PolarsCsvSource(TabularSource):
    """Tabular source backed by a polars ``LazyFrame``."""

    def __init__(self, path: str | Path, separator: str = DEFAULT_SEPARATOR) -> None:
        super().__init__(path, separator)
        try:
            self._lazy_frame = pl.scan_csv(
                self.path,
                separator=self.separator,
                has_header=True,
                infer_schema_length=0,
            )
        except (pl.exceptions.PolarsError, OSError, ValueError) as e:
            raise SourceError(self.path, str(e)) from e

    def _collect(self, lazy_frame: pl.LazyFrame) -> pl.DataFrame:
        try:
            return lazy_frame.collect()
        except (pl.exceptions.PolarsError, OSError) as e:
            raise SourceError(self.path, str(e)) from e

    def column_names(self) -> list[str]:
        try:
            return self._lazy_frame.collect_schema().names()
        except (pl.exceptions.PolarsError, OSError) as e:
            raise SourceError(self.path, str(e)) from e

    def sorted_projection(self, columns: list[str], sort_key: str) -> pl.DataFrame:
        return self._collect(
            self._lazy_frame.select([pl.col(column) for column in columns]).sort(
                sort_key, nulls_last=False, maintain_order=True
            )
        )

    def count_rows(self, column: str) -> int:
        return self._collect(self._lazy_frame.select(pl.col(column))).height

    def duplicate_count(self, column: str) -> int:
        result = self._collect(
            self._lazy_frame.select(
                (pl.len() - pl.col(column).n_unique()).alias("duplicates")
            )
        )
        return int(result.item())

    def equals(self, left: pl.DataFrame, right: pl.DataFrame) -> bool:
        return left.equals(right, null_equal=True)


def _quote_identifier(name: str) -> str:
    escaped = name.replace('"', '""')
    return f'"{escaped}"'


def _quote_literal(value: str) -> str:
    escaped = value.replace("'", "''")
    return f"'{escaped}'"


class DuckDBCsvSource(TabularSource):
    """Tabular source backed by DuckDB's ``read_csv`` table function."""

    def __init__(
        self,
        path: str | Path,
        separator: str = DEFAULT_SEPARATOR,
        duckdb_client: DuckDBClient | None = None,
    ) -> None:
        super().__init__(path, separator)
        self.duckdb_client = duckdb_client or DuckDBClient()
        self._scan = (
            f"read_csv({_quote_literal(self.path)}, "
            f"delim={_quote_literal(self.separator)}, header=true, all_varchar=true, "
            "quote='\"', escape='\"', comment='', strict_mode=true)"
        )

    def _query(self, query: str, return_rows: bool) -> Any:
        logger.debug("Running DuckDB query for %s: %s", self.path, query)
        try:
            return self.duckdb_client.query(query, return_rows=return_rows)
        except duckdb.Error as e:
            raise SourceError(self.path, str(e)) from e

    def column_names(self) -> list[str]:
        return list(self._query(f"SELECT * FROM {self._scan}", False).columns)

    def sorted_projection(
        self, columns: list[str], sort_key: str
    ) -> list[tuple[Any, ...]]:
        select_clause = ", ".join(_quote_identifier(column) for column in columns)
        query = f"""
        WITH numbered AS (
            SELECT *, row_number() OVER () AS {ROW_NUMBER_COLUMN}
            FROM {self._scan}
        )
        SELECT {select_clause}
        FROM numbered
        ORDER BY {_quote_identifier(sort_key)} ASC NULLS FIRST, {ROW_NUMBER_COLUMN}
        """
        return self._query(query, True)

    def count_rows(self, column: str) -> int:
        query = f"SELECT count(*) FROM (SELECT {_quote_identifier(column)} FROM {self._scan})"
        return int(self._query(query, True)[0][0])

    def duplicate_count(self, column: str) -> int:
        key = _quote_identifier(column)
        # count(DISTINCT) skips NULL, so a present NULL adds one distinct value back
        query = f"""
        SELECT count(*) - count(DISTINCT {key})
            - CASE WHEN count(*) > count({key}) THEN 1 ELSE 0 END
        FROM {self._scan}
        """
        return int(self._query(query, True)[0][0])

    def equals(
        self, left: list[tuple[Any, ...]], right: list[tuple[Any, ...]]
    ) -> bool:
        return left == right


def load_source(
    path: str | Path,
    separator: str = DEFAULT_SEPARATOR,
    engine: EngineName = DEFAULT_ENGINE,
    duckdb_client: DuckDBClient | None = None,
) -> TabularSource:
    """
    Open a delimited file as a lazy tabular source.

    Args:
        path: Path to a delimited text file with a header row
        separator: Single character delimiting fields
        engine: Name of the tabular engine to use ("polars" or "duckdb")
        duckdb_client: Client to share between DuckDB sources, created on demand if omitted

    Returns:
        TabularSource: Source for the given file

    Raises:
        SourceError: If the path does not point to a readable file
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SourceError(str(path), "file not found")

    logger.debug("Opening %s with the %s engine", path, engine)
    if engine == "polars":
        return PolarsCsvSource(file_path, separator)
    if engine == "duckdb":
        return DuckDBCsvSource(file_path, separator, duckdb_client=duckdb_client)
    raise ValueError(f"Unknown engine: {engine}")
