from pathlib import Path
from typing import Any, Literal, overload

import duckdb
from duckdb import DuckDBPyConnection


class DuckDBClient:
    """
    A thin wrapper around a single DuckDB connection.

    The comparison tool only reads CSV files through ``read_csv``, so the default
    database is an in-memory one and nothing is ever written to disk.

    Attributes:
        database_path (str | Path): Path to the database file. Use ":memory:" for in-memory database.
    """

    def __init__(self, database_path: str | Path = ":memory:") -> None:
        self.database_path = database_path
        self._connection: DuckDBPyConnection | None = self._connect(database_path)

    @staticmethod
    def _connect(database_path: str | Path) -> DuckDBPyConnection:
        return (
            duckdb.connect(database=str(database_path))
            if str(database_path) != ":memory:"
            else duckdb.connect()
        )

    def get_connection(self, new_connection: bool = False) -> DuckDBPyConnection:
        """
        Get or create the connection to the DuckDB database.

        Args:
            new_connection: If True, create a new connection even if one exists.

        Returns:
            DuckDBPyConnection: Database connection object.
        """
        if new_connection or self._connection is None:
            self._connection = self._connect(self.database_path)

        return self._connection

    @overload
    def query(self, query: str) -> duckdb.DuckDBPyRelation: ...

    @overload
    def query(
        self, query: str, return_rows: Literal[False]
    ) -> duckdb.DuckDBPyRelation: ...

    @overload
    def query(
        self, query: str, return_rows: Literal[True]
    ) -> list[tuple[Any, ...]]: ...

    def query(
        self, query: str, return_rows: bool = False
    ) -> duckdb.DuckDBPyRelation | list[tuple[Any, ...]]:
        """
        Execute a SQL query and optionally materialize its rows.

        Args:
            query: The SQL query to execute
            return_rows: If True, fetch every row as a tuple. If False, return the lazy relation.

        Returns:
            Either a list of row tuples or the DuckDB relation
        """
        conn = self.get_connection()
        result = conn.sql(query)

        if return_rows:
            return result.fetchall()
        return result

    def __enter__(self) -> "DuckDBClient":
        """Enable context manager support."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Cleanup resources when exiting context manager."""
        self.close()

    def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
