import logging
import sqlite3
from collections.abc import Iterator, Sequence
from pathlib import Path
from types import TracebackType
from typing import cast

from .sql import files, jobs, paths

logger: logging.Logger = logging.getLogger(__name__)


class CatalogDB:
    def __init__(self, path: Path) -> None:
        logger.debug("Opening catalog %s", path)
        self.connection: sqlite3.Connection = sqlite3.connect(
            path, detect_types=sqlite3.PARSE_DECLTYPES, isolation_level=None
        )
        self.connection.row_factory = sqlite3.Row

        self._configure()
        self._create_schema_if_needed()

    def __enter__(self) -> "CatalogDB":
        return self

    def __exit__(
        self, exc_type: type[BaseException] | None, exc: BaseException | None, tb: TracebackType | None
    ) -> None:
        self.connection.close()

    def _configure(self) -> None:
        cursor: sqlite3.Cursor = self.connection.cursor()

        statements: list[str] = [
            "PRAGMA foreign_keys = ON;",
            "PRAGMA case_sensitive_like = ON;",
        ]

        for statement in statements:
            _ = cursor.execute(statement)

    def _create_schema_if_needed(self) -> None:
        self.begin()

        self._apply_schema(table_sql=jobs.CREATE_TABLE)
        self._apply_schema(table_sql=paths.CREATE_TABLE)
        self._apply_schema(table_sql=files.CREATE_TABLE, index_sql=files.CREATE_INDEXES)

        self.commit()

    def _apply_schema(self, *, table_sql: str, index_sql: Sequence[str] | None = None) -> None:
        self.execute(sql=table_sql)

        if index_sql is not None:
            for sql in index_sql:
                self.execute(sql)

    def begin(self) -> None:
        _ = self.connection.execute("BEGIN;")

    def commit(self) -> None:
        _ = self.connection.execute("COMMIT;")

    def execute(self, sql: str, params: Sequence[object] | None = None) -> int | None:
        cursor: sqlite3.Cursor = self.connection.cursor()

        if params is not None:
            _ = cursor.execute(sql, params)
        else:
            _ = cursor.execute(sql)

        return cursor.lastrowid

    def query_one(self, sql: str, params: Sequence[object] | None = None) -> sqlite3.Row | None:
        cursor: sqlite3.Cursor = self.connection.cursor()

        if params is None:
            _ = cursor.execute(sql)
        else:
            _ = cursor.execute(sql, params)
        row: sqlite3.Row | None = cast(sqlite3.Row | None, cursor.fetchone())

        cursor.close()

        return row

    def query(self, sql: str, params: Sequence[object] | None = None) -> Iterator[sqlite3.Row]:
        """Yield rows one at a time; the result set is never loaded whole."""
        cursor: sqlite3.Cursor = self.connection.cursor()

        try:
            if params is None:
                _ = cursor.execute(sql)
            else:
                _ = cursor.execute(sql, params)

            for row in cursor:
                yield cast(sqlite3.Row, row)
        finally:
            cursor.close()
