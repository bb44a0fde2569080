from __future__ import annotations

import logging
import os
import sqlite3
from typing import Any, Optional

from sqlcrud.domain.value_objects import Pageable
from sqlcrud.errors import DataAccessError, EmptyResultError, IncorrectResultSizeError

from ..executor import Params, Row, SqlExecutor

logger = logging.getLogger(__name__)


class SqliteExecutor(SqlExecutor):
    """SQLite implementation of :class:`SqlExecutor`."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    @classmethod
    def connect(cls, database: Optional[str | os.PathLike[str]] = None) -> "SqliteExecutor":
        """Open ``database``, defaulting to ``SQLCRUD_DB_PATH``."""
        if database is None:
            from sqlcrud.config.settings import settings

            database = settings.database_path
        if str(database) != ":memory:":
            os.makedirs(os.path.dirname(os.path.abspath(database)), exist_ok=True)
        conn = sqlite3.connect(database, timeout=30.0)
        conn.execute("PRAGMA foreign_keys = ON;")
        return cls(conn)

    def close(self) -> None:
        self._conn.close()

    def _execute(self, sql: str, params: Optional[Params]) -> sqlite3.Cursor:
        logger.debug("Executing SQL: %s", sql, extra={"params": params})
        try:
            return self._conn.execute(sql, params if params is not None else ())
        except sqlite3.Error as exc:
            raise DataAccessError(f"SQLite statement failed: {exc}", sql) from exc

    def query_for_rows(self, sql: str, params: Optional[Params] = None) -> list[Row]:
        cur = self._execute(sql, params)
        columns = [d[0] for d in cur.description or ()]
        return [dict(zip(columns, row)) for row in cur.fetchall()]

    def query_for_object(self, sql: str, params: Optional[Params] = None) -> Any:
        cur = self._execute(sql, params)
        rows = cur.fetchall()
        if not rows:
            raise EmptyResultError(sql)
        if len(rows) > 1:
            raise IncorrectResultSizeError(1, len(rows), sql)
        return rows[0][0]

    def count(self, sql: str, params: Optional[Params] = None) -> int:
        return int(self.query_for_object(f"select count(*) from ({sql}) as counted", params))

    def paginate(self, sql: str, pageable: Pageable) -> str:
        return f"{sql}{pageable.order_by()} limit {int(pageable.size)} offset {int(pageable.offset)}"

    def update(self, sql: str, params: Optional[Params] = None) -> int:
        cur = self._execute(sql, params)
        self._conn.commit()
        return int(cur.rowcount)

    def insert(self, sql: str, params: Optional[Params], key_column: str) -> Any:
        cur = self._execute(sql, params)
        self._conn.commit()
        rowid = cur.lastrowid
        if rowid is None:
            raise DataAccessError(
                f"SQLite insert failed: no lastrowid (key column: {key_column})", sql
            )
        return int(rowid)
