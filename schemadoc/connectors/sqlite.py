"""
SQLite Connector

Introspects embedded SQLite database files with the standard library
``sqlite3`` driver. SQLite has no information_schema, so tables come from
``sqlite_master`` and columns/foreign keys from the ``table_info`` and
``foreign_key_list`` pragma functions.

Files are opened read-only, so a missing path is reported as a connection
failure instead of silently creating an empty database.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any

from schemadoc.connectors.base import BaseConnector, ColumnInfo, TableInfo
from schemadoc.connectors.spec import DatabaseDialect
from schemadoc.errors import ConnectionError

logger = logging.getLogger(__name__)

_TABLES_QUERY = """
SELECT name
FROM sqlite_master
WHERE type = 'table'
AND name NOT LIKE 'sqlite_%'
ORDER BY name
"""

_COLUMNS_QUERY = """
SELECT cid, name, type, "notnull", pk
FROM pragma_table_info(?)
ORDER BY cid
"""

_FOREIGN_KEYS_QUERY = """
SELECT "from", "table", "to"
FROM pragma_foreign_key_list(?)
ORDER BY id, seq
"""


class SQLiteConnector(BaseConnector):
    """SQLite file connector using sqlite3."""

    dialect = DatabaseDialect.SQLITE
    driver_errors = (sqlite3.Error,)

    def _open_sync(self) -> sqlite3.Connection:
        path = Path(self.spec.file_path).expanduser()
        if not path.is_file():
            raise ConnectionError(f"SQLite database file not found: {path}")

        logger.info(f"Opening SQLite database {path}")
        conn = sqlite3.connect(
            f"{path.resolve().as_uri()}?mode=ro",
            uri=True,
            timeout=self.timeout,
            check_same_thread=False,
        )
        try:
            # Forces SQLite to read the header so non-database files fail here.
            conn.execute("SELECT count(*) FROM sqlite_master").fetchone()
        except sqlite3.Error:
            conn.close()
            raise
        return conn

    def _fetch_tables_sync(self, conn: Any) -> list[TableInfo]:
        cursor = conn.execute(_TABLES_QUERY)
        return [
            TableInfo(schema="", table_name=str(row["name"]))
            for row in self._rows_as_dicts(cursor)
        ]

    def _fetch_columns_sync(self, conn: Any, table: TableInfo) -> list[ColumnInfo]:
        column_rows = self._rows_as_dicts(conn.execute(_COLUMNS_QUERY, (table.table_name,)))
        fk_rows = self._rows_as_dicts(conn.execute(_FOREIGN_KEYS_QUERY, (table.table_name,)))

        fk_map: dict[str, tuple[str, str | None]] = {}
        for row in fk_rows:
            fk_map.setdefault(
                str(row["from"]),
                (str(row["table"]), str(row["to"]) if row["to"] is not None else None),
            )

        columns: list[ColumnInfo] = []
        for row in column_rows:
            name = str(row["name"])
            fk_target = fk_map.get(name)
            columns.append(
                ColumnInfo(
                    name=name,
                    data_type=str(row["type"] or ""),
                    is_nullable=int(row["notnull"]) == 0,
                    is_primary_key=int(row["pk"]) > 0,
                    is_foreign_key=fk_target is not None,
                    foreign_table=fk_target[0] if fk_target else None,
                    foreign_column=fk_target[1] if fk_target else None,
                )
            )
        return columns
