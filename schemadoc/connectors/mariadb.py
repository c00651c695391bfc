"""
MariaDB Connector

MariaDB/MySQL connector using mysql-connector-python. Catalog metadata comes
from information_schema; foreign keys are read from KEY_COLUMN_USAGE rows
that carry a REFERENCED_TABLE_NAME.
"""

from __future__ import annotations

import logging
from typing import Any

try:
    import mysql.connector
except ImportError:  # pragma: no cover - dependency guard
    mysql = None

from schemadoc.connectors.base import BaseConnector, ColumnInfo, TableInfo
from schemadoc.connectors.spec import ConnectionSpec, DatabaseDialect

logger = logging.getLogger(__name__)

_TABLES_QUERY = """
SELECT table_schema, table_name
FROM information_schema.tables
WHERE table_schema = %s
AND table_type = 'BASE TABLE'
ORDER BY table_schema, table_name
"""

_COLUMNS_QUERY = """
SELECT
    c.column_name,
    c.column_type,
    c.is_nullable,
    c.column_key,
    kcu.referenced_table_name AS foreign_table_name,
    kcu.referenced_column_name AS foreign_column_name
FROM information_schema.columns c
LEFT JOIN information_schema.key_column_usage kcu
    ON c.table_schema = kcu.table_schema
    AND c.table_name = kcu.table_name
    AND c.column_name = kcu.column_name
    AND kcu.referenced_table_name IS NOT NULL
WHERE c.table_schema = %s AND c.table_name = %s
ORDER BY c.ordinal_position
"""


class MariaDBConnector(BaseConnector):
    """MariaDB database connector using mysql-connector-python."""

    dialect = DatabaseDialect.MARIADB
    driver_errors = (mysql.connector.Error,) if mysql is not None else ()

    def __init__(self, spec: ConnectionSpec, timeout: int = 30) -> None:
        if mysql is None:
            raise ImportError(
                "mysql-connector-python is not installed. "
                "Install it with: pip install mysql-connector-python"
            )
        super().__init__(spec, timeout=timeout)

    def _connection_kwargs(self) -> dict[str, Any]:
        return {
            "host": self.spec.server,
            "port": self.spec.effective_port,
            "database": self.spec.database,
            "user": self.spec.username or "",
            "password": self.spec.password.get_secret_value() if self.spec.password else "",
            "autocommit": True,
            "connection_timeout": self.timeout,
        }

    def _open_sync(self) -> Any:
        logger.info(f"Connecting to MariaDB at {self.spec.server}:{self.spec.effective_port}")
        return mysql.connector.connect(**self._connection_kwargs())

    def _fetch_tables_sync(self, conn: Any) -> list[TableInfo]:
        cursor = conn.cursor()
        try:
            cursor.execute(_TABLES_QUERY, (self.spec.database,))
            rows = self._rows_as_dicts(cursor)
        finally:
            cursor.close()
        return [
            TableInfo(schema=str(row["table_schema"]), table_name=str(row["table_name"]))
            for row in rows
        ]

    def _fetch_columns_sync(self, conn: Any, table: TableInfo) -> list[ColumnInfo]:
        cursor = conn.cursor()
        try:
            cursor.execute(_COLUMNS_QUERY, (table.schema_name, table.table_name))
            rows = self._rows_as_dicts(cursor)
        finally:
            cursor.close()

        columns: list[ColumnInfo] = []
        seen: set[str] = set()
        for row in rows:
            col_name = str(row["column_name"])
            # A column in several foreign keys joins once per constraint.
            if col_name in seen:
                continue
            seen.add(col_name)
            foreign_table = row.get("foreign_table_name")
            columns.append(
                ColumnInfo(
                    name=col_name,
                    data_type=str(row["column_type"]),
                    is_nullable=str(row["is_nullable"]).upper() == "YES",
                    is_primary_key=str(row["column_key"]).upper() == "PRI",
                    is_foreign_key=foreign_table is not None,
                    foreign_table=str(foreign_table) if foreign_table is not None else None,
                    foreign_column=(
                        str(row["foreign_column_name"]) if foreign_table is not None else None
                    ),
                )
            )
        return columns
