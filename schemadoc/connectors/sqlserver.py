"""
SQL Server Connector

Microsoft SQL Server connector using pyodbc. Tables and columns come from the
INFORMATION_SCHEMA views; primary and foreign keys are resolved by joining the
key-usage views in a single column query. Composite foreign keys pair
referencing and referenced columns by ordinal position.
"""

from __future__ import annotations

import logging
from typing import Any

try:
    import pyodbc
except ImportError:  # pragma: no cover - dependency guard
    pyodbc = None

from schemadoc.connectors.base import BaseConnector, ColumnInfo, TableInfo
from schemadoc.connectors.spec import ConnectionSpec, DatabaseDialect

logger = logging.getLogger(__name__)

_TABLES_QUERY = """
SELECT
    t.TABLE_SCHEMA AS table_schema,
    t.TABLE_NAME AS table_name
FROM INFORMATION_SCHEMA.TABLES t
WHERE t.TABLE_TYPE = 'BASE TABLE'
ORDER BY t.TABLE_SCHEMA, t.TABLE_NAME
"""

_COLUMNS_QUERY = """
SELECT
    c.COLUMN_NAME AS column_name,
    c.DATA_TYPE AS data_type,
    c.IS_NULLABLE AS is_nullable,
    CASE WHEN pk.COLUMN_NAME IS NOT NULL THEN 1 ELSE 0 END AS is_primary_key,
    fk.REFERENCED_TABLE_NAME AS foreign_table_name,
    fk.REFERENCED_COLUMN_NAME AS foreign_column_name
FROM INFORMATION_SCHEMA.COLUMNS c
LEFT JOIN (
    SELECT ku.TABLE_SCHEMA, ku.TABLE_NAME, ku.COLUMN_NAME
    FROM INFORMATION_SCHEMA.TABLE_CONSTRAINTS tc
    JOIN INFORMATION_SCHEMA.KEY_COLUMN_USAGE ku
        ON tc.CONSTRAINT_NAME = ku.CONSTRAINT_NAME
        AND tc.CONSTRAINT_SCHEMA = ku.CONSTRAINT_SCHEMA
    WHERE tc.CONSTRAINT_TYPE = 'PRIMARY KEY'
) pk
    ON c.TABLE_SCHEMA = pk.TABLE_SCHEMA
    AND c.TABLE_NAME = pk.TABLE_NAME
    AND c.COLUMN_NAME = pk.COLUMN_NAME
LEFT JOIN (
    SELECT
        fkcu.TABLE_SCHEMA,
        fkcu.TABLE_NAME,
        fkcu.COLUMN_NAME,
        fkcu.CONSTRAINT_NAME,
        pkcu.TABLE_NAME AS REFERENCED_TABLE_NAME,
        pkcu.COLUMN_NAME AS REFERENCED_COLUMN_NAME
    FROM INFORMATION_SCHEMA.REFERENTIAL_CONSTRAINTS rc
    JOIN INFORMATION_SCHEMA.KEY_COLUMN_USAGE fkcu
        ON rc.CONSTRAINT_NAME = fkcu.CONSTRAINT_NAME
        AND rc.CONSTRAINT_SCHEMA = fkcu.CONSTRAINT_SCHEMA
    JOIN INFORMATION_SCHEMA.KEY_COLUMN_USAGE pkcu
        ON rc.UNIQUE_CONSTRAINT_NAME = pkcu.CONSTRAINT_NAME
        AND rc.UNIQUE_CONSTRAINT_SCHEMA = pkcu.CONSTRAINT_SCHEMA
        AND fkcu.ORDINAL_POSITION = pkcu.ORDINAL_POSITION
) fk
    ON c.TABLE_SCHEMA = fk.TABLE_SCHEMA
    AND c.TABLE_NAME = fk.TABLE_NAME
    AND c.COLUMN_NAME = fk.COLUMN_NAME
WHERE c.TABLE_SCHEMA = ? AND c.TABLE_NAME = ?
ORDER BY c.ORDINAL_POSITION, fk.CONSTRAINT_NAME
"""


class SQLServerConnector(BaseConnector):
    """SQL Server database connector using pyodbc."""

    dialect = DatabaseDialect.SQLSERVER
    driver_errors = (pyodbc.Error,) if pyodbc is not None else ()

    def __init__(self, spec: ConnectionSpec, timeout: int = 30) -> None:
        if pyodbc is None:
            raise ImportError(
                "pyodbc is not installed. Install it with: pip install pyodbc"
            )
        super().__init__(spec, timeout=timeout)

    def _open_sync(self) -> Any:
        logger.info(f"Connecting to SQL Server at {self.spec.server}")
        return pyodbc.connect(self.spec.connection_string(), timeout=self.timeout)

    def _fetch_tables_sync(self, conn: Any) -> list[TableInfo]:
        cursor = conn.cursor()
        try:
            cursor.execute(_TABLES_QUERY)
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
            cursor.execute(_COLUMNS_QUERY, table.schema_name, table.table_name)
            rows = self._rows_as_dicts(cursor)
        finally:
            cursor.close()

        columns: list[ColumnInfo] = []
        seen: set[str] = set()
        for row in rows:
            col_name = str(row["column_name"])
            if col_name in seen:
                continue
            seen.add(col_name)
            foreign_table = row.get("foreign_table_name")
            columns.append(
                ColumnInfo(
                    name=col_name,
                    data_type=str(row["data_type"]),
                    is_nullable=str(row["is_nullable"]).upper() == "YES",
                    is_primary_key=bool(row["is_primary_key"]),
                    is_foreign_key=foreign_table is not None,
                    foreign_table=str(foreign_table) if foreign_table is not None else None,
                    foreign_column=(
                        str(row["foreign_column_name"]) if foreign_table is not None else None
                    ),
                )
            )
        return columns
