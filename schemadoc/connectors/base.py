"""
Base Database Connector

Abstract base class for all dialect connectors. Provides a consistent
async interface for opening connections and introspecting catalog metadata
into one normalized table/column model.

All connectors must implement:
- _open_sync(): Open a DB-API connection with the dialect driver
- _fetch_tables_sync(): Query the catalog for base tables
- _fetch_columns_sync(): Query the catalog for a table's columns and keys

The drivers are synchronous, so every blocking call runs in a worker thread
via asyncio.to_thread.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from schemadoc.connectors.spec import ConnectionSpec, DatabaseDialect
from schemadoc.errors import ConnectionError, ConnectorError, IntrospectionError

logger = logging.getLogger(__name__)


# ============================================================================
# Data Models
# ============================================================================


class ColumnInfo(BaseModel):
    """Information about a database column."""

    name: str = Field(..., description="Column name")
    data_type: str = Field(..., description="Dialect-native data type")
    is_nullable: bool = Field(..., description="Whether column can be NULL")
    is_primary_key: bool = Field(default=False, description="Is part of primary key")
    is_foreign_key: bool = Field(default=False, description="Is a foreign key")
    foreign_table: str | None = Field(None, description="Referenced table if FK")
    foreign_column: str | None = Field(None, description="Referenced column if FK")
    included: bool = Field(default=False, description="Selected for documentation")

    @property
    def foreign_target(self) -> str | None:
        if not self.is_foreign_key or not self.foreign_table:
            return None
        if self.foreign_column:
            return f"{self.foreign_table}.{self.foreign_column}"
        return self.foreign_table


class TableInfo(BaseModel):
    """Information about a database table."""

    schema_name: str = Field(default="", alias="schema", description="Schema name")
    table_name: str = Field(..., description="Table name")
    columns: list[ColumnInfo] = Field(default_factory=list, description="Columns in ordinal order")
    included: bool = Field(default=False, description="Selected for documentation")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def qualified_name(self) -> str:
        if self.schema_name:
            return f"{self.schema_name}.{self.table_name}"
        return self.table_name

    def set_included(self, included: bool) -> None:
        """Select or deselect the table together with every one of its columns."""
        self.included = included
        for column in self.columns:
            column.included = included

    def select(self) -> None:
        self.set_included(True)

    def deselect(self) -> None:
        self.set_included(False)


# ============================================================================
# Base Connector
# ============================================================================


class BaseConnector(ABC):
    """
    Abstract base class for dialect connectors.

    Usage:
        connector = create_connector(spec)

        if await connector.test_connection():
            tables = await connector.list_tables()

    Subclasses set ``dialect`` and ``driver_errors`` (the exception types the
    driver raises for expected failures such as refused connections or bad
    credentials).
    """

    dialect: DatabaseDialect
    driver_errors: tuple[type[BaseException], ...] = ()

    def __init__(self, spec: ConnectionSpec, timeout: int = 30):
        """
        Initialize connector.

        Args:
            spec: Connection parameters for the dialect
            timeout: Connect/login timeout in seconds
        """
        if spec.dialect != self.dialect:
            raise ValueError(
                f"{self.__class__.__name__} cannot serve {spec.dialect} connections"
            )
        self.spec = spec
        self.timeout = timeout

        logger.info(f"Initialized {self.__class__.__name__} for {spec.describe()}")

    # ------------------------------------------------------------------
    # Dialect hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _open_sync(self) -> Any:
        """Open and return a DB-API connection. Driver errors propagate."""
        pass  # pragma: no cover - abstract method

    @abstractmethod
    def _fetch_tables_sync(self, conn: Any) -> list[TableInfo]:
        """Return base tables ordered by (schema, name), without columns."""
        pass  # pragma: no cover - abstract method

    @abstractmethod
    def _fetch_columns_sync(self, conn: Any, table: TableInfo) -> list[ColumnInfo]:
        """Return the table's columns in catalog ordinal order."""
        pass  # pragma: no cover - abstract method

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def open(self) -> Any:
        """
        Open a dialect connection.

        Returns:
            An open DB-API connection; the caller owns and closes it.

        Raises:
            ConnectionError: If parameters are invalid, the server is
                unreachable, authentication fails or the file is missing.
        """
        return await asyncio.to_thread(self._connect_sync)

    async def test_connection(self) -> bool:
        """Open and immediately close a connection, reporting success as a bool."""
        try:
            conn = await self.open()
        except ConnectionError as exc:
            logger.warning(f"Connection test failed for {self.spec.describe()}: {exc}")
            return False
        await asyncio.to_thread(self._close_quietly, conn)
        logger.info(f"Connection test succeeded for {self.spec.describe()}")
        return True

    async def list_tables(self, connection: Any | None = None) -> list[TableInfo]:
        """
        Introspect every base table together with its columns.

        The fetch is all-or-nothing: any catalog failure raises
        IntrospectionError and no partial list is returned.

        Args:
            connection: Optional open connection from ``open()``. When omitted
                the connector opens and closes its own.

        Raises:
            ConnectionError: If no connection could be opened
            IntrospectionError: If any catalog query fails
        """
        return await self._run_introspection(self._list_tables_sync, connection)

    async def list_columns(
        self, table: TableInfo, connection: Any | None = None
    ) -> list[ColumnInfo]:
        """
        Introspect one table's columns in catalog ordinal order.

        Raises:
            ConnectionError: If no connection could be opened
            IntrospectionError: If the catalog query fails
        """
        return await self._run_introspection(
            lambda conn: self._fetch_columns_sync(conn, table), connection
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _connect_sync(self) -> Any:
        try:
            return self._open_sync()
        except ConnectorError:
            raise
        except (*self.driver_errors, OSError) as exc:
            logger.error(f"{self.dialect} connection failed: {exc}")
            raise ConnectionError(
                f"Failed to connect to {self.spec.describe()}: {exc}"
            ) from exc

    def _list_tables_sync(self, conn: Any) -> list[TableInfo]:
        tables = self._fetch_tables_sync(conn)
        for table in tables:
            table.columns = self._fetch_columns_sync(conn, table)
        logger.info(
            f"Introspected {len(tables)} tables from {self.spec.describe()}",
            extra={"dialect": str(self.dialect), "table_count": len(tables)},
        )
        return tables

    async def _run_introspection(self, operation, connection: Any | None):
        def run() -> Any:
            conn = connection if connection is not None else self._connect_sync()
            try:
                return operation(conn)
            except ConnectorError:
                raise
            except Exception as exc:
                logger.error(f"{self.dialect} schema introspection failed: {exc}")
                raise IntrospectionError(f"Failed to introspect schema: {exc}") from exc
            finally:
                if connection is None:
                    self._close_quietly(conn)

        return await asyncio.to_thread(run)

    @staticmethod
    def _close_quietly(conn: Any) -> None:
        try:
            conn.close()
        except Exception as exc:
            logger.debug(f"Ignoring error while closing connection: {exc}")

    @staticmethod
    def _rows_as_dicts(cursor: Any) -> list[dict[str, Any]]:
        """Map cursor rows to dicts keyed by lower-cased column label.

        Some drivers return catalog strings as bytes; those are decoded.
        """
        names = [str(col[0]).lower() for col in cursor.description or []]
        return [
            {
                name: value.decode("utf-8") if isinstance(value, (bytes, bytearray)) else value
                for name, value in zip(names, row)
            }
            for row in cursor.fetchall()
        ]

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.spec.describe()}>"
