"""
Database Connectors Module

Opens connections and introspects catalog metadata for the supported
dialects into one normalized table/column model.

Available Connectors:
    - BaseConnector: Abstract base class
    - SQLServerConnector: Microsoft SQL Server (pyodbc)
    - MariaDBConnector: MariaDB / MySQL (mysql-connector-python)
    - SQLiteConnector: SQLite files (sqlite3)

Usage:
    from schemadoc.connectors import ConnectionSpec, create_connector

    spec = ConnectionSpec.from_url("sqlite:///inventory.db")
    connector = create_connector(spec)

    if await connector.test_connection():
        tables = await connector.list_tables()
"""

from schemadoc.connectors.base import BaseConnector, ColumnInfo, TableInfo
from schemadoc.connectors.factory import create_connector, create_connector_from_url
from schemadoc.connectors.mariadb import MariaDBConnector
from schemadoc.connectors.spec import ConnectionSpec, DatabaseDialect
from schemadoc.connectors.sqlite import SQLiteConnector
from schemadoc.connectors.sqlserver import SQLServerConnector
from schemadoc.errors import ConnectionError, ConnectorError, IntrospectionError

__all__ = [
    "BaseConnector",
    "SQLServerConnector",
    "MariaDBConnector",
    "SQLiteConnector",
    "create_connector",
    "create_connector_from_url",
    "ConnectionSpec",
    "DatabaseDialect",
    "ColumnInfo",
    "TableInfo",
    "ConnectorError",
    "ConnectionError",
    "IntrospectionError",
]
