"""Connector factory for the supported database dialects."""

from __future__ import annotations

from schemadoc.connectors.base import BaseConnector
from schemadoc.connectors.mariadb import MariaDBConnector
from schemadoc.connectors.spec import ConnectionSpec, DatabaseDialect
from schemadoc.connectors.sqlite import SQLiteConnector
from schemadoc.connectors.sqlserver import SQLServerConnector


def create_connector(spec: ConnectionSpec, *, timeout: int = 30) -> BaseConnector:
    """Create the dialect connector for a connection spec."""
    match spec.dialect:
        case DatabaseDialect.SQLSERVER:
            return SQLServerConnector(spec, timeout=timeout)
        case DatabaseDialect.MARIADB:
            return MariaDBConnector(spec, timeout=timeout)
        case DatabaseDialect.SQLITE:
            return SQLiteConnector(spec, timeout=timeout)

    raise ValueError(f"Unsupported database dialect: {spec.dialect}")


def create_connector_from_url(database_url: str, *, timeout: int = 30) -> BaseConnector:
    """Create a connector from a connection URL (see ConnectionSpec.from_url)."""
    return create_connector(ConnectionSpec.from_url(database_url), timeout=timeout)
