"""
SchemaDoc Error Taxonomy

Every failure path in the library raises one of these distinguishable kinds,
with the underlying cause chained via ``raise ... from exc``.

    SchemaDocError
    ├── ConnectorError
    │   ├── ConnectionError      unreachable/misconfigured database
    │   └── IntrospectionError   catalog query failure
    ├── GenerationError          API retries exhausted, bad response, HTTP failure
    └── NoSelectionError         generation requested with zero selected tables
"""


class SchemaDocError(Exception):
    """Base exception for all SchemaDoc errors."""

    pass


class ConnectorError(SchemaDocError):
    """Base exception for connector errors."""

    pass


class ConnectionError(ConnectorError):
    """Error establishing a database connection."""

    pass


class IntrospectionError(ConnectorError):
    """Error querying catalog metadata."""

    pass


class GenerationError(SchemaDocError):
    """Error producing text from the generation endpoint."""

    pass


class NoSelectionError(SchemaDocError):
    """Documentation was requested without any selected table."""

    pass
