"""
SchemaDoc

Introspects SQL Server, MariaDB and SQLite schemas and generates Markdown
documentation for a table selection through the Gemini API.
"""

__version__ = "0.1.0"
