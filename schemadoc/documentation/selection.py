"""Table selection helpers applied before documentation generation."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from schemadoc.connectors.base import TableInfo
from schemadoc.errors import NoSelectionError


def select_all(tables: Iterable[TableInfo]) -> None:
    for table in tables:
        table.select()


def deselect_all(tables: Iterable[TableInfo]) -> None:
    for table in tables:
        table.deselect()


def selected_tables(tables: Iterable[TableInfo]) -> list[TableInfo]:
    return [table for table in tables if table.included]


def _matches(table: TableInfo, name: str) -> bool:
    wanted = name.strip().lower()
    return wanted in (table.table_name.lower(), table.qualified_name.lower())


def apply_selection(
    tables: Sequence[TableInfo], names: Iterable[str] | None = None
) -> list[TableInfo]:
    """
    Select tables by name, deselecting everything else.

    Names match either the bare table name or ``schema.table``, case
    insensitively. With no names every table is selected.

    Returns:
        The selected tables in their original order

    Raises:
        NoSelectionError: If a requested name matches no table
    """
    requested = [name for name in (names or []) if name.strip()]
    if not requested:
        select_all(tables)
        return list(tables)

    missing = [name for name in requested if not any(_matches(t, name) for t in tables)]
    if missing:
        raise NoSelectionError(f"Tables not found: {', '.join(missing)}")

    for table in tables:
        table.set_included(any(_matches(table, name) for name in requested))
    return selected_tables(tables)
