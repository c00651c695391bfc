"""
Documentation Prompts

Renders selected tables into generateContent prompts. The overview prompt
lists only key columns so it stays small for large selections; the detail
prompt lists every included column with its type and key annotations.
"""

from __future__ import annotations

from collections.abc import Iterable

from schemadoc.connectors.base import ColumnInfo, TableInfo

DEFAULT_LANGUAGE = "Traditional Chinese"


def _table_header(table: TableInfo) -> list[str]:
    lines = [f"Table: {table.table_name}"]
    if table.schema_name:
        lines.append(f"Schema: {table.schema_name}")
    return lines


def _foreign_target(column: ColumnInfo) -> str:
    return column.foreign_target or "(unknown)"


def describe_column(column: ColumnInfo) -> str:
    """One detail line: name, type, nullability and key annotations."""
    parts = [f"{column.name} ({column.data_type})"]
    parts.append("nullable" if column.is_nullable else "not null")
    if column.is_primary_key:
        parts.append("primary key")
    if column.is_foreign_key:
        parts.append(f"foreign key -> {_foreign_target(column)}")
    return ", ".join(parts)


def build_overview_prompt(tables: Iterable[TableInfo], language: str = DEFAULT_LANGUAGE) -> str:
    """
    Build the overview prompt for the full selection.

    Only included primary-key and foreign-key columns are listed.
    """
    lines = [
        "Write a brief overview of the following database schema in Markdown.",
        "Describe only the overall purpose of the database and the relationships "
        "between tables. Do not describe individual tables or columns in detail.",
        f"Respond in {language} and output Markdown only.",
        "",
        "Database schema:",
        "",
    ]

    for table in tables:
        lines.extend(_table_header(table))

        primary_keys = [c for c in table.columns if c.is_primary_key and c.included]
        foreign_keys = [c for c in table.columns if c.is_foreign_key and c.included]

        if primary_keys:
            lines.append("Primary keys:")
            lines.extend(f"  - {column.name}" for column in primary_keys)
        if foreign_keys:
            lines.append("Foreign keys:")
            lines.extend(
                f"  - {column.name} -> {_foreign_target(column)}" for column in foreign_keys
            )
        lines.append("")

    lines.extend(
        [
            "Produce:",
            "1. An overview of the database name and purpose",
            "2. A summary of the relationships between tables",
            "3. A short description of the overall schema structure",
        ]
    )
    return "\n".join(lines) + "\n"


def build_detail_prompt(
    tables: Iterable[TableInfo],
    include_overview: bool,
    language: str = DEFAULT_LANGUAGE,
) -> str:
    """
    Build the per-table detail prompt for one batch.

    Args:
        tables: Tables in the batch
        include_overview: Also ask for a schema overview (single-batch
            documents). When False the model is told not to restate it.
        language: Language the response is written in
    """
    if include_overview:
        lines = [
            "Write detailed Markdown documentation for the following database schema. "
            "Cover the purpose of each table and a concise description of each column.",
        ]
    else:
        lines = [
            "Write detailed Markdown documentation for the following tables. "
            "Describe only these tables; do not repeat the database overview.",
        ]
    lines.extend(
        [
            f"Respond in {language} and output Markdown only.",
            "",
            "Database schema:",
            "",
        ]
    )

    for table in tables:
        lines.extend(_table_header(table))
        lines.append("Columns:")
        lines.extend(
            f"  - {describe_column(column)}" for column in table.columns if column.included
        )
        lines.append("")

    if include_overview:
        lines.extend(
            [
                "Produce concise documentation with:",
                "1. A database overview",
                "2. A short description of each table, including its purpose and relationships",
                "3. A short description of each column, including its purpose and data type",
                "4. An explanation of the primary and foreign key relationships",
            ]
        )
    else:
        lines.extend(
            [
                "Produce concise documentation with:",
                "1. A short description of each table, including its purpose and relationships",
                "2. A short description of each column, including its purpose and data type",
                "3. An explanation of the primary and foreign key relationships",
                "4. No database overview; start directly with the table descriptions",
            ]
        )
    return "\n".join(lines) + "\n"
