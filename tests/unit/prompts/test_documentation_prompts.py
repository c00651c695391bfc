"""Unit tests for documentation prompt builders."""

from schemadoc.connectors.base import ColumnInfo, TableInfo
from schemadoc.prompts.documentation import (
    build_detail_prompt,
    build_overview_prompt,
    describe_column,
)


def _orders_table() -> TableInfo:
    table = TableInfo(
        schema="sales",
        table_name="orders",
        columns=[
            ColumnInfo(name="id", data_type="int", is_nullable=False, is_primary_key=True),
            ColumnInfo(
                name="customer_id",
                data_type="int",
                is_nullable=False,
                is_foreign_key=True,
                foreign_table="customers",
                foreign_column="id",
            ),
            ColumnInfo(name="notes", data_type="nvarchar(max)", is_nullable=True),
        ],
    )
    table.select()
    return table


class TestDescribeColumn:
    def test_plain_nullable_column(self):
        column = ColumnInfo(name="notes", data_type="text", is_nullable=True)

        assert describe_column(column) == "notes (text), nullable"

    def test_key_annotations(self):
        column = ColumnInfo(
            name="customer_id",
            data_type="int",
            is_nullable=False,
            is_primary_key=True,
            is_foreign_key=True,
            foreign_table="customers",
            foreign_column="id",
        )

        assert describe_column(column) == (
            "customer_id (int), not null, primary key, foreign key -> customers.id"
        )


class TestOverviewPrompt:
    def test_lists_only_key_columns(self):
        prompt = build_overview_prompt([_orders_table()])

        assert "Table: orders" in prompt
        assert "Schema: sales" in prompt
        assert "Primary keys:\n  - id" in prompt
        assert "Foreign keys:\n  - customer_id -> customers.id" in prompt
        assert "notes" not in prompt

    def test_excluded_key_columns_are_omitted(self):
        table = _orders_table()
        table.columns[1].included = False

        prompt = build_overview_prompt([table])

        assert "Foreign keys:" not in prompt

    def test_empty_schema_line_is_skipped(self):
        table = TableInfo(table_name="categories")
        table.select()

        prompt = build_overview_prompt([table])

        assert "Schema:" not in prompt

    def test_fixes_language_and_format(self):
        prompt = build_overview_prompt([_orders_table()], language="English")

        assert "Respond in English" in prompt
        assert "Markdown" in prompt
        assert "relationships between tables" in prompt


class TestDetailPrompt:
    def test_lists_every_included_column(self):
        prompt = build_detail_prompt([_orders_table()], include_overview=True)

        assert "  - id (int), not null, primary key" in prompt
        assert "  - customer_id (int), not null, foreign key -> customers.id" in prompt
        assert "  - notes (nvarchar(max)), nullable" in prompt

    def test_with_overview(self):
        prompt = build_detail_prompt([_orders_table()], include_overview=True)

        assert "1. A database overview" in prompt
        assert "do not repeat the database overview" not in prompt

    def test_without_overview(self):
        prompt = build_detail_prompt([_orders_table()], include_overview=False)

        assert "do not repeat the database overview" in prompt
        assert "No database overview" in prompt
        assert "1. A database overview" not in prompt

    def test_default_language_is_traditional_chinese(self):
        prompt = build_detail_prompt([_orders_table()], include_overview=False)

        assert "Respond in Traditional Chinese" in prompt

    def test_deselected_columns_are_omitted(self):
        table = _orders_table()
        table.columns[2].included = False

        prompt = build_detail_prompt([table], include_overview=False)

        assert "notes" not in prompt
