"""
Pytest configuration and shared fixtures.

This module provides fixtures and configuration used across all tests.
"""

import logging
import sqlite3

import pytest

from schemadoc.config import ApiSettings, GenerationSettings, Settings
from schemadoc.connectors.base import ColumnInfo, TableInfo

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests (requires API keys and database servers)",
    )


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (may require external services)"
    )
    config.addinivalue_line("markers", "slow: mark test as slow (takes more than 1 second)")
    config.addinivalue_line("markers", "unit: mark test as unit test (default)")


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless explicitly enabled."""
    if config.getoption("--run-integration"):
        return
    skip_integration = pytest.mark.skip(
        reason="Integration tests disabled (use --run-integration to enable)."
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(autouse=True)
def configure_test_logging(caplog):
    """
    Capture logs at DEBUG and undo any CLI log silencing after each test.
    """
    caplog.set_level(logging.DEBUG)
    yield
    logging.disable(logging.NOTSET)
    for logger_name in ("schemadoc", "httpx", "httpcore", "asyncio"):
        logging.getLogger(logger_name).setLevel(logging.NOTSET)


# ============================================================================
# Environment and Configuration
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """
    Keep .env files and cached settings out of tests.

    Runs automatically for all tests.
    """
    from schemadoc.config import get_settings

    get_settings.cache_clear()
    monkeypatch.setenv("SCHEMADOC_ENV_SOURCE", "process")
    for name in ("GEMINI_API_KEY", "GEMINI_MODEL", "GEMINI_BASE_URL"):
        monkeypatch.delenv(name, raising=False)
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Settings with a test API key and no cooldown waits."""
    return Settings(
        api=ApiSettings(api_key="test-key", base_url="https://gemini.test/v1beta/models"),
        generation=GenerationSettings(cooldown_seconds=0),
    )


# ============================================================================
# Common Test Data
# ============================================================================


def make_table(name: str, column_count: int, schema: str = "dbo", included: bool = True) -> TableInfo:
    """Build a table with an ``id`` primary key followed by plain columns."""
    columns = [ColumnInfo(name="id", data_type="int", is_nullable=False, is_primary_key=True)]
    columns.extend(
        ColumnInfo(name=f"col_{i}", data_type="nvarchar", is_nullable=True)
        for i in range(1, column_count)
    )
    table = TableInfo(schema=schema, table_name=name, columns=columns)
    table.set_included(included)
    return table


@pytest.fixture
def table_factory():
    """Factory for TableInfo objects (see make_table)."""
    return make_table


@pytest.fixture
def sqlite_db(tmp_path):
    """
    Small inventory database on disk.

    Tables: categories, products (FK to categories), order_items (composite
    PK, FKs to products).
    """
    path = tmp_path / "inventory.db"
    conn = sqlite3.connect(path)
    try:
        conn.executescript(
            """
            CREATE TABLE categories (
                id INTEGER PRIMARY KEY,
                name TEXT NOT NULL
            );
            CREATE TABLE products (
                id INTEGER PRIMARY KEY,
                category_id INTEGER NOT NULL REFERENCES categories(id),
                name VARCHAR(120) NOT NULL,
                price DECIMAL(10, 2)
            );
            CREATE TABLE order_items (
                order_id INTEGER NOT NULL,
                product_id INTEGER NOT NULL,
                quantity INTEGER,
                PRIMARY KEY (order_id, product_id),
                FOREIGN KEY (product_id) REFERENCES products(id)
            );
            """
        )
        conn.commit()
    finally:
        conn.close()
    return path
