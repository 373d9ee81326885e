"""Tests for the DuckDB connector."""

import pytest

from erd_cli.database.duckdb import DuckDBConnector, parse_enum_values
from erd_cli.database.models import TableDetail


class TestParseEnumValues:
    """ENUM type strings."""

    @pytest.mark.parametrize("data_type,expected", [
        ("ENUM('new', 'paid')", "new,paid"),
        ("enum('it''s')", "it's"),
        ("VARCHAR", ""),
        ("", ""),
    ])
    def test_parse(self, data_type, expected):
        assert parse_enum_values(data_type) == expected


class TestConnectionString:
    """Path extraction."""

    def test_paths(self):
        assert DuckDBConnector("duckdb:///data/shop.duckdb").database_path == "data/shop.duckdb"
        assert DuckDBConnector("duckdb://shop.duckdb?x=1").database_path == "shop.duckdb"
        assert DuckDBConnector("duckdb:///:memory:").database_path == ":memory:"

    def test_database_name(self):
        assert DuckDBConnector("duckdb:///data/shop.duckdb").get_database_name() == "shop"
        assert DuckDBConnector("duckdb://").get_database_name() == "memory"


@pytest.fixture
def connector(tmp_path):
    duckdb = pytest.importorskip("duckdb")
    path = tmp_path / "shop.duckdb"
    connection = duckdb.connect(str(path))
    connection.execute("""
        CREATE TABLE customers (
            id INTEGER PRIMARY KEY,
            name VARCHAR
        )
    """)
    connection.execute("""
        CREATE TABLE orders (
            id INTEGER PRIMARY KEY,
            customer_id INTEGER REFERENCES customers(id),
            status ENUM('new', 'paid')
        )
    """)
    connection.close()

    db = DuckDBConnector(f"duckdb:///{path}")
    yield db
    db.close()


class TestDuckDBConnector:
    """Metadata queries against a real database file."""

    def test_schemas_and_tables(self, connector):
        assert "main" in connector.get_schemas()
        assert connector.get_tables(["main"]) == [
            TableDetail(schema="main", name="customers"),
            TableDetail(schema="main", name="orders"),
        ]

    def test_columns(self, connector):
        columns = connector.get_columns(TableDetail(schema="main", name="orders"))

        by_name = {c.name: c for c in columns}
        assert [c.name for c in columns] == ["id", "customer_id", "status"]
        assert by_name["id"].is_primary
        assert by_name["customer_id"].is_foreign
        assert by_name["status"].data_type == "ENUM"
        assert by_name["status"].enum_values == "new,paid"

    def test_constraints(self, connector):
        constraints = connector.get_constraints(TableDetail(schema="main", name="orders"))

        assert any(
            c.fk_table == "orders" and c.pk_table == "customers" and c.column_name == "customer_id"
            for c in constraints
        )
        assert all(c.fk_schema == "main" for c in constraints)
