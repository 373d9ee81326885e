"""Shared pytest fixtures for ERD CLI tests."""

import os

import pytest
from unittest.mock import MagicMock

from erd_cli.config import ErdConfig
from erd_cli.database.models import TableDetail, ColumnResult, ConstraintResult, TableResult, AnalysisResult


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep the developer's ERD_* variables, .env and global config out of every test."""
    for name in list(os.environ):
        if name.upper().startswith("ERD_"):
            monkeypatch.delenv(name)
    monkeypatch.setitem(ErdConfig.model_config, "env_file", None)
    monkeypatch.setattr("erd_cli.config.GLOBAL_CONFIG_FILE", tmp_path / "global-config.yaml")


@pytest.fixture
def make_config():
    """Build an ErdConfig from keyword overrides."""
    def _make(**kwargs):
        return ErdConfig(**kwargs)
    return _make


@pytest.fixture
def connector():
    """A mocked MetadataProvider."""
    mock = MagicMock()
    mock.get_schemas.return_value = []
    mock.get_tables.return_value = []
    mock.get_columns.return_value = []
    mock.get_constraints.return_value = []
    return mock


@pytest.fixture
def connector_factory(connector):
    """A mocked ConnectorFactory returning the mocked connector."""
    factory = MagicMock()
    factory.new_connector.return_value = connector
    return factory


@pytest.fixture
def questioner():
    """A mocked Questioner; any unexpected question shows up in call records."""
    return MagicMock()


@pytest.fixture
def sample_result():
    """Two tables in one schema referencing each other once."""
    orders = TableDetail(schema="shop", name="orders")
    customers = TableDetail(schema="shop", name="customers")
    fk = ConstraintResult(
        fk_table="orders",
        pk_table="customers",
        column_name="customer_id",
        constraint_name="orders_customer_id_fkey",
        fk_schema="shop",
        pk_schema="shop",
    )
    return AnalysisResult(tables=[
        TableResult(
            table=customers,
            columns=[
                ColumnResult(name="id", data_type="int4", is_primary=True),
                ColumnResult(name="name", data_type="varchar", comment='the "full" name'),
            ],
            constraints=[fk],
        ),
        TableResult(
            table=orders,
            columns=[
                ColumnResult(name="customer_id", data_type="int4", is_foreign=True),
                ColumnResult(name="id", data_type="int4", is_primary=True),
                ColumnResult(name="status", data_type="order_status", enum_values="new,paid"),
            ],
            constraints=[fk],
        ),
    ])
