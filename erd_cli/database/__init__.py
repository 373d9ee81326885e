"""Database metadata module for erd-cli.

Connectors read schemas, tables, columns and foreign keys from one engine
each; all of them satisfy the ``MetadataProvider`` protocol.
"""

from .models import (
    TableDetail,
    ColumnResult,
    ConstraintResult,
    TableResult,
    AnalysisResult,
    TableNameResolution,
    parse_table_name,
)
from .base import MetadataProvider
from .factory import ConnectorFactory, get_scheme
from .duckdb import DuckDBConnector
from .postgres import PostgresConnector
from .snowflake import SnowflakeConnector
from .sqlite import SQLiteConnector

__all__ = [
    # Data models
    "TableDetail",
    "ColumnResult",
    "ConstraintResult",
    "TableResult",
    "AnalysisResult",
    "TableNameResolution",
    "parse_table_name",
    # Interface and factory
    "MetadataProvider",
    "ConnectorFactory",
    "get_scheme",
    # Connectors
    "DuckDBConnector",
    "PostgresConnector",
    "SnowflakeConnector",
    "SQLiteConnector",
]
