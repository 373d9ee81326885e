"""DuckDB metadata connector."""

import re
import logging
from typing import Optional, List, Sequence, Any
from pathlib import Path

from ..errors import ProviderError
from .models import TableDetail, ColumnResult, ConstraintResult

logger = logging.getLogger(__name__)

_ENUM_TYPE = re.compile(r"^ENUM\((.*)\)$", re.IGNORECASE | re.DOTALL)
_QUOTED_VALUE = re.compile(r"'((?:[^']|'')*)'")


def parse_enum_values(data_type: str) -> str:
    """Return the comma-joined members of an ``ENUM('a', 'b')`` type, or ''."""
    match = _ENUM_TYPE.match(data_type.strip())
    if not match:
        return ""
    values = [v.replace("''", "'") for v in _QUOTED_VALUE.findall(match.group(1))]
    return ",".join(values)


class DuckDBConnector:
    """Connector reading schema metadata from a DuckDB database file."""

    ENGINE = "duckdb"
    EXCLUDED_SCHEMAS = {'information_schema', 'pg_catalog'}

    def __init__(self, connection_string: str, read_only: bool = True):
        """Initialize DuckDB connector.

        Args:
            connection_string: duckdb:///path/to/file.duckdb, or duckdb:///:memory:
            read_only: Open database in read-only mode
        """
        self.connection_string = connection_string
        self.read_only = read_only
        self.database_path = self._extract_database_path()
        self._connection = None

    def _extract_database_path(self) -> str:
        """Extract the database path from the connection string."""
        path = self.connection_string
        if path.startswith('duckdb:///'):
            path = path[10:]
        elif path.startswith('duckdb://'):
            path = path[9:]
        # Remove query parameters if any
        if '?' in path:
            path = path.split('?')[0]
        return path or ':memory:'

    def get_database_name(self) -> str:
        if self.database_path == ':memory:':
            return 'memory'
        return Path(self.database_path).stem

    def connect(self):
        """Connect directly to the DuckDB database file."""
        if self._connection is not None:
            return self._connection

        try:
            import duckdb
        except ImportError:
            raise ImportError(
                "duckdb is required. "
                "Install it with: pip install duckdb"
            )

        read_only = self.read_only and self.database_path != ':memory:'
        try:
            self._connection = duckdb.connect(self.database_path, read_only=read_only)
        except duckdb.Error as e:
            raise ProviderError(
                f"Could not open DuckDB database '{self.database_path}': {e}",
                engine=self.ENGINE,
                operation="connect",
            ) from e
        return self._connection

    def close(self):
        """Close the DuckDB connection."""
        if self._connection:
            self._connection.close()
            self._connection = None

    def _execute_query(self, sql: str, params: Optional[Sequence[Any]] = None, operation: str = "query") -> List:
        """Execute a SQL query and return all result rows."""
        self.connect()
        import duckdb

        try:
            return self._connection.execute(sql, list(params or [])).fetchall()
        except duckdb.Error as e:
            raise ProviderError(f"DuckDB {operation} failed: {e}", engine=self.ENGINE, operation=operation) from e

    def get_schemas(self) -> List[str]:
        """Get all user schemas in the database."""
        result = self._execute_query("""
            SELECT schema_name
            FROM information_schema.schemata
            WHERE catalog_name = current_database()
            ORDER BY schema_name
        """, operation="get_schemas")

        schemas = [row[0] for row in result]
        return [s for s in schemas if s.lower() not in self.EXCLUDED_SCHEMAS]

    def get_tables(self, schemas: List[str]) -> List[TableDetail]:
        """Get all base tables in the given schemas."""
        if not schemas:
            return []

        placeholders = ", ".join("?" for _ in schemas)
        result = self._execute_query(f"""
            SELECT table_schema, table_name
            FROM information_schema.tables
            WHERE table_catalog = current_database()
              AND table_type = 'BASE TABLE'
              AND table_schema IN ({placeholders})
            ORDER BY table_schema, table_name
        """, schemas, operation="get_tables")

        return [TableDetail(schema=row[0], name=row[1]) for row in result]

    def _key_columns(self, schema: str, table: str, constraint_type: str) -> List[str]:
        """Get the columns taking part in constraints of the given type."""
        result = self._execute_query("""
            SELECT constraint_column_names
            FROM duckdb_constraints()
            WHERE database_name = current_database()
              AND schema_name = ?
              AND table_name = ?
              AND constraint_type = ?
        """, [schema, table, constraint_type], operation="get_key_columns")

        columns = []
        for row in result:
            names = row[0]
            if isinstance(names, (list, tuple)):
                columns.extend(names)
            elif names:
                columns.append(names)
        return columns

    def get_columns(self, table: TableDetail) -> List[ColumnResult]:
        """Get all columns for a table."""
        result = self._execute_query("""
            SELECT column_name, data_type, comment
            FROM duckdb_columns()
            WHERE database_name = current_database()
              AND schema_name = ?
              AND table_name = ?
            ORDER BY column_index
        """, [table.schema, table.name], operation="get_columns")

        primary_keys = set(self._key_columns(table.schema, table.name, 'PRIMARY KEY'))
        foreign_keys = set(self._key_columns(table.schema, table.name, 'FOREIGN KEY'))

        columns = []
        for name, data_type, comment in result:
            enum_values = parse_enum_values(data_type or "")
            columns.append(ColumnResult(
                name=name,
                data_type="ENUM" if enum_values else (data_type or ""),
                is_primary=name in primary_keys,
                is_foreign=name in foreign_keys,
                enum_values=enum_values,
                comment=comment or "",
            ))
        return columns

    def get_constraints(self, table: TableDetail) -> List[ConstraintResult]:
        """Get the foreign keys referencing or referenced by a table.

        DuckDB foreign keys cannot cross schemas, so both sides share the
        table's schema.
        """
        result = self._execute_query("""
            SELECT table_name, constraint_column_names, referenced_table
            FROM duckdb_constraints()
            WHERE database_name = current_database()
              AND schema_name = ?
              AND constraint_type = 'FOREIGN KEY'
              AND (table_name = ? OR referenced_table = ?)
            ORDER BY table_name, referenced_table
        """, [table.schema, table.name, table.name], operation="get_constraints")

        constraints = []
        pk_cache = {}
        for fk_table, column_names, pk_table in result:
            if fk_table not in pk_cache:
                pk_cache[fk_table] = self._key_columns(table.schema, fk_table, 'PRIMARY KEY')
            if pk_table not in pk_cache:
                pk_cache[pk_table] = self._key_columns(table.schema, pk_table, 'PRIMARY KEY')

            for column_name in column_names:
                constraints.append(ConstraintResult(
                    fk_table=fk_table,
                    pk_table=pk_table,
                    column_name=column_name,
                    constraint_name=f"{fk_table}_{'_'.join(column_names)}_fkey",
                    is_primary=column_name in pk_cache[fk_table],
                    has_multiple_pk=len(pk_cache[pk_table]) > 1,
                    fk_schema=table.schema,
                    pk_schema=table.schema,
                ))
        return constraints
