"""SQLite metadata connector."""

import sqlite3
from typing import Optional, List, Sequence, Any, Dict

from ..errors import ProviderError
from .models import TableDetail, ColumnResult, ConstraintResult


class SQLiteConnector:
    """Connector reading schema metadata from a SQLite database file.

    SQLite has a single schema, ``main``.
    """

    ENGINE = "sqlite"
    SCHEMA = "main"

    def __init__(self, connection_string: str):
        self.connection_string = connection_string
        self.database_path = self._extract_database_path()
        self._connection: Optional[sqlite3.Connection] = None

    def _extract_database_path(self) -> str:
        path = self.connection_string
        for prefix in ('sqlite3:///', 'sqlite:///', 'sqlite3://', 'sqlite://'):
            if path.startswith(prefix):
                path = path[len(prefix):]
                break
        if '?' in path:
            path = path.split('?')[0]
        return path or ':memory:'

    def connect(self):
        if self._connection is not None:
            return self._connection
        try:
            self._connection = sqlite3.connect(self.database_path)
        except sqlite3.Error as e:
            raise ProviderError(
                f"Could not open SQLite database '{self.database_path}': {e}",
                engine=self.ENGINE,
                operation="connect",
            ) from e
        return self._connection

    def close(self):
        if self._connection:
            self._connection.close()
            self._connection = None

    def _execute_query(self, sql: str, params: Optional[Sequence[Any]] = None, operation: str = "query") -> List:
        self.connect()
        try:
            return self._connection.execute(sql, tuple(params or ())).fetchall()
        except sqlite3.Error as e:
            raise ProviderError(f"SQLite {operation} failed: {e}", engine=self.ENGINE, operation=operation) from e

    def get_schemas(self) -> List[str]:
        return [self.SCHEMA]

    def get_tables(self, schemas: List[str]) -> List[TableDetail]:
        if self.SCHEMA not in schemas:
            return []
        result = self._execute_query("""
            SELECT name
            FROM sqlite_master
            WHERE type = 'table'
              AND name NOT LIKE 'sqlite_%'
            ORDER BY name
        """, operation="get_tables")
        return [TableDetail(schema=self.SCHEMA, name=row[0]) for row in result]

    def _primary_key_columns(self, table: str) -> List[str]:
        # pk is the 1-based position in the primary key, 0 for other columns
        rows = self._execute_query(
            "SELECT name, pk FROM pragma_table_info(?) WHERE pk > 0 ORDER BY pk",
            [table],
            operation="get_primary_keys",
        )
        return [row[0] for row in rows]

    def _foreign_keys(self, table: str) -> List[Dict[str, Any]]:
        rows = self._execute_query(
            'SELECT id, seq, "table", "from" FROM pragma_foreign_key_list(?) ORDER BY id, seq',
            [table],
            operation="get_foreign_keys",
        )
        return [{"id": r[0], "seq": r[1], "pk_table": r[2], "column": r[3]} for r in rows]

    def get_columns(self, table: TableDetail) -> List[ColumnResult]:
        rows = self._execute_query(
            "SELECT name, type, pk FROM pragma_table_info(?) ORDER BY cid",
            [table.name],
            operation="get_columns",
        )
        foreign_columns = {fk["column"] for fk in self._foreign_keys(table.name)}
        return [
            ColumnResult(
                name=name,
                data_type=data_type or "",
                is_primary=pk > 0,
                is_foreign=name in foreign_columns,
            )
            for name, data_type, pk in rows
        ]

    def get_constraints(self, table: TableDetail) -> List[ConstraintResult]:
        """Get the foreign keys declared on the table or pointing at it."""
        # SQLite only exposes foreign keys from the referencing side
        constraints = []
        for other in self.get_tables([self.SCHEMA]):
            for fk in self._foreign_keys(other.name):
                if other.name != table.name and fk["pk_table"] != table.name:
                    continue
                constraints.append(self._to_constraint(other.name, fk))
        return constraints

    def _to_constraint(self, fk_table: str, fk: Dict[str, Any]) -> ConstraintResult:
        fk_primary_keys = self._primary_key_columns(fk_table)
        pk_primary_keys = self._primary_key_columns(fk["pk_table"])
        return ConstraintResult(
            fk_table=fk_table,
            pk_table=fk["pk_table"],
            column_name=fk["column"],
            constraint_name=f"fk_{fk_table}_{fk['id']}",
            is_primary=fk["column"] in fk_primary_keys,
            has_multiple_pk=len(pk_primary_keys) > 1,
            fk_schema=self.SCHEMA,
            pk_schema=self.SCHEMA,
        )
