"""PostgreSQL metadata connector."""

from typing import Optional, List, Sequence, Any, Dict, Union

from ..errors import ProviderError
from .models import TableDetail, ColumnResult, ConstraintResult

COLUMNS_QUERY = """
    SELECT c.column_name,
           c.udt_name,
           EXISTS (
               SELECT 1
               FROM information_schema.table_constraints tc
               JOIN information_schema.key_column_usage kcu
                 ON tc.constraint_name = kcu.constraint_name
                AND tc.table_schema = kcu.table_schema
                AND tc.table_name = kcu.table_name
               WHERE tc.table_schema = c.table_schema
                 AND tc.table_name = c.table_name
                 AND kcu.column_name = c.column_name
                 AND tc.constraint_type = 'PRIMARY KEY'
           ) AS is_primary,
           EXISTS (
               SELECT 1
               FROM information_schema.table_constraints tc
               JOIN information_schema.key_column_usage kcu
                 ON tc.constraint_name = kcu.constraint_name
                AND tc.table_schema = kcu.table_schema
                AND tc.table_name = kcu.table_name
               WHERE tc.table_schema = c.table_schema
                 AND tc.table_name = c.table_name
                 AND kcu.column_name = c.column_name
                 AND tc.constraint_type = 'FOREIGN KEY'
           ) AS is_foreign,
           COALESCE((
               SELECT string_agg(e.enumlabel, ',' ORDER BY e.enumsortorder)
               FROM pg_type t
               JOIN pg_enum e ON e.enumtypid = t.oid
               JOIN pg_namespace n ON n.oid = t.typnamespace
               WHERE t.typname = c.udt_name
                 AND n.nspname = c.udt_schema
           ), '') AS enum_values,
           COALESCE(col_description(
               format('%%I.%%I', c.table_schema, c.table_name)::regclass,
               c.ordinal_position
           ), '') AS comment
    FROM information_schema.columns c
    WHERE c.table_schema = %(schema)s
      AND c.table_name = %(table)s
    ORDER BY c.ordinal_position
"""

CONSTRAINTS_QUERY = """
    SELECT fk.relname AS fk_table,
           fkn.nspname AS fk_schema,
           pk.relname AS pk_table,
           pkn.nspname AS pk_schema,
           a.attname AS column_name,
           con.conname AS constraint_name,
           COALESCE(a.attnum = ANY (fkpk.conkey), false) AS is_primary,
           COALESCE(array_length(pkpk.conkey, 1), 0) > 1 AS has_multiple_pk
    FROM pg_constraint con
    JOIN pg_class fk ON fk.oid = con.conrelid
    JOIN pg_namespace fkn ON fkn.oid = fk.relnamespace
    JOIN pg_class pk ON pk.oid = con.confrelid
    JOIN pg_namespace pkn ON pkn.oid = pk.relnamespace
    JOIN LATERAL unnest(con.conkey) AS k(attnum) ON true
    JOIN pg_attribute a ON a.attrelid = con.conrelid AND a.attnum = k.attnum
    LEFT JOIN pg_constraint fkpk ON fkpk.conrelid = con.conrelid AND fkpk.contype = 'p'
    LEFT JOIN pg_constraint pkpk ON pkpk.conrelid = con.confrelid AND pkpk.contype = 'p'
    WHERE con.contype = 'f'
      AND ((fkn.nspname = %(schema)s AND fk.relname = %(table)s)
        OR (pkn.nspname = %(schema)s AND pk.relname = %(table)s))
    ORDER BY fk.relname, pk.relname, con.conname, a.attname
"""


class PostgresConnector:
    """Connector reading schema metadata from PostgreSQL catalogs."""

    ENGINE = "postgres"
    EXCLUDED_SCHEMAS = {'information_schema', 'pg_catalog', 'pg_toast'}
    EXCLUDED_SCHEMA_PREFIXES = ('pg_temp_', 'pg_toast_temp_')

    def __init__(self, connection_string: str):
        self.connection_string = connection_string
        self._connection = None

    def connect(self):
        if self._connection is not None:
            return self._connection

        try:
            import psycopg2
        except ImportError:
            raise ImportError(
                "psycopg2 is required for PostgreSQL connections. "
                "Install it with: pip install psycopg2-binary"
            )

        try:
            # libpq accepts postgresql:// and postgres:// URIs directly
            self._connection = psycopg2.connect(self.connection_string)
            self._connection.set_session(readonly=True, autocommit=True)
        except psycopg2.Error as e:
            raise ProviderError(
                f"Could not connect to PostgreSQL: {e}",
                engine=self.ENGINE,
                operation="connect",
            ) from e
        return self._connection

    def close(self):
        if self._connection:
            self._connection.close()
            self._connection = None

    def _execute_query(
        self,
        sql: str,
        params: Optional[Union[Sequence[Any], Dict[str, Any]]] = None,
        operation: str = "query",
    ) -> List:
        self.connect()
        import psycopg2

        try:
            with self._connection.cursor() as cursor:
                cursor.execute(sql, params)
                return cursor.fetchall()
        except psycopg2.Error as e:
            raise ProviderError(f"PostgreSQL {operation} failed: {e}", engine=self.ENGINE, operation=operation) from e

    def get_schemas(self) -> List[str]:
        result = self._execute_query("""
            SELECT schema_name
            FROM information_schema.schemata
            ORDER BY schema_name
        """, operation="get_schemas")
        return [
            row[0] for row in result
            if row[0] not in self.EXCLUDED_SCHEMAS and not row[0].startswith(self.EXCLUDED_SCHEMA_PREFIXES)
        ]

    def get_tables(self, schemas: List[str]) -> List[TableDetail]:
        if not schemas:
            return []
        result = self._execute_query("""
            SELECT table_schema, table_name
            FROM information_schema.tables
            WHERE table_type = 'BASE TABLE'
              AND table_schema = ANY(%s)
            ORDER BY table_schema, table_name
        """, [list(schemas)], operation="get_tables")
        return [TableDetail(schema=row[0], name=row[1]) for row in result]

    def get_columns(self, table: TableDetail) -> List[ColumnResult]:
        result = self._execute_query(
            COLUMNS_QUERY,
            {"schema": table.schema, "table": table.name},
            operation="get_columns",
        )
        return [
            ColumnResult(
                name=name,
                data_type=data_type,
                is_primary=is_primary,
                is_foreign=is_foreign,
                enum_values=enum_values,
                comment=comment,
            )
            for name, data_type, is_primary, is_foreign, enum_values, comment in result
        ]

    def get_constraints(self, table: TableDetail) -> List[ConstraintResult]:
        result = self._execute_query(
            CONSTRAINTS_QUERY,
            {"schema": table.schema, "table": table.name},
            operation="get_constraints",
        )
        return [
            ConstraintResult(
                fk_table=fk_table,
                pk_table=pk_table,
                column_name=column_name,
                constraint_name=constraint_name,
                is_primary=is_primary,
                has_multiple_pk=has_multiple_pk,
                fk_schema=fk_schema,
                pk_schema=pk_schema,
            )
            for fk_table, fk_schema, pk_table, pk_schema, column_name, constraint_name, is_primary, has_multiple_pk
            in result
        ]
