"""Database metadata models produced by the connectors and the analyzer."""

from typing import Optional, List
from dataclasses import dataclass, field

from ..errors import NameResolutionWarning


@dataclass(frozen=True, order=True)
class TableDetail:
    """A table identified by schema and name.

    ``TableDetail()`` is the placeholder used for names that could not be
    resolved.
    """
    schema: str = ""
    name: str = ""

    @property
    def qualified_name(self) -> str:
        return f"{self.schema}.{self.name}"

    @property
    def is_placeholder(self) -> bool:
        return not self.schema and not self.name


@dataclass(frozen=True)
class ColumnResult:
    """A column of a table as reported by the database."""
    name: str
    data_type: str = ""
    is_primary: bool = False
    is_foreign: bool = False
    enum_values: str = ""  # comma-joined
    comment: str = ""


@dataclass(frozen=True)
class ConstraintResult:
    """A foreign key from ``fk_table`` to ``pk_table`` through ``column_name``."""
    fk_table: str
    pk_table: str
    column_name: str = ""
    constraint_name: str = ""
    is_primary: bool = False  # FK column is also part of the FK table's primary key
    has_multiple_pk: bool = False  # referenced table has a composite primary key
    fk_schema: str = ""
    pk_schema: str = ""


@dataclass(frozen=True)
class TableResult:
    """Columns and constraints loaded for one table."""
    table: TableDetail
    columns: List[ColumnResult] = field(default_factory=list)
    constraints: List[ConstraintResult] = field(default_factory=list)


@dataclass(frozen=True)
class AnalysisResult:
    """Output of the analyzer, input of the diagram builder."""
    tables: List[TableResult] = field(default_factory=list)

    @property
    def column_count(self) -> int:
        return sum(len(t.columns) for t in self.tables)

    @property
    def constraint_count(self) -> int:
        return sum(len(t.constraints) for t in self.tables)


@dataclass(frozen=True)
class TableNameResolution:
    """Result of resolving a ``schema.table`` string."""
    value: str
    table: TableDetail
    warning: Optional[NameResolutionWarning] = None

    @property
    def ok(self) -> bool:
        return self.warning is None


def parse_table_name(value: str, selected_schemas: List[str]) -> TableNameResolution:
    """Resolve ``value`` against the selected schemas.

    A value prefixed with ``<schema>.`` belongs to that schema; the longest
    matching schema wins so schema names containing dots resolve correctly.
    With exactly one selected schema a bare name is scoped to it. Anything
    else yields the placeholder descriptor together with a warning.
    """
    for schema in sorted(selected_schemas, key=len, reverse=True):
        prefix = f"{schema}."
        if value.startswith(prefix) and len(value) > len(prefix):
            return TableNameResolution(value=value, table=TableDetail(schema=schema, name=value[len(prefix):]))

    if len(selected_schemas) == 1 and value:
        return TableNameResolution(value=value, table=TableDetail(schema=selected_schemas[0], name=value))

    return TableNameResolution(
        value=value,
        table=TableDetail(),
        warning=NameResolutionWarning(value, selected_schemas),
    )
