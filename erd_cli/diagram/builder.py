"""Turns loaded table metadata into diagram view models.

Every function here is pure: output depends only on the configuration and
the metadata passed in.
"""

from typing import List, Optional

from ..config import ErdConfig, DescriptionSource
from ..database.models import AnalysisResult, ColumnResult, ConstraintResult, TableDetail
from .models import (
    ErdAttributeKey,
    ErdColumnData,
    ErdConstraintData,
    ErdDiagramData,
    ErdRelationType,
    ErdTableData,
)

# Mermaid cannot embed a raw double quote inside a quoted string
QUOTE_ESCAPE = "#quot;"


def classify_relation(constraint: ConstraintResult) -> ErdRelationType:
    """One-to-one only when the FK column is the table's single-column key."""
    if constraint.is_primary and not constraint.has_multiple_pk:
        return ErdRelationType.ONE_TO_ONE
    return ErdRelationType.MANY_TO_ONE


def classify_attribute_key(column: ColumnResult) -> ErdAttributeKey:
    if column.is_primary:
        return ErdAttributeKey.PRIMARY_KEY
    if column.is_foreign:
        return ErdAttributeKey.FOREIGN_KEY
    return ErdAttributeKey.NONE


def build_column_data(config: ErdConfig, column: ColumnResult) -> ErdColumnData:
    """Build the displayed column: key marker and description."""
    attribute_key = ErdAttributeKey.NONE if config.omit_attribute_keys else classify_attribute_key(column)

    parts = []
    if config.shows_description(DescriptionSource.ENUM_VALUES) and column.enum_values:
        parts.append(f"<{column.enum_values}>")
    if config.shows_description(DescriptionSource.COLUMN_COMMENTS) and column.comment:
        parts.append(column.comment.replace('"', QUOTE_ESCAPE))

    return ErdColumnData(
        name=column.name,
        data_type=column.data_type,
        description=" ".join(parts),
        attribute_key=attribute_key,
    )


def build_table_name(config: ErdConfig, table: TableDetail) -> str:
    """Display name of a table, optionally prefixed with its schema.

    A ``.`` separator is quoted because Mermaid would otherwise read it as
    part of the syntax.
    """
    if not config.show_schema_prefix:
        return table.name

    name = f"{table.schema}{config.schema_prefix_separator}{table.name}"
    if config.schema_prefix_separator == ".":
        return f'"{name}"'
    return name


def _endpoint_tables(constraint: ConstraintResult, owner: Optional[TableDetail]):
    # Connectors that do not report endpoint schemas leave them empty
    default_schema = owner.schema if owner else ""
    fk = TableDetail(schema=constraint.fk_schema or default_schema, name=constraint.fk_table)
    pk = TableDetail(schema=constraint.pk_schema or default_schema, name=constraint.pk_table)
    return fk, pk


def table_name_in_list(tables: List[ErdTableData], name: str) -> bool:
    return any(table.name == name for table in tables)


def should_skip_constraint(
    config: ErdConfig,
    tables: List[ErdTableData],
    constraint: ConstraintResult,
    owner: Optional[TableDetail] = None,
) -> bool:
    """Skip constraints with an endpoint outside the diagram, unless all are shown."""
    if config.show_all_constraints:
        return False

    fk, pk = _endpoint_tables(constraint, owner)
    return not (
        table_name_in_list(tables, build_table_name(config, pk))
        and table_name_in_list(tables, build_table_name(config, fk))
    )


def build_constraint_data(
    config: ErdConfig,
    constraint: ConstraintResult,
    owner: Optional[TableDetail] = None,
) -> ErdConstraintData:
    fk, pk = _endpoint_tables(constraint, owner)
    return ErdConstraintData(
        fk_table_name=build_table_name(config, fk),
        pk_table_name=build_table_name(config, pk),
        relation=classify_relation(constraint),
        constraint_label="" if config.omit_constraint_labels else constraint.column_name,
    )


def build_diagram_data(config: ErdConfig, result: AnalysisResult) -> ErdDiagramData:
    """Build the diagram for an analysis result.

    Tables keep the result order and duplicates (by display name) are dropped.
    Constraints are kept when both endpoints are in the diagram, or always
    when ``show_all_constraints`` is set.
    """
    tables: List[ErdTableData] = []
    for table_result in result.tables:
        name = build_table_name(config, table_result.table)
        if table_name_in_list(tables, name):
            continue
        tables.append(ErdTableData(
            name=name,
            columns=[build_column_data(config, column) for column in table_result.columns],
        ))

    constraints: List[ErdConstraintData] = []
    for table_result in result.tables:
        for constraint in table_result.constraints:
            if should_skip_constraint(config, tables, constraint, table_result.table):
                continue
            constraints.append(build_constraint_data(config, constraint, table_result.table))

    return ErdDiagramData(tables=tables, constraints=constraints)
