"""Diagram building and Mermaid rendering."""

from .models import (
    ErdAttributeKey,
    ErdRelationType,
    ErdColumnData,
    ErdTableData,
    ErdConstraintData,
    ErdDiagramData,
)
from .builder import (
    classify_relation,
    classify_attribute_key,
    build_column_data,
    build_table_name,
    build_constraint_data,
    should_skip_constraint,
    table_name_in_list,
    build_diagram_data,
)
from .renderer import render_mermaid, write_diagram

__all__ = [
    "ErdAttributeKey",
    "ErdRelationType",
    "ErdColumnData",
    "ErdTableData",
    "ErdConstraintData",
    "ErdDiagramData",
    "classify_relation",
    "classify_attribute_key",
    "build_column_data",
    "build_table_name",
    "build_constraint_data",
    "should_skip_constraint",
    "table_name_in_list",
    "build_diagram_data",
    "render_mermaid",
    "write_diagram",
]
