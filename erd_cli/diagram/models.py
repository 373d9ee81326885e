"""View models for rendering an entity-relationship diagram."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class ErdAttributeKey(str, Enum):
    """Key marker shown next to a column."""

    PRIMARY_KEY = "PK"
    FOREIGN_KEY = "FK"
    NONE = ""


class ErdRelationType(str, Enum):
    """Mermaid cardinality notation for a relationship."""

    ONE_TO_ONE = "|o--||"
    MANY_TO_ONE = "}o--||"


@dataclass
class ErdColumnData:
    name: str
    data_type: str
    description: str = ""
    attribute_key: ErdAttributeKey = ErdAttributeKey.NONE


@dataclass
class ErdTableData:
    name: str
    columns: List[ErdColumnData] = field(default_factory=list)


@dataclass
class ErdConstraintData:
    fk_table_name: str
    pk_table_name: str
    relation: ErdRelationType
    constraint_label: str = ""


@dataclass
class ErdDiagramData:
    """Tables and relationships ready to be rendered."""
    tables: List[ErdTableData] = field(default_factory=list)
    constraints: List[ErdConstraintData] = field(default_factory=list)
