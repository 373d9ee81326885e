"""Mermaid erDiagram rendering."""

import re
import logging
from typing import Optional

from rich.console import Console

from ..config import ErdConfig, OutputMode
from ..errors import ConfigurationError
from .models import ErdDiagramData, ErdColumnData, ErdConstraintData

logger = logging.getLogger(__name__)

# Mermaid attribute types only allow word characters, dashes, brackets and parentheses
_INVALID_TYPE_CHARS = re.compile(r"[^\w\-\[\]()]")


def format_data_type(data_type: str) -> str:
    return _INVALID_TYPE_CHARS.sub("_", data_type.strip()) or "unknown"


def _column_line(column: ErdColumnData) -> str:
    line = f"        {format_data_type(column.data_type)} {column.name}"
    if column.attribute_key.value:
        line += f" {column.attribute_key.value}"
    if column.description:
        line += f' "{column.description}"'
    return line


def _constraint_line(constraint: ErdConstraintData) -> str:
    return (
        f"    {constraint.fk_table_name} {constraint.relation.value} "
        f'{constraint.pk_table_name} : "{constraint.constraint_label}"'
    )


def render_mermaid(diagram: ErdDiagramData, enclose_with_backticks: bool = False) -> str:
    """Render the diagram as Mermaid erDiagram source.

    A relationship reported by both of its tables is written once.
    """
    lines = ["erDiagram"]

    for table in diagram.tables:
        lines.append(f"    {table.name} {{")
        lines.extend(_column_line(column) for column in table.columns)
        lines.append("    }")

    relation_lines = []
    for constraint in diagram.constraints:
        line = _constraint_line(constraint)
        if line not in relation_lines:
            relation_lines.append(line)

    if relation_lines:
        lines.append("")
        lines.extend(relation_lines)

    text = "\n".join(lines) + "\n"
    if enclose_with_backticks:
        text = f"```mermaid\n{text}```\n"
    return text


def write_diagram(text: str, config: ErdConfig, console: Optional[Console] = None) -> Optional[str]:
    """Write the rendered diagram to the configured output.

    Returns:
        The output file path, or None when printed to stdout
    """
    if config.output_mode == OutputMode.STDOUT:
        # plain print so the diagram is not styled or wrapped by rich
        print(text, end="")
        return None

    try:
        with open(config.output_file_name, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise ConfigurationError(
            f"Cannot write diagram to {config.output_file_name}: {e}",
            details={"path": config.output_file_name},
        ) from e

    logger.info("Diagram written to %s", config.output_file_name)
    if console:
        console.print(f"[green]Diagram written to {config.output_file_name}[/green]")
    return config.output_file_name
