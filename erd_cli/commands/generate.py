"""Diagram generation command - builds a Mermaid ERD from a live database."""

import logging
from pathlib import Path
from typing import Optional, List

import typer
from typing_extensions import Annotated
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ..analyzer import Analyzer
from ..config import ErdConfig, OutputMode, load_config
from ..database import ConnectorFactory, AnalysisResult
from ..diagram import build_diagram_data, render_mermaid, write_diagram
from ..errors import ErdError
from ..questioner import RichQuestioner

logger = logging.getLogger(__name__)


class SpinnerProgress:
    """Shows analyzer progress events as a transient rich spinner."""

    def __init__(self, console: Console):
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        )
        self._task = None

    def start(self, message: str) -> None:
        self._progress.start()
        self._task = self._progress.add_task(f"{message}...", total=None)

    def stop(self) -> None:
        if self._task is not None:
            self._progress.remove_task(self._task)
            self._task = None
        self._progress.stop()


def setup_logging(debug: bool, console: Console):
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def print_summary(console: Console, result: AnalysisResult):
    summary = Table(title="Analyzed Tables")
    summary.add_column("Schema", style="cyan")
    summary.add_column("Table", style="green")
    summary.add_column("Columns", justify="right")
    summary.add_column("Constraints", justify="right", style="yellow")

    for table_result in result.tables:
        summary.add_row(
            table_result.table.schema,
            table_result.table.name,
            str(len(table_result.columns)),
            str(len(table_result.constraints)),
        )
    console.print(summary)
    console.print(
        f"[bold]Total: {len(result.tables)} tables, {result.column_count} columns, "
        f"{result.constraint_count} constraints[/bold]"
    )


def generate(
    connection_string: Optional[str] = typer.Option(None, "--connection-string", "-c", help="Database connection string (e.g. postgresql://user:pw@host:5432/db)"),
    schema: Annotated[Optional[List[str]], typer.Option(
        "--schema", "-s",
        help="Schema to use. Can be specified multiple times."
    )] = None,
    use_all_schemas: Optional[bool] = typer.Option(None, "--use-all-schemas/--no-use-all-schemas", help="Use all available schemas without asking"),
    selected_tables: Annotated[Optional[List[str]], typer.Option(
        "--selected-tables", "-t",
        help="Table to use as schema.table. Can be specified multiple times."
    )] = None,
    use_all_tables: Optional[bool] = typer.Option(None, "--use-all-tables/--no-use-all-tables", help="Use all tables of the selected schemas without asking"),
    show_all_constraints: Optional[bool] = typer.Option(None, "--show-all-constraints/--no-show-all-constraints", help="Show constraints whose other table is not selected"),
    show_descriptions: Annotated[Optional[List[str]], typer.Option(
        "--show-descriptions", "-d",
        help="Column description to show: enumValues, columnComments. Can be specified multiple times."
    )] = None,
    omit_constraint_labels: Optional[bool] = typer.Option(None, "--omit-constraint-labels/--no-omit-constraint-labels", help="Hide relationship labels"),
    omit_attribute_keys: Optional[bool] = typer.Option(None, "--omit-attribute-keys/--no-omit-attribute-keys", help="Hide PK/FK markers"),
    show_schema_prefix: Optional[bool] = typer.Option(None, "--show-schema-prefix/--no-show-schema-prefix", help="Prefix table names with their schema"),
    schema_prefix_separator: Optional[str] = typer.Option(None, "--schema-prefix-separator", help="Separator between schema and table name (default: .)"),
    enclose_with_mermaid_backticks: Optional[bool] = typer.Option(None, "--enclose-with-mermaid-backticks/--no-enclose-with-mermaid-backticks", help="Wrap the diagram in a ```mermaid fence"),
    output_file_name: Optional[str] = typer.Option(None, "--output-file-name", "-o", help="Output file (default: result.mmd)"),
    output_mode: Optional[OutputMode] = typer.Option(None, "--output-mode", help="Write to a file or to stdout"),
    run_config: Optional[Path] = typer.Option(None, "--run-config", help="YAML file with the options of this run"),
    debug: Optional[bool] = typer.Option(None, "--debug/--no-debug", help="Enable debug logging"),
):
    """
    Generate a Mermaid ERD from a database schema.

    Options not given on the command line come from the run config file,
    ~/.erd-cli/config.yaml and ERD_* environment variables. Whatever is still
    open (connection string, schemas, tables) is asked interactively.

    Examples:
        erd-cli generate -c postgresql://user:pw@localhost:5432/shop --use-all-tables
        erd-cli generate -c duckdb:///analytics.duckdb -s main -t main.orders -t main.customers
        erd-cli generate --run-config run.yaml --output-mode stdout
    """
    # Flags left out are None and leave config file values alone
    overrides = {
        "connection_string": connection_string,
        "schemas": schema,
        "use_all_schemas": use_all_schemas,
        "selected_tables": selected_tables,
        "use_all_tables": use_all_tables,
        "show_all_constraints": show_all_constraints,
        "show_descriptions": show_descriptions,
        "omit_constraint_labels": omit_constraint_labels,
        "omit_attribute_keys": omit_attribute_keys,
        "show_schema_prefix": show_schema_prefix,
        "schema_prefix_separator": schema_prefix_separator,
        "enclose_with_mermaid_backticks": enclose_with_mermaid_backticks,
        "output_file_name": output_file_name,
        "output_mode": output_mode,
        "debug": debug,
    }

    try:
        config = load_config(run_config=run_config, overrides=overrides)
    except ErdError as e:
        Console(stderr=True).print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    # Keep stdout for the diagram itself when printing it there
    console = Console(stderr=config.output_mode == OutputMode.STDOUT)
    setup_logging(config.debug, console)

    console.print(Panel(
        f"[bold blue]Generating Mermaid ERD[/bold blue]\n"
        f"Schemas: {', '.join(config.schemas) or 'from database'}\n"
        f"Tables: {len(config.selected_tables) or 'from database'}",
        title="ERD Generator"
    ))

    analyzer = Analyzer(
        config=config,
        connector_factory=ConnectorFactory(),
        questioner=RichQuestioner(console),
        progress=SpinnerProgress(console),
    )

    try:
        result = analyzer.analyze()
    except ImportError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    except ErdError as e:
        console.print(f"[red]{e.code}: {e.message}[/red]")
        raise typer.Exit(1)

    for warning in analyzer.warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")

    print_summary(console, result)

    diagram = build_diagram_data(config, result)
    text = render_mermaid(diagram, enclose_with_backticks=config.enclose_with_mermaid_backticks)

    try:
        write_diagram(text, config, console)
    except ErdError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)


def mask_connection_string(connection_string: str) -> str:
    """Hide the password part of a connection string."""
    if "://" not in connection_string or "@" not in connection_string:
        return connection_string
    scheme, rest = connection_string.split("://", 1)
    credentials, host = rest.rsplit("@", 1)
    if ":" not in credentials:
        return connection_string
    user = credentials.split(":", 1)[0]
    return f"{scheme}://{user}:****@{host}"


def show_config(config: ErdConfig, console: Console):
    console.print("[bold]Current Configuration[/bold]")
    console.print(f"  Connection string: {mask_connection_string(config.connection_string) or 'Not set'}")
    console.print(f"  Suggestions: {len(config.connection_string_suggestions)}")
    console.print(f"  Schemas: {', '.join(config.schemas) or ('All' if config.use_all_schemas else 'Ask')}")
    console.print(f"  Tables: {', '.join(config.selected_tables) or ('All' if config.use_all_tables else 'Ask')}")
    console.print(f"  Show all constraints: {'Yes' if config.show_all_constraints else 'No'}")
    console.print(f"  Descriptions: {', '.join(d.value for d in config.show_descriptions) or 'None'}")
    console.print(f"  Omit constraint labels: {'Yes' if config.omit_constraint_labels else 'No'}")
    console.print(f"  Omit attribute keys: {'Yes' if config.omit_attribute_keys else 'No'}")
    schema_prefix = f"Yes ('{config.schema_prefix_separator}')" if config.show_schema_prefix else "No"
    console.print(f"  Schema prefix: {schema_prefix}")
    console.print(f"  Output: {config.output_mode.value} ({config.output_file_name})")
