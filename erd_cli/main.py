"""ERD CLI - Main entry point."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from .commands import generate
from .config import load_config
from .errors import ErdError

app = typer.Typer(
    name="erd-cli",
    help="Create Mermaid entity-relationship diagrams from database schemas",
    add_completion=False,
)

app.command(name="generate")(generate.generate)

console = Console()


@app.command()
def config(
    run_config: Optional[Path] = typer.Option(None, "--run-config", help="YAML file with the options of a run"),
):
    """Show current configuration."""
    try:
        settings = load_config(run_config=run_config)
    except ErdError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)
    generate.show_config(settings, console)


@app.callback()
def main():
    """
    ERD CLI - Create Mermaid ERDs from PostgreSQL, DuckDB, SQLite and Snowflake.

    Examples:

        erd-cli generate -c postgresql://user:pw@localhost:5432/shop

        erd-cli generate -c sqlite:///app.db --use-all-tables --output-mode stdout

        erd-cli config --run-config run.yaml
    """
    pass


if __name__ == "__main__":
    app()
