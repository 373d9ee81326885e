"""Interactive questions asked when configuration leaves a choice open."""

import re
from typing import List, Optional, Protocol

from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from .errors import InteractionError

_RANGE = re.compile(r"^(\d+)\s*-\s*(\d+)$")


class Questioner(Protocol):
    """Asks the user to pick a connection string, schemas or tables."""

    def ask_connection_question(self, suggestions: List[str]) -> str:
        ...

    def ask_schema_question(self, options: List[str]) -> List[str]:
        ...

    def ask_table_question(self, options: List[str]) -> List[str]:
        ...


def parse_selection(answer: str, options: List[str]) -> List[str]:
    """Parse a multi-select answer into the chosen options.

    Accepts comma-separated 1-based numbers, ranges like ``2-4``, option
    names, or ``all``. Chosen options keep the order of ``options``.

    Raises:
        ValueError: if any part of the answer matches nothing
    """
    answer = answer.strip()
    if answer.lower() == "all":
        return list(options)

    chosen = set()
    for part in (p.strip() for p in answer.split(",")):
        if not part:
            continue
        range_match = _RANGE.match(part)
        if part.isdigit():
            indexes = [int(part)]
        elif range_match:
            start, end = int(range_match.group(1)), int(range_match.group(2))
            indexes = list(range(start, end + 1))
        elif part in options:
            chosen.add(part)
            continue
        else:
            raise ValueError(f"Unknown option: {part}")

        for index in indexes:
            if not 1 <= index <= len(options):
                raise ValueError(f"No option number {index}")
            chosen.add(options[index - 1])

    return [option for option in options if option in chosen]


class RichQuestioner:
    """Questioner prompting on the terminal with rich."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def _print_options(self, title: str, options: List[str]):
        table = Table(title=title)
        table.add_column("#", style="cyan", justify="right")
        table.add_column("Option", style="green")
        for index, option in enumerate(options, start=1):
            table.add_row(str(index), option)
        self.console.print(table)

    def _ask(self, prompt: str, default: Optional[str] = None) -> str:
        try:
            if default is None:
                return Prompt.ask(prompt, console=self.console)
            return Prompt.ask(prompt, console=self.console, default=default)
        except (KeyboardInterrupt, EOFError) as e:
            raise InteractionError("Question aborted") from e

    def ask_connection_question(self, suggestions: List[str]) -> str:
        """Ask for a connection string, offering configured suggestions."""
        if suggestions:
            self._print_options("Connection string suggestions", suggestions)
            answer = self._ask("Connection string (number or value)", default="1").strip()
            if answer.isdigit() and 1 <= int(answer) <= len(suggestions):
                return suggestions[int(answer) - 1]
        else:
            answer = self._ask("Connection string").strip()

        if not answer:
            raise InteractionError("No connection string entered")
        return answer

    def _ask_multi_select(self, title: str, options: List[str]) -> List[str]:
        self._print_options(title, options)
        while True:
            answer = self._ask("Select (e.g. 1,3-5 or all)")
            try:
                chosen = parse_selection(answer, options)
            except ValueError as e:
                self.console.print(f"[red]{e}[/red]")
                continue
            if chosen:
                return chosen
            self.console.print("[yellow]Select at least one option[/yellow]")

    def ask_schema_question(self, options: List[str]) -> List[str]:
        return self._ask_multi_select("Available schemas", options)

    def ask_table_question(self, options: List[str]) -> List[str]:
        return self._ask_multi_select("Available tables", options)
