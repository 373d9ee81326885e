"""Tests for interactive questions."""

import io
from unittest.mock import patch

import pytest
from rich.console import Console

from erd_cli.errors import InteractionError
from erd_cli.questioner import RichQuestioner, parse_selection

OPTIONS = ["public", "sales", "staging", "audit"]


class TestParseSelection:
    """Multi-select answers."""

    @pytest.mark.parametrize("answer,expected", [
        ("1", ["public"]),
        ("3,1", ["public", "staging"]),
        ("2-3", ["sales", "staging"]),
        ("audit, 1", ["public", "audit"]),
        ("all", OPTIONS),
        (" ALL ", OPTIONS),
        ("", []),
    ])
    def test_valid(self, answer, expected):
        assert parse_selection(answer, OPTIONS) == expected

    @pytest.mark.parametrize("answer", ["0", "5", "2-9", "unknown"])
    def test_invalid(self, answer):
        with pytest.raises(ValueError):
            parse_selection(answer, OPTIONS)


@pytest.fixture
def rich_questioner():
    return RichQuestioner(Console(file=io.StringIO()))


class TestRichQuestioner:
    """Prompts through rich."""

    def test_connection_suggestion_by_number(self, rich_questioner):
        with patch("erd_cli.questioner.Prompt.ask", return_value="2"):
            answer = rich_questioner.ask_connection_question(["sqlite:///a.db", "sqlite:///b.db"])

        assert answer == "sqlite:///b.db"

    def test_connection_literal(self, rich_questioner):
        with patch("erd_cli.questioner.Prompt.ask", return_value=" duckdb:///x.duckdb "):
            answer = rich_questioner.ask_connection_question([])

        assert answer == "duckdb:///x.duckdb"

    def test_empty_connection(self, rich_questioner):
        with patch("erd_cli.questioner.Prompt.ask", return_value=""):
            with pytest.raises(InteractionError):
                rich_questioner.ask_connection_question([])

    def test_multi_select_retries(self, rich_questioner):
        with patch("erd_cli.questioner.Prompt.ask", side_effect=["9", "", "1,2"]) as ask:
            answer = rich_questioner.ask_schema_question(OPTIONS)

        assert answer == ["public", "sales"]
        assert ask.call_count == 3

    def test_aborted_question(self, rich_questioner):
        with patch("erd_cli.questioner.Prompt.ask", side_effect=KeyboardInterrupt):
            with pytest.raises(InteractionError):
                rich_questioner.ask_table_question(["main.users"])
