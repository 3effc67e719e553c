"""Tests for output rendering."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from linear_cli import output
from linear_cli.output import OutputMode, TableData, _strip_ansi, _wrap_text


@pytest.fixture
def table() -> TableData:
    return TableData(
        ["Identifier", "Title"],
        [["ENG-1", "Fix login"], ["ENG-2", "Add search"]],
    )


class TestOutputMode:
    def test_json_wins_over_plaintext(self) -> None:
        assert OutputMode.from_flags(plaintext=True, json_output=True) is OutputMode.JSON

    def test_defaults_to_table(self) -> None:
        assert OutputMode.from_flags() is OutputMode.TABLE
        assert OutputMode.from_flags(plaintext=True) is OutputMode.PLAINTEXT


class TestRenderTable:
    """Test the three renderings of a table."""

    def test_plaintext_is_tab_separated(self, table: TableData) -> None:
        rendered = output.render_table(table, OutputMode.PLAINTEXT)
        assert rendered.splitlines() == ["Identifier\tTitle", "ENG-1\tFix login", "ENG-2\tAdd search"]

    def test_json_uses_lowercase_keys(self, table: TableData) -> None:
        records = json.loads(output.render_table(table, OutputMode.JSON))
        assert records[0] == {"identifier": "ENG-1", "title": "Fix login"}

    def test_rich_table_has_borders(self, table: TableData) -> None:
        lines = [_strip_ansi(line) for line in output.render_table(table, OutputMode.TABLE).splitlines()]

        assert lines[0].startswith("+-")
        assert "Identifier" in lines[1]
        assert lines[2].startswith("+=")
        assert "| ENG-1" in lines[3]
        assert len({len(line) for line in lines}) == 1

    def test_long_cells_wrap_to_terminal(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            output.shutil, "get_terminal_size", lambda fallback=(120, 24): type("S", (), {"columns": 40})()
        )
        wide = TableData(["Title"], [["word " * 30]])

        lines = [_strip_ansi(line) for line in output.render_table(wide, OutputMode.TABLE).splitlines()]

        assert all(len(line) <= 40 for line in lines)
        assert len(lines) > 5


class TestWrapText:
    def test_breaks_on_words(self) -> None:
        assert _wrap_text("alpha beta gamma", 10) == ["alpha beta", "gamma"]

    def test_splits_long_words(self) -> None:
        assert _wrap_text("abcdefghij", 4) == ["abcd", "efgh", "ij"]

    def test_empty_text(self) -> None:
        assert _wrap_text("", 10) == [""]

    def test_chunks_of_long_words_start_new_lines(self) -> None:
        assert _wrap_text("a bcdefgh", 4) == ["a", "bcde", "fgh"]

    def test_colored_words_are_not_cut(self) -> None:
        colored = "\x1b[31mabcdefgh\x1b[0m"
        assert _wrap_text(colored, 4) == [colored]


class TestMessages:
    """Test success, info and error reporting per mode."""

    def test_error_json_goes_to_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        output.error("boom", OutputMode.JSON)
        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"error": "boom"}
        assert captured.err == ""

    def test_error_plaintext_goes_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        output.error("boom", OutputMode.PLAINTEXT)
        captured = capsys.readouterr()
        assert captured.err == "Error: boom\n"
        assert captured.out == ""

    def test_success_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        output.success("done", OutputMode.JSON)
        assert json.loads(capsys.readouterr().out) == {"status": "success", "message": "done"}

    def test_info_plaintext(self, capsys: pytest.CaptureFixture[str]) -> None:
        output.info("No issues found", OutputMode.PLAINTEXT)
        assert capsys.readouterr().out == "No issues found\n"

    def test_print_json_handles_datetimes(self, capsys: pytest.CaptureFixture[str]) -> None:
        output.print_json({"at": datetime(2024, 1, 1, tzinfo=timezone.utc)})
        assert json.loads(capsys.readouterr().out) == {"at": "2024-01-01T00:00:00+00:00"}

    def test_details_skip_empty_fields(self, capsys: pytest.CaptureFixture[str]) -> None:
        output.print_details(
            "ENG-1: Fix login",
            [("State", "Todo"), ("Due", None), ("Labels", "")],
            OutputMode.PLAINTEXT,
            body="Steps to reproduce",
        )
        assert capsys.readouterr().out == "ENG-1: Fix login\nState: Todo\n\nSteps to reproduce\n"


class TestFormattingHelpers:
    @pytest.mark.parametrize(
        "priority, label",
        [(0, "None"), (1, "Urgent"), (2, "High"), (3, "Normal"), (4, "Low"), (None, "None"), (9, "None")],
    )
    def test_priority_labels(self, priority, label: str) -> None:
        assert output.priority_label(priority) == label

    def test_truncate(self) -> None:
        assert output.truncate("abcdefghij", 8) == "abcde..."
        assert output.truncate("short", 8) == "short"
        assert output.truncate(None, 8) == ""

    def test_short_date(self) -> None:
        assert output.short_date("2024-05-01T10:00:00.000Z") == "2024-05-01"
        assert output.short_date(None) == ""

    def test_name_of(self) -> None:
        assert output.name_of({"name": "Ada"}) == "Ada"
        assert output.name_of(None, default="Unassigned") == "Unassigned"
        assert output.name_of({"key": "ENG"}, "key") == "ENG"
