"""Rendering of command results as a rich table, plain text, or JSON."""

from __future__ import annotations

import json
import re
import shutil
import sys
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, TextIO

from colorama import Fore, Style, init

init(autoreset=True)

ANSI_ESCAPE_RE = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")

PRIORITY_LABELS = {0: "None", 1: "Urgent", 2: "High", 3: "Normal", 4: "Low"}


class OutputMode(Enum):
    TABLE = "table"
    PLAINTEXT = "plaintext"
    JSON = "json"

    @classmethod
    def from_flags(cls, plaintext: bool = False, json_output: bool = False) -> "OutputMode":
        """JSON wins when both flags are given."""
        if json_output:
            return cls.JSON
        if plaintext:
            return cls.PLAINTEXT
        return cls.TABLE


@dataclass
class TableData:
    headers: list[str]
    rows: list[list[str]] = field(default_factory=list)


def _strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def _visible_length(text: str) -> int:
    return len(_strip_ansi(text))


def _ljust_visible(text: str, width: int) -> str:
    padding = max(width - _visible_length(text), 0)
    return text + (" " * padding)


def _chunks(word: str, width: int) -> list[str]:
    # Colored words cannot be cut without breaking their escape codes.
    if "\x1b" in word or _visible_length(word) <= width:
        return [word]
    return [word[start : start + width] for start in range(0, len(word), width)]


def _wrap_text(text: str, max_width: int) -> list[str]:
    """Greedy word wrap to ``max_width`` visible columns.

    Words longer than a whole line are split into line-sized chunks.
    """
    lines: list[str] = []
    line = ""
    for word in text.split():
        for chunk in _chunks(word, max_width):
            candidate = f"{line} {chunk}" if line else chunk
            if _visible_length(candidate) <= max_width:
                line = candidate
                continue
            if line:
                lines.append(line)
            line = chunk
    if line or not lines:
        lines.append(line)
    return lines


def _column_limits(headers: list[str], rows: list[list[str]], available: int) -> list[int]:
    """Share ``available`` columns between cells, giving wide content more room."""
    natural = [_visible_length(header) for header in headers]
    for row in rows:
        for idx, cell in enumerate(row[: len(headers)]):
            longest = max((_visible_length(line) for line in cell.splitlines()), default=0)
            natural[idx] = max(natural[idx], longest)
    if sum(natural) <= available:
        return [max(width, 1) for width in natural]
    total = sum(natural) or 1
    return [max(5, int(available * width / total)) for width in natural]


def _table_lines(headers: list[str], rows: Iterable[list[str]]) -> list[str]:
    terminal_width = shutil.get_terminal_size(fallback=(120, 24)).columns
    row_list = [list(row) for row in rows]

    # Borders take 3 characters per column plus the outer edges.
    num_columns = len(headers)
    separator_space = (num_columns * 3) + 4
    available_width = max(terminal_width - separator_space, num_columns * 5)
    max_column_widths = _column_limits(headers, row_list, available_width)

    split_rows: list[list[list[str]]] = []
    for row in [headers] + row_list:
        wrapped_row: list[list[str]] = []
        for idx in range(num_columns):
            cell = row[idx] if idx < len(row) else ""
            cell_lines: list[str] = []
            for line in cell.splitlines() or [""]:
                cell_lines.extend(_wrap_text(line, max_column_widths[idx]))
            wrapped_row.append(cell_lines)
        split_rows.append(wrapped_row)

    widths: list[int] = [0] * num_columns
    for row_cells in split_rows:
        for idx, cell_lines in enumerate(row_cells):
            widths[idx] = max(
                widths[idx],
                *(_visible_length(line) for line in cell_lines),
            )

    def build_rule(char: str, color: str = str(Fore.CYAN)) -> str:
        rule = "+" + "+".join(char * (width + 2) for width in widths) + "+"
        return f"{color}{rule}{Style.RESET_ALL}"

    def render_row(cell_lines: list[list[str]], is_header: bool = False) -> list[str]:
        height = max(len(lines) for lines in cell_lines)
        rendered: list[str] = []
        for line_idx in range(height):
            parts: list[str] = []
            for col_idx, lines in enumerate(cell_lines):
                text = lines[line_idx] if line_idx < len(lines) else ""
                padded = _ljust_visible(text, widths[col_idx])
                if is_header:
                    parts.append(f"{Fore.YELLOW}{Style.BRIGHT}{padded}{Style.RESET_ALL}")
                else:
                    parts.append(padded)
            rendered.append(
                f"{Fore.CYAN}|{Style.RESET_ALL} "
                + f" {Fore.CYAN}|{Style.RESET_ALL} ".join(parts)
                + f" {Fore.CYAN}|{Style.RESET_ALL}"
            )
        return rendered

    all_lines: list[str] = [build_rule("-")]
    all_lines.extend(render_row(split_rows[0], is_header=True))
    all_lines.append(build_rule("="))
    for row_cells in split_rows[1:]:
        all_lines.extend(render_row(row_cells))
    all_lines.append(build_rule("-"))
    return all_lines


def render_json(data: Any) -> str:
    return json.dumps(data, indent=2, default=_json_default)


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def table_as_records(table: TableData) -> list[dict[str, str]]:
    """Rows keyed by lower-cased header, the JSON form of a table."""
    records: list[dict[str, str]] = []
    for row in table.rows:
        records.append(
            {
                header.lower(): row[idx]
                for idx, header in enumerate(table.headers)
                if idx < len(row)
            }
        )
    return records


def render_table(table: TableData, mode: OutputMode) -> str:
    if mode is OutputMode.JSON:
        return render_json(table_as_records(table))
    if mode is OutputMode.PLAINTEXT:
        lines = []
        if table.headers:
            lines.append("\t".join(table.headers))
        lines.extend("\t".join(row) for row in table.rows)
        return "\n".join(lines)
    return "\n".join(_table_lines(table.headers, table.rows))


def print_json(data: Any, stream: TextIO | None = None) -> None:
    print(render_json(data), file=stream or sys.stdout)


def print_table(table: TableData, mode: OutputMode, stream: TextIO | None = None) -> None:
    rendered = render_table(table, mode)
    if rendered:
        print(rendered, file=stream or sys.stdout)


def error(message: str, mode: OutputMode) -> None:
    """Report a failure: JSON goes to stdout, text to stderr."""
    if mode is OutputMode.JSON:
        print_json({"error": message})
    elif mode is OutputMode.PLAINTEXT:
        print(f"Error: {message}", file=sys.stderr)
    else:
        print(f"{Fore.RED}✗{Style.RESET_ALL} {message}", file=sys.stderr)


def success(message: str, mode: OutputMode) -> None:
    if mode is OutputMode.JSON:
        print_json({"status": "success", "message": message})
    elif mode is OutputMode.PLAINTEXT:
        print(message)
    else:
        print(f"{Fore.GREEN}✓{Style.RESET_ALL} {message}")


def info(message: str, mode: OutputMode) -> None:
    if mode is OutputMode.JSON:
        print_json({"info": message})
    elif mode is OutputMode.PLAINTEXT:
        print(message)
    else:
        print(f"{Fore.BLUE}i{Style.RESET_ALL} {message}")


def heading(text: str, mode: OutputMode) -> str:
    if mode is OutputMode.TABLE:
        return f"{Fore.CYAN}{Style.BRIGHT}{text}{Style.RESET_ALL}"
    return text


def print_details(
    title: str, fields: list[tuple[str, Any]], mode: OutputMode, body: str | None = None
) -> None:
    """Print a single entity as labelled lines, skipping empty values."""
    lines = [heading(title, mode)]
    for label, value in fields:
        if value is None or value == "":
            continue
        if mode is OutputMode.TABLE:
            lines.append(f"  {Fore.CYAN}{label}:{Style.RESET_ALL} {value}")
        else:
            lines.append(f"{label}: {value}")
    if body:
        lines.append("")
        lines.append(body)
    print("\n".join(lines))


def priority_label(priority: Any) -> str:
    try:
        return PRIORITY_LABELS.get(int(priority), "None")
    except (TypeError, ValueError):
        return "None"


def truncate(text: str | None, width: int) -> str:
    if not text:
        return ""
    if len(text) <= width:
        return text
    if width <= 3:
        return text[:width]
    return text[: width - 3] + "..."


def short_date(value: str | None) -> str:
    """``YYYY-MM-DD`` part of an ISO timestamp, or an empty string."""
    if not value:
        return ""
    return value[:10]


def name_of(entity: Any, key: str = "name", default: str = "") -> str:
    if not entity:
        return default
    return str(entity.get(key) or default)
