"""Helpers shared by the command modules."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from colorama import Fore, Style

from .. import auth, output
from ..client import LinearClient
from ..config import Settings
from ..output import OutputMode

SORT_CHOICES = ("linear", "created", "updated")

STATE_COLORS = {
    "triage": Fore.MAGENTA,
    "backlog": Fore.CYAN,
    "unstarted": Fore.WHITE,
    "started": Fore.BLUE,
    "completed": Fore.GREEN,
    "canceled": Fore.RED,
}

PRIORITY_COLORS = {
    0: Style.DIM,
    1: Fore.RED + Style.BRIGHT,
    2: Fore.RED,
    3: Fore.YELLOW,
    4: Fore.BLUE,
}


class UsageError(ValueError):
    """Invalid combination of command-line values."""


def _default_client_factory(settings: Settings) -> LinearClient:
    return LinearClient(auth.authorization_header(), settings.api_url)


@dataclass
class CommandContext:
    """State handed to every command handler."""

    mode: OutputMode = OutputMode.TABLE
    settings: Settings = field(default_factory=Settings)
    client_factory: Callable[[Settings], LinearClient] = _default_client_factory

    @property
    def rich(self) -> bool:
        return self.mode is OutputMode.TABLE

    @property
    def json(self) -> bool:
        return self.mode is OutputMode.JSON

    def client(self) -> LinearClient:
        return self.client_factory(self.settings)


Handler = Callable[[argparse.Namespace, CommandContext], int]


def add_limit(parser: argparse.ArgumentParser, default: int = 50) -> None:
    parser.add_argument(
        "--limit",
        "-l",
        type=int,
        default=default,
        help=f"Maximum number of results to fetch (default: {default}).",
    )


def add_sort(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--sort",
        "-o",
        choices=SORT_CHOICES,
        default="linear",
        help="Sort order: linear (default), created, updated.",
    )


def order_by(sort: str | None) -> str | None:
    """Map a ``--sort`` value to the API's ``PaginationOrderBy``."""
    if sort in (None, "", "linear"):
        return None
    if sort in ("created", "createdAt"):
        return "createdAt"
    if sort in ("updated", "updatedAt"):
        return "updatedAt"
    raise UsageError(
        f"Invalid sort option: {sort}. Valid options are: {', '.join(SORT_CHOICES)}"
    )


def read_content(path: str) -> str:
    """Read a file, or standard input when ``path`` is ``-``."""
    if path == "-":
        return sys.stdin.read()
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise UsageError(f"failed to read file '{path}': {exc}") from exc


def resolve_text(
    value: str | None, file_path: str | None, flag: str, file_flag: str
) -> str | None:
    """Text from ``--<flag>`` or ``--<file_flag>``; giving both is an error."""
    if value is not None and file_path:
        raise UsageError(f"cannot use both --{flag} and --{file_flag}")
    if file_path:
        return read_content(file_path)
    return value


def parse_json_object(raw: str | None, flag: str) -> dict[str, Any] | None:
    if raw is None or raw == "":
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise UsageError(f"invalid JSON for --{flag}: {exc}") from exc
    if not isinstance(value, dict):
        raise UsageError(f"--{flag} must be a JSON object")
    return value


def compact(**values: Any) -> dict[str, Any]:
    """Keep the keyword arguments that were given on the command line."""
    return {key: value for key, value in values.items() if value is not None}


def require_changes(changes: dict[str, Any]) -> dict[str, Any]:
    if not changes:
        raise UsageError("No updates specified. Use flags to specify what to update.")
    return changes


def nodes(connection: Any) -> list[dict[str, Any]]:
    if not connection:
        return []
    return list(connection.get("nodes") or [])


def has_next_page(connection: Any) -> bool:
    if not connection:
        return False
    return bool((connection.get("pageInfo") or {}).get("hasNextPage"))


def colored_state(state: Any, ctx: CommandContext) -> str:
    if not state:
        return ""
    name = state.get("name") or ""
    if not ctx.rich:
        return name
    color = STATE_COLORS.get(state.get("type") or "", Fore.WHITE)
    return f"{color}{name}{Style.RESET_ALL}"


def colored_priority(priority: Any, ctx: CommandContext) -> str:
    label = output.priority_label(priority)
    if not ctx.rich:
        return label
    try:
        color = PRIORITY_COLORS.get(int(priority), Fore.WHITE)
    except (TypeError, ValueError):
        color = Fore.WHITE
    return f"{color}{label}{Style.RESET_ALL}"


def print_list(
    ctx: CommandContext,
    items: list[dict[str, Any]],
    table: output.TableData,
    noun: str,
    more: bool = False,
) -> int:
    """Print a fetched collection; JSON mode prints the raw entities."""
    if not items:
        output.info(f"No {noun} found", ctx.mode)
        return 0
    if ctx.json:
        output.print_json(items)
        return 0
    output.print_table(table, ctx.mode)
    if ctx.rich:
        print(f"\n{Fore.GREEN}✓{Style.RESET_ALL} {len(items)} {noun}")
        if more:
            print(f"{Fore.YELLOW}i{Style.RESET_ALL} Use --limit to see more results")
    return 0


def print_entity(
    ctx: CommandContext,
    entity: Any,
    title: str,
    fields: list[tuple[str, Any]],
    body: str | None = None,
) -> int:
    if ctx.json:
        output.print_json(entity)
    else:
        output.print_details(title, fields, ctx.mode, body=body)
    return 0


def report_success(ctx: CommandContext, message: str, entity: Any = None) -> int:
    """Announce a completed mutation; JSON mode prints the returned entity."""
    if ctx.json and entity is not None:
        output.print_json(entity)
    else:
        output.success(message, ctx.mode)
    return 0
