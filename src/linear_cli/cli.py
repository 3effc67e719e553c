"""Command line entrypoint for linctl."""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from datetime import datetime, timezone
from importlib import metadata
from pathlib import Path
from typing import Callable

from colorama import Fore, Style

from . import auth, config, operations, output
from .client import USER_AGENT, LinearApiError, LinearClient
from .commands import inbox, issues, projects, teams
from .commands.common import CommandContext, UsageError, parse_json_object
from .config import ConfigError, Settings
from .output import OutputMode

LOGGER = logging.getLogger(__name__)

VERSION = USER_AGENT.split("/", 1)[1]
DISTRIBUTION = "linctl"


def _login(args: argparse.Namespace, ctx: CommandContext) -> int:
    api_key = getattr(args, "api_key", None)
    if not api_key:
        if ctx.rich:
            print(f"{Fore.CYAN}{Style.BRIGHT}Linear Authentication{Style.RESET_ALL}\n")
            print("Create a personal API key at https://linear.app/settings/api")
        api_key = getpass.getpass("Enter your Linear API key: ").strip()
    if not api_key:
        raise UsageError("an API key is required")

    try:
        with LinearClient(api_key, ctx.settings.api_url) as client:
            viewer = operations.get_viewer(client)
    except LinearApiError as exc:
        raise auth.AuthError(f"Authentication failed: {exc}") from exc

    path = auth.save_auth(auth.AuthConfig(api_key=api_key))
    LOGGER.debug("Credentials for %s stored in %s", (viewer or {}).get("email"), path)
    return _report(ctx, "Successfully authenticated with Linear")


def _report(ctx: CommandContext, message: str) -> int:
    output.success(message, ctx.mode)
    return 0


def run_auth_status(args: argparse.Namespace, ctx: CommandContext) -> int:
    try:
        with ctx.client() as client:
            viewer = operations.get_viewer(client)
        if viewer is None:
            raise auth.NotAuthenticatedError("no user returned for these credentials")
    except (auth.AuthError, LinearApiError) as exc:
        if ctx.json:
            output.print_json({"authenticated": False, "error": str(exc)})
        elif ctx.rich:
            print(f"{Fore.RED}✗ Not authenticated{Style.RESET_ALL}")
        else:
            print("Not authenticated")
        return 1

    source = auth.auth_source()
    if ctx.json:
        output.print_json({"authenticated": True, "user": viewer, "auth_source": source})
    elif ctx.rich:
        print(f"{Fore.GREEN}✓ Authenticated{Style.RESET_ALL}")
        print(f"User: {Fore.CYAN}{viewer.get('name')}{Style.RESET_ALL}")
        print(f"Email: {Fore.CYAN}{viewer.get('email')}{Style.RESET_ALL}")
        print(f"Source: {Fore.YELLOW}{source}{Style.RESET_ALL}")
    else:
        print(f"Authenticated as: {viewer.get('name')} ({viewer.get('email')})")
        print(f"Auth source: {source}")
    return 0


def run_auth_logout(args: argparse.Namespace, ctx: CommandContext) -> int:
    if auth.logout():
        return _report(ctx, "Successfully logged out")
    output.info("No stored credentials to remove", ctx.mode)
    return 0


def _resets_in(moment: datetime | None) -> str:
    if moment is None:
        return "unknown"
    seconds = max(int((moment - datetime.now(timezone.utc)).total_seconds()), 0)
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{minutes}m{seconds}s"
    return f"{seconds}s"


def _quota_color(remaining: int, limit: int) -> str:
    percent = remaining / max(limit, 1) * 100
    if percent < 20:
        return Fore.RED
    if percent < 50:
        return Fore.YELLOW
    return Fore.GREEN


def run_auth_rate_limit(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        limits = client.get_rate_limit()
    if ctx.json:
        output.print_json(limits.to_dict())
        return 0

    requests = f"{limits.request_remaining}/{limits.request_limit}"
    complexity = f"{limits.complexity_remaining}/{limits.complexity_limit}"
    if ctx.rich:
        print(f"\n{Fore.CYAN}{Style.BRIGHT}API Rate Limits{Style.RESET_ALL}\n")
        color = _quota_color(limits.request_remaining, limits.request_limit)
        requests = f"{color}{requests}{Style.RESET_ALL}"
        color = _quota_color(limits.complexity_remaining, limits.complexity_limit)
        complexity = f"{color}{complexity}{Style.RESET_ALL}"
    print(f"Requests: {requests} remaining (resets in {_resets_in(limits.request_reset)})")
    print(f"Complexity: {complexity} remaining (resets in {_resets_in(limits.complexity_reset)})")
    print(f"Last query complexity: {limits.complexity}")
    return 0


def run_graphql(args: argparse.Namespace, ctx: CommandContext) -> int:
    """Run a raw document and print the ``data`` payload as indented JSON."""
    variables = parse_json_object(args.variables, "variables")
    with ctx.client() as client:
        data = client.execute_raw(args.query, variables)
    output.print_json(data)
    return 0


def run_docs(args: argparse.Namespace, ctx: CommandContext) -> int:
    try:
        readme = metadata.metadata(DISTRIBUTION).get_payload()
    except metadata.PackageNotFoundError:
        readme = None
    if not readme:
        readme = build_parser().format_help()
    print(readme, end="" if readme.endswith("\n") else "\n")
    return 0


def _global_flags() -> argparse.ArgumentParser:
    """Flags accepted before or after any subcommand.

    Defaults are suppressed so a flag given at one level is not reset by the
    parser of a deeper level.
    """
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--plaintext", "-p", action="store_true", default=argparse.SUPPRESS,
        help="Plain text output without colors or tables.",
    )
    parent.add_argument(
        "--json", "-j", action="store_true", default=argparse.SUPPRESS,
        help="JSON output.",
    )
    parent.add_argument(
        "--config", type=Path, default=argparse.SUPPRESS,
        help="Settings file (default: ~/.linctl.yaml).",
    )
    parent.add_argument(
        "--debug", action="store_true", default=argparse.SUPPRESS,
        help="Log API requests to stderr.",
    )
    return parent


def build_parser() -> argparse.ArgumentParser:
    parent = _global_flags()
    parser = argparse.ArgumentParser(
        prog="linctl",
        description="A command line client for Linear: issues, projects, teams, documents and more.",
        parents=[parent],
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    subparsers = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    auth_parser = subparsers.add_parser("auth", parents=[parent], help="Authenticate with Linear.")
    auth_parser.add_argument("--api-key", help="API key to store instead of prompting.")
    auth_parser.set_defaults(handler=_login)
    auth_sub = auth_parser.add_subparsers(dest="auth_command")

    login_parser = auth_sub.add_parser("login", parents=[parent], help="Store an API key.")
    login_parser.add_argument("--api-key", help="API key to store instead of prompting.")
    login_parser.set_defaults(handler=_login)
    auth_sub.add_parser(
        "status", parents=[parent], help="Check authentication status."
    ).set_defaults(handler=run_auth_status)
    auth_sub.add_parser(
        "logout", parents=[parent], help="Remove stored credentials."
    ).set_defaults(handler=run_auth_logout)
    auth_sub.add_parser(
        "rate-limit", parents=[parent], help="Show API rate limit status."
    ).set_defaults(handler=run_auth_rate_limit)

    subparsers.add_parser(
        "whoami", parents=[parent], help="Show the authenticated user."
    ).set_defaults(handler=run_auth_status)

    graphql_parser = subparsers.add_parser(
        "graphql", aliases=["gql"], parents=[parent], help="Run an arbitrary GraphQL document."
    )
    graphql_parser.add_argument("query", help="Query or mutation text.")
    graphql_parser.add_argument("--variables", "-v", help="Variables as a JSON object.")
    graphql_parser.set_defaults(handler=run_graphql)

    subparsers.add_parser(
        "docs", parents=[parent], help="Print the linctl documentation."
    ).set_defaults(handler=run_docs)

    for module in (issues, teams, projects, inbox):
        module.register(subparsers, parent)
    return parser


def _configure_logging(debug: bool) -> None:
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )
        # httpx logs every request at INFO and would duplicate ours.
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)


def main(
    argv: list[str] | None = None,
    client_factory: Callable[[Settings], LinearClient] | None = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(getattr(args, "debug", False))

    plaintext = getattr(args, "plaintext", False)
    json_output = getattr(args, "json", False)
    try:
        settings = config.load_settings(getattr(args, "config", None))
    except ConfigError as exc:
        output.error(str(exc), OutputMode.from_flags(plaintext, json_output))
        return 1

    mode = OutputMode.from_flags(
        plaintext or settings.plaintext, json_output or settings.json
    )
    ctx = CommandContext(mode=mode, settings=settings)
    if client_factory is not None:
        ctx.client_factory = client_factory

    try:
        return args.handler(args, ctx)
    except (UsageError, auth.AuthError, LinearApiError, ConfigError) as exc:
        LOGGER.debug("Command failed", exc_info=True)
        output.error(str(exc), mode)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
