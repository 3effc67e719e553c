"""Team, user, cycle and label commands."""

from __future__ import annotations

import argparse
from typing import Any

from .. import operations, output
from ..output import TableData
from .common import (
    CommandContext,
    add_limit,
    add_sort,
    compact,
    has_next_page,
    nodes,
    order_by,
    print_entity,
    print_list,
    report_success,
    require_changes,
)


def _require_team(client, key: str) -> dict[str, Any]:
    team = operations.get_team(client, key)
    if not team:
        raise operations.NotFoundError(f"Team '{key}' not found.")
    return team


def run_team_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        connection = operations.list_teams(
            client, first=args.limit, order_by=order_by(args.sort)
        )
    teams = nodes(connection)
    rows = [
        [
            team.get("key") or "",
            team.get("name") or "",
            "Yes" if team.get("private") else "No",
            str(team.get("issueCount") or 0),
        ]
        for team in teams
    ]
    return print_list(
        ctx, teams, TableData(["Key", "Name", "Private", "Issues"], rows), "teams",
        more=has_next_page(connection),
    )


def run_team_get(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        team = _require_team(client, args.team_key)
    fields = [
        ("Key", team.get("key")),
        ("ID", team.get("id")),
        ("Private", "Yes" if team.get("private") else "No"),
        ("Issues", team.get("issueCount")),
    ]
    return print_entity(ctx, team, team.get("name") or args.team_key, fields, body=team.get("description"))


def run_team_members(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        members = nodes(operations.get_team_members(client, args.team_key))
    rows = [
        [
            member.get("name") or "",
            member.get("email") or "",
            "Admin" if member.get("admin") else "Member",
            "Yes" if member.get("active") else "No",
        ]
        for member in members
    ]
    return print_list(
        ctx, members, TableData(["Name", "Email", "Role", "Active"], rows), "members"
    )


def run_team_states(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        states = operations.get_team_states(client, args.team_key) or []
    states = sorted(states, key=lambda state: state.get("position") or 0)
    rows = [
        [state.get("name") or "", state.get("type") or "", state.get("id") or ""]
        for state in states
    ]
    return print_list(ctx, states, TableData(["Name", "Type", "ID"], rows), "states")


def _team_input(args: argparse.Namespace) -> dict[str, Any]:
    return compact(
        name=args.name,
        key=args.key,
        description=args.description,
        color=args.color,
        icon=args.icon,
        private=args.private,
        timezone=args.timezone,
        parentId=args.parent,
        cyclesEnabled=args.cycles_enabled,
        cycleDuration=args.cycle_duration,
        cycleCooldownTime=args.cycle_cooldown,
        triageEnabled=args.triage_enabled,
        issueEstimationType=args.issue_estimation_type,
        autoArchivePeriod=args.auto_archive_period,
    )


def run_team_create(args: argparse.Namespace, ctx: CommandContext) -> int:
    team_input = _team_input(args)
    with ctx.client() as client:
        copy_from = None
        if args.copy_settings_from:
            copy_from = _require_team(client, args.copy_settings_from)["id"]
        team = operations.create_team(client, team_input, copy_settings_from=copy_from)
    return report_success(ctx, f"Created team {team.get('key')}: {team.get('name')}", team)


def run_team_update(args: argparse.Namespace, ctx: CommandContext) -> int:
    changes = require_changes(_team_input(args))
    with ctx.client() as client:
        team_id = _require_team(client, args.team_key)["id"]
        team = operations.update_team(client, team_id, changes)
    return report_success(ctx, f"Updated team {team.get('key')}", team)


def run_team_delete(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        team_id = _require_team(client, args.team_key)["id"]
        operations.delete_team(client, team_id)
    return report_success(ctx, f"Deleted team {args.team_key}")


USER_HEADERS = ["Name", "Email", "Role", "Active"]


def _user_row(user: dict[str, Any]) -> list[str]:
    return [
        user.get("name") or "",
        user.get("email") or "",
        "Admin" if user.get("admin") else "Member",
        "Yes" if user.get("active") else "No",
    ]


def run_user_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        connection = operations.list_users(
            client, first=args.limit, order_by=order_by(args.sort)
        )
    users = nodes(connection)
    if args.active:
        users = [user for user in users if user.get("active")]
    rows = [_user_row(user) for user in users]
    return print_list(
        ctx, users, TableData(USER_HEADERS, rows), "users", more=has_next_page(connection)
    )


def _print_user(ctx: CommandContext, user: dict[str, Any]) -> int:
    fields = [
        ("Email", user.get("email")),
        ("ID", user.get("id")),
        ("Role", "Admin" if user.get("admin") else "Member"),
        ("Active", "Yes" if user.get("active") else "No"),
    ]
    return print_entity(ctx, user, user.get("name") or "", fields)


def run_user_get(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        user = operations.get_user(client, args.email)
    if not user:
        raise operations.NotFoundError(f"User '{args.email}' not found.")
    return _print_user(ctx, user)


def run_user_me(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        user = operations.get_viewer(client)
    return _print_user(ctx, user)


def run_user_update(args: argparse.Namespace, ctx: CommandContext) -> int:
    changes = require_changes(
        compact(
            name=args.name,
            displayName=args.display_name,
            description=args.description,
            timezone=args.timezone,
            statusEmoji=args.status_emoji,
            statusLabel=args.status_label,
        )
    )
    with ctx.client() as client:
        user_id = args.user_id or operations.get_viewer(client)["id"]
        user = operations.update_user(client, user_id, changes)
    return report_success(ctx, f"Updated user {user.get('name')}", user)


CYCLE_HEADERS = ["Number", "Name", "Team", "Starts", "Ends", "Progress"]


def run_cycle_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    filters: dict[str, Any] = {}
    if args.team:
        filters["team"] = {"key": {"eq": args.team}}
    if args.active:
        filters["isActive"] = {"eq": True}
    with ctx.client() as client:
        connection = operations.list_cycles(client, filters=filters, first=args.limit)
    cycles = nodes(connection)
    rows = [
        [
            str(cycle.get("number") or ""),
            cycle.get("name") or "",
            output.name_of(cycle.get("team"), "key"),
            output.short_date(cycle.get("startsAt")),
            output.short_date(cycle.get("endsAt")),
            f"{round((cycle.get('progress') or 0) * 100)}%",
        ]
        for cycle in cycles
    ]
    return print_list(ctx, cycles, TableData(CYCLE_HEADERS, rows), "cycles")


def run_cycle_get(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        cycle = operations.get_cycle(client, args.cycle_id)
    if not cycle:
        raise operations.NotFoundError(f"Cycle '{args.cycle_id}' not found.")
    fields = [
        ("Number", cycle.get("number")),
        ("Team", output.name_of(cycle.get("team"), "key")),
        ("Starts", output.short_date(cycle.get("startsAt"))),
        ("Ends", output.short_date(cycle.get("endsAt"))),
        ("Progress", f"{round((cycle.get('progress') or 0) * 100)}%"),
        ("Completed", output.short_date(cycle.get("completedAt"))),
    ]
    title = cycle.get("name") or f"Cycle {cycle.get('number')}"
    return print_entity(ctx, cycle, title, fields, body=cycle.get("description"))


def run_cycle_create(args: argparse.Namespace, ctx: CommandContext) -> int:
    cycle_input = compact(
        teamId=args.team_id,
        name=args.name,
        description=args.description,
        startsAt=args.starts,
        endsAt=args.ends,
    )
    with ctx.client() as client:
        cycle = operations.create_cycle(client, cycle_input)
    return report_success(ctx, f"Created cycle {cycle.get('number')}", cycle)


def run_cycle_update(args: argparse.Namespace, ctx: CommandContext) -> int:
    changes = require_changes(
        compact(
            name=args.name,
            description=args.description,
            startsAt=args.starts,
            endsAt=args.ends,
        )
    )
    with ctx.client() as client:
        cycle = operations.update_cycle(client, args.cycle_id, changes)
    return report_success(ctx, f"Updated cycle {cycle.get('number')}", cycle)


def run_cycle_archive(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        operations.archive_cycle(client, args.cycle_id)
    return report_success(ctx, f"Archived cycle {args.cycle_id}")


def run_label_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    filters: dict[str, Any] = {}
    if args.team:
        filters["team"] = {"key": {"eq": args.team}}
    with ctx.client() as client:
        connection = operations.list_labels(client, filters=filters, first=args.limit)
    labels = nodes(connection)
    rows = [
        [
            label.get("name") or "",
            label.get("color") or "",
            output.name_of(label.get("parent")),
            label.get("id") or "",
        ]
        for label in labels
    ]
    return print_list(
        ctx, labels, TableData(["Name", "Color", "Group", "ID"], rows), "labels"
    )


def run_label_create(args: argparse.Namespace, ctx: CommandContext) -> int:
    label_input = compact(
        name=args.name, color=args.color, description=args.description, teamId=args.team_id
    )
    with ctx.client() as client:
        label = operations.create_label(client, label_input)
    return report_success(ctx, f"Created label {label.get('name')}", label)


def run_label_update(args: argparse.Namespace, ctx: CommandContext) -> int:
    changes = require_changes(
        compact(name=args.name, color=args.color, description=args.description)
    )
    with ctx.client() as client:
        label = operations.update_label(client, args.label_id, changes)
    return report_success(ctx, f"Updated label {label.get('name')}", label)


def run_label_delete(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        operations.delete_label(client, args.label_id)
    return report_success(ctx, f"Deleted label {args.label_id}")


def _add_team_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--name", "-n", help="Team name.")
    parser.add_argument("--key", "-k", help="Team identifier key.")
    parser.add_argument("--description", "-d", help="Team description.")
    parser.add_argument("--color", "-c", help="Team color (hex).")
    parser.add_argument("--icon", help="Team icon.")
    parser.add_argument(
        "--private", action=argparse.BooleanOptionalAction, default=None, help="Team visibility."
    )
    parser.add_argument("--timezone", help="Team timezone.")
    parser.add_argument("--parent", help="Parent team ID.")
    parser.add_argument(
        "--cycles-enabled", action=argparse.BooleanOptionalAction, default=None, help="Enable cycles."
    )
    parser.add_argument("--cycle-duration", type=int, help="Cycle duration in weeks.")
    parser.add_argument("--cycle-cooldown", type=int, help="Cooldown between cycles in weeks.")
    parser.add_argument(
        "--triage-enabled", action=argparse.BooleanOptionalAction, default=None, help="Enable triage."
    )
    parser.add_argument(
        "--issue-estimation-type",
        choices=["notUsed", "exponential", "fibonacci", "linear", "tShirt"],
        help="Issue estimation scale.",
    )
    parser.add_argument(
        "--auto-archive-period", type=float, help="Months before completed issues are archived."
    )


def register(subparsers: argparse._SubParsersAction, parent: argparse.ArgumentParser) -> None:
    team_parser = subparsers.add_parser("team", parents=[parent], help="Manage teams.")
    team_sub = team_parser.add_subparsers(dest="team_command", required=True)

    t_list = team_sub.add_parser("list", aliases=["ls"], parents=[parent], help="List teams.")
    add_limit(t_list)
    add_sort(t_list)
    t_list.set_defaults(handler=run_team_list)

    for name, aliases, handler, text in (
        ("get", ["show"], run_team_get, "Show a team."),
        ("members", [], run_team_members, "List team members."),
        ("states", ["workflows"], run_team_states, "List workflow states."),
        ("delete", ["rm"], run_team_delete, "Delete a team."),
    ):
        sub = team_sub.add_parser(name, aliases=aliases, parents=[parent], help=text)
        sub.add_argument("team_key", help="Team key (e.g. ENG).")
        sub.set_defaults(handler=handler)

    t_create = team_sub.add_parser("create", aliases=["new"], parents=[parent], help="Create a team.")
    _add_team_arguments(t_create)
    t_create.add_argument("--copy-settings-from", help="Team key to copy settings from.")
    t_create.set_defaults(handler=run_team_create)

    t_update = team_sub.add_parser("update", aliases=["edit"], parents=[parent], help="Update a team.")
    t_update.add_argument("team_key", help="Team key.")
    _add_team_arguments(t_update)
    t_update.set_defaults(handler=run_team_update)

    user_parser = subparsers.add_parser("user", parents=[parent], help="Manage users.")
    user_sub = user_parser.add_subparsers(dest="user_command", required=True)

    u_list = user_sub.add_parser("list", aliases=["ls"], parents=[parent], help="List users.")
    add_limit(u_list)
    add_sort(u_list)
    u_list.add_argument("--active", "-a", action="store_true", help="Only active users.")
    u_list.set_defaults(handler=run_user_list)

    u_get = user_sub.add_parser("get", aliases=["show"], parents=[parent], help="Show a user.")
    u_get.add_argument("email", help="User email address.")
    u_get.set_defaults(handler=run_user_get)

    u_me = user_sub.add_parser("me", parents=[parent], help="Show the authenticated user.")
    u_me.set_defaults(handler=run_user_me)

    u_update = user_sub.add_parser("update", aliases=["edit"], parents=[parent], help="Update a user.")
    u_update.add_argument("user_id", nargs="?", help="User ID (defaults to yourself).")
    u_update.add_argument("--name", help="Full name.")
    u_update.add_argument("--display-name", help="Display name.")
    u_update.add_argument("--description", help="Bio.")
    u_update.add_argument("--timezone", help="Timezone (e.g. America/New_York).")
    u_update.add_argument("--status-emoji", help="Status emoji (empty string clears).")
    u_update.add_argument("--status-label", help="Status label (empty string clears).")
    u_update.set_defaults(handler=run_user_update)

    cycle_parser = subparsers.add_parser("cycle", parents=[parent], help="Manage cycles.")
    cycle_sub = cycle_parser.add_subparsers(dest="cycle_command", required=True)

    cy_list = cycle_sub.add_parser("list", aliases=["ls"], parents=[parent], help="List cycles.")
    add_limit(cy_list, default=25)
    cy_list.add_argument("--team", "-t", help="Filter by team key.")
    cy_list.add_argument("--active", action="store_true", help="Only the active cycle.")
    cy_list.set_defaults(handler=run_cycle_list)

    cy_get = cycle_sub.add_parser("get", aliases=["show"], parents=[parent], help="Show a cycle.")
    cy_get.add_argument("cycle_id", help="Cycle ID.")
    cy_get.set_defaults(handler=run_cycle_get)

    cy_create = cycle_sub.add_parser("create", aliases=["new"], parents=[parent], help="Create a cycle.")
    cy_create.add_argument("--team-id", required=True, help="Team ID.")
    cy_create.add_argument("--starts", required=True, help="Start date (YYYY-MM-DD).")
    cy_create.add_argument("--ends", required=True, help="End date (YYYY-MM-DD).")
    cy_update = cycle_sub.add_parser("update", aliases=["edit"], parents=[parent], help="Update a cycle.")
    cy_update.add_argument("cycle_id", help="Cycle ID.")
    cy_update.add_argument("--starts", help="New start date (YYYY-MM-DD).")
    cy_update.add_argument("--ends", help="New end date (YYYY-MM-DD).")
    for sub in (cy_create, cy_update):
        sub.add_argument("--name", help="Cycle name.")
        sub.add_argument("--description", help="Cycle description.")
    cy_create.set_defaults(handler=run_cycle_create)
    cy_update.set_defaults(handler=run_cycle_update)

    cy_archive = cycle_sub.add_parser(
        "archive", aliases=["delete", "rm"], parents=[parent], help="Archive a cycle."
    )
    cy_archive.add_argument("cycle_id", help="Cycle ID.")
    cy_archive.set_defaults(handler=run_cycle_archive)

    label_parser = subparsers.add_parser("label", parents=[parent], help="Manage issue labels.")
    label_sub = label_parser.add_subparsers(dest="label_command", required=True)

    l_list = label_sub.add_parser("list", aliases=["ls"], parents=[parent], help="List labels.")
    add_limit(l_list)
    l_list.add_argument("--team", "-t", help="Filter by team key.")
    l_list.set_defaults(handler=run_label_list)

    l_create = label_sub.add_parser("create", aliases=["new"], parents=[parent], help="Create a label.")
    l_create.add_argument("--name", "-n", required=True, help="Label name.")
    l_create.add_argument("--team-id", help="Team ID to scope the label to.")
    l_update = label_sub.add_parser("update", aliases=["edit"], parents=[parent], help="Update a label.")
    l_update.add_argument("label_id", help="Label ID.")
    l_update.add_argument("--name", "-n", help="New name.")
    for sub in (l_create, l_update):
        sub.add_argument("--color", "-c", help="Color (hex).")
        sub.add_argument("--description", "-d", help="Description.")
    l_create.set_defaults(handler=run_label_create)
    l_update.set_defaults(handler=run_label_update)

    l_delete = label_sub.add_parser("delete", aliases=["rm"], parents=[parent], help="Delete a label.")
    l_delete.add_argument("label_id", help="Label ID.")
    l_delete.set_defaults(handler=run_label_delete)

