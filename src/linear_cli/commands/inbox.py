"""Notification inbox and favorites commands."""

from __future__ import annotations

import argparse
from datetime import datetime, timezone
from typing import Any

from .. import operations, output, timeutil
from ..output import TableData
from .common import (
    CommandContext,
    UsageError,
    add_limit,
    compact,
    has_next_page,
    nodes,
    print_entity,
    print_list,
    report_success,
    require_changes,
)

INBOX_HEADERS = ["", "Type", "Issue", "Title", "Actor", "Created", "ID"]


def _notification_subject(notification: dict[str, Any]) -> tuple[str, str]:
    issue = notification.get("issue") or {}
    return issue.get("identifier") or "", issue.get("title") or ""


def run_inbox_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        connection = operations.list_notifications(
            client, first=args.limit, include_archived=args.all
        )
    notifications = nodes(connection)
    if args.unread:
        notifications = [n for n in notifications if not n.get("readAt")]
    rows = []
    for notification in notifications:
        identifier, title = _notification_subject(notification)
        rows.append(
            [
                "" if notification.get("readAt") else "*",
                notification.get("type") or "",
                identifier,
                output.truncate(title, 50),
                output.name_of(notification.get("actor")),
                output.short_date(notification.get("createdAt")),
                notification.get("id") or "",
            ]
        )
    return print_list(
        ctx, notifications, TableData(INBOX_HEADERS, rows), "notifications",
        more=has_next_page(connection),
    )


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def run_inbox_read(args: argparse.Namespace, ctx: CommandContext) -> int:
    if args.all:
        with ctx.client() as client:
            count = operations.mark_all_notifications_read(client)
        return report_success(ctx, f"Marked {count} notifications as read")
    if not args.notification_id:
        raise UsageError("provide a notification ID or --all")
    with ctx.client() as client:
        notification = operations.update_notification(
            client, args.notification_id, {"readAt": _now()}
        )
    return report_success(ctx, f"Marked {args.notification_id} as read", notification)


def run_inbox_unread(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        notification = operations.update_notification(
            client, args.notification_id, {"readAt": None}
        )
    return report_success(ctx, f"Marked {args.notification_id} as unread", notification)


def run_inbox_snooze(args: argparse.Namespace, ctx: CommandContext) -> int:
    try:
        until = timeutil.parse_snooze_duration(args.duration)
    except ValueError as exc:
        raise UsageError(str(exc)) from exc
    with ctx.client() as client:
        notification = operations.update_notification(
            client, args.notification_id, {"snoozedUntilAt": until.isoformat()}
        )
    return report_success(
        ctx, f"Snoozed {args.notification_id} until {until:%Y-%m-%d %H:%M}", notification
    )


def run_inbox_archive(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        operations.archive_notification(client, args.notification_id)
    return report_success(ctx, f"Archived notification {args.notification_id}")


def run_inbox_unarchive(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        operations.unarchive_notification(client, args.notification_id)
    return report_success(ctx, f"Restored notification {args.notification_id}")


FAVORITE_HEADERS = ["Type", "Title", "Folder", "ID"]
FAVORITE_TARGETS = {
    "issue": "issueId",
    "project": "projectId",
    "view": "customViewId",
    "cycle": "cycleId",
    "document": "documentId",
    "initiative": "initiativeId",
    "label": "labelId",
    "user": "userId",
}


def _favorite_title(favorite: dict[str, Any]) -> str:
    if favorite.get("title"):
        return favorite["title"]
    issue = favorite.get("issue")
    if issue:
        return f"{issue.get('identifier')} {issue.get('title') or ''}".strip()
    for key in ("project", "customView", "cycle", "initiative"):
        if favorite.get(key):
            return output.name_of(favorite[key])
    if favorite.get("document"):
        return output.name_of(favorite["document"], "title")
    return favorite.get("folderName") or ""


def run_favorite_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        connection = operations.list_favorites(client, first=args.limit)
    favorites = nodes(connection)
    rows = [
        [
            favorite.get("type") or "",
            output.truncate(_favorite_title(favorite), 50),
            favorite.get("folderName") or "",
            favorite.get("id") or "",
        ]
        for favorite in favorites
    ]
    return print_list(ctx, favorites, TableData(FAVORITE_HEADERS, rows), "favorites")


def run_favorite_get(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        favorite = operations.get_favorite(client, args.favorite_id)
    if not favorite:
        raise operations.NotFoundError(f"Favorite '{args.favorite_id}' not found.")
    fields = [
        ("ID", favorite.get("id")),
        ("Type", favorite.get("type")),
        ("Folder", favorite.get("folderName")),
        ("Sort order", favorite.get("sortOrder")),
        ("URL", favorite.get("url")),
    ]
    return print_entity(ctx, favorite, _favorite_title(favorite), fields)


def run_favorite_add(args: argparse.Namespace, ctx: CommandContext) -> int:
    values = {field: getattr(args, name) for name, field in FAVORITE_TARGETS.items()}
    favorite_input = compact(
        **values,
        folderName=args.folder,
        parentId=args.parent,
        sortOrder=args.sort_order,
    )
    if not any(favorite_input.get(field) for field in FAVORITE_TARGETS.values()) and not args.folder:
        raise UsageError("specify what to favorite, e.g. --issue or --project, or a --folder")
    with ctx.client() as client:
        favorite = operations.create_favorite(client, favorite_input)
    return report_success(ctx, f"Added favorite {_favorite_title(favorite)}", favorite)


def run_favorite_update(args: argparse.Namespace, ctx: CommandContext) -> int:
    changes = require_changes(
        compact(folderName=args.folder, parentId=args.parent, sortOrder=args.sort_order)
    )
    with ctx.client() as client:
        favorite = operations.update_favorite(client, args.favorite_id, changes)
    return report_success(ctx, f"Updated favorite {args.favorite_id}", favorite)


def run_favorite_remove(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        operations.delete_favorite(client, args.favorite_id)
    return report_success(ctx, f"Removed favorite {args.favorite_id}")


def _add_list_flags(parser: argparse.ArgumentParser) -> None:
    add_limit(parser)
    parser.add_argument("--unread", "-u", action="store_true", help="Only unread notifications.")
    parser.add_argument("--all", "-a", action="store_true", help="Include archived notifications.")


def _add_placement(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--folder", help="Folder name.")
    parser.add_argument("--parent", help="Parent folder favorite ID.")
    parser.add_argument("--sort-order", type=float, help="Position within the sidebar.")


def register(subparsers: argparse._SubParsersAction, parent: argparse.ArgumentParser) -> None:
    inbox_parser = subparsers.add_parser(
        "inbox", aliases=["notifications"], parents=[parent], help="Manage your notification inbox."
    )
    _add_list_flags(inbox_parser)
    inbox_parser.set_defaults(handler=run_inbox_list)
    inbox_sub = inbox_parser.add_subparsers(dest="inbox_command")

    list_parser = inbox_sub.add_parser("list", aliases=["ls"], parents=[parent], help="List notifications.")
    _add_list_flags(list_parser)
    list_parser.set_defaults(handler=run_inbox_list)

    read_parser = inbox_sub.add_parser("read", parents=[parent], help="Mark notifications as read.")
    read_parser.add_argument("notification_id", nargs="?", help="Notification ID.")
    read_parser.add_argument("--all", "-a", action="store_true", help="Mark every unread notification as read.")
    read_parser.set_defaults(handler=run_inbox_read)

    for name, handler, text in (
        ("unread", run_inbox_unread, "Mark a notification as unread."),
        ("archive", run_inbox_archive, "Archive a notification."),
        ("unarchive", run_inbox_unarchive, "Restore an archived notification."),
    ):
        sub = inbox_sub.add_parser(name, parents=[parent], help=text)
        sub.add_argument("notification_id", help="Notification ID.")
        sub.set_defaults(handler=handler)

    snooze_parser = inbox_sub.add_parser("snooze", parents=[parent], help="Snooze a notification.")
    snooze_parser.add_argument("notification_id", help="Notification ID.")
    snooze_parser.add_argument("duration", help="tomorrow, or a duration such as 2h, 3d or 1w.")
    snooze_parser.set_defaults(handler=run_inbox_snooze)

    favorite_parser = subparsers.add_parser(
        "favorite", aliases=["fav"], parents=[parent], help="Manage sidebar favorites."
    )
    favorite_sub = favorite_parser.add_subparsers(dest="favorite_command", required=True)

    f_list = favorite_sub.add_parser("list", aliases=["ls"], parents=[parent], help="List favorites.")
    add_limit(f_list, default=100)
    f_list.set_defaults(handler=run_favorite_list)

    f_get = favorite_sub.add_parser("get", aliases=["show"], parents=[parent], help="Show a favorite.")
    f_get.add_argument("favorite_id", help="Favorite ID.")
    f_get.set_defaults(handler=run_favorite_get)

    f_add = favorite_sub.add_parser("add", aliases=["create"], parents=[parent], help="Add a favorite.")
    for name in FAVORITE_TARGETS:
        f_add.add_argument(f"--{name}", help=f"{name.capitalize()} ID to favorite.")
    _add_placement(f_add)
    f_add.set_defaults(handler=run_favorite_add)

    f_update = favorite_sub.add_parser("update", aliases=["move"], parents=[parent], help="Move a favorite.")
    f_update.add_argument("favorite_id", help="Favorite ID.")
    _add_placement(f_update)
    f_update.set_defaults(handler=run_favorite_update)

    f_remove = favorite_sub.add_parser(
        "remove", aliases=["rm", "delete"], parents=[parent], help="Remove a favorite."
    )
    f_remove.add_argument("favorite_id", help="Favorite ID.")
    f_remove.set_defaults(handler=run_favorite_remove)
