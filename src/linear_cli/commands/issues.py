"""Issue, relation, comment and attachment commands."""

from __future__ import annotations

import argparse
from typing import Any

from colorama import Fore, Style

from .. import operations, output, timeutil
from ..output import TableData
from .common import (
    CommandContext,
    UsageError,
    add_limit,
    add_sort,
    colored_priority,
    colored_state,
    compact,
    has_next_page,
    nodes,
    order_by,
    parse_json_object,
    print_entity,
    print_list,
    report_success,
    require_changes,
    resolve_text,
)

ISSUE_HEADERS = ["Identifier", "Title", "State", "Assignee", "Team", "Priority", "Created", "Updated"]


def build_issue_filter(args: argparse.Namespace) -> dict[str, Any]:
    """Translate list flags into an ``IssueFilter``.

    Completed and canceled issues are hidden unless a state is requested or
    ``--include-completed`` is set.
    """
    filters: dict[str, Any] = {}
    assignee = getattr(args, "assignee", None)
    if assignee:
        if assignee == "me":
            filters["assignee"] = {"isMe": {"eq": True}}
        else:
            filters["assignee"] = {"email": {"eq": assignee}}

    state = getattr(args, "state", None)
    if state:
        filters["state"] = {"name": {"eq": state}}
    elif not getattr(args, "include_completed", False):
        filters["state"] = {"type": {"nin": ["completed", "canceled"]}}

    team = getattr(args, "team", None)
    if team:
        filters["team"] = {"key": {"eq": team}}

    priority = getattr(args, "priority", None)
    if priority is not None:
        filters["priority"] = {"eq": priority}

    try:
        created_after = timeutil.parse_time_expression(getattr(args, "newer_than", None))
    except ValueError as exc:
        raise UsageError(f"Invalid newer-than value: {exc}") from exc
    if created_after:
        filters["createdAt"] = {"gte": created_after}
    return filters


def _issue_rows(issues: list[dict[str, Any]], ctx: CommandContext) -> list[list[str]]:
    rows = []
    for issue in issues:
        assignee = output.name_of(issue.get("assignee"), default="Unassigned")
        rows.append(
            [
                issue.get("identifier") or "",
                output.truncate(issue.get("title"), 40),
                colored_state(issue.get("state"), ctx),
                assignee,
                output.name_of(issue.get("team"), "key"),
                colored_priority(issue.get("priority"), ctx),
                output.short_date(issue.get("createdAt")),
                output.short_date(issue.get("updatedAt")),
            ]
        )
    return rows


def run_issue_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    filters = build_issue_filter(args)
    with ctx.client() as client:
        connection = operations.list_issues(
            client, filters=filters, first=args.limit, order_by=order_by(args.sort)
        )
    issues = nodes(connection)
    return print_list(
        ctx, issues, TableData(ISSUE_HEADERS, _issue_rows(issues, ctx)), "issues",
        more=has_next_page(connection),
    )


def run_issue_search(args: argparse.Namespace, ctx: CommandContext) -> int:
    filters = build_issue_filter(args)
    with ctx.client() as client:
        connection = operations.search_issues(
            client,
            args.query,
            filters=filters,
            first=args.limit,
            order_by=order_by(args.sort),
            include_archived=args.include_archived,
        )
    issues = nodes(connection)
    return print_list(
        ctx, issues, TableData(ISSUE_HEADERS, _issue_rows(issues, ctx)), "issues",
        more=has_next_page(connection),
    )


def run_issue_get(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        issue = operations.require_issue(client, args.issue_id)
    fields = [
        ("State", output.name_of(issue.get("state"))),
        ("Priority", output.priority_label(issue.get("priority"))),
        ("Assignee", output.name_of(issue.get("assignee"), default="Unassigned")),
        ("Team", output.name_of(issue.get("team"), "key")),
        ("Project", output.name_of(issue.get("project"))),
        ("Cycle", output.name_of(issue.get("cycle"))),
        ("Labels", ", ".join(label["name"] for label in nodes(issue.get("labels")))),
        ("Parent", output.name_of(issue.get("parent"), "identifier")),
        ("Due", issue.get("dueDate")),
        ("Created", output.short_date(issue.get("createdAt"))),
        ("Updated", output.short_date(issue.get("updatedAt"))),
        ("Branch", issue.get("branchName")),
        ("URL", issue.get("url")),
    ]
    children = nodes(issue.get("children"))
    if children:
        fields.append(
            ("Sub-issues", ", ".join(child["identifier"] for child in children))
        )
    title = f"{issue.get('identifier')}: {issue.get('title')}"
    return print_entity(ctx, issue, title, fields, body=issue.get("description"))


def run_issue_activity(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        issue = operations.get_issue_activity(client, args.issue_id, args.limit)
    if not issue:
        raise operations.NotFoundError(f"Issue '{args.issue_id}' not found.")
    if ctx.json:
        output.print_json(issue)
        return 0
    rows = []
    for entry in nodes(issue.get("history")):
        rows.append(
            [
                output.short_date(entry.get("createdAt")),
                output.name_of(entry.get("actor"), default="System"),
                _describe_history(entry),
            ]
        )
    print(output.heading(f"{issue.get('identifier')}: {issue.get('title')}", ctx.mode))
    return print_list(ctx, rows, TableData(["Date", "Actor", "Change"], rows), "history entries")


def _describe_history(entry: dict[str, Any]) -> str:
    changes = []
    for label, before, after in (
        ("state", entry.get("fromState"), entry.get("toState")),
        ("assignee", entry.get("fromAssignee"), entry.get("toAssignee")),
        ("cycle", entry.get("fromCycle"), entry.get("toCycle")),
        ("project", entry.get("fromProject"), entry.get("toProject")),
    ):
        if before or after:
            changes.append(
                f"{label}: {output.name_of(before, default='-')} -> {output.name_of(after, default='-')}"
            )
    if entry.get("fromTitle") or entry.get("toTitle"):
        changes.append(f"title: {entry.get('fromTitle') or '-'} -> {entry.get('toTitle') or '-'}")
    if entry.get("fromPriority") is not None or entry.get("toPriority") is not None:
        changes.append(
            f"priority: {output.priority_label(entry.get('fromPriority'))} -> "
            f"{output.priority_label(entry.get('toPriority'))}"
        )
    if entry.get("addedLabelIds"):
        changes.append(f"labels added: {len(entry['addedLabelIds'])}")
    if entry.get("removedLabelIds"):
        changes.append(f"labels removed: {len(entry['removedLabelIds'])}")
    return "; ".join(changes) or "updated"


def run_issue_create(args: argparse.Namespace, ctx: CommandContext) -> int:
    team_key = args.team or ctx.settings.default_team
    if not team_key:
        raise UsageError("--team is required (or set default_team in the config file)")
    description = resolve_text(
        args.description, args.description_file, "description", "description-file"
    )
    with ctx.client() as client:
        team = operations.fetch_team_context(client, team_key)
        issue_input = compact(
            title=args.title,
            teamId=team.id,
            description=description,
            priority=args.priority,
            dueDate=args.due_date,
        )
        if args.state:
            issue_input["stateId"] = team.resolve_state_id(args.state)
        if args.labels:
            issue_input["labelIds"] = team.resolve_label_ids(args.labels)
        if args.assign_me:
            issue_input["assigneeId"] = operations.get_viewer(client)["id"]
        elif args.assignee:
            issue_input["assigneeId"] = team.resolve_member_id(args.assignee)
        if args.parent:
            issue_input["parentId"] = operations.require_issue(client, args.parent)["id"]
        issue = operations.create_issue(client, issue_input)
    return report_success(
        ctx, f"Created issue {issue['identifier']}: {issue['title']}", issue
    )


def run_issue_update(args: argparse.Namespace, ctx: CommandContext) -> int:
    description = resolve_text(
        args.description, args.description_file, "description", "description-file"
    )
    changes = compact(
        title=args.title,
        description=description,
        priority=args.priority,
        dueDate=args.due_date,
    )
    with ctx.client() as client:
        if args.state or args.labels or (args.assignee and args.assignee not in ("me", "none")):
            current = operations.require_issue(client, args.issue_id)
            team = operations.fetch_team_context(client, current["team"]["key"])
            if args.state:
                changes["stateId"] = team.resolve_state_id(args.state)
            if args.labels:
                changes["labelIds"] = team.resolve_label_ids(args.labels)
            if args.assignee and args.assignee not in ("me", "none"):
                changes["assigneeId"] = team.resolve_member_id(args.assignee)
        if args.assignee == "me":
            changes["assigneeId"] = operations.get_viewer(client)["id"]
        elif args.assignee == "none":
            changes["assigneeId"] = None
        issue = operations.update_issue(client, args.issue_id, require_changes(changes))
    return report_success(ctx, f"Updated issue {issue['identifier']}", issue)


def run_issue_assign(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        viewer = operations.get_viewer(client)
        issue = operations.update_issue(client, args.issue_id, {"assigneeId": viewer["id"]})
    return report_success(
        ctx, f"Assigned {issue['identifier']} to {viewer.get('name')}", issue
    )


def run_issue_archive(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        archived = operations.archive_issue(client, args.issue_id)
    identifier = (archived or {}).get("identifier") or args.issue_id
    return report_success(ctx, f"Archived issue {identifier}", archived)


RELATION_HEADERS = ["Type", "Issue", "Title", "State", "Relation ID"]


def run_relation_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        issue = operations.require_issue(client, args.issue_id)

    entries: list[dict[str, Any]] = []
    parent = issue.get("parent")
    if parent:
        entries.append({"type": "parent", "issue": parent, "relationId": None})
    for child in nodes(issue.get("children")):
        entries.append({"type": "sub-issue", "issue": child, "relationId": None})
    for relation in nodes(issue.get("relations")):
        entries.append(
            {
                "type": relation.get("type"),
                "issue": relation.get("relatedIssue") or {},
                "relationId": relation.get("id"),
            }
        )

    if not entries:
        output.info(f"No relationships found for {args.issue_id}", ctx.mode)
        return 0
    rows = [
        [
            entry["type"],
            entry["issue"].get("identifier") or "",
            output.truncate(entry["issue"].get("title"), 40),
            colored_state(entry["issue"].get("state"), ctx),
            entry["relationId"] or "",
        ]
        for entry in entries
    ]
    return print_list(ctx, entries, TableData(RELATION_HEADERS, rows), "relationships")


def run_relation_add(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        result = operations.add_issue_relation(client, args.issue_id, args.type, args.target)
    return report_success(
        ctx, f"Added {args.type} relationship: {args.issue_id} -> {args.target}", result
    )


def run_relation_remove(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        result = operations.remove_issue_relation(
            client, args.issue_id, args.type, args.target
        )
    return report_success(
        ctx, f"Removed {args.type} relationship: {args.issue_id} -> {args.target}", result
    )


def run_relation_update(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        relation = operations.update_issue_relation(
            client, args.relation_id, {"type": args.type}
        )
    return report_success(ctx, f"Updated relation {args.relation_id} to {args.type}", relation)


def _tree_label(node: dict[str, Any], ctx: CommandContext) -> str:
    identifier = node.get("identifier") or ""
    state = node.get("state")
    if ctx.rich:
        identifier = f"{Fore.CYAN}{Style.BRIGHT}{identifier}{Style.RESET_ALL}"
    if state:
        identifier = f"{identifier} ({state})"
    label = f"{identifier} - {node.get('title') or ''}"
    if node.get("circular"):
        label += " [circular]"
    return label


def _tree_lines(node: dict[str, Any], prefix: str, ctx: CommandContext) -> list[str]:
    lines: list[str] = []
    children = node.get("children") or []
    for index, child in enumerate(children):
        last = index == len(children) - 1
        connector = "└──" if last else "├──"
        kind = child["type"]
        if ctx.rich:
            kind = f"{Fore.MAGENTA}{kind}{Style.RESET_ALL}"
        lines.append(f"{prefix}{connector} {kind}: {_tree_label(child, ctx)}")
        lines.extend(_tree_lines(child, prefix + ("    " if last else "│   "), ctx))
    return lines


def run_issue_tree(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        tree = operations.build_issue_tree(client, args.issue_id, depth=args.depth)
    if ctx.json:
        output.print_json(tree)
        return 0
    print(_tree_label(tree, ctx))
    for line in _tree_lines(tree, "", ctx):
        print(line)
    return 0


def run_comment_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        connection = operations.list_issue_comments(
            client, args.issue_id, first=args.limit, order_by=order_by(args.sort)
        )
    comments = nodes(connection)
    if ctx.mode is output.OutputMode.TABLE and comments:
        for comment in comments:
            author = output.name_of(comment.get("user"), default="Unknown")
            print(output.heading(f"{author} ({output.short_date(comment.get('createdAt'))})", ctx.mode))
            print(f"  id: {comment.get('id')}")
            print(comment.get("body") or "")
            print()
        return 0
    rows = [
        [
            comment.get("id") or "",
            output.name_of(comment.get("user"), default="Unknown"),
            output.short_date(comment.get("createdAt")),
            (comment.get("body") or "").replace("\n", " "),
        ]
        for comment in comments
    ]
    return print_list(
        ctx, comments, TableData(["ID", "Author", "Created", "Body"], rows), "comments"
    )


def _comment_body(args: argparse.Namespace) -> str:
    body = resolve_text(args.body, args.file, "body", "file")
    if not body:
        raise UsageError("comment body is required (use --body or --file)")
    return body


def run_comment_create(args: argparse.Namespace, ctx: CommandContext) -> int:
    body = _comment_body(args)
    with ctx.client() as client:
        issue = operations.require_issue(client, args.issue_id)
        comment = operations.create_comment(client, issue["id"], body)
    return report_success(ctx, f"Added comment to {args.issue_id}", comment)


def run_comment_update(args: argparse.Namespace, ctx: CommandContext) -> int:
    body = _comment_body(args)
    with ctx.client() as client:
        comment = operations.update_comment(client, args.comment_id, body)
    return report_success(ctx, f"Updated comment {args.comment_id}", comment)


def run_comment_delete(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        operations.delete_comment(client, args.comment_id)
    return report_success(ctx, f"Deleted comment {args.comment_id}")


ATTACHMENT_HEADERS = ["ID", "Title", "URL", "Created"]


def run_attachment_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        connection = operations.list_issue_attachments(client, args.issue_id, first=args.limit)
    attachments = nodes(connection)
    rows = [
        [
            item.get("id") or "",
            output.truncate(item.get("title"), 40),
            item.get("url") or "",
            output.short_date(item.get("createdAt")),
        ]
        for item in attachments
    ]
    return print_list(ctx, attachments, TableData(ATTACHMENT_HEADERS, rows), "attachments")


def run_attachment_create(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        issue = operations.require_issue(client, args.issue_id)
        attachment_input = compact(
            issueId=issue["id"],
            url=args.url,
            title=args.title or args.url,
            subtitle=args.subtitle,
            iconUrl=args.icon_url,
            metadata=parse_json_object(args.metadata, "metadata"),
        )
        attachment = operations.create_attachment(client, attachment_input)
    return report_success(ctx, f"Attached {args.url} to {args.issue_id}", attachment)


def run_attachment_link(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        issue = operations.require_issue(client, args.issue_id)
        attachment = operations.link_url(client, issue["id"], args.url, args.title)
    return report_success(ctx, f"Linked {args.url} to {args.issue_id}", attachment)


def run_attachment_update(args: argparse.Namespace, ctx: CommandContext) -> int:
    changes = require_changes(
        compact(
            title=args.title,
            subtitle=args.subtitle,
            iconUrl=args.icon_url,
            metadata=parse_json_object(args.metadata, "metadata"),
        )
    )
    with ctx.client() as client:
        attachment = operations.update_attachment(client, args.attachment_id, changes)
    return report_success(ctx, f"Updated attachment {args.attachment_id}", attachment)


def run_attachment_delete(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        operations.delete_attachment(client, args.attachment_id)
    return report_success(ctx, f"Deleted attachment {args.attachment_id}")


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--assignee", "-a", help="Filter by assignee (email or 'me').")
    parser.add_argument("--state", "-s", help="Filter by state name.")
    parser.add_argument("--team", "-t", help="Filter by team key.")
    parser.add_argument(
        "--priority",
        "-r",
        type=int,
        choices=[0, 1, 2, 3, 4],
        help="Filter by priority (0=None, 1=Urgent, 2=High, 3=Normal, 4=Low).",
    )
    parser.add_argument(
        "--include-completed",
        "-c",
        action="store_true",
        help="Include completed and canceled issues.",
    )
    parser.add_argument(
        "--newer-than",
        "-n",
        help="Only issues created after this time (default: 6_months_ago, 'all_time' disables).",
    )
    add_limit(parser)
    add_sort(parser)


def _add_write_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--description", "-d", help="Issue description (markdown).")
    parser.add_argument(
        "--description-file", help="Read the description from a file (use - for stdin)."
    )
    parser.add_argument(
        "--priority",
        type=int,
        choices=[0, 1, 2, 3, 4],
        help="Priority (0=None, 1=Urgent, 2=High, 3=Normal, 4=Low).",
    )
    parser.add_argument("--state", "-s", help="Workflow state name.")
    parser.add_argument("--labels", nargs="+", help="Label names.")
    parser.add_argument("--due-date", help="Due date (YYYY-MM-DD).")


def register(subparsers: argparse._SubParsersAction, parent: argparse.ArgumentParser) -> None:
    issue_parser = subparsers.add_parser("issue", parents=[parent], help="Manage issues.")
    issue_sub = issue_parser.add_subparsers(dest="issue_command", required=True)

    list_parser = issue_sub.add_parser("list", aliases=["ls"], parents=[parent], help="List issues.")
    _add_filter_arguments(list_parser)
    list_parser.set_defaults(handler=run_issue_list)

    search_parser = issue_sub.add_parser(
        "search", aliases=["find"], parents=[parent], help="Full-text search across issues."
    )
    search_parser.add_argument("query", help="Search term.")
    _add_filter_arguments(search_parser)
    search_parser.add_argument(
        "--include-archived", action="store_true", help="Include archived issues."
    )
    search_parser.set_defaults(handler=run_issue_search)

    get_parser = issue_sub.add_parser("get", aliases=["show"], parents=[parent], help="Show an issue.")
    get_parser.add_argument("issue_id", help="Issue identifier (e.g. ENG-123).")
    get_parser.set_defaults(handler=run_issue_get)

    activity_parser = issue_sub.add_parser(
        "activity", aliases=["history"], parents=[parent], help="Show an issue's history."
    )
    activity_parser.add_argument("issue_id", help="Issue identifier.")
    add_limit(activity_parser, default=20)
    activity_parser.set_defaults(handler=run_issue_activity)

    create_parser = issue_sub.add_parser(
        "create", aliases=["new"], parents=[parent], help="Create an issue."
    )
    create_parser.add_argument("--title", required=True, help="Issue title.")
    create_parser.add_argument("--team", "-t", help="Team key.")
    create_parser.add_argument("--assign-me", "-m", action="store_true", help="Assign to yourself.")
    create_parser.add_argument("--assignee", "-a", help="Assignee email address.")
    create_parser.add_argument("--parent", help="Parent issue identifier.")
    _add_write_arguments(create_parser)
    create_parser.set_defaults(handler=run_issue_create, priority=3)

    update_parser = issue_sub.add_parser(
        "update", aliases=["edit"], parents=[parent], help="Update an issue."
    )
    update_parser.add_argument("issue_id", help="Issue identifier.")
    update_parser.add_argument("--title", help="New title.")
    update_parser.add_argument(
        "--assignee", "-a", help="Assignee email, 'me', or 'none' to unassign."
    )
    _add_write_arguments(update_parser)
    update_parser.set_defaults(handler=run_issue_update)

    assign_parser = issue_sub.add_parser("assign", parents=[parent], help="Assign an issue to yourself.")
    assign_parser.add_argument("issue_id", help="Issue identifier.")
    assign_parser.set_defaults(handler=run_issue_assign)

    archive_parser = issue_sub.add_parser("archive", parents=[parent], help="Archive an issue.")
    archive_parser.add_argument("issue_id", help="Issue identifier.")
    archive_parser.set_defaults(handler=run_issue_archive)

    tree_parser = issue_sub.add_parser(
        "tree", aliases=["deps"], parents=[parent], help="Show an issue's dependency tree."
    )
    tree_parser.add_argument("issue_id", help="Issue identifier.")
    tree_parser.add_argument("--depth", type=int, default=3, help="Maximum recursion depth (default: 3).")
    tree_parser.set_defaults(handler=run_issue_tree)

    relation_parser = subparsers.add_parser(
        "relation", parents=[parent], help="Manage issue relationships."
    )
    relation_sub = relation_parser.add_subparsers(dest="relation_command", required=True)

    rel_list = relation_sub.add_parser("list", aliases=["ls"], parents=[parent], help="List relationships.")
    rel_list.add_argument("issue_id", help="Issue identifier.")
    rel_list.set_defaults(handler=run_relation_list)

    for name, aliases, handler, text in (
        ("add", ["create", "new"], run_relation_add, "Add a relationship."),
        ("remove", ["rm", "delete"], run_relation_remove, "Remove a relationship."),
    ):
        rel_parser = relation_sub.add_parser(name, aliases=aliases, parents=[parent], help=text)
        rel_parser.add_argument("issue_id", help="Issue identifier.")
        rel_parser.add_argument(
            "--type", required=True, choices=operations.RELATION_TYPES, help="Relation type."
        )
        rel_parser.add_argument("--target", required=True, help="Target issue identifier.")
        rel_parser.set_defaults(handler=handler)

    rel_update = relation_sub.add_parser(
        "update", aliases=["edit"], parents=[parent], help="Change a relation's type."
    )
    rel_update.add_argument("relation_id", help="Relation ID.")
    rel_update.add_argument(
        "--type", required=True, choices=operations.UPDATABLE_RELATION_TYPES, help="New type."
    )
    rel_update.set_defaults(handler=run_relation_update)

    comment_parser = subparsers.add_parser("comment", parents=[parent], help="Manage comments.")
    comment_sub = comment_parser.add_subparsers(dest="comment_command", required=True)

    c_list = comment_sub.add_parser("list", aliases=["ls"], parents=[parent], help="List comments.")
    c_list.add_argument("issue_id", help="Issue identifier.")
    add_limit(c_list)
    add_sort(c_list)
    c_list.set_defaults(handler=run_comment_list)

    c_create = comment_sub.add_parser(
        "create", aliases=["add", "new"], parents=[parent], help="Comment on an issue."
    )
    c_create.add_argument("issue_id", help="Issue identifier.")
    c_update = comment_sub.add_parser(
        "update", aliases=["edit"], parents=[parent], help="Edit a comment."
    )
    c_update.add_argument("comment_id", help="Comment ID.")
    for sub in (c_create, c_update):
        sub.add_argument("--body", "-b", help="Comment body.")
        sub.add_argument("--file", "-f", help="Read the body from a file (use - for stdin).")
    c_create.set_defaults(handler=run_comment_create)
    c_update.set_defaults(handler=run_comment_update)

    c_delete = comment_sub.add_parser("delete", aliases=["rm"], parents=[parent], help="Delete a comment.")
    c_delete.add_argument("comment_id", help="Comment ID.")
    c_delete.set_defaults(handler=run_comment_delete)

    attachment_parser = subparsers.add_parser(
        "attachment", parents=[parent], help="Manage issue attachments."
    )
    attachment_sub = attachment_parser.add_subparsers(dest="attachment_command", required=True)

    a_list = attachment_sub.add_parser("list", aliases=["ls"], parents=[parent], help="List attachments.")
    a_list.add_argument("issue_id", help="Issue identifier.")
    add_limit(a_list)
    a_list.set_defaults(handler=run_attachment_list)

    a_create = attachment_sub.add_parser(
        "create", aliases=["new"], parents=[parent], help="Attach a URL with metadata."
    )
    a_create.add_argument("issue_id", help="Issue identifier.")
    a_create.add_argument("--url", required=True, help="URL to attach.")
    a_create.add_argument("--title", help="Attachment title.")
    a_create.add_argument("--subtitle", help="Attachment subtitle.")
    a_create.add_argument("--icon-url", help="Icon URL.")
    a_create.add_argument("--metadata", help="Metadata as a JSON object.")
    a_create.set_defaults(handler=run_attachment_create)

    a_link = attachment_sub.add_parser("link", parents=[parent], help="Link a URL to an issue.")
    a_link.add_argument("issue_id", help="Issue identifier.")
    a_link.add_argument("--url", required=True, help="URL to link.")
    a_link.add_argument("--title", help="Title override.")
    a_link.set_defaults(handler=run_attachment_link)

    a_update = attachment_sub.add_parser(
        "update", aliases=["edit"], parents=[parent], help="Update an attachment."
    )
    a_update.add_argument("attachment_id", help="Attachment ID.")
    a_update.add_argument("--title", help="New title.")
    a_update.add_argument("--subtitle", help="New subtitle.")
    a_update.add_argument("--icon-url", help="New icon URL.")
    a_update.add_argument("--metadata", help="New metadata as a JSON object.")
    a_update.set_defaults(handler=run_attachment_update)

    a_delete = attachment_sub.add_parser(
        "delete", aliases=["rm"], parents=[parent], help="Delete an attachment."
    )
    a_delete.add_argument("attachment_id", help="Attachment ID.")
    a_delete.set_defaults(handler=run_attachment_delete)
