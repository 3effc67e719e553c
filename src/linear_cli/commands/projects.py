"""Project, milestone, status update, initiative, document and view commands."""

from __future__ import annotations

import argparse
from typing import Any

from .. import operations, output, timeutil
from ..output import TableData
from .common import (
    CommandContext,
    UsageError,
    add_limit,
    add_sort,
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
from .issues import ISSUE_HEADERS, _issue_rows

PROJECT_STATES = ("backlog", "planned", "started", "paused", "completed", "canceled")
PROJECT_HEALTH = ("onTrack", "atRisk", "offTrack")
PROJECT_HEADERS = ["Name", "State", "Lead", "Teams", "Progress", "Target", "ID"]


def _percent(value: Any) -> str:
    return f"{round((value or 0) * 100)}%"


def _created_after(expression: str | None) -> str | None:
    try:
        return timeutil.parse_time_expression(expression)
    except ValueError as exc:
        raise UsageError(f"Invalid newer-than value: {exc}") from exc


def _team_keys(entity: dict[str, Any]) -> str:
    return ", ".join(team.get("key") or "" for team in nodes(entity.get("teams")))


def build_project_filter(args: argparse.Namespace) -> dict[str, Any]:
    filters: dict[str, Any] = {}
    if args.team:
        filters["accessibleTeams"] = {"some": {"key": {"eq": args.team}}}
    if args.state:
        filters["state"] = {"eq": args.state}
    elif not args.include_completed:
        filters["state"] = {"nin": ["completed", "canceled"]}
    created_after = _created_after(args.newer_than)
    if created_after:
        filters["createdAt"] = {"gte": created_after}
    return filters


def _project_rows(projects: list[dict[str, Any]]) -> list[list[str]]:
    return [
        [
            output.truncate(project.get("name"), 40),
            project.get("state") or "",
            output.name_of(project.get("lead"), default="Unassigned"),
            _team_keys(project),
            _percent(project.get("progress")),
            project.get("targetDate") or "",
            project.get("id") or "",
        ]
        for project in projects
    ]


def run_project_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    filters = build_project_filter(args)
    with ctx.client() as client:
        connection = operations.list_projects(
            client, filters=filters, first=args.limit, order_by=order_by(args.sort)
        )
    projects = nodes(connection)
    return print_list(
        ctx, projects, TableData(PROJECT_HEADERS, _project_rows(projects)), "projects",
        more=has_next_page(connection),
    )


def _require_project(client, project_id: str) -> dict[str, Any]:
    project = operations.get_project(client, project_id)
    if not project:
        raise operations.NotFoundError(f"Project '{project_id}' not found.")
    return project


def run_project_get(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        project = _require_project(client, args.project_id)
    fields = [
        ("ID", project.get("id")),
        ("State", project.get("state")),
        ("Health", project.get("health")),
        ("Progress", _percent(project.get("progress"))),
        ("Lead", output.name_of(project.get("lead"), default="Unassigned")),
        ("Teams", _team_keys(project)),
        ("Start", project.get("startDate")),
        ("Target", project.get("targetDate")),
        ("Milestones", ", ".join(m["name"] for m in nodes(project.get("projectMilestones")))),
        ("Issues", len(nodes(project.get("issues")))),
        ("URL", project.get("url")),
    ]
    body = project.get("content") or project.get("description")
    return print_entity(ctx, project, project.get("name") or args.project_id, fields, body=body)


def run_project_issues(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        connection = operations.list_project_issues(client, args.project_id, first=args.limit)
    issues = nodes(connection)
    return print_list(
        ctx, issues, TableData(ISSUE_HEADERS, _issue_rows(issues, ctx)), "issues",
        more=has_next_page(connection),
    )


def _resolve_team_ids(client, keys: list[str]) -> list[str]:
    ids = []
    for key in keys:
        team = operations.get_team(client, key)
        if not team:
            raise operations.NotFoundError(f"Team '{key}' not found.")
        ids.append(team["id"])
    return ids


def run_project_create(args: argparse.Namespace, ctx: CommandContext) -> int:
    description = resolve_text(args.description, args.description_file, "description", "description-file")
    with ctx.client() as client:
        project_input = compact(
            name=args.name,
            teamIds=_resolve_team_ids(client, args.team),
            description=description,
            state=args.state,
            startDate=args.start_date,
            targetDate=args.target_date,
            leadId=args.lead,
        )
        project = operations.create_project(client, project_input)
    return report_success(ctx, f"Created project {project.get('name')}", project)


def run_project_update(args: argparse.Namespace, ctx: CommandContext) -> int:
    description = resolve_text(args.description, args.description_file, "description", "description-file")
    changes = require_changes(
        compact(
            name=args.name,
            description=description,
            state=args.state,
            startDate=args.start_date,
            targetDate=args.target_date,
            leadId=args.lead,
        )
    )
    with ctx.client() as client:
        project = operations.update_project(client, args.project_id, changes)
    return report_success(ctx, f"Updated project {project.get('name')}", project)


def run_project_teams(args: argparse.Namespace, ctx: CommandContext) -> int:
    """Add or remove teams by rewriting the project's full ``teamIds`` list."""
    adding = args.project_command == "add-team"
    with ctx.client() as client:
        project = _require_project(client, args.project_id)
        current = [team["id"] for team in nodes(project.get("teams"))]
        requested = _resolve_team_ids(client, args.team_keys)
        if adding:
            team_ids = current + [team_id for team_id in requested if team_id not in current]
        else:
            team_ids = [team_id for team_id in current if team_id not in requested]
            if not team_ids:
                raise UsageError("a project must keep at least one team")
        updated = operations.update_project(client, project["id"], {"teamIds": team_ids})
    verb = "Added" if adding else "Removed"
    return report_success(
        ctx, f"{verb} {', '.join(args.team_keys)} on project {project.get('name')}", updated
    )


def run_project_archive(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        operations.archive_project(client, args.project_id)
    return report_success(ctx, f"Archived project {args.project_id}")


def run_project_delete(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        operations.delete_project(client, args.project_id)
    return report_success(ctx, f"Deleted project {args.project_id}")


MILESTONE_HEADERS = ["Name", "Status", "Target", "Progress", "ID"]


def run_milestone_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        connection = operations.list_project_milestones(client, args.project_id, first=args.limit)
    milestones = nodes(connection)
    rows = [
        [
            milestone.get("name") or "",
            milestone.get("status") or "",
            milestone.get("targetDate") or "",
            _percent(milestone.get("progress")),
            milestone.get("id") or "",
        ]
        for milestone in milestones
    ]
    return print_list(ctx, milestones, TableData(MILESTONE_HEADERS, rows), "milestones")


def run_milestone_get(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        milestone = operations.get_project_milestone(client, args.milestone_id)
    if not milestone:
        raise operations.NotFoundError(f"Milestone '{args.milestone_id}' not found.")
    fields = [
        ("ID", milestone.get("id")),
        ("Project", output.name_of(milestone.get("project"))),
        ("Status", milestone.get("status")),
        ("Target", milestone.get("targetDate")),
        ("Progress", _percent(milestone.get("progress"))),
        ("Issues", ", ".join(i["identifier"] for i in nodes(milestone.get("issues")))),
    ]
    return print_entity(ctx, milestone, milestone.get("name") or "", fields, body=milestone.get("description"))


def run_milestone_create(args: argparse.Namespace, ctx: CommandContext) -> int:
    description = resolve_text(args.description, args.description_file, "description", "description-file")
    milestone_input = compact(
        projectId=args.project_id,
        name=args.name,
        description=description,
        targetDate=args.target_date,
    )
    with ctx.client() as client:
        milestone = operations.create_project_milestone(client, milestone_input)
    return report_success(ctx, f"Created milestone {milestone.get('name')}", milestone)


def run_milestone_update(args: argparse.Namespace, ctx: CommandContext) -> int:
    description = resolve_text(args.description, args.description_file, "description", "description-file")
    changes = compact(name=args.name, description=description)
    if args.target_date is not None:
        # An empty value clears the target date.
        changes["targetDate"] = args.target_date or None
    with ctx.client() as client:
        milestone = operations.update_project_milestone(
            client, args.milestone_id, require_changes(changes)
        )
    return report_success(ctx, f"Updated milestone {milestone.get('name')}", milestone)


def run_milestone_delete(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        operations.delete_project_milestone(client, args.milestone_id)
    return report_success(ctx, f"Deleted milestone {args.milestone_id}")


def run_project_update_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        connection = operations.list_project_updates(client, args.project_id, first=args.limit)
    updates = nodes(connection)
    rows = [
        [
            output.short_date(update.get("createdAt")),
            output.name_of(update.get("user"), default="Unknown"),
            update.get("health") or "",
            output.truncate((update.get("body") or "").replace("\n", " "), 60),
            update.get("id") or "",
        ]
        for update in updates
    ]
    return print_list(
        ctx, updates, TableData(["Date", "Author", "Health", "Body", "ID"], rows), "updates"
    )


def run_project_update_get(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        update = operations.get_project_update(client, args.update_id)
    if not update:
        raise operations.NotFoundError(f"Project update '{args.update_id}' not found.")
    fields = [
        ("Health", update.get("health")),
        ("Author", output.name_of(update.get("user"))),
        ("Created", output.short_date(update.get("createdAt"))),
        ("URL", update.get("url")),
    ]
    return print_entity(ctx, update, f"Update {update.get('id')}", fields, body=update.get("body"))


def run_project_update_create(args: argparse.Namespace, ctx: CommandContext) -> int:
    body = resolve_text(args.body, args.body_file, "body", "body-file")
    if not body:
        raise UsageError("--body is required")
    with ctx.client() as client:
        update = operations.create_project_update(
            client, compact(projectId=args.project_id, body=body, health=args.health)
        )
    return report_success(ctx, "Posted project update", update)


def run_project_update_update(args: argparse.Namespace, ctx: CommandContext) -> int:
    body = resolve_text(args.body, args.body_file, "body", "body-file")
    changes = require_changes(compact(body=body, health=args.health))
    with ctx.client() as client:
        update = operations.update_project_update(client, args.update_id, changes)
    return report_success(ctx, f"Updated project update {args.update_id}", update)


def run_project_update_archive(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        operations.archive_project_update(client, args.update_id)
    return report_success(ctx, f"Archived project update {args.update_id}")


INITIATIVE_HEADERS = ["Name", "Status", "Owner", "Target", "Health", "ID"]


def run_initiative_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    filters: dict[str, Any] = {}
    if args.status:
        filters["status"] = {"eq": args.status}
    elif not args.include_completed:
        filters["status"] = {"nin": ["Completed"]}
    with ctx.client() as client:
        connection = operations.list_initiatives(
            client, filters=filters, first=args.limit, order_by=order_by(args.sort)
        )
    initiatives = nodes(connection)
    rows = [
        [
            output.truncate(item.get("name"), 40),
            item.get("status") or "",
            output.name_of(item.get("owner"), default="Unassigned"),
            item.get("targetDate") or "",
            item.get("health") or "",
            item.get("id") or "",
        ]
        for item in initiatives
    ]
    return print_list(
        ctx, initiatives, TableData(INITIATIVE_HEADERS, rows), "initiatives",
        more=has_next_page(connection),
    )


def run_initiative_get(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        initiative = operations.get_initiative(client, args.initiative_id)
    if not initiative:
        raise operations.NotFoundError(f"Initiative '{args.initiative_id}' not found.")
    fields = [
        ("ID", initiative.get("id")),
        ("Status", initiative.get("status")),
        ("Health", initiative.get("health")),
        ("Owner", output.name_of(initiative.get("owner"), default="Unassigned")),
        ("Target", initiative.get("targetDate")),
        ("Parent", output.name_of(initiative.get("parentInitiative"))),
        ("Projects", ", ".join(p["name"] for p in nodes(initiative.get("projects")))),
        ("URL", initiative.get("url")),
    ]
    body = initiative.get("content") or initiative.get("description")
    return print_entity(ctx, initiative, initiative.get("name") or "", fields, body=body)


def run_initiative_projects(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        connection = operations.list_initiative_projects(
            client, args.initiative_id, first=args.limit
        )
    projects = nodes(connection)
    return print_list(
        ctx, projects, TableData(PROJECT_HEADERS, _project_rows(projects)), "projects",
        more=has_next_page(connection),
    )


def _initiative_input(args: argparse.Namespace, client) -> dict[str, Any]:
    description = resolve_text(args.description, args.description_file, "description", "description-file")
    values = compact(
        name=args.name,
        description=description,
        status=args.status,
        color=args.color,
        icon=args.icon,
    )
    if args.target_date is not None:
        values["targetDate"] = args.target_date or None
    owner = getattr(args, "owner", None)
    if owner == "none":
        values["ownerId"] = None
    elif owner == "me":
        values["ownerId"] = operations.get_viewer(client)["id"]
    elif owner:
        user = operations.get_user(client, owner)
        if not user:
            raise operations.NotFoundError(f"User '{owner}' not found.")
        values["ownerId"] = user["id"]
    return values


def run_initiative_create(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        initiative = operations.create_initiative(client, _initiative_input(args, client))
    return report_success(ctx, f"Created initiative {initiative.get('name')}", initiative)


def run_initiative_update(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        changes = require_changes(_initiative_input(args, client))
        initiative = operations.update_initiative(client, args.initiative_id, changes)
    return report_success(ctx, f"Updated initiative {initiative.get('name')}", initiative)


def run_initiative_delete(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        operations.delete_initiative(client, args.initiative_id)
    return report_success(ctx, f"Deleted initiative {args.initiative_id}")


DOCUMENT_HEADERS = ["Title", "Project", "Team", "Creator", "Updated", "ID"]


def _document_rows(documents: list[dict[str, Any]]) -> list[list[str]]:
    return [
        [
            output.truncate(document.get("title"), 40),
            output.name_of(document.get("project")),
            output.name_of(document.get("team"), "key"),
            output.name_of(document.get("creator")),
            output.short_date(document.get("updatedAt")),
            document.get("id") or "",
        ]
        for document in documents
    ]


def run_document_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    filters: dict[str, Any] = {}
    if args.project:
        filters["project"] = {"id": {"eq": args.project}}
    if args.issue:
        filters["issue"] = {"id": {"eq": args.issue}}
    if args.team:
        filters["team"] = {"key": {"eq": args.team}}
    created_after = _created_after(args.newer_than)
    if created_after:
        filters["createdAt"] = {"gte": created_after}
    with ctx.client() as client:
        connection = operations.list_documents(
            client, filters=filters, first=args.limit, order_by=order_by(args.sort)
        )
    documents = nodes(connection)
    return print_list(
        ctx, documents, TableData(DOCUMENT_HEADERS, _document_rows(documents)), "documents",
        more=has_next_page(connection),
    )


def run_document_search(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        connection = operations.search_documents(
            client,
            args.query,
            first=args.limit,
            order_by=order_by(args.sort),
            team_id=args.team,
            include_comments=args.include_comments,
        )
    documents = nodes(connection)
    return print_list(
        ctx, documents, TableData(DOCUMENT_HEADERS, _document_rows(documents)), "documents",
        more=has_next_page(connection),
    )


def run_document_get(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        document = operations.get_document(client, args.document_id)
    if not document:
        raise operations.NotFoundError(f"Document '{args.document_id}' not found.")
    fields = [
        ("ID", document.get("id")),
        ("Project", output.name_of(document.get("project"))),
        ("Team", output.name_of(document.get("team"), "key")),
        ("Creator", output.name_of(document.get("creator"))),
        ("Updated", output.short_date(document.get("updatedAt"))),
        ("URL", document.get("url")),
    ]
    return print_entity(ctx, document, document.get("title") or "", fields, body=document.get("content"))


def run_document_create(args: argparse.Namespace, ctx: CommandContext) -> int:
    content = resolve_text(args.content, args.content_file, "content", "content-file")
    with ctx.client() as client:
        document_input = compact(
            title=args.title,
            content=content,
            projectId=args.project,
            issueId=args.issue,
            icon=args.icon,
            color=args.color,
        )
        if args.team:
            document_input["teamId"] = _resolve_team_ids(client, [args.team])[0]
        document = operations.create_document(client, document_input)
    return report_success(ctx, f"Created document {document.get('title')}", document)


def run_document_update(args: argparse.Namespace, ctx: CommandContext) -> int:
    content = resolve_text(args.content, args.content_file, "content", "content-file")
    changes = require_changes(
        compact(
            title=args.title,
            content=content,
            projectId=args.project,
            issueId=args.issue,
            icon=args.icon,
            color=args.color,
        )
    )
    with ctx.client() as client:
        document = operations.update_document(client, args.document_id, changes)
    return report_success(ctx, f"Updated document {document.get('title')}", document)


def run_document_delete(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        operations.delete_document(client, args.document_id)
    return report_success(ctx, f"Deleted document {args.document_id}")


VIEW_HEADERS = ["Name", "Model", "Team", "Shared", "Owner", "ID"]


def run_view_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    filters: dict[str, Any] = {}
    if args.model:
        filters["modelName"] = {"eq": args.model}
    if args.shared:
        filters["shared"] = {"eq": True}
    if args.team:
        filters["team"] = {"key": {"eq": args.team}}
    with ctx.client() as client:
        connection = operations.list_custom_views(client, filters=filters, first=args.limit)
    views = nodes(connection)
    rows = [
        [
            output.truncate(view.get("name"), 40),
            view.get("modelName") or "",
            output.name_of(view.get("team"), "key"),
            "Yes" if view.get("shared") else "No",
            output.name_of(view.get("owner")),
            view.get("id") or "",
        ]
        for view in views
    ]
    return print_list(ctx, views, TableData(VIEW_HEADERS, rows), "views")


def _require_view(client, view_id: str) -> dict[str, Any]:
    view = operations.get_custom_view(client, view_id)
    if not view:
        raise operations.NotFoundError(f"View '{view_id}' not found.")
    return view


def run_view_get(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        view = _require_view(client, args.view_id)
    fields = [
        ("ID", view.get("id")),
        ("Model", view.get("modelName")),
        ("Team", output.name_of(view.get("team"), "key")),
        ("Shared", "Yes" if view.get("shared") else "No"),
        ("Owner", output.name_of(view.get("owner"))),
    ]
    filter_data = view.get("filterData") or view.get("projectFilterData")
    body = output.render_json(filter_data) if filter_data else None
    return print_entity(ctx, view, view.get("name") or "", fields, body=body)


def run_view_run(args: argparse.Namespace, ctx: CommandContext) -> int:
    """Fetch the issues or projects matched by a saved view."""
    with ctx.client() as client:
        view = _require_view(client, args.view_id)
        if (view.get("modelName") or "").lower() == "project":
            connection = operations.list_custom_view_projects(client, args.view_id, first=args.limit)
            projects = nodes(connection)
            table = TableData(PROJECT_HEADERS, _project_rows(projects))
            return print_list(ctx, projects, table, "projects", more=has_next_page(connection))
        connection = operations.list_custom_view_issues(client, args.view_id, first=args.limit)
    issues = nodes(connection)
    return print_list(
        ctx, issues, TableData(ISSUE_HEADERS, _issue_rows(issues, ctx)), "issues",
        more=has_next_page(connection),
    )


def _view_filter(args: argparse.Namespace, model: str) -> dict[str, Any]:
    filter_data = parse_json_object(args.filter_json, "filter-json")
    if filter_data is None:
        return {}
    key = "projectFilterData" if model == "project" else "filterData"
    return {key: filter_data}


def run_view_create(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        view_input = compact(
            name=args.name,
            description=args.description,
            shared=args.shared,
        )
        view_input.update(_view_filter(args, args.model))
        if args.team:
            view_input["teamId"] = _resolve_team_ids(client, [args.team])[0]
        view = operations.create_custom_view(client, view_input)
    return report_success(ctx, f"Created view {view.get('name')}", view)


def run_view_update(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        changes = compact(name=args.name, description=args.description, shared=args.shared)
        if args.filter_json is not None:
            view = _require_view(client, args.view_id)
            changes.update(_view_filter(args, (view.get("modelName") or "").lower()))
        updated = operations.update_custom_view(client, args.view_id, require_changes(changes))
    return report_success(ctx, f"Updated view {updated.get('name')}", updated)


def run_view_delete(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.client() as client:
        operations.delete_custom_view(client, args.view_id)
    return report_success(ctx, f"Deleted view {args.view_id}")


def _add_description(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--description", "-d", help="Description (markdown).")
    parser.add_argument(
        "--description-file", help="Read the description from a file (use - for stdin)."
    )


def _single_id_command(sub, name, aliases, parent, handler, dest, text) -> argparse.ArgumentParser:
    parser = sub.add_parser(name, aliases=aliases, parents=[parent], help=text)
    parser.add_argument(dest, help="ID.")
    parser.set_defaults(handler=handler)
    return parser


def register(subparsers: argparse._SubParsersAction, parent: argparse.ArgumentParser) -> None:
    project_parser = subparsers.add_parser("project", parents=[parent], help="Manage projects.")
    project_sub = project_parser.add_subparsers(dest="project_command", required=True)

    p_list = project_sub.add_parser("list", aliases=["ls"], parents=[parent], help="List projects.")
    p_list.add_argument("--team", "-t", help="Filter by team key.")
    p_list.add_argument("--state", "-s", choices=PROJECT_STATES, help="Filter by state.")
    p_list.add_argument(
        "--include-completed", "-c", action="store_true", help="Include completed and canceled projects."
    )
    p_list.add_argument(
        "--newer-than", "-n", help="Only projects created after this time (default: 6_months_ago)."
    )
    add_limit(p_list)
    add_sort(p_list)
    p_list.set_defaults(handler=run_project_list)

    _single_id_command(project_sub, "get", ["show"], parent, run_project_get, "project_id", "Show a project.")
    p_issues = _single_id_command(
        project_sub, "issues", [], parent, run_project_issues, "project_id", "List a project's issues."
    )
    add_limit(p_issues)
    _single_id_command(project_sub, "archive", [], parent, run_project_archive, "project_id", "Archive a project.")
    _single_id_command(project_sub, "delete", ["rm"], parent, run_project_delete, "project_id", "Delete a project.")

    p_create = project_sub.add_parser("create", aliases=["new"], parents=[parent], help="Create a project.")
    p_create.add_argument("--name", required=True, help="Project name.")
    p_create.add_argument("--team", "-t", action="append", required=True, help="Team key (repeatable).")
    p_update = project_sub.add_parser("update", aliases=["edit"], parents=[parent], help="Update a project.")
    p_update.add_argument("project_id", help="Project ID.")
    p_update.add_argument("--name", help="New name.")
    for sub in (p_create, p_update):
        _add_description(sub)
        sub.add_argument("--state", "-s", choices=PROJECT_STATES, help="Project state.")
        sub.add_argument("--start-date", help="Start date (YYYY-MM-DD).")
        sub.add_argument("--target-date", help="Target date (YYYY-MM-DD).")
        sub.add_argument("--lead", help="Lead user ID.")
    p_create.set_defaults(handler=run_project_create)
    p_update.set_defaults(handler=run_project_update)

    for name, text in (("add-team", "Add teams to a project."), ("remove-team", "Remove teams from a project.")):
        team_cmd = project_sub.add_parser(name, parents=[parent], help=text)
        team_cmd.add_argument("project_id", help="Project ID.")
        team_cmd.add_argument("team_keys", nargs="+", help="Team keys.")
        team_cmd.set_defaults(handler=run_project_teams)

    milestone_parser = subparsers.add_parser("milestone", parents=[parent], help="Manage project milestones.")
    milestone_sub = milestone_parser.add_subparsers(dest="milestone_command", required=True)

    m_list = _single_id_command(
        milestone_sub, "list", ["ls"], parent, run_milestone_list, "project_id", "List a project's milestones."
    )
    add_limit(m_list)
    _single_id_command(milestone_sub, "get", ["show"], parent, run_milestone_get, "milestone_id", "Show a milestone.")
    _single_id_command(milestone_sub, "delete", ["rm"], parent, run_milestone_delete, "milestone_id", "Delete a milestone.")
    m_create = _single_id_command(
        milestone_sub, "create", ["new"], parent, run_milestone_create, "project_id", "Create a milestone."
    )
    m_create.add_argument("--name", required=True, help="Milestone name.")
    m_update = _single_id_command(
        milestone_sub, "update", ["edit"], parent, run_milestone_update, "milestone_id", "Update a milestone."
    )
    m_update.add_argument("--name", help="New name.")
    for sub in (m_create, m_update):
        _add_description(sub)
        sub.add_argument("--target-date", help="Target date (YYYY-MM-DD, empty to clear).")

    update_parser = subparsers.add_parser(
        "project-update", aliases=["status"], parents=[parent], help="Manage project status updates."
    )
    update_sub = update_parser.add_subparsers(dest="project_update_command", required=True)

    pu_list = _single_id_command(
        update_sub, "list", ["ls"], parent, run_project_update_list, "project_id", "List status updates."
    )
    add_limit(pu_list, default=20)
    _single_id_command(update_sub, "get", ["show"], parent, run_project_update_get, "update_id", "Show a status update.")
    _single_id_command(
        update_sub, "archive", ["delete", "rm"], parent, run_project_update_archive, "update_id", "Archive a status update."
    )
    pu_create = _single_id_command(
        update_sub, "create", ["new", "add"], parent, run_project_update_create, "project_id", "Post a status update."
    )
    pu_update = _single_id_command(
        update_sub, "update", ["edit"], parent, run_project_update_update, "update_id", "Edit a status update."
    )
    for sub in (pu_create, pu_update):
        sub.add_argument("--body", "-b", help="Update body (markdown).")
        sub.add_argument("--body-file", help="Read the body from a file (use - for stdin).")
        sub.add_argument("--health", choices=PROJECT_HEALTH, help="Project health.")

    initiative_parser = subparsers.add_parser("initiative", parents=[parent], help="Manage initiatives.")
    initiative_sub = initiative_parser.add_subparsers(dest="initiative_command", required=True)

    i_list = initiative_sub.add_parser("list", aliases=["ls"], parents=[parent], help="List initiatives.")
    i_list.add_argument("--status", "-s", help="Filter by status (Planned, Active, Completed).")
    i_list.add_argument("--include-completed", "-c", action="store_true", help="Include completed initiatives.")
    add_limit(i_list)
    add_sort(i_list)
    i_list.set_defaults(handler=run_initiative_list)

    _single_id_command(initiative_sub, "get", ["show"], parent, run_initiative_get, "initiative_id", "Show an initiative.")
    _single_id_command(
        initiative_sub, "delete", ["rm"], parent, run_initiative_delete, "initiative_id", "Delete an initiative."
    )
    i_projects = _single_id_command(
        initiative_sub, "projects", [], parent, run_initiative_projects, "initiative_id", "List an initiative's projects."
    )
    add_limit(i_projects)

    i_create = initiative_sub.add_parser("create", aliases=["new"], parents=[parent], help="Create an initiative.")
    i_create.add_argument("--name", required=True, help="Initiative name.")
    i_update = _single_id_command(
        initiative_sub, "update", ["edit"], parent, run_initiative_update, "initiative_id", "Update an initiative."
    )
    i_update.add_argument("--name", help="New name.")
    i_update.add_argument("--owner", "-o", help="Owner email, 'me', or 'none' to unset.")
    for sub in (i_create, i_update):
        _add_description(sub)
        sub.add_argument("--status", "-s", choices=["Planned", "Active", "Completed"], help="Status.")
        sub.add_argument("--target-date", help="Target date (YYYY-MM-DD, empty to clear).")
        sub.add_argument("--color", help="Color (hex).")
        sub.add_argument("--icon", help="Icon.")
    i_create.set_defaults(handler=run_initiative_create)

    document_parser = subparsers.add_parser("document", aliases=["doc"], parents=[parent], help="Manage documents.")
    document_sub = document_parser.add_subparsers(dest="document_command", required=True)

    d_list = document_sub.add_parser("list", aliases=["ls"], parents=[parent], help="List documents.")
    d_list.add_argument("--project", help="Filter by project ID.")
    d_list.add_argument("--issue", help="Filter by issue ID.")
    d_list.add_argument("--team", "-t", help="Filter by team key.")
    d_list.add_argument("--newer-than", "-n", help="Only documents created after this time.")
    add_limit(d_list)
    add_sort(d_list)
    d_list.set_defaults(handler=run_document_list)

    d_search = document_sub.add_parser("search", aliases=["find"], parents=[parent], help="Search documents.")
    d_search.add_argument("query", help="Search term.")
    d_search.add_argument("--team", "-t", help="Filter by team ID.")
    d_search.add_argument("--include-comments", action="store_true", help="Search comments too.")
    add_limit(d_search)
    add_sort(d_search)
    d_search.set_defaults(handler=run_document_search)

    _single_id_command(document_sub, "get", ["show"], parent, run_document_get, "document_id", "Show a document.")
    _single_id_command(document_sub, "delete", ["rm"], parent, run_document_delete, "document_id", "Delete a document.")

    d_create = document_sub.add_parser("create", aliases=["new"], parents=[parent], help="Create a document.")
    d_create.add_argument("--title", required=True, help="Document title.")
    d_create.add_argument("--team", "-t", help="Team key.")
    d_update = _single_id_command(
        document_sub, "update", ["edit"], parent, run_document_update, "document_id", "Update a document."
    )
    d_update.add_argument("--title", help="New title.")
    for sub in (d_create, d_update):
        sub.add_argument("--content", help="Content (markdown).")
        sub.add_argument("--content-file", help="Read content from a file (use - for stdin).")
        sub.add_argument("--project", help="Project ID.")
        sub.add_argument("--issue", help="Issue ID.")
        sub.add_argument("--icon", help="Icon (emoji).")
        sub.add_argument("--color", help="Icon color (hex).")
    d_create.set_defaults(handler=run_document_create)

    view_parser = subparsers.add_parser("view", parents=[parent], help="Manage custom views.")
    view_sub = view_parser.add_subparsers(dest="view_command", required=True)

    v_list = view_sub.add_parser("list", aliases=["ls"], parents=[parent], help="List custom views.")
    v_list.add_argument("--shared", action="store_true", help="Only shared views.")
    v_list.add_argument("--model", "-m", choices=["issue", "project"], help="Filter by model type.")
    v_list.add_argument("--team", "-t", help="Filter by team key.")
    add_limit(v_list)
    v_list.set_defaults(handler=run_view_list)

    _single_id_command(view_sub, "get", ["show"], parent, run_view_get, "view_id", "Show a view.")
    _single_id_command(view_sub, "delete", ["rm"], parent, run_view_delete, "view_id", "Delete a view.")
    v_run = _single_id_command(view_sub, "run", ["exec"], parent, run_view_run, "view_id", "Run a saved view.")
    add_limit(v_run)

    v_create = view_sub.add_parser("create", aliases=["new"], parents=[parent], help="Create a view.")
    v_create.add_argument("--name", required=True, help="View name.")
    v_create.add_argument("--model", "-m", choices=["issue", "project"], default="issue", help="Model type.")
    v_create.add_argument("--team", "-t", help="Team key.")
    v_update = _single_id_command(view_sub, "update", ["edit"], parent, run_view_update, "view_id", "Update a view.")
    v_update.add_argument("--name", help="New name.")
    for sub in (v_create, v_update):
        sub.add_argument("--description", "-d", help="Description.")
        sub.add_argument("--shared", action=argparse.BooleanOptionalAction, default=None, help="Sharing.")
        sub.add_argument("--filter-json", help="IssueFilter or ProjectFilter as JSON.")
    v_create.set_defaults(handler=run_view_create)
