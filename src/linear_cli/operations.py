"""Typed accessors for the Linear API.

Each accessor is an :class:`Operation`: a GraphQL document, a function that
turns Python arguments into the variables map, and a function that unwraps
the single top-level field of the response. Mutations that report a
``success`` flag also carry a failure description, and a payload with
``success: false`` raises :class:`OperationFailedError` even though the HTTP
and GraphQL layers succeeded.

Optional arguments follow a send-if-present rule: ``None``, empty strings and
empty filter mappings are left out of the variables map entirely.

Accessors are called with the client first::

    with LinearClient(token) as client:
        issue = operations.get_issue(client, "ENG-123")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from . import queries
from .client import LinearApiError, LinearClient, OperationFailedError

LOGGER = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50

Variables = dict[str, Any]


class NotFoundError(LinearApiError):
    """A lookup that has to succeed before a follow-up call found nothing."""


@dataclass(frozen=True)
class Operation:
    name: str
    document: str
    variables: Callable[..., Variables]
    unwrap: Callable[[Any], Any]
    failure: str | None = None

    def __call__(self, client: LinearClient, *args: Any, **kwargs: Any) -> Any:
        return client.execute(
            self.document, self.variables(*args, **kwargs), decode=self.decode
        )

    def decode(self, data: Any) -> Any:
        if self.failure is not None:
            _check_success(data, self.failure)
        return self.unwrap(data)


OPERATIONS: dict[str, Operation] = {}


def _register(operation: Operation) -> Operation:
    if operation.name in OPERATIONS:
        raise ValueError(f"Duplicate operation name '{operation.name}'.")
    OPERATIONS[operation.name] = operation
    return operation


def send_if_present(required: Mapping[str, Any] | None = None, **optional: Any) -> Variables:
    """Merge ``required`` with the optional values that are actually set."""
    variables: Variables = dict(required or {})
    for key, value in optional.items():
        if _is_present(value):
            variables[key] = value
    return variables


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, Mapping):
        return bool(value)
    return True


def _no_variables() -> Variables:
    return {}


def _by_id(id: str) -> Variables:
    return {"id": id}


def _by_key(key: str) -> Variables:
    return {"key": key}


def _input(input: Mapping[str, Any]) -> Variables:
    return {"input": dict(input)}


def _id_and_input(id: str, input: Mapping[str, Any]) -> Variables:
    return {"id": id, "input": dict(input)}


def _page(
    first: int = DEFAULT_PAGE_SIZE, after: str | None = None, order_by: str | None = None
) -> Variables:
    return send_if_present({"first": first}, after=after, orderBy=order_by)


def _filtered_page(
    filters: Mapping[str, Any] | None = None,
    first: int = DEFAULT_PAGE_SIZE,
    after: str | None = None,
    order_by: str | None = None,
) -> Variables:
    return send_if_present(
        {"first": first}, filter=filters, after=after, orderBy=order_by
    )


def _nested_page(id: str, first: int = DEFAULT_PAGE_SIZE, after: str | None = None) -> Variables:
    return send_if_present({"id": id, "first": first}, after=after)


def _field(*path: str) -> Callable[[Any], Any]:
    """Walk ``path`` through the data payload, stopping at a null value."""

    def unwrap(data: Any) -> Any:
        value = data
        for key in path:
            if value is None:
                return None
            value = value[key]
        return value

    return unwrap


def _nothing(data: Any) -> None:
    return None


def _check_success(data: Any, failure: str) -> None:
    if not isinstance(data, Mapping) or len(data) != 1:
        raise KeyError("expected a single mutation payload")
    payload = next(iter(data.values()))
    if not isinstance(payload, Mapping) or not payload.get("success"):
        LOGGER.debug("Mutation payload reported failure: %s", payload)
        raise OperationFailedError(f"failed to {failure}")


# Users

get_viewer = _register(
    Operation("get_viewer", queries.VIEWER_QUERY, _no_variables, _field("viewer"))
)
list_users = _register(
    Operation("list_users", queries.USERS_QUERY, _page, _field("users"))
)
get_user = _register(
    Operation(
        "get_user", queries.USER_QUERY, lambda email: {"email": email}, _field("user")
    )
)
update_user = _register(
    Operation(
        "update_user",
        queries.USER_UPDATE_MUTATION,
        _id_and_input,
        _field("userUpdate", "user"),
        failure="update user",
    )
)

# Issues


def _issue_search_variables(
    term: str,
    filters: Mapping[str, Any] | None = None,
    first: int = DEFAULT_PAGE_SIZE,
    after: str | None = None,
    order_by: str | None = None,
    include_archived: bool = False,
) -> Variables:
    return send_if_present(
        {"term": term, "first": first, "includeArchived": include_archived},
        filter=filters,
        after=after,
        orderBy=order_by,
    )


list_issues = _register(
    Operation("list_issues", queries.ISSUES_QUERY, _filtered_page, _field("issues"))
)
search_issues = _register(
    Operation(
        "search_issues",
        queries.ISSUE_SEARCH_QUERY,
        _issue_search_variables,
        _field("searchIssues"),
    )
)
get_issue = _register(
    Operation("get_issue", queries.ISSUE_QUERY, _by_id, _field("issue"))
)
get_issue_activity = _register(
    Operation(
        "get_issue_activity",
        queries.ISSUE_ACTIVITY_QUERY,
        lambda id, history_first=20: {"id": id, "historyFirst": history_first},
        _field("issue"),
    )
)
create_issue = _register(
    Operation(
        "create_issue",
        queries.ISSUE_CREATE_MUTATION,
        _input,
        _field("issueCreate", "issue"),
        failure="create issue",
    )
)
update_issue = _register(
    Operation(
        "update_issue",
        queries.ISSUE_UPDATE_MUTATION,
        _id_and_input,
        _field("issueUpdate", "issue"),
        failure="update issue",
    )
)
archive_issue = _register(
    Operation(
        "archive_issue",
        queries.ISSUE_ARCHIVE_MUTATION,
        _by_id,
        _field("issueArchive", "entity"),
        failure="archive issue",
    )
)

# Comments

list_issue_comments = _register(
    Operation(
        "list_issue_comments",
        queries.ISSUE_COMMENTS_QUERY,
        lambda issue_id, first=DEFAULT_PAGE_SIZE, after=None, order_by=None: send_if_present(
            {"id": issue_id, "first": first}, after=after, orderBy=order_by
        ),
        _field("issue", "comments"),
    )
)
create_comment = _register(
    Operation(
        "create_comment",
        queries.COMMENT_CREATE_MUTATION,
        lambda issue_id, body: {"input": {"issueId": issue_id, "body": body}},
        _field("commentCreate", "comment"),
        failure="create comment",
    )
)
update_comment = _register(
    Operation(
        "update_comment",
        queries.COMMENT_UPDATE_MUTATION,
        lambda id, body: {"id": id, "input": {"body": body}},
        _field("commentUpdate", "comment"),
        failure="update comment",
    )
)
delete_comment = _register(
    Operation(
        "delete_comment",
        queries.COMMENT_DELETE_MUTATION,
        _by_id,
        _nothing,
        failure="delete comment",
    )
)

# Teams

list_teams = _register(
    Operation("list_teams", queries.TEAMS_QUERY, _page, _field("teams"))
)
get_team = _register(
    Operation("get_team", queries.TEAM_QUERY, _by_key, _field("team"))
)
get_team_states = _register(
    Operation(
        "get_team_states",
        queries.TEAM_STATES_QUERY,
        _by_key,
        _field("team", "states", "nodes"),
    )
)
get_team_members = _register(
    Operation(
        "get_team_members",
        queries.TEAM_MEMBERS_QUERY,
        _by_key,
        _field("team", "members"),
    )
)
create_team = _register(
    Operation(
        "create_team",
        queries.TEAM_CREATE_MUTATION,
        lambda input, copy_settings_from=None: send_if_present(
            {"input": dict(input)}, copySettingsFromTeamId=copy_settings_from
        ),
        _field("teamCreate", "team"),
        failure="create team",
    )
)
update_team = _register(
    Operation(
        "update_team",
        queries.TEAM_UPDATE_MUTATION,
        _id_and_input,
        _field("teamUpdate", "team"),
        failure="update team",
    )
)
delete_team = _register(
    Operation(
        "delete_team",
        queries.TEAM_DELETE_MUTATION,
        _by_id,
        _nothing,
        failure="delete team",
    )
)

# Projects

list_projects = _register(
    Operation(
        "list_projects", queries.PROJECTS_QUERY, _filtered_page, _field("projects")
    )
)
get_project = _register(
    Operation("get_project", queries.PROJECT_QUERY, _by_id, _field("project"))
)
list_project_issues = _register(
    Operation(
        "list_project_issues",
        queries.PROJECT_ISSUES_QUERY,
        _nested_page,
        _field("project", "issues"),
    )
)
create_project = _register(
    Operation(
        "create_project",
        queries.PROJECT_CREATE_MUTATION,
        _input,
        _field("projectCreate", "project"),
        failure="create project",
    )
)
update_project = _register(
    Operation(
        "update_project",
        queries.PROJECT_UPDATE_MUTATION,
        _id_and_input,
        _field("projectUpdate", "project"),
        failure="update project",
    )
)
archive_project = _register(
    Operation(
        "archive_project",
        queries.PROJECT_ARCHIVE_MUTATION,
        _by_id,
        _nothing,
        failure="archive project",
    )
)
delete_project = _register(
    Operation(
        "delete_project",
        queries.PROJECT_DELETE_MUTATION,
        _by_id,
        _nothing,
        failure="delete project",
    )
)

# Project milestones

list_project_milestones = _register(
    Operation(
        "list_project_milestones",
        queries.PROJECT_MILESTONES_QUERY,
        lambda project_id, first=DEFAULT_PAGE_SIZE, after=None: send_if_present(
            {
                "first": first,
                "filter": {"project": {"id": {"eq": project_id}}},
            },
            after=after,
        ),
        _field("projectMilestones"),
    )
)
get_project_milestone = _register(
    Operation(
        "get_project_milestone",
        queries.PROJECT_MILESTONE_QUERY,
        _by_id,
        _field("projectMilestone"),
    )
)
create_project_milestone = _register(
    Operation(
        "create_project_milestone",
        queries.PROJECT_MILESTONE_CREATE_MUTATION,
        _input,
        _field("projectMilestoneCreate", "projectMilestone"),
        failure="create project milestone",
    )
)
update_project_milestone = _register(
    Operation(
        "update_project_milestone",
        queries.PROJECT_MILESTONE_UPDATE_MUTATION,
        _id_and_input,
        _field("projectMilestoneUpdate", "projectMilestone"),
        failure="update project milestone",
    )
)
delete_project_milestone = _register(
    Operation(
        "delete_project_milestone",
        queries.PROJECT_MILESTONE_DELETE_MUTATION,
        _by_id,
        _nothing,
        failure="delete project milestone",
    )
)

# Project status updates

list_project_updates = _register(
    Operation(
        "list_project_updates",
        queries.PROJECT_UPDATES_QUERY,
        _nested_page,
        _field("project", "projectUpdates"),
    )
)
get_project_update = _register(
    Operation(
        "get_project_update",
        queries.PROJECT_STATUS_UPDATE_QUERY,
        _by_id,
        _field("projectUpdate"),
    )
)
create_project_update = _register(
    Operation(
        "create_project_update",
        queries.PROJECT_STATUS_UPDATE_CREATE_MUTATION,
        _input,
        _field("projectUpdateCreate", "projectUpdate"),
        failure="create project update",
    )
)
update_project_update = _register(
    Operation(
        "update_project_update",
        queries.PROJECT_STATUS_UPDATE_UPDATE_MUTATION,
        _id_and_input,
        _field("projectUpdateUpdate", "projectUpdate"),
        failure="update project update",
    )
)
archive_project_update = _register(
    Operation(
        "archive_project_update",
        queries.PROJECT_STATUS_UPDATE_ARCHIVE_MUTATION,
        _by_id,
        _nothing,
        failure="archive project update",
    )
)

# Issue relations

create_issue_relation = _register(
    Operation(
        "create_issue_relation",
        queries.ISSUE_RELATION_CREATE_MUTATION,
        lambda issue_id, related_issue_id, type: {
            "input": {
                "issueId": issue_id,
                "relatedIssueId": related_issue_id,
                "type": type,
            }
        },
        _field("issueRelationCreate", "issueRelation"),
        failure="create issue relation",
    )
)
update_issue_relation = _register(
    Operation(
        "update_issue_relation",
        queries.ISSUE_RELATION_UPDATE_MUTATION,
        _id_and_input,
        _field("issueRelationUpdate", "issueRelation"),
        failure="update issue relation",
    )
)
delete_issue_relation = _register(
    Operation(
        "delete_issue_relation",
        queries.ISSUE_RELATION_DELETE_MUTATION,
        _by_id,
        _nothing,
        failure="delete issue relation",
    )
)

# Documents

list_documents = _register(
    Operation(
        "list_documents", queries.DOCUMENTS_QUERY, _filtered_page, _field("documents")
    )
)
get_document = _register(
    Operation("get_document", queries.DOCUMENT_QUERY, _by_id, _field("document"))
)
search_documents = _register(
    Operation(
        "search_documents",
        queries.DOCUMENT_SEARCH_QUERY,
        lambda term, first=DEFAULT_PAGE_SIZE, after=None, order_by=None, team_id=None, include_comments=False: send_if_present(
            {"term": term, "first": first, "includeComments": include_comments},
            after=after,
            orderBy=order_by,
            teamId=team_id,
        ),
        _field("searchDocuments"),
    )
)
create_document = _register(
    Operation(
        "create_document",
        queries.DOCUMENT_CREATE_MUTATION,
        _input,
        _field("documentCreate", "document"),
        failure="create document",
    )
)
update_document = _register(
    Operation(
        "update_document",
        queries.DOCUMENT_UPDATE_MUTATION,
        _id_and_input,
        _field("documentUpdate", "document"),
        failure="update document",
    )
)
delete_document = _register(
    Operation(
        "delete_document",
        queries.DOCUMENT_DELETE_MUTATION,
        _by_id,
        _nothing,
        failure="delete document",
    )
)

# Custom views

list_custom_views = _register(
    Operation(
        "list_custom_views",
        queries.CUSTOM_VIEWS_QUERY,
        lambda filters=None, first=DEFAULT_PAGE_SIZE, after=None: send_if_present(
            {"first": first}, filter=filters, after=after
        ),
        _field("customViews"),
    )
)
get_custom_view = _register(
    Operation(
        "get_custom_view", queries.CUSTOM_VIEW_QUERY, _by_id, _field("customView")
    )
)
list_custom_view_issues = _register(
    Operation(
        "list_custom_view_issues",
        queries.CUSTOM_VIEW_ISSUES_QUERY,
        _nested_page,
        _field("customView", "issues"),
    )
)
list_custom_view_projects = _register(
    Operation(
        "list_custom_view_projects",
        queries.CUSTOM_VIEW_PROJECTS_QUERY,
        _nested_page,
        _field("customView", "projects"),
    )
)
create_custom_view = _register(
    Operation(
        "create_custom_view",
        queries.CUSTOM_VIEW_CREATE_MUTATION,
        _input,
        _field("customViewCreate", "customView"),
        failure="create custom view",
    )
)
update_custom_view = _register(
    Operation(
        "update_custom_view",
        queries.CUSTOM_VIEW_UPDATE_MUTATION,
        _id_and_input,
        _field("customViewUpdate", "customView"),
        failure="update custom view",
    )
)
delete_custom_view = _register(
    Operation(
        "delete_custom_view",
        queries.CUSTOM_VIEW_DELETE_MUTATION,
        _by_id,
        _nothing,
        failure="delete custom view",
    )
)

# Initiatives

list_initiatives = _register(
    Operation(
        "list_initiatives",
        queries.INITIATIVES_QUERY,
        lambda filters=None, first=DEFAULT_PAGE_SIZE, after=None, order_by=None, include_archived=False: send_if_present(
            {"first": first, "includeArchived": include_archived},
            filter=filters,
            after=after,
            orderBy=order_by,
        ),
        _field("initiatives"),
    )
)
get_initiative = _register(
    Operation(
        "get_initiative", queries.INITIATIVE_QUERY, _by_id, _field("initiative")
    )
)
list_initiative_projects = _register(
    Operation(
        "list_initiative_projects",
        queries.INITIATIVE_PROJECTS_QUERY,
        _nested_page,
        _field("initiative", "projects"),
    )
)
create_initiative = _register(
    Operation(
        "create_initiative",
        queries.INITIATIVE_CREATE_MUTATION,
        _input,
        _field("initiativeCreate", "initiative"),
        failure="create initiative",
    )
)
update_initiative = _register(
    Operation(
        "update_initiative",
        queries.INITIATIVE_UPDATE_MUTATION,
        _id_and_input,
        _field("initiativeUpdate", "initiative"),
        failure="update initiative",
    )
)
delete_initiative = _register(
    Operation(
        "delete_initiative",
        queries.INITIATIVE_DELETE_MUTATION,
        _by_id,
        _nothing,
        failure="delete initiative",
    )
)

# Attachments

list_issue_attachments = _register(
    Operation(
        "list_issue_attachments",
        queries.ISSUE_ATTACHMENTS_QUERY,
        _nested_page,
        _field("issue", "attachments"),
    )
)
create_attachment = _register(
    Operation(
        "create_attachment",
        queries.ATTACHMENT_CREATE_MUTATION,
        _input,
        _field("attachmentCreate", "attachment"),
        failure="create attachment",
    )
)
link_url = _register(
    Operation(
        "link_url",
        queries.ATTACHMENT_LINK_URL_MUTATION,
        lambda issue_id, url, title=None: send_if_present(
            {"issueId": issue_id, "url": url}, title=title
        ),
        _field("attachmentLinkURL", "attachment"),
        failure="link URL",
    )
)
update_attachment = _register(
    Operation(
        "update_attachment",
        queries.ATTACHMENT_UPDATE_MUTATION,
        _id_and_input,
        _field("attachmentUpdate", "attachment"),
        failure="update attachment",
    )
)
delete_attachment = _register(
    Operation(
        "delete_attachment",
        queries.ATTACHMENT_DELETE_MUTATION,
        _by_id,
        _nothing,
        failure="delete attachment",
    )
)

# Cycles

list_cycles = _register(
    Operation(
        "list_cycles",
        queries.CYCLES_QUERY,
        lambda filters=None, first=DEFAULT_PAGE_SIZE, after=None: send_if_present(
            {"first": first}, filter=filters, after=after
        ),
        _field("cycles"),
    )
)
get_cycle = _register(
    Operation("get_cycle", queries.CYCLE_QUERY, _by_id, _field("cycle"))
)
create_cycle = _register(
    Operation(
        "create_cycle",
        queries.CYCLE_CREATE_MUTATION,
        _input,
        _field("cycleCreate", "cycle"),
        failure="create cycle",
    )
)
update_cycle = _register(
    Operation(
        "update_cycle",
        queries.CYCLE_UPDATE_MUTATION,
        _id_and_input,
        _field("cycleUpdate", "cycle"),
        failure="update cycle",
    )
)
archive_cycle = _register(
    Operation(
        "archive_cycle",
        queries.CYCLE_ARCHIVE_MUTATION,
        _by_id,
        _nothing,
        failure="archive cycle",
    )
)

# Labels

list_labels = _register(
    Operation(
        "list_labels",
        queries.LABELS_QUERY,
        lambda filters=None, first=DEFAULT_PAGE_SIZE, after=None: send_if_present(
            {"first": first}, filter=filters, after=after
        ),
        _field("issueLabels"),
    )
)
create_label = _register(
    Operation(
        "create_label",
        queries.LABEL_CREATE_MUTATION,
        _input,
        _field("issueLabelCreate", "issueLabel"),
        failure="create label",
    )
)
update_label = _register(
    Operation(
        "update_label",
        queries.LABEL_UPDATE_MUTATION,
        _id_and_input,
        _field("issueLabelUpdate", "issueLabel"),
        failure="update label",
    )
)
delete_label = _register(
    Operation(
        "delete_label",
        queries.LABEL_DELETE_MUTATION,
        _by_id,
        _nothing,
        failure="delete label",
    )
)

# Notifications

list_notifications = _register(
    Operation(
        "list_notifications",
        queries.NOTIFICATIONS_QUERY,
        lambda first=DEFAULT_PAGE_SIZE, after=None, include_archived=False: send_if_present(
            {"first": first, "includeArchived": include_archived}, after=after
        ),
        _field("notifications"),
    )
)
update_notification = _register(
    Operation(
        "update_notification",
        queries.NOTIFICATION_UPDATE_MUTATION,
        _id_and_input,
        _field("notificationUpdate", "notification"),
        failure="update notification",
    )
)
archive_notification = _register(
    Operation(
        "archive_notification",
        queries.NOTIFICATION_ARCHIVE_MUTATION,
        _by_id,
        _nothing,
        failure="archive notification",
    )
)
unarchive_notification = _register(
    Operation(
        "unarchive_notification",
        queries.NOTIFICATION_UNARCHIVE_MUTATION,
        _by_id,
        _nothing,
        failure="unarchive notification",
    )
)

# Favorites

list_favorites = _register(
    Operation(
        "list_favorites",
        queries.FAVORITES_QUERY,
        lambda first=DEFAULT_PAGE_SIZE, after=None: send_if_present(
            {"first": first}, after=after
        ),
        _field("favorites"),
    )
)
get_favorite = _register(
    Operation("get_favorite", queries.FAVORITE_QUERY, _by_id, _field("favorite"))
)
create_favorite = _register(
    Operation(
        "create_favorite",
        queries.FAVORITE_CREATE_MUTATION,
        _input,
        _field("favoriteCreate", "favorite"),
        failure="create favorite",
    )
)
update_favorite = _register(
    Operation(
        "update_favorite",
        queries.FAVORITE_UPDATE_MUTATION,
        _id_and_input,
        _field("favoriteUpdate", "favorite"),
        failure="update favorite",
    )
)
delete_favorite = _register(
    Operation(
        "delete_favorite",
        queries.FAVORITE_DELETE_MUTATION,
        _by_id,
        _nothing,
        failure="delete favorite",
    )
)


# Multi-call helpers. Each one reads before it writes, with no guarantee that
# the remote state is unchanged in between.

RELATION_TYPES = ("blocks", "blocked-by", "related", "duplicate", "parent", "sub-issue")
UPDATABLE_RELATION_TYPES = ("blocks", "related", "duplicate")


def require_issue(client: LinearClient, identifier: str) -> dict[str, Any]:
    issue = get_issue(client, identifier)
    if not issue:
        raise NotFoundError(f"Issue '{identifier}' not found.")
    return issue


def add_issue_relation(
    client: LinearClient, issue_identifier: str, relation_type: str, target: str
) -> dict[str, Any]:
    """Create a relation of ``relation_type`` from one issue to ``target``.

    ``parent`` and ``sub-issue`` set ``parentId`` instead of creating a
    relation and return the updated issue.
    """
    if relation_type not in RELATION_TYPES:
        raise ValueError(
            f"Invalid type '{relation_type}'. Valid types: {', '.join(RELATION_TYPES)}"
        )
    if relation_type == "parent":
        parent = require_issue(client, target)
        return update_issue(client, issue_identifier, {"parentId": parent["id"]})
    if relation_type == "sub-issue":
        parent = require_issue(client, issue_identifier)
        return update_issue(client, target, {"parentId": parent["id"]})

    source = require_issue(client, issue_identifier)
    related = require_issue(client, target)
    if relation_type == "blocked-by":
        return create_issue_relation(client, related["id"], source["id"], "blocks")
    return create_issue_relation(client, source["id"], related["id"], relation_type)


def remove_issue_relation(
    client: LinearClient, issue_identifier: str, relation_type: str, target: str
) -> dict[str, Any]:
    """Undo :func:`add_issue_relation`.

    Returns the updated issue for ``parent``/``sub-issue`` and
    ``{"success": True, "relationId": ...}`` for formal relations.
    """
    if relation_type not in RELATION_TYPES:
        raise ValueError(
            f"Invalid type '{relation_type}'. Valid types: {', '.join(RELATION_TYPES)}"
        )
    if relation_type == "parent":
        return update_issue(client, issue_identifier, {"parentId": None})
    if relation_type == "sub-issue":
        return update_issue(client, target, {"parentId": None})

    # blocked-by is stored as a "blocks" relation owned by the blocking issue.
    if relation_type == "blocked-by":
        owner, other, api_type = target, issue_identifier, "blocks"
    else:
        owner, other, api_type = issue_identifier, target, relation_type

    owner_issue = require_issue(client, owner)
    other_issue = require_issue(client, other)
    relation_id = find_relation_id(owner_issue, other_issue["id"], api_type)
    if relation_id is None:
        raise NotFoundError(
            f"No {relation_type} relation found between {issue_identifier} and {target}"
        )
    delete_issue_relation(client, relation_id)
    return {"success": True, "relationId": relation_id}


def find_relation_id(issue: Mapping[str, Any], related_id: str, relation_type: str) -> str | None:
    relations = (issue.get("relations") or {}).get("nodes") or []
    for relation in relations:
        related = relation.get("relatedIssue") or {}
        if related.get("id") == related_id and relation.get("type") == relation_type:
            return relation["id"]
    return None


def _relation_display_type(api_type: str | None) -> str:
    lowered = (api_type or "").lower()
    if lowered in ("blocked", "blocked-by"):
        return "blocked-by"
    return lowered or "related"


def _tree_links(issue: Mapping[str, Any]) -> list[tuple[str, dict[str, Any]]]:
    links: list[tuple[str, dict[str, Any]]] = []
    if issue.get("parent"):
        links.append(("parent", issue["parent"]))
    for child in (issue.get("children") or {}).get("nodes") or []:
        links.append(("sub-issue", child))
    for relation in (issue.get("relations") or {}).get("nodes") or []:
        related = relation.get("relatedIssue")
        if related:
            links.append((_relation_display_type(relation.get("type")), related))
    # Seen from the other side, "A blocks B" means B is blocked by A.
    for relation in (issue.get("inverseRelations") or {}).get("nodes") or []:
        source = relation.get("issue")
        if source:
            api_type = (relation.get("type") or "").lower()
            kind = "blocked-by" if api_type == "blocks" else _relation_display_type(api_type)
            links.append((kind, source))
    return links


def _tree_node(kind: str, issue: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "type": kind,
        "id": issue.get("id"),
        "identifier": issue.get("identifier"),
        "title": issue.get("title"),
        "state": (issue.get("state") or {}).get("name") or "",
        "children": [],
    }


def build_issue_tree(client: LinearClient, identifier: str, depth: int = 3) -> dict[str, Any]:
    """Walk the parent, sub-issue, relation and inverse relation links of an issue.

    Expansion stops after ``depth`` hops. Each issue is expanded at most once;
    later sightings become leaves marked ``circular``. A linked issue that
    cannot be fetched is kept as a leaf.
    """
    root = require_issue(client, identifier)
    visited = {root["id"]}

    def expand(issue: Mapping[str, Any], kind: str, level: int) -> dict[str, Any]:
        node = _tree_node(kind, issue)
        if level >= depth:
            return node
        for link_type, linked in _tree_links(issue):
            if linked.get("id") in visited:
                leaf = _tree_node(link_type, linked)
                leaf["circular"] = True
                node["children"].append(leaf)
                continue
            visited.add(linked.get("id"))
            try:
                full = get_issue(client, linked.get("identifier") or linked.get("id"))
            except LinearApiError as exc:
                LOGGER.debug("Could not expand %s: %s", linked.get("identifier"), exc)
                full = None
            if full:
                node["children"].append(expand(full, link_type, level + 1))
            else:
                node["children"].append(_tree_node(link_type, linked))
        return node

    return expand(root, "root", 0)


def mark_all_notifications_read(
    client: LinearClient, read_at: datetime | None = None, limit: int = 100
) -> int:
    """Mark every unread notification among the newest ``limit`` as read."""
    timestamp = (read_at or datetime.now(timezone.utc)).isoformat()
    notifications = list_notifications(client, first=limit) or {}
    count = 0
    for notification in notifications.get("nodes") or []:
        if notification.get("readAt"):
            continue
        update_notification(client, notification["id"], {"readAt": timestamp})
        count += 1
    return count


def _normalize_key(value: str) -> str:
    return value.strip().lower()


@dataclass
class TeamContext:
    """Team metadata used to translate names into Linear IDs."""

    key: str
    id: str
    name: str = ""
    states: dict[str, str] = field(default_factory=dict)
    available_states: list[str] = field(default_factory=list)
    labels: dict[str, str] = field(default_factory=dict)
    available_labels: list[str] = field(default_factory=list)
    members: dict[str, str] = field(default_factory=dict)

    def resolve_state_id(self, state_name: str) -> str:
        lookup = _normalize_key(state_name)
        try:
            return self.states[lookup]
        except KeyError as exc:
            options = ", ".join(self.available_states) or "none"
            raise NotFoundError(
                f"State '{state_name}' is not valid for team {self.key}. Available states: {options}."
            ) from exc

    def resolve_label_ids(self, labels: list[str]) -> list[str]:
        ids: list[str] = []
        missing: list[str] = []
        for label in labels:
            label_id = self.labels.get(_normalize_key(label))
            if label_id:
                ids.append(label_id)
            else:
                missing.append(label)
        if missing:
            options = ", ".join(self.available_labels) or "none"
            raise NotFoundError(
                f"Label(s) {', '.join(missing)} not found in team {self.key}. Available labels: {options}."
            )
        return ids

    def resolve_member_id(self, email: str) -> str:
        try:
            return self.members[_normalize_key(email)]
        except KeyError as exc:
            raise NotFoundError(
                f"No Linear member with email '{email}' in team {self.key}."
            ) from exc


def _team_context_from_payload(data: Any) -> TeamContext | None:
    team = data["team"]
    if team is None:
        return None
    states_raw = team["states"]["nodes"]
    labels_raw = (team.get("labels") or {}).get("nodes", [])
    members_raw = (team.get("members") or {}).get("nodes", [])
    return TeamContext(
        key=team["key"],
        id=team["id"],
        name=team.get("name") or "",
        states={_normalize_key(node["name"]): node["id"] for node in states_raw},
        available_states=[node["name"] for node in states_raw],
        labels={_normalize_key(node["name"]): node["id"] for node in labels_raw},
        available_labels=[node["name"] for node in labels_raw],
        members={
            _normalize_key(node["email"]): node["id"]
            for node in members_raw
            if node.get("email")
        },
    )


get_team_context = _register(
    Operation(
        "get_team_context",
        queries.TEAM_CONTEXT_QUERY,
        _by_key,
        _team_context_from_payload,
    )
)


def fetch_team_context(client: LinearClient, team_key: str) -> TeamContext:
    context = get_team_context(client, team_key)
    if context is None:
        raise NotFoundError(f"Linear team with key '{team_key}' not found.")
    return context
