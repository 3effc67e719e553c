"""GraphQL documents sent to the Linear API.

Every accessor in :mod:`linear_cli.operations` pairs one of these documents
with a variable builder and an unwrap function. Shared selections are kept as
GraphQL fragments and appended to the documents that spread them.
"""

from __future__ import annotations

PAGE_INFO_FRAGMENT = """
fragment PageInfoFields on PageInfo {
  hasNextPage
  endCursor
}
""".strip()

ISSUE_SUMMARY_FRAGMENT = """
fragment IssueSummaryFields on Issue {
  id
  identifier
  title
  description
  priority
  estimate
  createdAt
  updatedAt
  dueDate
  url
  state {
    id
    name
    type
    color
  }
  assignee {
    id
    name
    email
  }
  team {
    id
    key
    name
  }
  labels {
    nodes {
      id
      name
      color
    }
  }
}
""".strip()

PROJECT_SUMMARY_FRAGMENT = """
fragment ProjectSummaryFields on Project {
  id
  name
  description
  state
  progress
  startDate
  targetDate
  url
  createdAt
  updatedAt
  lead {
    id
    name
    email
  }
  teams {
    nodes {
      id
      key
      name
    }
  }
}
""".strip()


def _with_fragments(document: str, *fragments: str) -> str:
    return "\n\n".join((document.strip(), *fragments))


# Probe used to refresh rate-limit headers without fetching anything useful.
RATE_LIMIT_PROBE_QUERY = "query { viewer { id } }"

VIEWER_QUERY = """
query Me {
  viewer {
    id
    name
    email
    avatarUrl
    isMe
    active
    admin
  }
}
""".strip()

ISSUES_QUERY = _with_fragments(
    """
query Issues($filter: IssueFilter, $first: Int, $after: String, $orderBy: PaginationOrderBy) {
  issues(filter: $filter, first: $first, after: $after, orderBy: $orderBy) {
    nodes {
      ...IssueSummaryFields
    }
    pageInfo {
      ...PageInfoFields
    }
  }
}
""",
    ISSUE_SUMMARY_FRAGMENT,
    PAGE_INFO_FRAGMENT,
)

ISSUE_SEARCH_QUERY = _with_fragments(
    """
query IssueSearch(
  $term: String!
  $filter: IssueFilter
  $first: Int
  $after: String
  $orderBy: PaginationOrderBy
  $includeArchived: Boolean
) {
  searchIssues(
    term: $term
    filter: $filter
    first: $first
    after: $after
    orderBy: $orderBy
    includeArchived: $includeArchived
  ) {
    nodes {
      ...IssueSummaryFields
    }
    pageInfo {
      ...PageInfoFields
    }
  }
}
""",
    ISSUE_SUMMARY_FRAGMENT,
    PAGE_INFO_FRAGMENT,
)

ISSUE_QUERY = """
query Issue($id: String!) {
  issue(id: $id) {
    id
    identifier
    number
    title
    description
    priority
    priorityLabel
    estimate
    boardOrder
    subIssueSortOrder
    createdAt
    updatedAt
    dueDate
    url
    branchName
    snoozedUntilAt
    completedAt
    canceledAt
    archivedAt
    triagedAt
    customerTicketCount
    previousIdentifiers
    integrationSourceType
    state {
      id
      name
      type
      color
      description
      position
    }
    assignee {
      id
      name
      email
      avatarUrl
      displayName
      active
      admin
      createdAt
    }
    creator {
      id
      name
      email
      avatarUrl
      displayName
      active
    }
    team {
      id
      key
      name
      description
      icon
      color
      cyclesEnabled
      cycleStartDay
      cycleDuration
      upcomingCycleCount
    }
    labels {
      nodes {
        id
        name
        color
        description
        parent {
          id
          name
        }
      }
    }
    parent {
      id
      identifier
      title
      state {
        name
        type
      }
    }
    children {
      nodes {
        id
        identifier
        title
        priority
        createdAt
        state {
          name
          type
          color
        }
        assignee {
          name
          email
        }
      }
    }
    cycle {
      id
      number
      name
      description
      startsAt
      endsAt
      progress
      completedAt
      scopeHistory
    }
    project {
      id
      name
      description
      state
      progress
      startDate
      targetDate
      health
      lead {
        name
        email
      }
    }
    projectMilestone {
      id
      name
      targetDate
      status
    }
    attachments(first: 20) {
      nodes {
        id
        title
        subtitle
        url
        metadata
        createdAt
        creator {
          name
          email
        }
      }
    }
    documents(first: 20) {
      nodes {
        id
        title
        icon
        color
        slugId
        url
        createdAt
        updatedAt
        creator {
          name
          email
        }
      }
    }
    comments(first: 10) {
      nodes {
        id
        body
        createdAt
        updatedAt
        editedAt
        user {
          name
          email
          avatarUrl
        }
        parent {
          id
        }
        children {
          nodes {
            id
            body
            user {
              name
            }
          }
        }
      }
    }
    subscribers {
      nodes {
        id
        name
        email
        avatarUrl
      }
    }
    relations {
      nodes {
        id
        type
        relatedIssue {
          id
          identifier
          title
          state {
            name
            type
          }
        }
      }
    }
    inverseRelations {
      nodes {
        id
        type
        issue {
          id
          identifier
          title
          state {
            name
            type
          }
        }
      }
    }
    history(first: 10) {
      nodes {
        id
        createdAt
        updatedAt
        actor {
          name
          email
        }
        fromAssignee {
          name
        }
        toAssignee {
          name
        }
        fromState {
          name
        }
        toState {
          name
        }
        fromPriority
        toPriority
        fromTitle
        toTitle
        fromCycle {
          name
        }
        toCycle {
          name
        }
        fromProject {
          name
        }
        toProject {
          name
        }
        addedLabelIds
        removedLabelIds
      }
    }
    reactions {
      id
      emoji
      user {
        name
        email
      }
      createdAt
    }
    externalUserCreator {
      id
      name
      email
      avatarUrl
    }
  }
}
""".strip()

TEAMS_QUERY = _with_fragments(
    """
query Teams($first: Int, $after: String, $orderBy: PaginationOrderBy) {
  teams(first: $first, after: $after, orderBy: $orderBy) {
    nodes {
      id
      key
      name
      description
      private
      issueCount
    }
    pageInfo {
      ...PageInfoFields
    }
  }
}
""",
    PAGE_INFO_FRAGMENT,
)

PROJECTS_QUERY = _with_fragments(
    """
query Projects($filter: ProjectFilter, $first: Int, $after: String, $orderBy: PaginationOrderBy) {
  projects(filter: $filter, first: $first, after: $after, orderBy: $orderBy) {
    nodes {
      ...ProjectSummaryFields
    }
    pageInfo {
      ...PageInfoFields
    }
  }
}
""",
    PROJECT_SUMMARY_FRAGMENT,
    PAGE_INFO_FRAGMENT,
)

PROJECT_QUERY = """
query Project($id: String!) {
  project(id: $id) {
    id
    slugId
    name
    description
    content
    state
    progress
    health
    scope
    startDate
    targetDate
    url
    icon
    color
    createdAt
    updatedAt
    completedAt
    canceledAt
    archivedAt
    slackNewIssue
    slackIssueComments
    slackIssueStatuses
    lead {
      id
      name
      email
      avatarUrl
      displayName
      active
    }
    creator {
      id
      name
      email
      avatarUrl
      active
    }
    convertedFromIssue {
      id
      identifier
      title
    }
    lastAppliedTemplate {
      id
      name
      description
    }
    teams {
      nodes {
        id
        key
        name
        description
        icon
        color
        cyclesEnabled
      }
    }
    members {
      nodes {
        id
        name
        email
        avatarUrl
        displayName
        active
        admin
      }
    }
    projectMilestones(first: 50) {
      nodes {
        id
        name
        description
        targetDate
        status
        progress
        sortOrder
      }
    }
    issues(first: 50, orderBy: updatedAt) {
      nodes {
        id
        identifier
        number
        title
        description
        priority
        estimate
        createdAt
        updatedAt
        completedAt
        state {
          name
          type
          color
        }
        assignee {
          name
          email
        }
        labels {
          nodes {
            name
            color
          }
        }
      }
    }
    projectUpdates(first: 10) {
      nodes {
        id
        body
        health
        createdAt
        updatedAt
        editedAt
        user {
          name
          email
          avatarUrl
        }
      }
    }
    documents(first: 20) {
      nodes {
        id
        title
        content
        icon
        color
        createdAt
        updatedAt
        creator {
          name
          email
        }
        updatedBy {
          name
          email
        }
      }
    }
  }
}
""".strip()

PROJECT_UPDATE_MUTATION = """
mutation ProjectUpdate($id: String!, $input: ProjectUpdateInput!) {
  projectUpdate(id: $id, input: $input) {
    success
    project {
      id
      name
      state
      progress
      url
      teams {
        nodes {
          id
          key
          name
        }
      }
    }
  }
}
""".strip()

ISSUE_UPDATE_MUTATION = _with_fragments(
    """
mutation UpdateIssue($id: String!, $input: IssueUpdateInput!) {
  issueUpdate(id: $id, input: $input) {
    success
    issue {
      ...IssueSummaryFields
    }
  }
}
""",
    ISSUE_SUMMARY_FRAGMENT,
)

ISSUE_CREATE_MUTATION = _with_fragments(
    """
mutation CreateIssue($input: IssueCreateInput!) {
  issueCreate(input: $input) {
    success
    issue {
      ...IssueSummaryFields
    }
  }
}
""",
    ISSUE_SUMMARY_FRAGMENT,
)

TEAM_QUERY = """
query Team($key: String!) {
  team(id: $key) {
    id
    key
    name
    description
    private
    issueCount
  }
}
""".strip()

# Everything needed to translate human-readable names into ids for a team.
TEAM_CONTEXT_QUERY = """
query TeamContext($key: String!) {
  team(id: $key) {
    id
    key
    name
    states {
      nodes {
        id
        name
        type
      }
    }
    labels(first: 250) {
      nodes {
        id
        name
      }
    }
    members(first: 250) {
      nodes {
        id
        email
      }
    }
  }
}
""".strip()

TEAM_STATES_QUERY = """
query TeamStates($key: String!) {
  team(id: $key) {
    states {
      nodes {
        id
        name
        type
        color
        description
        position
      }
    }
  }
}
""".strip()

TEAM_MEMBERS_QUERY = _with_fragments(
    """
query TeamMembers($key: String!) {
  team(id: $key) {
    members {
      nodes {
        id
        name
        email
        avatarUrl
        isMe
        active
        admin
      }
      pageInfo {
        ...PageInfoFields
      }
    }
  }
}
""",
    PAGE_INFO_FRAGMENT,
)

USERS_QUERY = _with_fragments(
    """
query Users($first: Int, $after: String, $orderBy: PaginationOrderBy) {
  users(first: $first, after: $after, orderBy: $orderBy) {
    nodes {
      id
      name
      email
      avatarUrl
      isMe
      active
      admin
    }
    pageInfo {
      ...PageInfoFields
    }
  }
}
""",
    PAGE_INFO_FRAGMENT,
)

USER_QUERY = """
query User($email: String!) {
  user(email: $email) {
    id
    name
    email
    avatarUrl
    isMe
    active
    admin
  }
}
""".strip()

ISSUE_COMMENTS_QUERY = _with_fragments(
    """
query IssueComments($id: String!, $first: Int, $after: String, $orderBy: PaginationOrderBy) {
  issue(id: $id) {
    comments(first: $first, after: $after, orderBy: $orderBy) {
      nodes {
        id
        body
        createdAt
        updatedAt
        user {
          id
          name
          email
        }
      }
      pageInfo {
        ...PageInfoFields
      }
    }
  }
}
""",
    PAGE_INFO_FRAGMENT,
)

COMMENT_CREATE_MUTATION = """
mutation CreateComment($input: CommentCreateInput!) {
  commentCreate(input: $input) {
    success
    comment {
      id
      body
      createdAt
      updatedAt
      user {
        id
        name
        email
      }
    }
  }
}
""".strip()

DOCUMENT_LIST_FRAGMENT = """
fragment DocumentListFields on Document {
  id
  title
  icon
  color
  slugId
  url
  createdAt
  updatedAt
  creator {
    id
    name
    email
  }
  updatedBy {
    id
    name
    email
  }
  project {
    id
    name
  }
  team {
    id
    key
    name
  }
}
""".strip()

DOCUMENT_WRITE_FRAGMENT = """
fragment DocumentWriteFields on Document {
  id
  title
  content
  icon
  color
  slugId
  url
  createdAt
  updatedAt
  creator {
    id
    name
    email
  }
  project {
    id
    name
  }
  team {
    id
    key
    name
  }
}
""".strip()

DOCUMENTS_QUERY = _with_fragments(
    """
query Documents($filter: DocumentFilter, $first: Int, $after: String, $orderBy: PaginationOrderBy) {
  documents(filter: $filter, first: $first, after: $after, orderBy: $orderBy) {
    nodes {
      ...DocumentListFields
    }
    pageInfo {
      ...PageInfoFields
    }
  }
}
""",
    DOCUMENT_LIST_FRAGMENT,
    PAGE_INFO_FRAGMENT,
)

DOCUMENT_QUERY = """
query Document($id: String!) {
  document(id: $id) {
    id
    title
    content
    icon
    color
    slugId
    url
    createdAt
    updatedAt
    creator {
      id
      name
      email
      avatarUrl
    }
    updatedBy {
      id
      name
      email
    }
    project {
      id
      name
      state
      progress
      url
    }
    team {
      id
      key
      name
    }
  }
}
""".strip()

DOCUMENT_SEARCH_QUERY = _with_fragments(
    """
query SearchDocuments(
  $term: String!
  $first: Int
  $after: String
  $orderBy: PaginationOrderBy
  $teamId: String
  $includeComments: Boolean
) {
  searchDocuments(
    term: $term
    first: $first
    after: $after
    orderBy: $orderBy
    teamId: $teamId
    includeComments: $includeComments
  ) {
    nodes {
      ...DocumentListFields
    }
    pageInfo {
      ...PageInfoFields
    }
  }
}
""",
    DOCUMENT_LIST_FRAGMENT,
    PAGE_INFO_FRAGMENT,
)

DOCUMENT_CREATE_MUTATION = _with_fragments(
    """
mutation CreateDocument($input: DocumentCreateInput!) {
  documentCreate(input: $input) {
    success
    document {
      ...DocumentWriteFields
    }
  }
}
""",
    DOCUMENT_WRITE_FRAGMENT,
)

DOCUMENT_UPDATE_MUTATION = _with_fragments(
    """
mutation UpdateDocument($id: String!, $input: DocumentUpdateInput!) {
  documentUpdate(id: $id, input: $input) {
    success
    document {
      ...DocumentWriteFields
    }
  }
}
""",
    DOCUMENT_WRITE_FRAGMENT,
)

DOCUMENT_DELETE_MUTATION = """
mutation DeleteDocument($id: String!) {
  documentDelete(id: $id) {
    success
  }
}
""".strip()

MILESTONE_FIELDS_FRAGMENT = """
fragment MilestoneFields on ProjectMilestone {
  id
  name
  description
  targetDate
  status
  progress
  sortOrder
  createdAt
  updatedAt
}
""".strip()

PROJECT_MILESTONES_QUERY = _with_fragments(
    """
query ProjectMilestones($filter: ProjectMilestoneFilter, $first: Int, $after: String) {
  projectMilestones(filter: $filter, first: $first, after: $after) {
    nodes {
      ...MilestoneFields
      archivedAt
    }
    pageInfo {
      ...PageInfoFields
    }
  }
}
""",
    MILESTONE_FIELDS_FRAGMENT,
    PAGE_INFO_FRAGMENT,
)

PROJECT_MILESTONE_QUERY = _with_fragments(
    """
query ProjectMilestone($id: String!) {
  projectMilestone(id: $id) {
    ...MilestoneFields
    archivedAt
    project {
      id
      name
      state
      progress
    }
    issues(first: 50) {
      nodes {
        id
        identifier
        title
        priority
        createdAt
        state {
          name
          type
          color
        }
        assignee {
          name
          email
        }
      }
    }
  }
}
""",
    MILESTONE_FIELDS_FRAGMENT,
)

PROJECT_MILESTONE_CREATE_MUTATION = _with_fragments(
    """
mutation ProjectMilestoneCreate($input: ProjectMilestoneCreateInput!) {
  projectMilestoneCreate(input: $input) {
    success
    projectMilestone {
      ...MilestoneFields
    }
  }
}
""",
    MILESTONE_FIELDS_FRAGMENT,
)

PROJECT_MILESTONE_UPDATE_MUTATION = _with_fragments(
    """
mutation ProjectMilestoneUpdate($id: String!, $input: ProjectMilestoneUpdateInput!) {
  projectMilestoneUpdate(id: $id, input: $input) {
    success
    projectMilestone {
      ...MilestoneFields
    }
  }
}
""",
    MILESTONE_FIELDS_FRAGMENT,
)

PROJECT_MILESTONE_DELETE_MUTATION = """
mutation ProjectMilestoneDelete($id: String!) {
  projectMilestoneDelete(id: $id) {
    success
  }
}
""".strip()

PROJECT_UPDATES_QUERY = _with_fragments(
    """
query ProjectUpdates($id: String!, $first: Int, $after: String) {
  project(id: $id) {
    projectUpdates(first: $first, after: $after) {
      nodes {
        id
        body
        health
        url
        createdAt
        updatedAt
        editedAt
        archivedAt
        user {
          id
          name
          email
          avatarUrl
        }
      }
      pageInfo {
        ...PageInfoFields
      }
    }
  }
}
""",
    PAGE_INFO_FRAGMENT,
)

PROJECT_STATUS_UPDATE_QUERY = """
query ProjectUpdate($id: String!) {
  projectUpdate(id: $id) {
    id
    body
    health
    url
    createdAt
    updatedAt
    editedAt
    archivedAt
    user {
      id
      name
      email
      avatarUrl
    }
    project {
      id
      name
      state
      progress
    }
  }
}
""".strip()

PROJECT_STATUS_UPDATE_CREATE_MUTATION = """
mutation ProjectUpdateCreate($input: ProjectUpdateCreateInput!) {
  projectUpdateCreate(input: $input) {
    success
    projectUpdate {
      id
      body
      health
      url
      createdAt
      updatedAt
      user {
        id
        name
        email
      }
      project {
        id
        name
      }
    }
  }
}
""".strip()

PROJECT_STATUS_UPDATE_UPDATE_MUTATION = """
mutation ProjectUpdateUpdate($id: String!, $input: ProjectUpdateUpdateInput!) {
  projectUpdateUpdate(id: $id, input: $input) {
    success
    projectUpdate {
      id
      body
      health
      url
      createdAt
      updatedAt
      editedAt
      user {
        id
        name
        email
      }
      project {
        id
        name
      }
    }
  }
}
""".strip()

PROJECT_STATUS_UPDATE_ARCHIVE_MUTATION = """
mutation ProjectUpdateArchive($id: String!) {
  projectUpdateArchive(id: $id) {
    success
  }
}
""".strip()

ISSUE_RELATION_FRAGMENT = """
fragment IssueRelationFields on IssueRelation {
  id
  type
  issue {
    id
    identifier
    title
  }
  relatedIssue {
    id
    identifier
    title
  }
}
""".strip()

ISSUE_RELATION_CREATE_MUTATION = _with_fragments(
    """
mutation IssueRelationCreate($input: IssueRelationCreateInput!) {
  issueRelationCreate(input: $input) {
    success
    issueRelation {
      ...IssueRelationFields
    }
  }
}
""",
    ISSUE_RELATION_FRAGMENT,
)

ISSUE_RELATION_UPDATE_MUTATION = _with_fragments(
    """
mutation IssueRelationUpdate($id: String!, $input: IssueRelationUpdateInput!) {
  issueRelationUpdate(id: $id, input: $input) {
    success
    issueRelation {
      ...IssueRelationFields
    }
  }
}
""",
    ISSUE_RELATION_FRAGMENT,
)

ISSUE_RELATION_DELETE_MUTATION = """
mutation IssueRelationDelete($id: String!) {
  issueRelationDelete(id: $id) {
    success
  }
}
""".strip()

CUSTOM_VIEW_FRAGMENT = """
fragment CustomViewFields on CustomView {
  id
  name
  description
  icon
  color
  shared
  slugId
  modelName
  filterData
  projectFilterData
  creator {
    id
    name
    email
  }
  owner {
    id
    name
    email
  }
  team {
    id
    key
    name
  }
  createdAt
  updatedAt
}
""".strip()

CUSTOM_VIEWS_QUERY = _with_fragments(
    """
query CustomViews($filter: CustomViewFilter, $first: Int, $after: String) {
  customViews(filter: $filter, first: $first, after: $after) {
    nodes {
      ...CustomViewFields
    }
    pageInfo {
      ...PageInfoFields
    }
  }
}
""",
    CUSTOM_VIEW_FRAGMENT,
    PAGE_INFO_FRAGMENT,
)

CUSTOM_VIEW_QUERY = _with_fragments(
    """
query CustomView($id: String!) {
  customView(id: $id) {
    ...CustomViewFields
  }
}
""",
    CUSTOM_VIEW_FRAGMENT,
)

CUSTOM_VIEW_ISSUES_QUERY = _with_fragments(
    """
query CustomViewIssues($id: String!, $first: Int, $after: String) {
  customView(id: $id) {
    issues(first: $first, after: $after) {
      nodes {
        ...IssueSummaryFields
      }
      pageInfo {
        ...PageInfoFields
      }
    }
  }
}
""",
    ISSUE_SUMMARY_FRAGMENT,
    PAGE_INFO_FRAGMENT,
)

CUSTOM_VIEW_PROJECTS_QUERY = _with_fragments(
    """
query CustomViewProjects($id: String!, $first: Int, $after: String) {
  customView(id: $id) {
    projects(first: $first, after: $after) {
      nodes {
        ...ProjectSummaryFields
      }
      pageInfo {
        ...PageInfoFields
      }
    }
  }
}
""",
    PROJECT_SUMMARY_FRAGMENT,
    PAGE_INFO_FRAGMENT,
)

CUSTOM_VIEW_CREATE_MUTATION = _with_fragments(
    """
mutation CustomViewCreate($input: CustomViewCreateInput!) {
  customViewCreate(input: $input) {
    success
    customView {
      ...CustomViewFields
    }
  }
}
""",
    CUSTOM_VIEW_FRAGMENT,
)

CUSTOM_VIEW_UPDATE_MUTATION = _with_fragments(
    """
mutation CustomViewUpdate($id: String!, $input: CustomViewUpdateInput!) {
  customViewUpdate(id: $id, input: $input) {
    success
    customView {
      ...CustomViewFields
    }
  }
}
""",
    CUSTOM_VIEW_FRAGMENT,
)

CUSTOM_VIEW_DELETE_MUTATION = """
mutation CustomViewDelete($id: String!) {
  customViewDelete(id: $id) {
    success
  }
}
""".strip()

INITIATIVES_QUERY = _with_fragments(
    """
query Initiatives(
  $filter: InitiativeFilter
  $first: Int
  $after: String
  $orderBy: PaginationOrderBy
  $includeArchived: Boolean
) {
  initiatives(
    filter: $filter
    first: $first
    after: $after
    orderBy: $orderBy
    includeArchived: $includeArchived
  ) {
    nodes {
      id
      name
      description
      status
      slugId
      color
      icon
      targetDate
      targetDateResolution
      health
      url
      createdAt
      updatedAt
      archivedAt
      completedAt
      owner {
        id
        name
        email
      }
      creator {
        id
        name
        email
      }
    }
    pageInfo {
      ...PageInfoFields
    }
  }
}
""",
    PAGE_INFO_FRAGMENT,
)

INITIATIVE_QUERY = """
query Initiative($id: String!) {
  initiative(id: $id) {
    id
    name
    description
    status
    slugId
    color
    icon
    content
    targetDate
    targetDateResolution
    health
    url
    createdAt
    updatedAt
    archivedAt
    completedAt
    owner {
      id
      name
      email
      avatarUrl
      displayName
      active
    }
    creator {
      id
      name
      email
      avatarUrl
      active
    }
    projects(first: 50) {
      nodes {
        id
        name
        state
        progress
        url
      }
    }
    parentInitiative {
      id
      name
      status
    }
    subInitiatives(first: 50) {
      nodes {
        id
        name
        status
        health
      }
    }
  }
}
""".strip()

INITIATIVE_WRITE_FRAGMENT = """
fragment InitiativeWriteFields on Initiative {
  id
  name
  description
  status
  color
  icon
  targetDate
  health
  url
  createdAt
  updatedAt
  owner {
    id
    name
    email
  }
}
""".strip()

INITIATIVE_CREATE_MUTATION = _with_fragments(
    """
mutation InitiativeCreate($input: InitiativeCreateInput!) {
  initiativeCreate(input: $input) {
    success
    initiative {
      ...InitiativeWriteFields
    }
  }
}
""",
    INITIATIVE_WRITE_FRAGMENT,
)

INITIATIVE_UPDATE_MUTATION = _with_fragments(
    """
mutation InitiativeUpdate($id: String!, $input: InitiativeUpdateInput!) {
  initiativeUpdate(id: $id, input: $input) {
    success
    initiative {
      ...InitiativeWriteFields
    }
  }
}
""",
    INITIATIVE_WRITE_FRAGMENT,
)

INITIATIVE_DELETE_MUTATION = """
mutation InitiativeDelete($id: String!) {
  initiativeDelete(id: $id) {
    success
  }
}
""".strip()

ATTACHMENT_FRAGMENT = """
fragment AttachmentFields on Attachment {
  id
  title
  subtitle
  url
  metadata
  createdAt
  creator {
    id
    name
    email
  }
}
""".strip()

ISSUE_ATTACHMENTS_QUERY = _with_fragments(
    """
query IssueAttachments($id: String!, $first: Int, $after: String) {
  issue(id: $id) {
    attachments(first: $first, after: $after) {
      nodes {
        ...AttachmentFields
      }
    }
  }
}
""",
    ATTACHMENT_FRAGMENT,
)

ATTACHMENT_CREATE_MUTATION = _with_fragments(
    """
mutation AttachmentCreate($input: AttachmentCreateInput!) {
  attachmentCreate(input: $input) {
    success
    attachment {
      ...AttachmentFields
    }
  }
}
""",
    ATTACHMENT_FRAGMENT,
)

ATTACHMENT_LINK_URL_MUTATION = _with_fragments(
    """
mutation AttachmentLinkURL($issueId: String!, $url: String!, $title: String) {
  attachmentLinkURL(issueId: $issueId, url: $url, title: $title) {
    success
    attachment {
      ...AttachmentFields
    }
  }
}
""",
    ATTACHMENT_FRAGMENT,
)

ATTACHMENT_UPDATE_MUTATION = _with_fragments(
    """
mutation AttachmentUpdate($id: String!, $input: AttachmentUpdateInput!) {
  attachmentUpdate(id: $id, input: $input) {
    success
    attachment {
      ...AttachmentFields
    }
  }
}
""",
    ATTACHMENT_FRAGMENT,
)

ATTACHMENT_DELETE_MUTATION = """
mutation AttachmentDelete($id: String!) {
  attachmentDelete(id: $id) {
    success
  }
}
""".strip()

ISSUE_ACTIVITY_QUERY = """
query IssueActivity($id: String!, $historyFirst: Int) {
  issue(id: $id) {
    id
    identifier
    title
    url
    state {
      id
      name
      type
      color
    }
    assignee {
      id
      name
      email
    }
    team {
      id
      key
      name
    }
    attachments(first: 50) {
      nodes {
        id
        title
        subtitle
        url
        metadata
        createdAt
        creator {
          name
          email
        }
      }
    }
    relations {
      nodes {
        id
        type
        relatedIssue {
          id
          identifier
          title
          state {
            name
            type
          }
        }
      }
    }
    comments(first: 10) {
      nodes {
        id
        body
        createdAt
        user {
          name
          email
        }
      }
    }
    history(first: $historyFirst) {
      nodes {
        id
        createdAt
        updatedAt
        actor {
          name
          email
        }
        fromAssignee {
          name
        }
        toAssignee {
          name
        }
        fromState {
          name
        }
        toState {
          name
        }
        fromPriority
        toPriority
        fromTitle
        toTitle
        fromCycle {
          name
        }
        toCycle {
          name
        }
        fromProject {
          name
        }
        toProject {
          name
        }
        addedLabelIds
        removedLabelIds
      }
    }
  }
}
""".strip()

ISSUE_ARCHIVE_MUTATION = """
mutation ArchiveIssue($id: String!) {
  issueArchive(id: $id) {
    success
    entity {
      id
      identifier
      title
      archivedAt
    }
  }
}
""".strip()

CYCLE_WRITE_FRAGMENT = """
fragment CycleWriteFields on Cycle {
  id
  number
  name
  description
  startsAt
  endsAt
  progress
  team {
    id
    key
    name
  }
}
""".strip()

# orderBy is fixed server-side ordering for cycles, it is not a variable.
CYCLES_QUERY = _with_fragments(
    """
query Cycles($filter: CycleFilter, $first: Int, $after: String) {
  cycles(filter: $filter, first: $first, after: $after, orderBy: createdAt) {
    nodes {
      ...CycleWriteFields
      completedAt
    }
    pageInfo {
      ...PageInfoFields
    }
  }
}
""",
    CYCLE_WRITE_FRAGMENT,
    PAGE_INFO_FRAGMENT,
)

CYCLE_QUERY = _with_fragments(
    """
query Cycle($id: String!) {
  cycle(id: $id) {
    ...CycleWriteFields
    completedAt
    issues {
      nodes {
        id
        identifier
        title
        priority
        state {
          id
          name
          type
          color
        }
        assignee {
          id
          name
          email
        }
      }
    }
  }
}
""",
    CYCLE_WRITE_FRAGMENT,
)

CYCLE_CREATE_MUTATION = _with_fragments(
    """
mutation CreateCycle($input: CycleCreateInput!) {
  cycleCreate(input: $input) {
    success
    cycle {
      ...CycleWriteFields
    }
  }
}
""",
    CYCLE_WRITE_FRAGMENT,
)

CYCLE_UPDATE_MUTATION = _with_fragments(
    """
mutation UpdateCycle($id: String!, $input: CycleUpdateInput!) {
  cycleUpdate(id: $id, input: $input) {
    success
    cycle {
      ...CycleWriteFields
    }
  }
}
""",
    CYCLE_WRITE_FRAGMENT,
)

CYCLE_ARCHIVE_MUTATION = """
mutation ArchiveCycle($id: String!) {
  cycleArchive(id: $id) {
    success
  }
}
""".strip()

TEAM_UPDATE_MUTATION = """
mutation UpdateTeam($id: String!, $input: TeamUpdateInput!) {
  teamUpdate(id: $id, input: $input) {
    success
    team {
      id
      key
      name
      cyclesEnabled
    }
  }
}
""".strip()

TEAM_CREATE_MUTATION = """
mutation CreateTeam($input: TeamCreateInput!, $copySettingsFromTeamId: String) {
  teamCreate(input: $input, copySettingsFromTeamId: $copySettingsFromTeamId) {
    success
    team {
      id
      key
      name
      description
      private
    }
  }
}
""".strip()

TEAM_DELETE_MUTATION = """
mutation DeleteTeam($id: String!) {
  teamDelete(id: $id) {
    success
  }
}
""".strip()

USER_UPDATE_MUTATION = """
mutation UpdateUser($id: String!, $input: UserUpdateInput!) {
  userUpdate(id: $id, input: $input) {
    success
    user {
      id
      name
      displayName
      email
      avatarUrl
    }
  }
}
""".strip()

LABELS_QUERY = _with_fragments(
    """
query Labels($filter: IssueLabelFilter, $first: Int, $after: String) {
  issueLabels(filter: $filter, first: $first, after: $after) {
    nodes {
      id
      name
      description
      color
      parent {
        id
        name
      }
    }
    pageInfo {
      ...PageInfoFields
    }
  }
}
""",
    PAGE_INFO_FRAGMENT,
)

LABEL_CREATE_MUTATION = """
mutation CreateLabel($input: IssueLabelCreateInput!) {
  issueLabelCreate(input: $input) {
    success
    issueLabel {
      id
      name
      description
      color
    }
  }
}
""".strip()

LABEL_UPDATE_MUTATION = """
mutation UpdateLabel($id: String!, $input: IssueLabelUpdateInput!) {
  issueLabelUpdate(id: $id, input: $input) {
    success
    issueLabel {
      id
      name
      description
      color
    }
  }
}
""".strip()

LABEL_DELETE_MUTATION = """
mutation DeleteLabel($id: String!) {
  issueLabelDelete(id: $id) {
    success
  }
}
""".strip()

INITIATIVE_PROJECTS_QUERY = _with_fragments(
    """
query InitiativeProjects($id: String!, $first: Int, $after: String) {
  initiative(id: $id) {
    projects(first: $first, after: $after) {
      nodes {
        id
        name
        state
        progress
        startDate
        targetDate
        lead {
          id
          name
        }
        teams {
          nodes {
            id
            key
            name
          }
        }
      }
      pageInfo {
        ...PageInfoFields
      }
    }
  }
}
""",
    PAGE_INFO_FRAGMENT,
)

PROJECT_ISSUES_QUERY = _with_fragments(
    """
query ProjectIssues($id: String!, $first: Int, $after: String) {
  project(id: $id) {
    issues(first: $first, after: $after) {
      nodes {
        id
        identifier
        title
        priority
        priorityLabel
        createdAt
        updatedAt
        state {
          id
          name
          type
          color
        }
        assignee {
          id
          name
          email
        }
      }
      pageInfo {
        ...PageInfoFields
      }
    }
  }
}
""",
    PAGE_INFO_FRAGMENT,
)

PROJECT_CREATE_MUTATION = """
mutation CreateProject($input: ProjectCreateInput!) {
  projectCreate(input: $input) {
    success
    project {
      id
      name
      description
      state
      progress
      startDate
      targetDate
      url
      slugId
      lead {
        id
        name
      }
      teams {
        nodes {
          id
          key
          name
        }
      }
    }
  }
}
""".strip()

PROJECT_ARCHIVE_MUTATION = """
mutation ArchiveProject($id: String!) {
  projectArchive(id: $id) {
    success
  }
}
""".strip()

PROJECT_DELETE_MUTATION = """
mutation DeleteProject($id: String!) {
  projectDelete(id: $id) {
    success
  }
}
""".strip()

COMMENT_UPDATE_MUTATION = """
mutation UpdateComment($id: String!, $input: CommentUpdateInput!) {
  commentUpdate(id: $id, input: $input) {
    success
    comment {
      id
      body
      createdAt
      updatedAt
      editedAt
      user {
        id
        name
        email
      }
    }
  }
}
""".strip()

COMMENT_DELETE_MUTATION = """
mutation DeleteComment($id: String!) {
  commentDelete(id: $id) {
    success
  }
}
""".strip()

NOTIFICATION_FRAGMENT = """
fragment NotificationFields on Notification {
  id
  type
  createdAt
  readAt
  snoozedUntilAt
  archivedAt
  actor {
    id
    name
    email
  }
  ... on IssueNotification {
    issue {
      id
      identifier
      title
      state {
        id
        name
        type
        color
      }
      team {
        id
        key
        name
      }
    }
    commentId
    reactionEmoji
  }
}
""".strip()

NOTIFICATIONS_QUERY = _with_fragments(
    """
query Notifications($first: Int, $after: String, $includeArchived: Boolean) {
  notifications(first: $first, after: $after, includeArchived: $includeArchived) {
    nodes {
      ...NotificationFields
    }
    pageInfo {
      ...PageInfoFields
    }
  }
}
""",
    NOTIFICATION_FRAGMENT,
    PAGE_INFO_FRAGMENT,
)

NOTIFICATION_UPDATE_MUTATION = _with_fragments(
    """
mutation UpdateNotification($id: String!, $input: NotificationUpdateInput!) {
  notificationUpdate(id: $id, input: $input) {
    success
    notification {
      ...NotificationFields
    }
  }
}
""",
    NOTIFICATION_FRAGMENT,
)

NOTIFICATION_ARCHIVE_MUTATION = """
mutation ArchiveNotification($id: String!) {
  notificationArchive(id: $id) {
    success
  }
}
""".strip()

NOTIFICATION_UNARCHIVE_MUTATION = """
mutation UnarchiveNotification($id: String!) {
  notificationUnarchive(id: $id) {
    success
  }
}
""".strip()

FAVORITE_FRAGMENT = """
fragment FavoriteFields on Favorite {
  id
  type
  title
  detail
  url
  folderName
  sortOrder
  createdAt
  predefinedViewType
  projectTab
  initiativeTab
  issue {
    id
    identifier
    title
  }
  project {
    id
    name
    state
  }
  cycle {
    id
    name
    number
  }
  customView {
    id
    name
    modelName
  }
  document {
    id
    title
  }
  initiative {
    id
    name
  }
  label {
    id
    name
  }
  projectLabel {
    id
    name
  }
  user {
    id
    name
    email
  }
  predefinedViewTeam {
    id
    key
    name
  }
  projectTeam {
    id
    key
    name
  }
  pullRequest {
    id
    number
    title
  }
  parent {
    id
    title
  }
}
""".strip()

FAVORITES_QUERY = _with_fragments(
    """
query Favorites($first: Int, $after: String) {
  favorites(first: $first, after: $after) {
    nodes {
      ...FavoriteFields
      children {
        nodes {
          id
          type
          title
        }
      }
    }
    pageInfo {
      ...PageInfoFields
    }
  }
}
""",
    FAVORITE_FRAGMENT,
    PAGE_INFO_FRAGMENT,
)

FAVORITE_QUERY = _with_fragments(
    """
query Favorite($id: String!) {
  favorite(id: $id) {
    ...FavoriteFields
    children {
      nodes {
        id
        type
        title
      }
    }
  }
}
""",
    FAVORITE_FRAGMENT,
)

FAVORITE_CREATE_MUTATION = _with_fragments(
    """
mutation CreateFavorite($input: FavoriteCreateInput!) {
  favoriteCreate(input: $input) {
    success
    favorite {
      ...FavoriteFields
    }
  }
}
""",
    FAVORITE_FRAGMENT,
)

FAVORITE_UPDATE_MUTATION = _with_fragments(
    """
mutation UpdateFavorite($id: String!, $input: FavoriteUpdateInput!) {
  favoriteUpdate(id: $id, input: $input) {
    success
    favorite {
      ...FavoriteFields
    }
  }
}
""",
    FAVORITE_FRAGMENT,
)

FAVORITE_DELETE_MUTATION = """
mutation DeleteFavorite($id: String!) {
  favoriteDelete(id: $id) {
    success
  }
}
""".strip()
