"""
Project item fetching from GitHub and conversion into calendar events.
"""

import logging
from datetime import datetime

from core.config import GITHUB_REQUIRED_LABEL
from core.github_client import GitHubAPIError, GitHubAuthError, GitHubClient
from core.validation import parse_timestamp
from models.events import Assignee, CalendarEvent, Label
from models.github import ProjectItem, ProjectItemsQuery, SearchIssuesResponse
from services.dates import extract_dates

logger = logging.getLogger(__name__)

PAGE_SIZE = 100
MAX_SEARCH_PAGES = 10  # search API stops at 1000 results

PROJECT_ITEMS_QUERY = """
query($org: String!, $projectNumber: Int!, $cursor: String) {
  organization(login: $org) {
    projectV2(number: $projectNumber) {
      id
      title
      items(first: 100, after: $cursor) {
        pageInfo { hasNextPage endCursor }
        nodes {
          id
          type
          content {
            ... on Issue {
              id
              number
              title
              body
              state
              createdAt
              updatedAt
              closedAt
              url
              author { login avatarUrl }
              labels(first: 20) { nodes { id name color description } }
              assignees(first: 10) { nodes { login avatarUrl } }
              milestone { title description dueOn }
            }
          }
          fieldValues(first: 20) {
            nodes {
              ... on ProjectV2ItemFieldDateValue {
                field { ... on ProjectV2FieldCommon { id name } }
                date
              }
              ... on ProjectV2ItemFieldTextValue {
                field { ... on ProjectV2FieldCommon { id name } }
                text
              }
              ... on ProjectV2ItemFieldSingleSelectValue {
                field { ... on ProjectV2FieldCommon { id name } }
                name
              }
              ... on ProjectV2ItemFieldNumberValue {
                field { ... on ProjectV2FieldCommon { id name } }
                number
              }
            }
          }
        }
      }
    }
  }
}
"""


def _keep_item(item: ProjectItem, since: datetime | None, required_label: str) -> bool:
    """Issue items only, optionally labelled and created on/after ``since``."""
    if item.content is None or item.type != "ISSUE":
        return False
    if required_label and not any(
        label.name == required_label for label in item.content.labels
    ):
        return False
    if since is not None:
        created = parse_timestamp(item.content.created_at)
        if created is None or created < since:
            return False
    return True


async def fetch_project_items_graphql(
    client: GitHubClient,
    org: str,
    project_number: int,
    since: datetime | None,
    required_label: str = GITHUB_REQUIRED_LABEL,
) -> list[ProjectItem]:
    """Page through a Projects v2 board and return the matching issue items."""
    items: list[ProjectItem] = []
    cursor = None

    while True:
        response: ProjectItemsQuery = await client.graphql(
            PROJECT_ITEMS_QUERY,
            {"org": org, "projectNumber": project_number, "cursor": cursor},
            schema=ProjectItemsQuery,
        )
        project = response.organization.project_v2 if response.organization else None
        if project is None:
            raise GitHubAPIError(
                f"Project {project_number} not found for organization {org}"
            )

        items.extend(
            item for item in project.items.nodes if _keep_item(item, since, required_label)
        )

        page_info = project.items.page_info
        if not page_info.has_next_page:
            break
        cursor = page_info.end_cursor

    logger.info("Fetched %d items from project %s/%d", len(items), org, project_number)
    return items


async def search_issues(
    client: GitHubClient,
    org: str,
    since: datetime | None,
    required_label: str = GITHUB_REQUIRED_LABEL,
) -> list[ProjectItem]:
    """
    Find issues through the search API.

    Used when the project board cannot be read; items carry no custom field
    values, so dates come from body annotations and fallbacks only.
    """
    query = f"org:{org} type:issue"
    if required_label:
        query += f' label:"{required_label}"'
    if since is not None:
        query += f" created:>={since.date().isoformat()}"

    items: list[ProjectItem] = []
    for page in range(1, MAX_SEARCH_PAGES + 1):
        result: SearchIssuesResponse = await client.request(
            "GET",
            "/search/issues",
            params={"q": query, "per_page": PAGE_SIZE, "page": page},
            schema=SearchIssuesResponse,
        )
        items.extend(
            ProjectItem(id=str(issue.id), type="ISSUE", content=issue)
            for issue in result.items
        )
        if len(result.items) < PAGE_SIZE:
            break

    logger.info("Found %d issues via search for %s", len(items), org)
    return items


async def fetch_project_items(
    client: GitHubClient,
    org: str,
    project_number: int,
    since: datetime | None = None,
) -> list[ProjectItem]:
    """
    Fetch issue items of a project, falling back to issue search.

    Authentication failures are raised as-is; any other GraphQL failure
    (including a missing project) switches to the search API.
    """
    try:
        return await fetch_project_items_graphql(client, org, project_number, since)
    except GitHubAuthError:
        raise
    except GitHubAPIError as e:
        logger.warning("GraphQL project query failed, falling back to search: %s", e)
        return await search_issues(client, org, since)


def normalize_label_color(color: str) -> str:
    return color if color.startswith("#") else f"#{color}"


def project_status(item: ProjectItem) -> str | None:
    """Value of the first single-select field named like 'Status'."""
    for value in item.field_values:
        if value.name and "status" in value.field_name.lower():
            return value.name
    return None


def to_calendar_event(item: ProjectItem) -> CalendarEvent | None:
    """Map one project item to a calendar event; None when it has no start date."""
    issue = item.content
    dates = extract_dates(item)
    if issue is None or dates is None:
        return None

    return CalendarEvent(
        id=str(issue.number),
        title=issue.title,
        start_date=dates.start_date,
        end_date=dates.end_date,
        url=issue.html_url,
        labels=[
            Label(name=label.name, color=normalize_label_color(label.color))
            for label in issue.labels
        ],
        assignees=[
            Assignee(login=user.login, avatar_url=user.avatar_url)
            for user in issue.assignees
        ],
        status=issue.state,
        project_status=project_status(item),
    )


def transform_to_calendar_events(items: list[ProjectItem]) -> list[CalendarEvent]:
    """Convert project items, dropping those without a resolvable start date."""
    events = []
    for item in items:
        event = to_calendar_event(item)
        if event is None:
            number = item.content.number if item.content else item.id
            logger.debug("Dropping item %s: no start date", number)
            continue
        events.append(event)
    return events


async def get_calendar_events(
    client: GitHubClient,
    org: str,
    project_number: int,
    since: datetime | None = None,
) -> list[CalendarEvent]:
    items = await fetch_project_items(client, org, project_number, since)
    return transform_to_calendar_events(items)
