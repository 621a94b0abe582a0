"""
Projects v2 custom fields: date field updates and status field listing.
"""

import logging
from dataclasses import dataclass
from datetime import date

from core.config import (
    DEFAULT_OPTION_COLOR,
    GITHUB_ORG,
    GITHUB_PROJECT_NUMBER,
    GITHUB_REPO,
    GITHUB_REPO_OWNER,
    PROJECT_END_FIELD_ID,
    PROJECT_START_FIELD_ID,
    STATUS_FIELD_KEYWORDS,
)
from core.github_client import GitHubAPIError, GitHubClient
from models.github import (
    IssueProjectItem,
    ProjectFieldNode,
    ProjectFieldsQuery,
    ProjectItemLookupQuery,
    ProjectV2Fields,
    UpdateFieldValueMutation,
)

logger = logging.getLogger(__name__)

PROJECT_ITEM_LOOKUP_QUERY = """
query($owner: String!, $repo: String!, $issueNumber: Int!) {
  repository(owner: $owner, name: $repo) {
    issue(number: $issueNumber) {
      id
      number
      title
      projectItems(first: 10) {
        nodes {
          id
          project { id title number }
        }
      }
    }
  }
}
"""

PROJECT_FIELDS_QUERY = """
query($org: String!, $projectNumber: Int!) {
  organization(login: $org) {
    projectV2(number: $projectNumber) {
      id
      title
      fields(first: 50) {
        nodes {
          ... on ProjectV2Field { id name dataType }
          ... on ProjectV2SingleSelectField {
            id
            name
            dataType
            options { id name color }
          }
        }
      }
    }
  }
}
"""

UPDATE_FIELD_VALUE_MUTATION = """
mutation($projectId: ID!, $itemId: ID!, $fieldId: ID!, $value: ProjectV2FieldValue!) {
  updateProjectV2ItemFieldValue(input: {
    projectId: $projectId
    itemId: $itemId
    fieldId: $fieldId
    value: $value
  }) {
    projectV2Item { id }
  }
}
"""


class ProjectItemNotFoundError(LookupError):
    """Issue is missing or not linked to the configured project."""


class ProjectFieldError(Exception):
    """The project does not expose the date field needed for an update."""


@dataclass
class FieldUpdate:
    field: str
    value: str


@dataclass
class DateFieldsResult:
    updates: list[FieldUpdate]
    project_item_id: str


async def find_project_item(
    client: GitHubClient,
    issue_number: int,
    project_number: int = GITHUB_PROJECT_NUMBER,
    owner: str = GITHUB_REPO_OWNER,
    repo: str = GITHUB_REPO,
) -> IssueProjectItem:
    """
    Find the project item linking an issue to the configured project.

    Raises:
        ProjectItemNotFoundError: issue missing, or not in the project
    """
    try:
        response: ProjectItemLookupQuery = await client.graphql(
            PROJECT_ITEM_LOOKUP_QUERY,
            {"owner": owner, "repo": repo, "issueNumber": issue_number},
            schema=ProjectItemLookupQuery,
        )
    except GitHubAPIError as e:
        if e.status_code == 404:
            raise ProjectItemNotFoundError(f"Issue #{issue_number} not found") from e
        raise
    issue = response.repository.issue if response.repository else None
    if issue is None:
        raise ProjectItemNotFoundError(f"Issue #{issue_number} not found")

    for item in issue.project_items:
        if item.project and item.project.number == project_number:
            return item

    linked = ", ".join(
        f"{item.project.number} ({item.project.title})"
        for item in issue.project_items
        if item.project
    )
    logger.info("Issue #%d is linked to projects: %s", issue_number, linked or "none")
    raise ProjectItemNotFoundError(
        f"Issue #{issue_number} is not in project {project_number}"
    )


async def get_project_fields(
    client: GitHubClient,
    org: str = GITHUB_ORG,
    project_number: int = GITHUB_PROJECT_NUMBER,
) -> ProjectV2Fields:
    response: ProjectFieldsQuery = await client.graphql(
        PROJECT_FIELDS_QUERY,
        {"org": org, "projectNumber": project_number},
        schema=ProjectFieldsQuery,
    )
    project = response.organization.project_v2 if response.organization else None
    if project is None:
        raise ProjectItemNotFoundError(
            f"Project {project_number} not found for organization {org}"
        )
    return project


def resolve_date_fields(
    fields: list[ProjectFieldNode],
) -> tuple[ProjectFieldNode | None, ProjectFieldNode | None]:
    """
    Pick the start and end date fields of a project.

    Configured field ids win; otherwise the first DATE field named like
    'start', and the first named like 'end' or 'due'.
    """
    start = end = None
    for field in fields:
        if not field.id or not field.name:
            continue
        if PROJECT_START_FIELD_ID and field.id == PROJECT_START_FIELD_ID:
            start = field
        elif PROJECT_END_FIELD_ID and field.id == PROJECT_END_FIELD_ID:
            end = field

    for field in fields:
        if not field.id or not field.name or field.data_type != "DATE":
            continue
        name = field.name.lower()
        if "start" in name:
            start = start or field
        elif "end" in name or "due" in name:
            end = end or field
    return start, end


async def update_project_dates(
    client: GitHubClient,
    issue_number: int,
    start: date | None,
    end: date | None,
    org: str = GITHUB_ORG,
    project_number: int = GITHUB_PROJECT_NUMBER,
) -> DateFieldsResult:
    """
    Write start/end dates into the project's custom date fields.

    Raises:
        ProjectItemNotFoundError: issue missing or not linked to the project
        ProjectFieldError: the project lacks a needed date field
    """
    item = await find_project_item(client, issue_number, project_number)
    project = await get_project_fields(client, org, project_number)
    start_field, end_field = resolve_date_fields(project.fields)

    updates: list[FieldUpdate] = []
    for value, field, label in ((start, start_field, "start"), (end, end_field, "end")):
        if value is None:
            continue
        if field is None:
            raise ProjectFieldError(f"Project {project_number} has no {label} date field")

        await client.graphql(
            UPDATE_FIELD_VALUE_MUTATION,
            {
                "projectId": project.id,
                "itemId": item.id,
                "fieldId": field.id,
                "value": {"date": value.isoformat()},
            },
            schema=UpdateFieldValueMutation,
        )
        logger.info("Set %s of issue #%d to %s", field.name, issue_number, value)
        updates.append(FieldUpdate(field=field.name, value=value.isoformat()))

    return DateFieldsResult(updates=updates, project_item_id=item.id)


def is_status_field(field: ProjectFieldNode) -> bool:
    if not field.name or field.options is None:
        return False
    name = field.name.lower()
    return any(keyword in name for keyword in STATUS_FIELD_KEYWORDS)


async def list_status_fields(
    client: GitHubClient,
    org: str = GITHUB_ORG,
    project_number: int = GITHUB_PROJECT_NUMBER,
) -> list[dict]:
    """Single-select status-like fields of the project with their options."""
    project = await get_project_fields(client, org, project_number)
    status_fields = [
        {
            "id": field.id,
            "name": field.name,
            "options": [
                {
                    "id": option.id,
                    "name": option.name,
                    "color": option.color or DEFAULT_OPTION_COLOR,
                }
                for option in field.options
            ],
        }
        for field in project.fields
        if is_status_field(field)
    ]
    logger.info("Found %d status fields", len(status_fields))
    return status_fields
