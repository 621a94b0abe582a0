"""
Issue creation and updates, keeping body annotations and project fields in sync.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date

from core.config import FIELD_SYNC_DELAY_SECONDS, GITHUB_REPO, GITHUB_REPO_OWNER
from core.github_client import GitHubAPIError, GitHubClient
from models.github import Issue
from services.dates import apply_date_annotations, format_date_annotations, parse_body_dates
from services.project_fields import (
    ProjectFieldError,
    ProjectItemNotFoundError,
    update_project_dates,
)

logger = logging.getLogger(__name__)


@dataclass
class IssueDraft:
    """Fields of a new issue."""

    title: str
    labels: list[str] = field(default_factory=list)
    assignees: list[str] = field(default_factory=list)
    start_date: date | None = None
    end_date: date | None = None


@dataclass
class IssueChanges:
    """Partial update; None means 'leave unchanged'."""

    title: str | None = None
    labels: list[str] | None = None
    assignees: list[str] | None = None
    state: str | None = None
    start_date: date | None = None
    end_date: date | None = None


@dataclass
class IssueResult:
    issue: Issue
    warnings: list[str] = field(default_factory=list)


async def sync_project_dates(
    client: GitHubClient,
    issue_number: int,
    start: date | None,
    end: date | None,
    delay: float = FIELD_SYNC_DELAY_SECONDS,
) -> str | None:
    """
    Best-effort write of the project date fields of an issue.

    Waits ``delay`` seconds first so GitHub has linked the issue to the
    project. Returns a warning message on failure instead of raising.
    """
    if delay > 0:
        await asyncio.sleep(delay)
    try:
        await update_project_dates(client, issue_number, start, end)
    except (GitHubAPIError, ProjectItemNotFoundError, ProjectFieldError) as e:
        logger.warning(
            "Project date fields not updated for issue #%d: %s", issue_number, e
        )
        return f"Project date fields not updated: {e}"
    return None


async def create_issue(
    client: GitHubClient,
    draft: IssueDraft,
    owner: str = GITHUB_REPO_OWNER,
    repo: str = GITHUB_REPO,
    field_sync_delay: float = FIELD_SYNC_DELAY_SECONDS,
) -> IssueResult:
    """
    Create an issue with its dates annotated in the body.

    When dates are given, the project's custom date fields are also set; a
    failure there is reported in ``warnings`` and never fails the create.

    Raises:
        GitHubAPIError: if the issue itself could not be created
    """
    issue: Issue = await client.request(
        "POST",
        f"/repos/{owner}/{repo}/issues",
        json={
            "title": draft.title,
            "body": format_date_annotations(draft.start_date, draft.end_date),
            "labels": draft.labels,
            "assignees": draft.assignees,
        },
        schema=Issue,
    )
    logger.info("Created issue #%d in %s/%s", issue.number, owner, repo)

    result = IssueResult(issue=issue)
    if draft.start_date or draft.end_date:
        warning = await sync_project_dates(
            client, issue.number, draft.start_date, draft.end_date, delay=field_sync_delay
        )
        if warning:
            result.warnings.append(warning)
    return result


async def update_issue(
    client: GitHubClient,
    issue_number: int,
    changes: IssueChanges,
    owner: str = GITHUB_REPO_OWNER,
    repo: str = GITHUB_REPO,
) -> IssueResult:
    """
    Update an issue in a single PATCH.

    The current body is re-read so existing text survives. A supplied date
    replaces its annotation; an omitted one keeps what the body already
    says, so a date cannot be removed through an update. Supplied dates are
    also written to the project's date fields, which take precedence over
    the body when events are read; a failure there is reported in
    ``warnings``. No conflict detection: the last write wins.

    Raises:
        GitHubAPIError: if the issue could not be read or updated
    """
    current: Issue = await client.request(
        "GET", f"/repos/{owner}/{repo}/issues/{issue_number}", schema=Issue
    )

    body = current.body
    if changes.start_date or changes.end_date:
        existing_start, existing_end = parse_body_dates(body)
        body = apply_date_annotations(
            body,
            changes.start_date or existing_start,
            changes.end_date or existing_end,
        )

    payload: dict = {"body": body}
    if changes.title:
        payload["title"] = changes.title
    if changes.labels is not None:
        payload["labels"] = changes.labels
    if changes.assignees is not None:
        payload["assignees"] = changes.assignees
    if changes.state:
        payload["state"] = changes.state

    issue: Issue = await client.request(
        "PATCH",
        f"/repos/{owner}/{repo}/issues/{issue_number}",
        json=payload,
        schema=Issue,
    )
    logger.info("Updated issue #%d in %s/%s", issue.number, owner, repo)

    result = IssueResult(issue=issue)
    if changes.start_date or changes.end_date:
        warning = await sync_project_dates(
            client, issue.number, changes.start_date, changes.end_date, delay=0
        )
        if warning:
            result.warnings.append(warning)
    return result
