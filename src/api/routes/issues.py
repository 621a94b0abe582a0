"""Issue create/update endpoints."""

from fastapi import APIRouter, Depends, Request

from api.dependencies import github_client
from api.errors import bad_request, upstream_error
from api.models.requests import CreateIssueRequest, UpdateIssueRequest
from api.models.responses import IssueResponse, IssueSummary
from core.config import FIELD_SYNC_DELAY_SECONDS
from core.github_client import GitHubAPIError, GitHubClient
from core.validation import parse_issue_number
from models.github import Issue
from services.issues import IssueChanges, IssueDraft, create_issue, update_issue

router = APIRouter()


def _summary(issue: Issue) -> IssueSummary:
    return IssueSummary(
        id=str(issue.id),
        number=issue.number,
        title=issue.title,
        url=issue.html_url,
        status=issue.state,
        body=issue.body,
    )


@router.post("/issues", response_model=IssueResponse)
async def post_issue(
    request: Request,
    body: CreateIssueRequest,
    client: GitHubClient = Depends(github_client),
):
    """
    Create an issue.

    Dates go into the body annotation and, after a short delay, into the
    project's date fields. Field sync failures come back as ``warnings``.
    """
    if not body.title or not body.title.strip():
        raise bad_request("Title is required")

    draft = IssueDraft(
        title=body.title.strip(),
        labels=[label.name for label in body.labels],
        assignees=[assignee.login for assignee in body.assignees],
        start_date=body.start_date,
        end_date=body.end_date,
    )
    try:
        result = await create_issue(client, draft, field_sync_delay=FIELD_SYNC_DELAY_SECONDS)
    except GitHubAPIError as e:
        raise upstream_error(e, "create issue")

    for warning in result.warnings:
        request.state.request_log.details.append(("warning", warning))
    return IssueResponse(issue=_summary(result.issue), warnings=result.warnings)


@router.patch("/issues", response_model=IssueResponse)
async def patch_issue(
    request: Request,
    body: UpdateIssueRequest,
    client: GitHubClient = Depends(github_client),
):
    """
    Update title, labels, assignees, state and dates of an issue.

    Supplied dates are also written to the project's date fields; failures
    there come back as ``warnings``.
    """
    if body.id is None or body.id == "":
        raise bad_request("Issue ID is required")
    try:
        issue_number = parse_issue_number(body.id)
    except ValueError as e:
        raise bad_request("Invalid issue ID format", [str(e)])

    changes = IssueChanges(
        title=body.title,
        labels=[label.name for label in body.labels] if body.labels is not None else None,
        assignees=(
            [assignee.login for assignee in body.assignees]
            if body.assignees is not None
            else None
        ),
        state=body.status,
        start_date=body.start_date,
        end_date=body.end_date,
    )
    try:
        result = await update_issue(client, issue_number, changes)
    except GitHubAPIError as e:
        raise upstream_error(e, "update issue")

    for warning in result.warnings:
        request.state.request_log.details.append(("warning", warning))
    return IssueResponse(issue=_summary(result.issue), warnings=result.warnings)
