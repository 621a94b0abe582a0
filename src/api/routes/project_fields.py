"""Project custom field endpoints."""

from fastapi import APIRouter, Depends, status

from api.dependencies import github_client
from api.errors import api_error, bad_request, not_found, upstream_error
from api.models.requests import ProjectFieldsRequest
from api.models.responses import ErrorCodes, ProjectFieldsResponse, StatusFieldsResponse
from core.github_client import GitHubAPIError, GitHubClient
from core.validation import parse_issue_number
from services.project_fields import (
    ProjectFieldError,
    ProjectItemNotFoundError,
    list_status_fields,
    update_project_dates,
)

router = APIRouter()


@router.patch("/project-fields", response_model=ProjectFieldsResponse)
async def patch_project_fields(
    body: ProjectFieldsRequest,
    client: GitHubClient = Depends(github_client),
):
    """Set the project start/due date fields of an issue."""
    if body.issue_number is None or body.issue_number == "":
        raise bad_request("Issue number is required")
    try:
        issue_number = parse_issue_number(body.issue_number)
    except ValueError as e:
        raise bad_request("Invalid issue number", [str(e)])

    try:
        result = await update_project_dates(
            client, issue_number, body.start_date, body.end_date
        )
    except ProjectItemNotFoundError as e:
        raise not_found(str(e))
    except ProjectFieldError as e:
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Project is missing a date field",
            ErrorCodes.INTERNAL_ERROR,
            [str(e)],
        )
    except GitHubAPIError as e:
        raise upstream_error(e, "update project fields")

    return ProjectFieldsResponse(
        updates=[{"field": u.field, "value": u.value} for u in result.updates],
        project_item_id=result.project_item_id,
    )


@router.get("/status-fields", response_model=StatusFieldsResponse)
async def get_status_fields(client: GitHubClient = Depends(github_client)):
    try:
        fields = await list_status_fields(client)
    except ProjectItemNotFoundError as e:
        raise not_found(str(e))
    except GitHubAPIError as e:
        raise upstream_error(e, "fetch project status fields")
    return StatusFieldsResponse(status_fields=fields, count=len(fields))
