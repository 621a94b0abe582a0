"""Calendar event endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies import github_client
from api.errors import bad_request, upstream_error
from api.models.responses import EventsResponse
from core.config import DEFAULT_SINCE, GITHUB_ORG, GITHUB_PROJECT_NUMBER
from core.github_client import GitHubAPIError, GitHubClient
from core.validation import parse_since
from models.events import CalendarEvent, CalendarView
from services.calendar import get_calendar_events
from services.display import build_calendar_view

router = APIRouter()


async def _load_events(
    request: Request,
    client: GitHubClient,
    org: str | None,
    project: str | None,
    since: str | None,
) -> list[CalendarEvent]:
    """Validate query parameters and fetch events fresh from GitHub."""
    org = org or GITHUB_ORG
    if not org:
        raise bad_request("Organization is required", ["Pass ?org= or set GITHUB_ORG"])

    try:
        project_number = int(project) if project else GITHUB_PROJECT_NUMBER
    except ValueError:
        raise bad_request("Invalid project number", [f"Received: {project}"])

    try:
        since_dt = parse_since(since or DEFAULT_SINCE)
    except ValueError as e:
        raise bad_request("Invalid since date format", [str(e)])

    try:
        events = await get_calendar_events(client, org, project_number, since_dt)
    except GitHubAPIError as e:
        raise upstream_error(e, "fetch calendar events")

    request.state.request_log.event_count = len(events)
    return events


@router.get("/events", response_model=EventsResponse)
async def list_events(
    request: Request,
    org: str | None = None,
    project: str | None = None,
    since: str | None = None,
    client: GitHubClient = Depends(github_client),
):
    """Issues of the project as calendar events."""
    events = await _load_events(request, client, org, project, since)
    return EventsResponse(events=events)


@router.get("/calendar", response_model=CalendarView)
async def calendar_view(
    request: Request,
    org: str | None = None,
    project: str | None = None,
    since: str | None = None,
    assignee: Annotated[list[str], Query()] = [],
    client: GitHubClient = Depends(github_client),
):
    """
    Render-ready calendar entries and assignee statistics.

    Repeat ``assignee`` to filter; ``assignee=unassigned`` selects issues
    without assignees.
    """
    events = await _load_events(request, client, org, project, since)
    return build_calendar_view(events, assignee)
