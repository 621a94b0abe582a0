"""Pydantic response models for API endpoints."""

from typing import Literal

from pydantic import BaseModel

from models.events import CalendarEvent, CamelModel


class HealthResponse(CamelModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    token_configured: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class EventsResponse(CamelModel):
    events: list[CalendarEvent]


class IssueSummary(CamelModel):
    id: str
    number: int
    title: str
    url: str
    status: Literal["open", "closed"]
    body: str = ""


class IssueResponse(CamelModel):
    success: bool = True
    issue: IssueSummary
    warnings: list[str] = []


class LabelInfo(CamelModel):
    name: str
    color: str
    description: str = ""


class LabelsResponse(CamelModel):
    labels: list[LabelInfo]
    count: int


class FieldUpdateInfo(CamelModel):
    field: str
    value: str


class ProjectFieldsResponse(CamelModel):
    success: bool = True
    updates: list[FieldUpdateInfo]
    project_item_id: str


class StatusOption(CamelModel):
    id: str
    name: str
    color: str


class StatusField(CamelModel):
    id: str
    name: str
    options: list[StatusOption]


class StatusFieldsResponse(CamelModel):
    status_fields: list[StatusField]
    count: int
