"""API Pydantic models."""

from .requests import CreateIssueRequest, ProjectFieldsRequest, UpdateIssueRequest
from .responses import ErrorCodes, ErrorResponse, HealthResponse

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "CreateIssueRequest",
    "UpdateIssueRequest",
    "ProjectFieldsRequest",
]
