"""Pydantic request bodies for the issue endpoints."""

from datetime import date
from typing import Literal

from pydantic import field_validator

from core.validation import parse_iso_date
from models.events import CamelModel


def _parse_optional_date(value):
    if value is None or value == "":
        return None
    parsed = parse_iso_date(value)
    if parsed is None:
        raise ValueError(f"Invalid date: {value!r}")
    return parsed


def _names_as_objects(value, key: str):
    # Accept ["bug"] as well as [{"name": "bug", ...}]
    if not isinstance(value, list):
        return value
    return [{key: item} if isinstance(item, str) else item for item in value]


class LabelInput(CamelModel):
    name: str
    color: str = ""


class AssigneeInput(CamelModel):
    login: str
    avatar_url: str = ""


class _DatedRequest(CamelModel):
    start_date: date | None = None
    end_date: date | None = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _dates(cls, value):
        return _parse_optional_date(value)


class CreateIssueRequest(_DatedRequest):
    title: str | None = None
    labels: list[LabelInput] = []
    assignees: list[AssigneeInput] = []

    # null is an empty list here; on update it means "leave unchanged"
    @field_validator("labels", mode="before")
    @classmethod
    def _label_names(cls, value):
        return _names_as_objects(value if value is not None else [], "name")

    @field_validator("assignees", mode="before")
    @classmethod
    def _assignee_logins(cls, value):
        return _names_as_objects(value if value is not None else [], "login")


class UpdateIssueRequest(_DatedRequest):
    id: str | int | None = None
    title: str | None = None
    labels: list[LabelInput] | None = None
    assignees: list[AssigneeInput] | None = None
    status: Literal["open", "closed"] | None = None

    @field_validator("labels", mode="before")
    @classmethod
    def _label_names(cls, value):
        return _names_as_objects(value, "name")

    @field_validator("assignees", mode="before")
    @classmethod
    def _assignee_logins(cls, value):
        return _names_as_objects(value, "login")


class ProjectFieldsRequest(_DatedRequest):
    issue_number: str | int | None = None
