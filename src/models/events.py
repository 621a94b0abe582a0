"""
Data models for calendar events and their rendered form.

Serialized with camelCase keys, which is what the calendar UI consumes.
"""

from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model accepting snake_case or camelCase, emitting camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Label(CamelModel):
    name: str
    color: str  # "#rrggbb"


class Assignee(CamelModel):
    login: str
    avatar_url: str = ""


class ExtractedDates(CamelModel):
    """Normalized timeline of one tracker item."""

    start_date: date
    end_date: date | None = None


class CalendarEvent(CamelModel):
    """One issue placed on the calendar."""

    id: str  # issue number, used for write-back
    title: str
    start_date: date
    end_date: date | None = None
    url: str
    labels: list[Label] = []
    assignees: list[Assignee] = []
    status: Literal["open", "closed"] = "open"
    project_status: str | None = None


class ColorPair(CamelModel):
    background: str
    border: str


class EntryProps(CamelModel):
    labels: list[Label] = []
    assignees: list[Assignee] = []
    status: Literal["open", "closed"] = "open"
    project_status: str | None = None
    repository: str = ""
    primary_assignee: str | None = None
    is_completed: bool = False
    original_id: str


class CalendarEntry(CamelModel):
    """Render-ready calendar event with colors and an explicit display order."""

    id: str
    title: str
    start: date
    end: date | None = None
    all_day: bool
    url: str
    background_color: str
    border_color: str
    text_color: str
    order: int
    extended_props: EntryProps


class AssigneeStat(CamelModel):
    """Per-assignee event count for the filter panel."""

    login: str
    avatar_url: str = ""
    count: int
    color: ColorPair


class CalendarView(CamelModel):
    entries: list[CalendarEntry] = []
    assignee_stats: list[AssigneeStat] = []
