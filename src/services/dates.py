"""
Timeline extraction from project items and issue body date annotations.

Issues created through the dashboard carry their dates at the top of the body:

    **Start Date:** August 1, 2025 (2025-08-01)
    **End Date:** August 5, 2025 (2025-08-05)

    ---

The parenthesized ISO date is the machine-readable part.
"""

import re
from datetime import date

from core.validation import parse_iso_date, parse_timestamp
from models.events import ExtractedDates
from models.github import ProjectItem

START_ANNOTATION = re.compile(r"\*\*Start Date:\*\*.*?\(([^)]+)\)")
END_ANNOTATION = re.compile(r"\*\*End Date:\*\*.*?\(([^)]+)\)")
ANNOTATION_LINE = re.compile(r"^\*\*(?:Start|End) Date:\*\*.*(?:\n|$)", re.MULTILINE)
LEADING_SEPARATOR = re.compile(r"\A\s*---[ \t]*(?:\n[ \t]*\n?|$)")
SEPARATOR = "\n---\n\n"


def format_human_date(value: date) -> str:
    """Format a date as e.g. 'August 1, 2025'."""
    return f"{value.strftime('%B')} {value.day}, {value.year}"


def format_date_annotations(start: date | None, end: date | None) -> str:
    """Render the date annotation block, or '' when there are no dates."""
    lines = ""
    if start:
        lines += f"**Start Date:** {format_human_date(start)} ({start.isoformat()})\n"
    if end:
        lines += f"**End Date:** {format_human_date(end)} ({end.isoformat()})\n"
    if lines:
        lines += SEPARATOR
    return lines


def parse_body_dates(body: str | None) -> tuple[date | None, date | None]:
    """Find annotated start/end dates in an issue body."""
    body = body or ""
    start = end = None

    start_match = START_ANNOTATION.search(body)
    if start_match:
        start = parse_iso_date(start_match.group(1))

    end_match = END_ANNOTATION.search(body)
    if end_match:
        end = parse_iso_date(end_match.group(1))

    return start, end


def strip_date_annotations(body: str | None) -> str:
    """Remove annotation lines and the separator block they leave at the top."""
    stripped, removed = ANNOTATION_LINE.subn("", body or "")
    if removed:
        stripped = LEADING_SEPARATOR.sub("", stripped, count=1)
    return stripped


def apply_date_annotations(body: str | None, start: date | None, end: date | None) -> str:
    """Replace any existing annotations with fresh ones for start/end."""
    return format_date_annotations(start, end) + strip_date_annotations(body)


def scan_field_dates(item: ProjectItem) -> tuple[date | None, date | None]:
    """
    Read start/end dates from a project item's custom fields.

    Fields are scanned in the order GitHub returns them; when several fields
    match, the last one scanned wins.
    """
    start = end = None
    for value in item.field_values:
        parsed = parse_iso_date(value.date)
        if parsed is None:
            continue
        name = value.field_name.lower()
        if "start" in name:
            start = parsed
        elif "end" in name or "due" in name:
            end = parsed
    return start, end


def extract_dates(item: ProjectItem) -> ExtractedDates | None:
    """
    Resolve the start/end dates of a project item.

    Priority per date: custom project field, body annotation, then the
    creation day (start) or the milestone due day (end). Returns None when no
    start date can be resolved.
    """
    issue = item.content
    if issue is None:
        return None

    start, end = scan_field_dates(item)

    if start is None or end is None:
        body_start, body_end = parse_body_dates(issue.body)
        start = start or body_start
        end = end or body_end

    if start is None:
        created = parse_timestamp(issue.created_at)
        start = created.date() if created else None

    if end is None and issue.milestone and issue.milestone.due_on:
        end = parse_iso_date(issue.milestone.due_on)

    if start is None:
        return None
    return ExtractedDates(start_date=start, end_date=end)
