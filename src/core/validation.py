"""
Request input parsing and validation.
"""

import re
from datetime import date, datetime, timezone


def parse_iso_date(value) -> date | None:
    """
    Parse an ISO date or datetime into a calendar day.

    Accepts '2025-08-01', '2025-08-01T10:00:00Z', date and datetime objects.
    Timezone-aware datetimes are converted to UTC first. Returns None for
    empty or unparseable input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    try:
        parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO timestamp into an aware UTC datetime."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_since(since: str | None) -> datetime | None:
    """
    Parse the ``since`` query parameter.

    Raises:
        ValueError: if a value is given but is not an ISO date/datetime
    """
    if not since:
        return None
    parsed = parse_timestamp(since)
    if parsed is None:
        raise ValueError(f"Invalid since date format: {since!r}")
    return parsed


def parse_issue_number(value) -> int:
    """
    Extract an issue number from an event id.

    '#42' and 'acme/roadmap#42' yield 42; otherwise all digits of the value
    are used ('42', 'issue-42', 42).

    Raises:
        ValueError: if no positive number can be extracted
    """
    if value is None or isinstance(value, bool):
        raise ValueError("Issue ID is required")

    text = str(value)
    if "#" in text:
        text = text.split("#", 1)[1]
    digits = re.sub(r"\D", "", text)
    if not digits or int(digits) == 0:
        raise ValueError(f"Invalid issue ID format: {value!r}")
    return int(digits)
