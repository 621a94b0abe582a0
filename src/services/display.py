"""
Calendar presentation: assignee colors, filtering, ordering and entries.
"""

from collections.abc import Iterable

from core.config import UNASSIGNED
from models.events import (
    AssigneeStat,
    CalendarEntry,
    CalendarEvent,
    CalendarView,
    ColorPair,
    EntryProps,
)

ASSIGNEE_PALETTE = (
    ColorPair(background="#3b82f6", border="#1d4ed8"),  # Blue
    ColorPair(background="#10b981", border="#047857"),  # Green
    ColorPair(background="#f59e0b", border="#d97706"),  # Amber
    ColorPair(background="#ef4444", border="#dc2626"),  # Red
    ColorPair(background="#8b5cf6", border="#7c3aed"),  # Purple
    ColorPair(background="#06b6d4", border="#0891b2"),  # Cyan
    ColorPair(background="#ec4899", border="#db2777"),  # Pink
    ColorPair(background="#84cc16", border="#65a30d"),  # Lime
    ColorPair(background="#f97316", border="#ea580c"),  # Orange
    ColorPair(background="#6366f1", border="#4f46e5"),  # Indigo
)
UNASSIGNED_COLOR = ColorPair(background="#6b7280", border="#4b5563")

COMPLETED_ALPHA = "80"  # 50% opacity suffix for closed issues
TEXT_COLOR = "#ffffff"


def assign_colors(events: Iterable[CalendarEvent]) -> dict[str, ColorPair]:
    """
    Map each assignee login to a palette color in first-seen order.

    Wraps around the palette once it is exhausted. A login keeps the color it
    was first given for the rest of the pass.
    """
    colors: dict[str, ColorPair] = {}
    for event in events:
        for assignee in event.assignees:
            if assignee.login not in colors:
                colors[assignee.login] = ASSIGNEE_PALETTE[len(colors) % len(ASSIGNEE_PALETTE)]
    return colors


def event_color(event: CalendarEvent, colors: dict[str, ColorPair]) -> ColorPair:
    """Color of the event's primary assignee, gray when unassigned."""
    if not event.assignees:
        return UNASSIGNED_COLOR
    return colors.get(event.assignees[0].login, UNASSIGNED_COLOR)


def filter_events(
    events: Iterable[CalendarEvent], selected: Iterable[str]
) -> list[CalendarEvent]:
    """
    Keep events matching the selected assignee logins.

    An empty selection keeps everything. The special login "unassigned"
    selects events without assignees.
    """
    selected = set(selected)
    events = list(events)
    if not selected:
        return events

    kept = []
    for event in events:
        if not event.assignees:
            if UNASSIGNED in selected:
                kept.append(event)
        elif any(assignee.login in selected for assignee in event.assignees):
            kept.append(event)
    return kept


def primary_assignee(event: CalendarEvent) -> str | None:
    return event.assignees[0].login.lower() if event.assignees else None


def sort_key(event: CalendarEvent) -> tuple[int, str]:
    # Unassigned events come after every login
    login = primary_assignee(event)
    return (1, "") if login is None else (0, login)


def sort_events(events: Iterable[CalendarEvent]) -> list[CalendarEvent]:
    """Stable sort by lowercased primary assignee, unassigned last."""
    return sorted(events, key=sort_key)


def _repository(url: str) -> str:
    """'https://github.com/acme/roadmap/issues/1' -> 'acme/roadmap'."""
    return "/".join(url.split("/")[3:5])


def to_calendar_entry(
    event: CalendarEvent, colors: dict[str, ColorPair], order: int
) -> CalendarEntry:
    color = event_color(event, colors)
    is_completed = event.status == "closed"
    background, border, text = color.background, color.border, TEXT_COLOR
    if is_completed:
        background += COMPLETED_ALPHA
        border += COMPLETED_ALPHA
        text += COMPLETED_ALPHA

    has_end = event.end_date is not None
    return CalendarEntry(
        id=event.id if has_end else f"{event.id}-single",
        title=event.title,
        start=event.start_date,
        end=event.end_date,
        all_day=not has_end,
        url=event.url,
        background_color=background,
        border_color=border,
        text_color=text,
        order=order,
        extended_props=EntryProps(
            labels=event.labels,
            assignees=event.assignees,
            status=event.status,
            project_status=event.project_status,
            repository=_repository(event.url),
            primary_assignee=primary_assignee(event) or UNASSIGNED,
            is_completed=is_completed,
            original_id=event.id,
        ),
    )


def build_entries(
    events: list[CalendarEvent], selected: Iterable[str] = ()
) -> list[CalendarEntry]:
    """
    Filter, order and color events for rendering.

    Colors come from the unfiltered event list so they stay put while the
    selection changes. Each entry carries its explicit display ``order``.
    """
    colors = assign_colors(events)
    ordered = sort_events(filter_events(events, selected))
    return [to_calendar_entry(event, colors, index) for index, event in enumerate(ordered)]


def assignee_stats(events: list[CalendarEvent]) -> list[AssigneeStat]:
    """Event count per assignee, busiest first, with unassigned at the end."""
    colors = assign_colors(events)
    stats: dict[str, AssigneeStat] = {}
    unassigned = 0

    for event in events:
        if not event.assignees:
            unassigned += 1
            continue
        for assignee in event.assignees:
            if assignee.login in stats:
                stats[assignee.login].count += 1
            else:
                stats[assignee.login] = AssigneeStat(
                    login=assignee.login,
                    avatar_url=assignee.avatar_url,
                    count=1,
                    color=colors[assignee.login],
                )

    ordered = sorted(stats.values(), key=lambda stat: -stat.count)
    if unassigned:
        ordered.append(
            AssigneeStat(login=UNASSIGNED, count=unassigned, color=UNASSIGNED_COLOR)
        )
    return ordered


def build_calendar_view(
    events: list[CalendarEvent], selected: Iterable[str] = ()
) -> CalendarView:
    return CalendarView(
        entries=build_entries(events, selected),
        assignee_stats=assignee_stats(events),
    )
