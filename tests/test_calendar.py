"""Tests for fetching project items and building calendar events."""

import asyncio
from datetime import date, datetime, timezone

import pytest

from core.github_client import GitHubAuthError
from services.calendar import (
    fetch_project_items,
    fetch_project_items_graphql,
    get_calendar_events,
    transform_to_calendar_events,
)


def test_events_from_project_fields_body_and_fallbacks(fake_github, github):
    with_fields = fake_github.add_issue("Fields", assignees=["alice"], labels=["bug"])
    fake_github.field_values[with_fields] = {"Start Date": "2025-08-01", "Due Date": "2025-08-05"}
    fake_github.statuses[with_fields] = "In Progress"
    fake_github.add_issue(
        "Body",
        body="**Start Date:** Aug 3 (2025-08-03)\n**End Date:** Aug 4 (2025-08-04)\n",
    )
    fake_github.add_issue(
        "Fallbacks", created_at="2025-08-12T09:00:00Z", milestone_due="2025-09-30T07:00:00Z"
    )

    events = asyncio.run(get_calendar_events(github, "acme", 7))

    by_title = {event.title: event for event in events}
    assert set(by_title) == {"Fields", "Body", "Fallbacks"}

    fields = by_title["Fields"]
    assert fields.id == str(with_fields)
    assert (fields.start_date, fields.end_date) == (date(2025, 8, 1), date(2025, 8, 5))
    assert fields.labels[0].model_dump() == {"name": "bug", "color": "#ededed"}
    assert fields.assignees[0].login == "alice"
    assert fields.project_status == "In Progress"
    assert fields.url == f"https://github.com/acme/roadmap/issues/{with_fields}"

    assert (by_title["Body"].start_date, by_title["Body"].end_date) == (
        date(2025, 8, 3),
        date(2025, 8, 4),
    )
    assert (by_title["Fallbacks"].start_date, by_title["Fallbacks"].end_date) == (
        date(2025, 8, 12),
        date(2025, 9, 30),
    )


def test_closed_state_is_lowercased(fake_github, github):
    fake_github.add_issue("Done", state="closed")

    (event,) = asyncio.run(get_calendar_events(github, "acme", 7))

    assert event.status == "closed"


def test_paginates_and_skips_non_issue_items(fake_github, github):
    fake_github.page_size = 2
    for index in range(5):
        fake_github.add_issue(f"Issue {index}")

    items = asyncio.run(fetch_project_items_graphql(github, "acme", 7, None))

    assert [item.content.title for item in items] == [f"Issue {index}" for index in range(5)]
    graphql_calls = [path for _, path, _ in fake_github.requests if path == "/graphql"]
    assert len(graphql_calls) == 3


def test_since_filters_by_creation(fake_github, github):
    fake_github.add_issue("Old", created_at="2025-07-31T23:59:59Z")
    fake_github.add_issue("New", created_at="2025-08-01T00:00:00Z")

    since = datetime(2025, 8, 1, tzinfo=timezone.utc)
    items = asyncio.run(fetch_project_items_graphql(github, "acme", 7, since))

    assert [item.content.title for item in items] == ["New"]


def test_required_label_filter(fake_github, github):
    fake_github.add_issue("Tagged", labels=["area: devrel"])
    fake_github.add_issue("Untagged")

    items = asyncio.run(
        fetch_project_items_graphql(github, "acme", 7, None, required_label="area: devrel")
    )

    assert [item.content.title for item in items] == ["Tagged"]


def test_falls_back_to_search_when_project_missing(fake_github, github):
    fake_github.add_issue("Unlinked", linked=False)

    events = asyncio.run(get_calendar_events(github, "acme", 404))

    assert [event.title for event in events] == ["Unlinked"]
    assert any(path == "/search/issues" for _, path, _ in fake_github.requests)


def test_falls_back_to_search_on_graphql_errors(fake_github, github):
    fake_github.failures["items"] = "graphql"
    fake_github.add_issue("Found by search", body="**Start Date:** x (2025-08-02)")

    (event,) = asyncio.run(get_calendar_events(github, "acme", 7))

    assert event.start_date == date(2025, 8, 2)
    assert event.project_status is None


def test_auth_failure_is_not_masked_by_fallback(fake_github, github):
    fake_github.failures["items"] = 401

    with pytest.raises(GitHubAuthError):
        asyncio.run(fetch_project_items(github, "acme", 7))
    assert not any(path == "/search/issues" for _, path, _ in fake_github.requests)


def test_transform_drops_items_without_start(make_item):
    items = [make_item(number=1), make_item(number=2, created_at=None)]

    events = transform_to_calendar_events(items)

    assert [event.id for event in events] == ["1"]


def test_transform_normalizes_label_colors(make_item):
    item = make_item(labels=[("bug", "d73a4a"), ("hex", "#00ff00")])

    (event,) = transform_to_calendar_events([item])

    assert [label.color for label in event.labels] == ["#d73a4a", "#00ff00"]
