#!/usr/bin/env python3
"""
List project issues as calendar entries, in display order.

Usage:
    uv run python src/scripts/list_calendar_events.py --org acme --project 7
    uv run python src/scripts/list_calendar_events.py --assignee alice --assignee unassigned
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DEFAULT_SINCE, GITHUB_ORG, GITHUB_PROJECT_NUMBER
from core.github_client import close_github_client, get_github_client
from core.validation import parse_since
from services.calendar import get_calendar_events
from services.dashboard import CalendarDashboard


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--org", default=GITHUB_ORG, help="GitHub organization")
    parser.add_argument(
        "--project", type=int, default=GITHUB_PROJECT_NUMBER, help="Project number"
    )
    parser.add_argument("--since", default=DEFAULT_SINCE, help="Created on/after (YYYY-MM-DD)")
    parser.add_argument(
        "--assignee",
        action="append",
        default=[],
        help="Only show this assignee (repeatable; 'unassigned' for none)",
    )
    return parser.parse_args()


async def main():
    """Fetch events and print the calendar in display order."""
    args = parse_args()
    if not args.org:
        print("No organization given (use --org or set GITHUB_ORG)")
        return 1

    try:
        since = parse_since(args.since)
    except ValueError as e:
        print(e)
        return 1

    client = get_github_client()
    dashboard = CalendarDashboard(
        lambda: get_calendar_events(client, args.org, args.project, since)
    )
    for login in args.assignee:
        dashboard.toggle_assignee(login)

    print(f"Fetching issues from {args.org} project {args.project}...\n")
    try:
        ok = await dashboard.refresh()
    finally:
        await close_github_client()

    if not ok:
        print(f"Error: {dashboard.error}")
        return 1

    view = dashboard.view()
    print(f"Found {len(dashboard.events)} issues")
    if dashboard.selected_assignees:
        print(f"Showing issues for: {dashboard.describe_filters()}")
    print("=" * 80)

    for entry in view.entries:
        end = entry.end.isoformat() if entry.end else "          "
        props = entry.extended_props
        status = props.project_status or props.status
        print(
            f"{entry.start.isoformat()} -> {end}  "
            f"#{props.original_id:<6} {props.primary_assignee:<16} [{status}] {entry.title}"
        )

    print("-" * 80)
    for stat in view.assignee_stats:
        print(f"  {stat.login:<16} {stat.count:>3} issue(s)  {stat.color.background}")

    print("\nDone!")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
