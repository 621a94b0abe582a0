"""
In-memory calendar state with an explicit refresh.

Holds the last fetched events and the assignee selection for one viewer.
Refreshing re-fetches from GitHub and replaces the events wholesale.
"""

import logging
from collections.abc import Awaitable, Callable

from core.config import UNASSIGNED
from core.github_client import AUTH_ERROR_MESSAGE, GitHubAPIError, GitHubAuthError
from models.events import CalendarEvent, CalendarView
from services.display import build_calendar_view

logger = logging.getLogger(__name__)

EventLoader = Callable[[], Awaitable[list[CalendarEvent]]]


class CalendarDashboard:
    def __init__(self, load_events: EventLoader):
        self._load_events = load_events
        self.events: list[CalendarEvent] = []
        self.selected_assignees: list[str] = []
        self.error: str | None = None
        self.loading = False

    async def refresh(self) -> bool:
        """
        Re-fetch events, replacing the current ones.

        On failure the previous events are kept and ``error`` holds a message
        the viewer can retry from. Returns True on success.
        """
        self.loading = True
        try:
            events = await self._load_events()
        except GitHubAuthError as e:
            logger.error("Refresh failed: %s", e)
            self.error = AUTH_ERROR_MESSAGE
            return False
        except GitHubAPIError as e:
            logger.error("Refresh failed: %s", e)
            self.error = f"Failed to fetch events: {e}"
            return False
        finally:
            self.loading = False

        self.events = events
        self.error = None
        return True

    def toggle_assignee(self, login: str) -> None:
        if login in self.selected_assignees:
            self.selected_assignees.remove(login)
        else:
            self.selected_assignees.append(login)

    def clear_filters(self) -> None:
        self.selected_assignees = []

    def describe_filters(self) -> str:
        names = ["Unassigned" if login == UNASSIGNED else login for login in self.selected_assignees]
        return ", ".join(names)

    def view(self) -> CalendarView:
        return build_calendar_view(self.events, self.selected_assignees)
