"""
Pytest configuration and shared fixtures.
"""

import json
import os
import sys
from pathlib import Path

import httpx
import pytest

# Test configuration must be in place before core.config is imported
os.environ.update(
    {
        "GITHUB_TOKEN": "test-token",
        "GITHUB_ORG": "acme",
        "GITHUB_REPO_OWNER": "",
        "GITHUB_REPO": "roadmap",
        "GITHUB_PROJECT_NUMBER": "7",
        "GITHUB_REQUIRED_LABEL": "",
        "DEFAULT_SINCE": "",
        "PROJECT_START_FIELD_ID": "",
        "PROJECT_END_FIELD_ID": "",
        "FIELD_SYNC_DELAY_SECONDS": "0",
    }
)

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.github_client import GitHubClient  # noqa: E402
from models.events import Assignee, CalendarEvent  # noqa: E402
from models.github import ProjectItem  # noqa: E402

PROJECT_ID = "PVT_project7"
PROJECT_FIELDS = [
    {"id": "PVTF_start", "name": "Start Date", "dataType": "DATE"},
    {"id": "PVTF_due", "name": "Due Date", "dataType": "DATE"},
    {"id": "PVTF_title", "name": "Title", "dataType": "TITLE"},
    {
        "id": "PVTSSF_status",
        "name": "Status",
        "dataType": "SINGLE_SELECT",
        "options": [
            {"id": "opt_todo", "name": "Todo", "color": "GRAY"},
            {"id": "opt_doing", "name": "In Progress", "color": None},
        ],
    },
    {},  # iteration field: no fragment matched
]


class FakeGitHub:
    """
    In-memory GitHub serving the REST and GraphQL calls the app makes.

    ``failures`` maps an operation name (items, lookup, fields, mutation,
    create, get, update, labels, search) to an HTTP status, or to "graphql"
    for a 200 response carrying GraphQL errors.
    """

    def __init__(self, org="acme", repo="roadmap", project_number=7):
        self.org = org
        self.repo = repo
        self.project_number = project_number
        self.issues: dict[int, dict] = {}
        self.field_values: dict[int, dict[str, str]] = {}
        self.statuses: dict[int, str] = {}
        self.linked: set[int] = set()
        self.labels = [
            {"id": 1, "name": "bug", "color": "d73a4a", "description": "Something is broken"},
            {"id": 2, "name": "docs", "color": "0075ca", "description": None},
        ]
        self.failures: dict[str, int | str] = {}
        self.requests: list[tuple[str, str, dict | None]] = []
        self.page_size = 100
        self._next_number = 1

    # -- fixtures -------------------------------------------------------------

    def add_issue(
        self,
        title,
        body="",
        created_at="2025-08-10T12:00:00Z",
        assignees=(),
        labels=(),
        milestone_due=None,
        state="open",
        linked=True,
    ) -> int:
        number = self._next_number
        self._next_number += 1
        self.issues[number] = {
            "id": 1000 + number,
            "number": number,
            "title": title,
            "body": body,
            "state": state,
            "created_at": created_at,
            "updated_at": created_at,
            "closed_at": None,
            "url": f"https://api.github.com/repos/{self.org}/{self.repo}/issues/{number}",
            "html_url": f"https://github.com/{self.org}/{self.repo}/issues/{number}",
            "user": {"login": "octocat", "avatar_url": "https://avatars/octocat"},
            "labels": [
                {"id": index, "name": name, "color": "ededed", "description": None}
                for index, name in enumerate(labels)
            ],
            "assignees": [
                {"login": login, "avatar_url": f"https://avatars/{login}"}
                for login in assignees
            ],
            "milestone": (
                {"title": "M1", "description": None, "due_on": milestone_due}
                if milestone_due
                else None
            ),
        }
        if linked:
            self.linked.add(number)
        return number

    # -- transport --------------------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content) if request.content else None
        self.requests.append((request.method, request.url.path, payload))

        if request.url.path == "/graphql":
            return self._graphql(payload)
        return self._rest(request, payload)

    def _fail(self, operation):
        failure = self.failures.get(operation)
        if failure is None:
            return None
        if failure == "graphql":
            return httpx.Response(200, json={"data": None, "errors": [{"message": f"{operation} broke"}]})
        return httpx.Response(failure, json={"message": f"{operation} failed"})

    def _serve(self, operation, build):
        failure = self._fail(operation)
        return failure if failure is not None else build()

    def _rest(self, request, payload):
        base = f"/repos/{self.org}/{self.repo}"
        path = request.url.path

        if path == f"{base}/issues" and request.method == "POST":
            return self._serve("create", lambda: self._create(payload))
        if path.startswith(f"{base}/issues/"):
            number = int(path.rsplit("/", 1)[1])
            operation = "get" if request.method == "GET" else "update"
            failure = self._fail(operation)
            if failure is not None:
                return failure
            if number not in self.issues:
                return httpx.Response(404, json={"message": "Not Found"})
            if request.method == "PATCH":
                self._update(number, payload)
            return httpx.Response(200, json=self.issues[number])
        if path == f"{base}/labels":
            return self._serve("labels", lambda: httpx.Response(200, json=self.labels))
        if path == "/search/issues":
            return self._serve("search", lambda: self._search(request))
        return httpx.Response(404, json={"message": "Not Found"})

    def _create(self, payload):
        number = self.add_issue(
            payload["title"],
            body=payload.get("body", ""),
            assignees=payload.get("assignees", []),
            labels=payload.get("labels", []),
        )
        return httpx.Response(201, json=self.issues[number])

    def _update(self, number, payload):
        issue = self.issues[number]
        for key in ("title", "body", "state"):
            if key in payload:
                issue[key] = payload[key]
        if "labels" in payload:
            issue["labels"] = [
                {"id": index, "name": name, "color": "ededed", "description": None}
                for index, name in enumerate(payload["labels"])
            ]
        if "assignees" in payload:
            issue["assignees"] = [
                {"login": login, "avatar_url": f"https://avatars/{login}"}
                for login in payload["assignees"]
            ]

    def _search(self, request):
        query = request.url.params["q"]
        page = int(request.url.params.get("page", 1))
        per_page = int(request.url.params.get("per_page", 30))
        issues = list(self.issues.values())
        if 'label:"' in query:
            wanted = query.split('label:"', 1)[1].split('"', 1)[0]
            issues = [i for i in issues if any(label["name"] == wanted for label in i["labels"])]
        chunk = issues[(page - 1) * per_page : page * per_page]
        return httpx.Response(200, json={"total_count": len(issues), "items": chunk})

    def _graphql(self, payload):
        query, variables = payload["query"], payload["variables"]
        if "updateProjectV2ItemFieldValue" in query:
            return self._serve("mutation", lambda: self._mutation(variables))
        if "projectItems" in query:
            return self._serve("lookup", lambda: self._lookup(variables))
        if "items(first" in query:
            return self._serve("items", lambda: self._items(variables))
        if "fields(first" in query:
            return self._serve("fields", lambda: self._fields(variables))
        return httpx.Response(200, json={"errors": [{"message": "unknown query"}]})

    def _is_project(self, org, number):
        return org == self.org and number == self.project_number

    def _graphql_issue(self, issue):
        milestone = issue["milestone"]
        return {
            "id": f"I_{issue['number']}",
            "number": issue["number"],
            "title": issue["title"],
            "body": issue["body"],
            "state": issue["state"].upper(),
            "createdAt": issue["created_at"],
            "updatedAt": issue["updated_at"],
            "closedAt": issue["closed_at"],
            "url": issue["html_url"],
            "author": {"login": "octocat", "avatarUrl": "https://avatars/octocat"},
            "labels": {"nodes": issue["labels"]},
            "assignees": {
                "nodes": [
                    {"login": a["login"], "avatarUrl": a["avatar_url"]} for a in issue["assignees"]
                ]
            },
            "milestone": (
                {"title": milestone["title"], "description": None, "dueOn": milestone["due_on"]}
                if milestone
                else None
            ),
        }

    def _items(self, variables):
        if not self._is_project(variables["org"], variables["projectNumber"]):
            return httpx.Response(200, json={"data": {"organization": {"projectV2": None}}})

        field_ids = {field.get("name"): field.get("id") for field in PROJECT_FIELDS}
        nodes = []
        for number in sorted(self.linked):
            values = [
                {"field": {"id": field_ids.get(name), "name": name}, "date": value}
                for name, value in self.field_values.get(number, {}).items()
            ]
            if number in self.statuses:
                values.append(
                    {"field": {"id": "PVTSSF_status", "name": "Status"}, "name": self.statuses[number]}
                )
            values.append({})
            nodes.append(
                {
                    "id": f"PVTI_{number}",
                    "type": "ISSUE",
                    "content": self._graphql_issue(self.issues[number]),
                    "fieldValues": {"nodes": values},
                }
            )
        nodes.append({"id": "PVTI_draft", "type": "DRAFT_ISSUE", "content": {}, "fieldValues": {"nodes": []}})

        start = int(variables.get("cursor") or 0)
        page = nodes[start : start + self.page_size]
        end = start + len(page)
        return httpx.Response(
            200,
            json={
                "data": {
                    "organization": {
                        "projectV2": {
                            "id": PROJECT_ID,
                            "title": "Roadmap",
                            "items": {
                                "pageInfo": {"hasNextPage": end < len(nodes), "endCursor": str(end)},
                                "nodes": page,
                            },
                        }
                    }
                }
            },
        )

    def _lookup(self, variables):
        number = variables["issueNumber"]
        if number not in self.issues:
            return httpx.Response(
                200,
                json={
                    "data": {"repository": {"issue": None}},
                    "errors": [
                        {
                            "type": "NOT_FOUND",
                            "path": ["repository", "issue"],
                            "message": f"Could not resolve to an Issue with the number of {number}.",
                        }
                    ],
                },
            )
        project_items = [
            {"id": f"PVTI_other{number}", "project": {"id": "PVT_other", "title": "Other", "number": 99}}
        ]
        if number in self.linked:
            project_items.append(
                {
                    "id": f"PVTI_{number}",
                    "project": {"id": PROJECT_ID, "title": "Roadmap", "number": self.project_number},
                }
            )
        issue = {
            "id": f"I_{number}",
            "number": number,
            "title": self.issues[number]["title"],
            "projectItems": {"nodes": project_items},
        }
        return httpx.Response(200, json={"data": {"repository": {"issue": issue}}})

    def _fields(self, variables):
        if not self._is_project(variables["org"], variables["projectNumber"]):
            return httpx.Response(200, json={"data": {"organization": {"projectV2": None}}})
        project = {"id": PROJECT_ID, "title": "Roadmap", "fields": {"nodes": PROJECT_FIELDS}}
        return httpx.Response(200, json={"data": {"organization": {"projectV2": project}}})

    def _mutation(self, variables):
        number = int(variables["itemId"].removeprefix("PVTI_"))
        name = next(f["name"] for f in PROJECT_FIELDS if f.get("id") == variables["fieldId"])
        self.field_values.setdefault(number, {})[name] = variables["value"]["date"]
        return httpx.Response(
            200,
            json={
                "data": {
                    "updateProjectV2ItemFieldValue": {"projectV2Item": {"id": variables["itemId"]}}
                }
            },
        )


@pytest.fixture
def fake_github():
    return FakeGitHub()


@pytest.fixture
def github(fake_github):
    """GitHubClient talking to the in-memory fake."""
    return GitHubClient(
        token="test-token",
        base_url="https://api.github.test",
        transport=httpx.MockTransport(fake_github.handler),
    )


@pytest.fixture
def api_client(github):
    """FastAPI TestClient with the GitHub client dependency overridden."""
    from fastapi.testclient import TestClient

    from api.dependencies import github_client
    from api.main import app

    app.dependency_overrides[github_client] = lambda: github
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_item():
    """Build a ProjectItem from GraphQL-shaped pieces."""

    def _make_item(
        number=1,
        body="",
        created_at="2025-08-10T12:00:00Z",
        fields=(),
        milestone_due=None,
        assignees=(),
        labels=(),
        state="OPEN",
    ):
        return ProjectItem.model_validate(
            {
                "id": f"PVTI_{number}",
                "type": "ISSUE",
                "content": {
                    "id": f"I_{number}",
                    "number": number,
                    "title": f"Issue {number}",
                    "body": body,
                    "state": state,
                    "createdAt": created_at,
                    "url": f"https://github.com/acme/roadmap/issues/{number}",
                    "labels": {"nodes": [{"name": n, "color": c} for n, c in labels]},
                    "assignees": {"nodes": [{"login": login, "avatarUrl": ""} for login in assignees]},
                    "milestone": {"title": "M", "dueOn": milestone_due} if milestone_due else None,
                },
                "fieldValues": {
                    "nodes": [{"field": {"name": name}, "date": value} for name, value in fields]
                },
            }
        )

    return _make_item


@pytest.fixture
def make_event():
    """Build a CalendarEvent with the given assignee logins."""

    def _make_event(number, *logins, end=None, status="open"):
        return CalendarEvent(
            id=str(number),
            title=f"Issue {number}",
            start_date="2025-08-01",
            end_date=end,
            url=f"https://github.com/acme/roadmap/issues/{number}",
            assignees=[Assignee(login=login) for login in logins],
            status=status,
        )

    return _make_event
