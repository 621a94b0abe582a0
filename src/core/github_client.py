"""
GitHub API client setup with lazy initialization.
"""

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from core.config import GITHUB_API_URL, GITHUB_TIMEOUT_SECONDS, GITHUB_TOKEN

logger = logging.getLogger(__name__)

AUTH_ERROR_MESSAGE = "GitHub authentication failed. Please check your GITHUB_TOKEN."


class GitHubAPIError(Exception):
    """Request to GitHub failed or returned an unexpected payload."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GitHubAuthError(GitHubAPIError):
    """GitHub rejected the configured token (HTTP 401)."""


def _error_message(response: httpx.Response) -> str:
    """Best-effort extraction of GitHub's error message."""
    try:
        payload = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.reason_phrase


def validate_payload(schema: Any, data: Any) -> Any:
    """Validate a decoded GitHub payload against a pydantic schema."""
    try:
        return TypeAdapter(schema).validate_python(data)
    except ValidationError as e:
        raise GitHubAPIError(f"Unexpected GitHub response shape: {e}") from e


class GitHubClient:
    """Thin async wrapper over the GitHub REST and GraphQL endpoints."""

    def __init__(
        self,
        token: str,
        base_url: str = GITHUB_API_URL,
        timeout: float = GITHUB_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict | None = None,
        json: dict | None = None,
        schema: Any = None,
    ) -> Any:
        """
        Call a REST endpoint and return the decoded JSON body.

        When a schema is given the payload is validated against it.

        Raises:
            GitHubAuthError: on HTTP 401
            GitHubAPIError: on any other failure
        """
        try:
            response = await self._http.request(method, path, params=params, json=json)
        except httpx.HTTPError as e:
            raise GitHubAPIError(f"{method} {path} failed: {e}") from e

        if response.status_code == 401:
            raise GitHubAuthError(
                f"401 Unauthorized: {_error_message(response)}", status_code=401
            )
        if response.status_code >= 400:
            raise GitHubAPIError(
                f"{response.status_code} {_error_message(response)}",
                status_code=response.status_code,
            )

        data = response.json() if response.content else None
        if schema is not None:
            return validate_payload(schema, data)
        return data

    async def graphql(self, query: str, variables: dict, schema: Any = None) -> Any:
        """Run a GraphQL query and return its ``data`` member."""
        payload = await self.request(
            "POST", "/graphql", json={"query": query, "variables": variables}
        )
        errors = (payload or {}).get("errors")
        if errors:
            messages = "; ".join(str(err.get("message", err)) for err in errors)
            # Unresolvable nodes (unknown issue, org or project) come back as 200
            not_found = all(err.get("type") == "NOT_FOUND" for err in errors)
            raise GitHubAPIError(
                f"GraphQL error: {messages}", status_code=404 if not_found else None
            )

        data = (payload or {}).get("data")
        if schema is not None:
            return validate_payload(schema, data)
        return data

    async def aclose(self) -> None:
        await self._http.aclose()


_github_client: GitHubClient | None = None


def get_github_client() -> GitHubClient:
    """Get or create the GitHub client (lazy initialization)."""
    global _github_client
    if _github_client is None:
        if not GITHUB_TOKEN:
            logger.warning("GITHUB_TOKEN is not set; GitHub calls will be unauthenticated")
        _github_client = GitHubClient(token=GITHUB_TOKEN)
    return _github_client


async def close_github_client() -> None:
    """Close the shared client, if one was created."""
    global _github_client
    if _github_client is not None:
        await _github_client.aclose()
        _github_client = None
