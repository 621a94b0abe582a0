"""FastAPI dependencies for shared resources."""

from core.github_client import GitHubClient, get_github_client


async def github_client() -> GitHubClient:
    """The process-wide GitHub client, overridable in tests."""
    return get_github_client()
