"""Repository label listing."""

from core.config import GITHUB_REPO, GITHUB_REPO_OWNER
from core.github_client import GitHubClient
from models.github import GitHubLabel
from services.calendar import normalize_label_color


async def list_labels(
    client: GitHubClient, owner: str = GITHUB_REPO_OWNER, repo: str = GITHUB_REPO
) -> list[dict]:
    labels: list[GitHubLabel] = await client.request(
        "GET",
        f"/repos/{owner}/{repo}/labels",
        params={"per_page": 100},
        schema=list[GitHubLabel],
    )
    return [
        {
            "name": label.name,
            "color": normalize_label_color(label.color),
            "description": label.description or "",
        }
        for label in labels
    ]
