"""Repository label listing endpoint."""

from fastapi import APIRouter, Depends

from api.dependencies import github_client
from api.errors import upstream_error
from api.models.responses import LabelsResponse
from core.github_client import GitHubAPIError, GitHubClient
from services.labels import list_labels

router = APIRouter()


@router.get("/labels", response_model=LabelsResponse)
async def get_labels(client: GitHubClient = Depends(github_client)):
    try:
        labels = await list_labels(client)
    except GitHubAPIError as e:
        raise upstream_error(e, "fetch repository labels")
    return LabelsResponse(labels=labels, count=len(labels))
