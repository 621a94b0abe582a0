"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from api.models.responses import HealthResponse
from core.config import API_VERSION, GITHUB_TOKEN

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns 200 if healthy, 503 if no GitHub token is configured.
    """
    timestamp = datetime.now(timezone.utc).isoformat()

    if GITHUB_TOKEN:
        return HealthResponse(
            status="healthy",
            version=API_VERSION,
            token_configured=True,
            timestamp=timestamp,
        )
    else:
        return JSONResponse(
            status_code=503,
            content=HealthResponse(
                status="unhealthy",
                version=API_VERSION,
                token_configured=False,
                timestamp=timestamp,
                error="GITHUB_TOKEN not configured",
            ).model_dump(by_alias=True),
        )
