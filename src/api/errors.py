"""HTTP error construction for API routes."""

from fastapi import HTTPException, status

from api.models.responses import ErrorCodes
from core.github_client import AUTH_ERROR_MESSAGE, GitHubAPIError, GitHubAuthError


def api_error(status_code: int, error: str, code: str, details: list[str] | None = None) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={"error": error, "code": code, "details": details or []},
    )


def bad_request(error: str, details: list[str] | None = None) -> HTTPException:
    return api_error(status.HTTP_400_BAD_REQUEST, error, ErrorCodes.INVALID_REQUEST, details)


def not_found(error: str) -> HTTPException:
    return api_error(status.HTTP_404_NOT_FOUND, error, ErrorCodes.NOT_FOUND)


def upstream_error(exc: GitHubAPIError, action: str) -> HTTPException:
    """
    Translate a GitHub failure.

    401 becomes a distinct authentication error and 404 a not-found error;
    everything else is a 500 carrying the upstream message.
    """
    if isinstance(exc, GitHubAuthError):
        return api_error(
            status.HTTP_401_UNAUTHORIZED,
            AUTH_ERROR_MESSAGE,
            ErrorCodes.UNAUTHORIZED,
            [str(exc)],
        )
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return not_found(f"Failed to {action}: {exc}")
    return api_error(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        f"Failed to {action}: {exc}",
        ErrorCodes.UPSTREAM_ERROR,
        [f"GitHub status: {exc.status_code}"] if exc.status_code else [],
    )
