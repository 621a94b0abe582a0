"""Per-request diagnostics for the API."""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

logger = logging.getLogger("api.requests")


@dataclass
class RequestLog:
    """Captured request/response data for logging."""

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    endpoint: str = ""
    method: str = ""
    client_ip: str | None = None
    status_code: int = 0
    error_code: str | None = None
    error_message: str | None = None
    processing_time_ms: int = 0
    event_count: int | None = None
    details: list[tuple[str, str]] = field(default_factory=list)  # (type, message)


def log_request(log: RequestLog) -> None:
    """Emit one summary line per request, plus its detail records."""
    level = logging.INFO
    if log.status_code >= 500:
        level = logging.ERROR
    elif log.status_code >= 400:
        level = logging.WARNING

    summary = f"{log.method} {log.endpoint} -> {log.status_code} in {log.processing_time_ms}ms"
    if log.event_count is not None:
        summary += f" ({log.event_count} events)"
    if log.error_code:
        summary += f" [{log.error_code}] {log.error_message}"

    logger.log(
        level,
        summary,
        extra={"request_id": log.request_id, "client_ip": log.client_ip},
    )
    for detail_type, message in log.details:
        logger.log(level, "  %s %s: %s", log.request_id, detail_type, message)
