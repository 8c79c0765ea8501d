"""FastAPI dependencies for authentication and orchestrator access."""

import os

from fastapi import Header, HTTPException, Request, status

from orchestrator.core import ChatOrchestrator
from server.utils import redact_sensitive_headers
from utils.logger import get_logger

logger = get_logger(__name__)


async def get_api_key(request: Request, x_api_key: str | None = Header(None)):
    """
    Validate API key from X-API-Key header.

    The guard is only active when API_KEYS is configured; otherwise endpoints are open.
    """
    valid_keys_str = os.getenv("API_KEYS", "")
    if not valid_keys_str.strip():
        return None

    valid_keys = [k.strip() for k in valid_keys_str.split(",") if k.strip()]

    if not x_api_key or x_api_key not in valid_keys:
        request_id = getattr(request.state, "request_id", "unknown")
        logger.warning(
            "API authentication failed",
            extra={
                "extra_fields": {
                    "request_id": request_id,
                    "headers": redact_sensitive_headers(dict(request.headers)),
                }
            },
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or missing API key"
        )

    return x_api_key


def get_orchestrator(request: Request) -> ChatOrchestrator:
    """Orchestrator built once in the app lifespan (see server.app)."""
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Chat service is not configured",
        )
    return orchestrator
