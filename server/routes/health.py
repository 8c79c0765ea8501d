"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Request

from server.schemas.responses import HealthResponseDTO

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponseDTO)
async def health_check(request: Request):
    """Reports "degraded" when the chat service could not be configured."""
    configured = getattr(request.app.state, "orchestrator", None) is not None
    return HealthResponseDTO(
        status="healthy" if configured else "degraded",
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        version="1.0.0",
    )
