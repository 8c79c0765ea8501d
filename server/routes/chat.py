"""Chat endpoints: URL-grounded answers, blocking and streamed."""

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from models.errors import ModelError
from orchestrator.core import ChatOrchestrator
from server.dependencies import get_api_key, get_orchestrator
from server.schemas.requests import ChatRequest
from server.schemas.responses import ChatResponseDTO, ErrorDTO
from server.utils import to_ndjson
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/v1", tags=["Chat"])

ERROR_RESPONSES = {
    400: {"model": ErrorDTO},
    502: {"model": ErrorDTO},
    500: {"model": ErrorDTO},
}


@router.post("/chat", response_model=ChatResponseDTO, responses=ERROR_RESPONSES)
async def chat(
    request: ChatRequest,
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
    api_key: str | None = Depends(get_api_key),
):
    """Answer a message; when it embeds a URL, ground the answer in that page."""
    result = await orchestrator.handle(request.message)
    return ChatResponseDTO.from_chat_result(request.message, result)


@router.post("/chat/stream", responses=ERROR_RESPONSES)
async def chat_stream(
    request: ChatRequest,
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
    api_key: str | None = Depends(get_api_key),
):
    """Stream the answer as NDJSON events: start, delta*, then done or error."""
    # Acquisition errors raise here, before the stream opens, and get a normal error response.
    result, fragments = await orchestrator.handle_stream(request.message)

    def event_stream():
        yield to_ndjson(
            {
                "type": "start",
                "hasUrl": result.has_url,
                "url": result.url,
                "title": result.title,
                "extractionMethod": result.extraction_method,
                "cached": result.from_cache,
            }
        )
        try:
            for fragment in fragments:
                yield to_ndjson({"type": "delta", "text": fragment})
        except ModelError as exc:
            logger.error(
                "Model stream failed",
                extra={"extra_fields": {"stage": exc.stage, "error_message": exc.message}},
            )
            yield to_ndjson({"type": "error", "error": "model-failed", "message": exc.message})
            return
        finally:
            close = getattr(fragments, "close", None)
            if close is not None:
                close()
        yield to_ndjson({"type": "done"})

    return StreamingResponse(
        event_stream(),
        media_type="application/x-ndjson",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )
