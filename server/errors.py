"""Map pipeline errors onto HTTP responses, one distinct message per failure class."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from models.errors import (
    AcquisitionError,
    ChatServiceError,
    InvalidInputError,
    InvalidUrlError,
    ModelError,
)
from utils.logger import get_logger

logger = get_logger(__name__)

# (status code, public error label)
ERROR_STATUS: dict[type[ChatServiceError], tuple[int, str]] = {
    InvalidInputError: (status.HTTP_400_BAD_REQUEST, "invalid-input"),
    InvalidUrlError: (status.HTTP_400_BAD_REQUEST, "invalid-url"),
    AcquisitionError: (status.HTTP_502_BAD_GATEWAY, "scrape-failed"),
    ModelError: (status.HTTP_502_BAD_GATEWAY, "model-failed"),
}


def error_payload(exc: ChatServiceError) -> tuple[int, dict]:
    for error_type, (status_code, label) in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code, {"error": label, "message": exc.message}
    return status.HTTP_500_INTERNAL_SERVER_ERROR, {
        "error": "generic-failure",
        "message": exc.message,
    }


async def chat_service_error_handler(request: Request, exc: ChatServiceError) -> JSONResponse:
    status_code, payload = error_payload(exc)
    log = logger.warning if status_code < 500 or isinstance(exc, AcquisitionError) else logger.error
    log(
        "Chat request failed",
        extra={
            "extra_fields": {
                "stage": exc.stage,
                "error": payload["error"],
                "error_message": exc.message,
                "path": request.url.path,
            }
        },
    )
    return JSONResponse(status_code=status_code, content=payload)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Chat API error",
        exc_info=exc,
        extra={"extra_fields": {"path": request.url.path, "error_type": type(exc).__name__}},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "generic-failure", "message": "Internal Server Error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ChatServiceError, chat_service_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
