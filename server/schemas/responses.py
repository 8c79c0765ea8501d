"""Pydantic response models (DTOs) for FastAPI endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from models.chat_result import ChatResult


class ChatResponseDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    user: str
    ai: str
    has_url: bool = Field(alias="hasUrl")
    url: str | None = None
    title: str | None = None
    extraction_method: str | None = Field(None, alias="extractionMethod")
    word_count: int | None = Field(None, alias="wordCount")
    cached: bool = False

    @classmethod
    def from_chat_result(cls, message: str, result: ChatResult):
        """Convert ChatResult to DTO."""
        return cls(
            user=message,
            ai=result.ai_text,
            has_url=result.has_url,
            url=result.url,
            title=result.title,
            extraction_method=result.extraction_method,
            word_count=result.word_count,
            cached=result.from_cache,
        )


class ErrorDTO(BaseModel):
    error: str
    message: str


class HealthResponseDTO(BaseModel):
    status: str
    timestamp: str
    version: str = "1.0.0"
