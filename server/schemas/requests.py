"""Pydantic request models for FastAPI endpoints."""

from pydantic import BaseModel, Field, StrictStr


class ChatRequest(BaseModel):
    message: StrictStr = Field(..., min_length=1)
