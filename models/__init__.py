"""
Models package for chat results and the error taxonomy.
"""

from .chat_result import ChatResult
from .errors import (
    AcquisitionError,
    ChatServiceError,
    FetchError,
    InvalidInputError,
    InvalidUrlError,
    ModelError,
    RenderError,
)

__all__ = [
    "AcquisitionError",
    "ChatResult",
    "ChatServiceError",
    "FetchError",
    "InvalidInputError",
    "InvalidUrlError",
    "ModelError",
    "RenderError",
]
