"""Error taxonomy for the chat + content acquisition pipeline.

Every error carries a ``stage`` label so the HTTP layer can report a distinct
message per failure class ("couldn't read the page" vs "couldn't answer").
"""


class ChatServiceError(Exception):
    """Base class for all pipeline errors."""

    stage = "generic-failure"

    def __init__(self, message: str, stage: str | None = None):
        super().__init__(message)
        self.message = message
        if stage is not None:
            self.stage = stage


class InvalidInputError(ChatServiceError):
    """Request shape is wrong (missing or non-text message)."""

    stage = "input"


class InvalidUrlError(ChatServiceError):
    """The URL detected in the message cannot be parsed as an absolute http(s) URL."""

    stage = "input"


class FetchError(ChatServiceError):
    """Static tier transport or HTTP status failure. Recovered by falling back."""

    stage = "static-fetch"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class RenderError(ChatServiceError):
    """Browser tier failure: launch failure or navigation timeout."""

    stage = "rendered-fetch"


class AcquisitionError(ChatServiceError):
    """Terminal acquisition failure surfaced to the caller."""

    stage = "scrape-failed"

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class ModelError(ChatServiceError):
    """Language-model collaborator failure (transport, auth, provider)."""

    stage = "model-failed"

    def __init__(self, message: str, provider: str = "unknown", retryable: bool = False):
        super().__init__(message)
        self.provider = provider
        self.retryable = retryable
