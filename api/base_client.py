from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator

from models.errors import ModelError


class BaseAIClient(ABC):
    """
    Abstract base class for language-model clients.

    Clients are stateless per call: the only context the model sees is the
    prompt passed in. Provider failures surface as a single ModelError.
    """

    provider = "unknown"

    def __init__(self, api_key: str, **kwargs):
        """
        Initialize the AI client.

        Args:
            api_key: API key for the AI service
            **kwargs: Additional model-specific parameters
        """
        self.api_key = api_key
        self.model_name = kwargs.get('model_name')
        self.temperature = kwargs.get('temperature', 0.7)

    @abstractmethod
    def get_completion(self, prompt: str, **kwargs) -> str:
        """
        Get a completion from the AI model.

        Args:
            prompt: The input prompt to send to the model
            **kwargs: Per-call overrides (model, temperature)

        Returns:
            The generated text

        Raises:
            ModelError: On any transport, auth or provider failure
        """

    @abstractmethod
    def iter_completion(self, prompt: str, **kwargs) -> Iterator[str]:
        """
        Yield text fragments in generation order as soon as they arrive.

        Closing the generator early releases the underlying connection.

        Raises:
            ModelError: On any transport, auth or provider failure
        """

    def stream_completion(
        self, prompt: str, on_fragment: Callable[[str], None], **kwargs
    ) -> None:
        """
        Callback form of iter_completion: on_fragment is invoked once per fragment.
        """
        stream = self.iter_completion(prompt, **kwargs)
        try:
            for fragment in stream:
                on_fragment(fragment)
        finally:
            stream.close()

    def _wrap_error(self, error: Exception) -> ModelError:
        """
        Convert a provider exception into a ModelError.

        Timeouts, rate limits and 5xx responses are flagged retryable.
        """
        if isinstance(error, ModelError):
            return error

        message = str(error) or type(error).__name__
        text = message.lower()
        retryable = (
            isinstance(error, TimeoutError)
            or "timeout" in text
            or "timed out" in text
            or "429" in text
            or "rate limit" in text
            or any(code in text for code in ("500", "502", "503", "504"))
        )
        return ModelError(
            f"{self.provider} API error: {message}",
            provider=self.provider,
            retryable=retryable,
        )
