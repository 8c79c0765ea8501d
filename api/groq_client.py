import time
from collections.abc import Iterator

import openai

from config.config import GroqModels
from utils.logger import get_logger

from .base_client import BaseAIClient

logger = get_logger(__name__)

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
SYSTEM_PROMPT = "You are a helpful AI assistant."


class GroqClient(BaseAIClient):
    """
    Groq API client.

    Uses the OpenAI SDK with a custom base URL since the Groq API is OpenAI-compatible.
    """

    provider = "groq"

    def __init__(
        self,
        api_key: str,
        model_name: str = GroqModels.LLAMA_8B,
        temperature: float = 0.7,
        base_url: str = GROQ_BASE_URL,
        client: openai.OpenAI | None = None,
        **kwargs,
    ):
        """
        Initialize the Groq client.

        Args:
            api_key: The Groq API key
            model_name: Default model (llama-3.1-8b-instant, llama-3.1-70b-versatile,
                mixtral-8x7b-32768)
            temperature: Default sampling temperature
            base_url: OpenAI-compatible endpoint
            client: Pre-built SDK client (tests inject a fake)
        """
        super().__init__(api_key, model_name=model_name, temperature=temperature, **kwargs)
        self.client = client or openai.OpenAI(api_key=api_key, base_url=base_url)

    def _messages(self, prompt: str) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

    def get_completion(self, prompt: str, **kwargs) -> str:
        model = kwargs.get("model") or self.model_name
        temperature = kwargs.get("temperature", self.temperature)
        start_time = time.time()

        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=self._messages(prompt),
                temperature=temperature,
            )
        except Exception as e:
            error = self._wrap_error(e)
            logger.error(
                "Groq completion failed",
                extra={
                    "extra_fields": {
                        "model": model,
                        "error_message": error.message,
                        "retryable": error.retryable,
                    }
                },
            )
            raise error from e

        text = ""
        if response.choices:
            text = response.choices[0].message.content or ""

        logger.info(
            "Groq completion successful",
            extra={
                "extra_fields": {
                    "model": model,
                    "latency_ms": int((time.time() - start_time) * 1000),
                    "chars": len(text),
                }
            },
        )
        return text

    def iter_completion(self, prompt: str, **kwargs) -> Iterator[str]:
        model = kwargs.get("model") or self.model_name
        temperature = kwargs.get("temperature", self.temperature)

        try:
            stream = self.client.chat.completions.create(
                model=model,
                messages=self._messages(prompt),
                temperature=temperature,
                stream=True,
            )
        except Exception as e:
            raise self._wrap_error(e) from e

        fragments = 0
        try:
            for chunk in stream:
                if not chunk.choices:
                    continue
                content = chunk.choices[0].delta.content
                if content:
                    fragments += 1
                    yield content
        except Exception as e:
            error = self._wrap_error(e)
            logger.error(
                "Groq streaming failed",
                extra={"extra_fields": {"model": model, "error_message": error.message}},
            )
            raise error from e
        finally:
            # Releases the HTTP connection when the consumer stops early.
            stream.close()
            logger.debug(
                "Groq stream closed",
                extra={"extra_fields": {"model": model, "fragments": fragments}},
            )
