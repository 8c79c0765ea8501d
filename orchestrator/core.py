"""
ChatOrchestrator - Core business logic layer for the grounded chat service.

Key guarantees:
- CLI/API layers stay thin (no provider or scraper imports there)
- Acquisition errors and model errors stay distinct (AcquisitionError vs ModelError)
- Streaming uses the exact same prompt construction as the blocking path
"""

import asyncio
import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from api.base_client import BaseAIClient
from models.chat_result import ChatResult
from models.errors import InvalidInputError
from tools.web.acquirer import AcquisitionOutcome, ContentAcquirer
from tools.web.contracts import ExtractedContent
from tools.web.intent import detect_input_type
from tools.web.research_pack import build_grounded_prompt
from utils.logger import get_logger

logger = get_logger(__name__)

_STREAM_END = object()


@dataclass(frozen=True)
class PreparedRequest:
    """A classified (and, if needed, grounded) message ready for the model."""

    prompt: str
    result: ChatResult


class ChatOrchestrator:
    def __init__(self, acquirer: ContentAcquirer, client: BaseAIClient):
        """
        Args:
            acquirer: Content acquisition pipeline (cache + extraction tiers)
            client: Language-model collaborator
        """
        self.acquirer = acquirer
        self.client = client

    # ---------- helpers ----------

    def _check_message(self, message) -> str:
        if not isinstance(message, str) or not message:
            raise InvalidInputError("Message is required and must be a string")
        return message

    def _grounded_result(self, url: str, outcome: AcquisitionOutcome) -> ChatResult:
        content = outcome.content
        return ChatResult(
            ai_text="",
            has_url=True,
            url=url,
            title=content.title,
            extraction_method=(
                content.extraction_method.value if content.extraction_method else None
            ),
            word_count=content.word_count,
            from_cache=outcome.from_cache,
        )

    def build_prompt(self, content: ExtractedContent, query: str) -> str:
        return build_grounded_prompt(content, query)

    async def prepare(self, message: str) -> PreparedRequest:
        """
        Classify the message and, when it carries a URL, acquire the page.

        Raises:
            InvalidInputError: message is missing or not text
            InvalidUrlError: the detected URL is malformed
            AcquisitionError: every extraction tier failed
        """
        message = self._check_message(message)
        detection = detect_input_type(message)

        if not detection.has_url:
            logger.info("Processing regular chat message")
            return PreparedRequest(
                prompt=message, result=ChatResult(ai_text="", has_url=False, url=None)
            )

        logger.info(
            "Processing message with URL",
            extra={"extra_fields": {"url": detection.url}},
        )
        outcome = await self.acquirer.acquire(detection.url)
        logger.info(
            "Content acquired",
            extra={
                "extra_fields": {
                    "url": detection.url,
                    "method": (
                        outcome.content.extraction_method.value
                        if outcome.content.extraction_method
                        else None
                    ),
                    "word_count": outcome.content.word_count,
                    "cached": outcome.from_cache,
                }
            },
        )
        return PreparedRequest(
            prompt=self.build_prompt(outcome.content, detection.query),
            result=self._grounded_result(detection.url, outcome),
        )

    # ---------- public API ----------

    async def handle(self, message: str) -> ChatResult:
        """
        Answer a message, grounded in the embedded URL's content when present.

        Raises:
            InvalidInputError, InvalidUrlError, AcquisitionError, ModelError
        """
        prepared = await self.prepare(message)
        ai_text = await asyncio.to_thread(self.client.get_completion, prepared.prompt)
        return prepared.result.with_text(ai_text)

    async def handle_stream(self, message: str) -> tuple[ChatResult, Iterator[str]]:
        """
        Streaming variant of handle().

        Acquisition runs first, so page errors surface before any fragment.
        Returns the result metadata (empty ai_text) and a fragment iterator in
        generation order. Closing the iterator stops the model stream.
        """
        prepared = await self.prepare(message)
        return prepared.result, self.client.iter_completion(prepared.prompt)

    async def handle_stream_to(
        self, message: str, on_fragment: Callable[[str], None]
    ) -> ChatResult:
        """
        Callback form of handle_stream(): each fragment is passed to on_fragment
        as soon as it is produced. Returns the result with the full text.

        Cancelling the task stops delivery at once; the model stream is closed
        as soon as any in-flight read returns.
        """
        prepared = await self.prepare(message)
        fragments = self.client.iter_completion(prepared.prompt)
        # next() and close() must not overlap on the generator.
        lock = threading.Lock()

        def _pull():
            with lock:
                return next(fragments, _STREAM_END)

        def _close() -> None:
            with lock:
                fragments.close()

        parts: list[str] = []
        try:
            while True:
                fragment = await asyncio.to_thread(_pull)
                if fragment is _STREAM_END:
                    break
                parts.append(fragment)
                on_fragment(fragment)
        finally:
            await asyncio.to_thread(_close)
        return prepared.result.with_text("".join(parts))


def create_orchestrator(config) -> ChatOrchestrator:
    """
    Build the orchestrator and its collaborators from a Config.

    Constructed once at process start; nothing needs tearing down beyond process exit.
    """
    from api.groq_client import GroqClient
    from tools.web.factory import create_acquirer

    client = GroqClient(
        api_key=config.GROQ_API_KEY,
        model_name=config.DEFAULT_MODEL,
        temperature=config.MODEL_TEMPERATURE,
        base_url=config.GROQ_BASE_URL,
    )
    logger.info(
        "Orchestrator initialized",
        extra={"extra_fields": {"model": config.get_model_info(), "cache": config.CACHE_BACKEND}},
    )
    return ChatOrchestrator(acquirer=create_acquirer(config), client=client)
