"""Content acquisition pipeline: cache -> static tier -> rendered tier -> cache write."""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
from urllib.parse import urlparse

from models.errors import AcquisitionError, FetchError, InvalidUrlError
from utils.logger import get_logger

from .cache import AcquisitionCache
from .contracts import ExtractedContent
from .extractor_base import ContentExtractor
from .validator import is_content_valid

logger = get_logger(__name__)


@dataclass(frozen=True)
class AcquisitionOutcome:
    content: ExtractedContent
    from_cache: bool = False


def validate_url(url: str) -> str:
    """Return the stripped URL or raise InvalidUrlError if it is not absolute http(s)."""
    candidate = (url or "").strip()
    try:
        parsed = urlparse(candidate)
        parsed.port  # raises ValueError on a non-numeric or out-of-range port
    except ValueError as exc:
        raise InvalidUrlError(f"Invalid URL provided: {candidate!r}") from exc
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise InvalidUrlError(f"Invalid URL provided: {candidate!r}")
    return candidate


class ContentAcquirer:
    """
    Fallback pipeline over an ordered list of extraction tiers.

    Every tier but the last is a planned fallback: a transport failure or a result
    that fails the validator moves on to the next tier. The last tier is terminal:
    its result is used as-is, and its failure is raised as AcquisitionError.
    The first tier that completes wins, even if a later tier could return more text.
    """

    def __init__(
        self,
        cache: AcquisitionCache,
        extractors: Sequence[ContentExtractor],
        *,
        static_timeout_s: float | None = None,
    ):
        """
        Args:
            cache: Read-through cache consulted before any tier runs
            extractors: Tiers in fallback order, e.g. [StaticExtractor, RenderedExtractor]
            static_timeout_s: Optional deadline applied to each non-terminal tier
        """
        if not extractors:
            raise ValueError("ContentAcquirer needs at least one extractor")
        self.cache = cache
        self.extractors = list(extractors)
        self.static_timeout_s = static_timeout_s

    async def acquire(self, url: str) -> AcquisitionOutcome:
        url = validate_url(url)

        cached = await asyncio.to_thread(self.cache.get, url)
        if cached is not None:
            return AcquisitionOutcome(content=cached, from_cache=True)

        *fallback_tiers, terminal = self.extractors

        for extractor in fallback_tiers:
            content = await self._try_fallback_tier(extractor, url)
            if content is not None:
                return await self._finish(url, content, extractor)

        logger.info(
            "Attempting terminal extraction tier",
            extra={"extra_fields": {"url": url, "tier": terminal.name}},
        )
        try:
            content = await terminal.extract(url)
        except Exception as exc:
            logger.error(
                "Terminal extraction tier failed",
                extra={
                    "extra_fields": {
                        "url": url,
                        "tier": terminal.name,
                        "error": str(exc),
                        "error_type": type(exc).__name__,
                    }
                },
            )
            raise AcquisitionError(f"Failed to scrape website: {exc}", url=url) from exc

        if not content.main_content:
            raise AcquisitionError("No readable text found on page", url=url)

        return await self._finish(url, content, terminal)

    async def _try_fallback_tier(
        self, extractor: ContentExtractor, url: str
    ) -> ExtractedContent | None:
        logger.info(
            "Attempting extraction tier",
            extra={"extra_fields": {"url": url, "tier": extractor.name}},
        )
        try:
            if self.static_timeout_s is not None:
                content = await asyncio.wait_for(extractor.extract(url), self.static_timeout_s)
            else:
                content = await extractor.extract(url)
        except (FetchError, asyncio.TimeoutError) as exc:
            logger.info(
                "Extraction tier failed, falling back",
                extra={"extra_fields": {"url": url, "tier": extractor.name, "error": str(exc)}},
            )
            return None
        except Exception as exc:
            logger.warning(
                "Extraction tier raised unexpectedly, falling back",
                extra={
                    "extra_fields": {
                        "url": url,
                        "tier": extractor.name,
                        "error": str(exc),
                        "error_type": type(exc).__name__,
                    }
                },
                exc_info=True,
            )
            return None

        if not is_content_valid(content):
            logger.info(
                "Extraction result insufficient, falling back",
                extra={
                    "extra_fields": {
                        "url": url,
                        "tier": extractor.name,
                        "chars": len(content.main_content or ""),
                    }
                },
            )
            return None
        return content

    async def _finish(
        self, url: str, content: ExtractedContent, extractor: ContentExtractor
    ) -> AcquisitionOutcome:
        tagged = content.with_method(extractor.method)
        if not tagged.url:
            tagged = tagged.with_url(url)

        logger.info(
            "Extraction succeeded",
            extra={
                "extra_fields": {
                    "url": url,
                    "method": tagged.extraction_method.value,
                    "word_count": tagged.word_count,
                }
            },
        )
        # put() never raises; a failed write only costs a future cache miss.
        await asyncio.to_thread(self.cache.put, url, tagged)
        return AcquisitionOutcome(content=tagged, from_cache=False)
