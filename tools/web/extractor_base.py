"""Extraction capability shared by the static and rendered tiers."""

import re
from abc import ABC, abstractmethod

from .contracts import (
    MAX_CONTENT_CHARS,
    MAX_PARAGRAPHS,
    MIN_PARAGRAPH_CHARS,
    UNTITLED,
    ExtractedContent,
    ExtractionMethod,
)
from .validator import MIN_CONTENT_CHARS

DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

# Elements that never carry grounding text.
NOISE_SELECTOR = "script, style, nav, header, footer, aside"

_WHITESPACE_RE = re.compile(r"\s+")


class ContentExtractor(ABC):
    """
    One extraction tier: ``extract(url) -> ExtractedContent``.

    Implementations raise their own tier error (FetchError / RenderError) on failure.
    The acquirer only depends on this interface, so tiers can be added or reordered
    without touching orchestration.
    """

    name: str = "extractor"
    method: ExtractionMethod

    @abstractmethod
    async def extract(self, url: str) -> ExtractedContent:
        """Fetch ``url`` and return its extracted text content."""


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text or "").strip()


def pick_longest(candidates: list[str]) -> str:
    """Greedy-longest: keep the longest stripped candidate, earliest wins ties."""
    best = ""
    for candidate in candidates:
        text = (candidate or "").strip()
        if len(text) > len(best):
            best = text
    return best


def filter_paragraphs(paragraphs: list[str]) -> list[str]:
    kept = [p.strip() for p in paragraphs if p and len(p.strip()) > MIN_PARAGRAPH_CHARS]
    return kept[:MAX_PARAGRAPHS]


def build_content(
    *,
    url: str,
    title: str,
    best_text: str,
    body_text: str,
    paragraphs: list[str],
) -> ExtractedContent:
    """
    Apply the shared body/cleaning/truncation rules to raw extracted strings.

    Falls back to the full body text when no container reached the validity floor,
    collapses whitespace, truncates to MAX_CONTENT_CHARS and derives the word count
    from the collapsed (pre-truncation) text.
    """
    main = best_text
    if not main or len(main) < MIN_CONTENT_CHARS:
        main = (body_text or "").strip()

    cleaned = collapse_whitespace(main)
    return ExtractedContent(
        title=(title or "").strip() or UNTITLED,
        main_content=cleaned[:MAX_CONTENT_CHARS],
        url=url,
        paragraphs=filter_paragraphs(paragraphs),
        word_count=len(cleaned.split()),
    )
