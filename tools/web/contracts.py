"""Data contracts for the content acquisition module."""

from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Any

MAX_CONTENT_CHARS = 10000
MAX_PARAGRAPHS = 20
MIN_PARAGRAPH_CHARS = 30
UNTITLED = "Untitled"


class ExtractionMethod(str, Enum):
    STATIC = "static"
    RENDERED = "rendered"


@dataclass(frozen=True)
class InputDetection:
    """Result of scanning a user message for an embedded URL."""

    has_url: bool
    url: str | None
    query: str


@dataclass(frozen=True)
class ExtractedContent:
    """One acquisition attempt's output. Never mutated; use the with_* helpers."""

    title: str
    main_content: str
    url: str = ""
    paragraphs: list[str] = field(default_factory=list)
    word_count: int = 0
    extraction_method: ExtractionMethod | None = None
    cached_at: int | None = None  # epoch millis, set only on cache write

    def __post_init__(self):
        if not self.title:
            object.__setattr__(self, "title", UNTITLED)

    def with_method(self, method: ExtractionMethod) -> "ExtractedContent":
        return replace(self, extraction_method=method)

    def with_url(self, url: str) -> "ExtractedContent":
        return replace(self, url=url)

    def with_cached_at(self, cached_at: int) -> "ExtractedContent":
        return replace(self, cached_at=cached_at)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the cache wire shape (camelCase keys)."""
        data = asdict(self)
        return {
            "title": data["title"],
            "mainContent": data["main_content"],
            "paragraphs": list(data["paragraphs"]),
            "url": data["url"],
            "wordCount": data["word_count"],
            "extractionMethod": (
                self.extraction_method.value if self.extraction_method else None
            ),
            "cachedAt": data["cached_at"],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExtractedContent":
        """Inverse of to_dict. Raises ValueError/TypeError on malformed input."""
        method = data.get("extractionMethod")
        return cls(
            title=str(data.get("title") or ""),
            main_content=data["mainContent"],
            url=data["url"],
            paragraphs=list(data.get("paragraphs") or []),
            word_count=int(data.get("wordCount") or 0),
            extraction_method=ExtractionMethod(method) if method else None,
            cached_at=data.get("cachedAt"),
        )
