from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True)
class ChatResult:
    ai_text: str
    has_url: bool
    url: str | None = None

    # acquisition metadata (None on the non-grounded path)
    title: str | None = None
    extraction_method: str | None = None
    word_count: int | None = None
    from_cache: bool = False

    def with_text(self, ai_text: str) -> "ChatResult":
        return replace(self, ai_text=ai_text)

    def to_dict(self) -> dict[str, Any]:
        return {
            "aiText": self.ai_text,
            "hasUrl": self.has_url,
            "url": self.url,
            "title": self.title,
            "extractionMethod": self.extraction_method,
            "wordCount": self.word_count,
            "cached": self.from_cache,
        }
