"""Quality gate applied to every extraction before it is used or cached."""

from typing import Any

from .contracts import ExtractedContent

MIN_CONTENT_CHARS = 100


def _main_content(content: Any) -> Any:
    if content is None:
        return None
    if isinstance(content, ExtractedContent):
        return content.main_content
    if isinstance(content, dict):
        return content.get("mainContent", content.get("main_content"))
    return getattr(content, "main_content", None)


def is_content_valid(content: Any) -> bool:
    """True iff the candidate has a main content string longer than 100 chars."""
    text = _main_content(content)
    return isinstance(text, str) and len(text) > MIN_CONTENT_CHARS


def is_valid_cached_record(data: Any) -> bool:
    """Schema check for a deserialized cache payload (wire shape, camelCase)."""
    if not isinstance(data, dict):
        return False
    return (
        isinstance(data.get("title"), str)
        and isinstance(data.get("mainContent"), str)
        and isinstance(data.get("url"), str)
        and len(data["mainContent"]) > MIN_CONTENT_CHARS
    )
