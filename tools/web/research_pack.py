"""Build the grounded prompt that embeds extracted page content."""

from .contracts import ExtractedContent

DEFAULT_QUERY = "Summarize this content"
MAX_PROMPT_CONTENT_CHARS = 10000


def build_grounded_prompt(
    content: ExtractedContent,
    query: str,
    max_content_chars: int = MAX_PROMPT_CONTENT_CHARS,
) -> str:
    """
    Build citation-formatted prompt text for a single grounding source.

    Args:
        content: Extracted page content
        query: Residual user question (URL removed); empty means "summarize"
        max_content_chars: Upper bound on embedded body text

    Returns:
        Prompt with title, URL, body, user question and a cite-the-source instruction
    """
    question = (query or "").strip() or DEFAULT_QUERY
    source = content.url or "provided content"
    body = content.main_content[:max_content_chars]

    lines = [
        "Based on the following web content, answer the user's question.",
        "Always cite specific information from the source.",
        "",
        "WEB CONTENT:",
        f"Title: {content.title}",
    ]
    if content.url:
        lines.append(f"URL: {content.url}")
    lines.extend(
        [
            f"Content: {body}",
            "",
            f"USER QUESTION: {question}",
            "",
            f"Provide your answer with citations like [Source: {source}]",
        ]
    )
    return "\n".join(lines)
