"""Input classification: find the URL a message should be grounded in."""

import re

from .contracts import InputDetection

URL_PATTERN = re.compile(r"https?://\S+")


def detect_input_type(text: str) -> InputDetection:
    """
    Split a user message into (url, residual query).

    The first absolute http(s) token is the acquisition target. Every URL
    occurrence is stripped from the query, not only the first one.

    Args:
        text: Raw user message

    Returns:
        InputDetection with has_url/url/query
    """
    urls = URL_PATTERN.findall(text)
    return InputDetection(
        has_url=bool(urls),
        url=urls[0] if urls else None,
        query=URL_PATTERN.sub("", text).strip(),
    )
