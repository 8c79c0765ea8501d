"""Static tier: plain HTTP GET + BeautifulSoup parse, no script execution."""

import httpx
from bs4 import BeautifulSoup

from models.errors import FetchError
from utils.logger import get_logger

from .contracts import ExtractedContent, ExtractionMethod
from .extractor_base import (
    DEFAULT_USER_AGENT,
    NOISE_SELECTOR,
    ContentExtractor,
    build_content,
    pick_longest,
)

logger = get_logger(__name__)

STATIC_CONTENT_SELECTORS = (
    "article",
    "main",
    ".content",
    ".post-content",
    ".entry-content",
    "#content",
)
DEFAULT_TIMEOUT_S = 15.0


def parse_static_html(html: str, url: str) -> ExtractedContent:
    """
    Extract title, main text and paragraphs from raw markup.

    Args:
        html: Raw document markup
        url: Source URL stamped on the record

    Returns:
        ExtractedContent (not yet validated)
    """
    soup = BeautifulSoup(html or "", "lxml")

    for element in soup.select(NOISE_SELECTOR):
        element.decompose()

    title = ""
    if soup.title is not None:
        title = soup.title.get_text().strip()
    if not title:
        h1 = soup.find("h1")
        title = h1.get_text().strip() if h1 else ""

    # Every match of a selector contributes, like a jQuery-style .text() on a set.
    candidates = [
        "".join(el.get_text() for el in soup.select(selector))
        for selector in STATIC_CONTENT_SELECTORS
    ]

    body = soup.body
    body_text = body.get_text() if body is not None else soup.get_text()

    return build_content(
        url=url,
        title=title,
        best_text=pick_longest(candidates),
        body_text=body_text,
        paragraphs=[p.get_text() for p in soup.find_all("p")],
    )


class StaticExtractor(ContentExtractor):
    """Cheap first tier. Fails with FetchError on transport or non-2xx status."""

    name = "static"
    method = ExtractionMethod.STATIC

    def __init__(
        self,
        *,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Args:
            user_agent: Browser-like UA sent with the GET
            timeout_s: Transport timeout when no shared client is supplied
            client: Optional shared AsyncClient (tests pass one with a MockTransport)
        """
        self.user_agent = user_agent
        self.timeout_s = timeout_s
        self._client = client

    async def _get(self, client: httpx.AsyncClient, url: str) -> httpx.Response:
        return await client.get(url, headers={"User-Agent": self.user_agent})

    async def fetch(self, url: str) -> str:
        try:
            if self._client is not None:
                response = await self._get(self._client, url)
            else:
                async with httpx.AsyncClient(
                    timeout=self.timeout_s, follow_redirects=True
                ) as client:
                    response = await self._get(client, url)
        except httpx.HTTPError as exc:
            raise FetchError(f"Static fetch failed: {exc}") from exc

        if not response.is_success:
            raise FetchError(
                f"HTTP error! status: {response.status_code}", status_code=response.status_code
            )
        return response.text

    async def extract(self, url: str) -> ExtractedContent:
        html = await self.fetch(url)
        content = parse_static_html(html, url)
        logger.debug(
            "Static extraction parsed",
            extra={
                "extra_fields": {
                    "url": url,
                    "chars": len(content.main_content),
                    "paragraphs": len(content.paragraphs),
                }
            },
        )
        return content
