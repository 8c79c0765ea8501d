"""Rendered tier: headless Chromium per call, read the live DOM after scripts ran."""

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from models.errors import RenderError
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

DEFAULT_NAVIGATION_TIMEOUT_MS = 30000
BROWSER_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]
RENDERED_CONTENT_SELECTORS = [
    "article",
    "main",
    '[role="main"]',
    ".content",
    ".post-content",
]

# Runs inside the page. Returns raw strings; cleaning/truncation happens in Python
# through the same build_content() the static tier uses.
EXTRACT_SCRIPT = """
({noise, selectors}) => {
  document.querySelectorAll(noise).forEach(el => el.remove());
  const h1 = document.querySelector('h1');
  const title = document.title || (h1 && h1.textContent) || '';
  const candidates = selectors.map(sel => {
    const el = document.querySelector(sel);
    return (el && el.textContent) || '';
  });
  const body = document.body ? (document.body.textContent || '') : '';
  const paragraphs = Array.from(document.querySelectorAll('p')).map(p => p.textContent || '');
  return {title, candidates, body, paragraphs};
}
"""


class RenderedExtractor(ContentExtractor):
    """
    Fallback tier backed by Playwright.

    A fresh browser process is launched for every call and closed on every exit
    path, including errors and task cancellation. Nothing is pooled.
    """

    name = "rendered"
    method = ExtractionMethod.RENDERED

    def __init__(
        self,
        *,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS,
        headless: bool = True,
        playwright_factory=async_playwright,
    ):
        self.user_agent = user_agent
        self.timeout_ms = timeout_ms
        self.headless = headless
        self._playwright_factory = playwright_factory

    async def extract(self, url: str) -> ExtractedContent:
        try:
            async with self._playwright_factory() as playwright:
                browser = await playwright.chromium.launch(
                    headless=self.headless, args=BROWSER_ARGS
                )
                try:
                    page = await browser.new_page(user_agent=self.user_agent)
                    await page.goto(url, wait_until="networkidle", timeout=self.timeout_ms)
                    raw = await page.evaluate(
                        EXTRACT_SCRIPT,
                        {"noise": NOISE_SELECTOR, "selectors": RENDERED_CONTENT_SELECTORS},
                    )
                finally:
                    await browser.close()
                    logger.debug("Browser closed", extra={"extra_fields": {"url": url}})
        except PlaywrightError as exc:
            raise RenderError(f"Rendered scraping failed: {exc}") from exc

        return build_content(
            url=url,
            title=raw.get("title") or "",
            best_text=pick_longest(raw.get("candidates") or []),
            body_text=raw.get("body") or "",
            paragraphs=raw.get("paragraphs") or [],
        )
