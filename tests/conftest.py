import os
import tempfile

# Keep test runs from writing into the project's logs/ directory.
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="grounded-chat-logs-"))

import pytest

from api.base_client import BaseAIClient
from tools.web.cache import AcquisitionCache, InMemoryTTLCache
from tools.web.contracts import ExtractedContent, ExtractionMethod
from tools.web.extractor_base import ContentExtractor

LONG_TEXT = (
    "Grounded answers quote the page they were given. "
    "This sentence exists so the article comfortably clears the validity floor. "
    "A third sentence keeps the body well above one hundred characters."
)


def make_content(
    main_content: str = LONG_TEXT,
    title: str = "Example Article",
    url: str = "https://example.com/a",
    **kwargs,
) -> ExtractedContent:
    return ExtractedContent(
        title=title,
        main_content=main_content,
        url=url,
        word_count=len(main_content.split()),
        **kwargs,
    )


# -------------------------------------------------------------------
# Fakes (keep tests offline & deterministic)
# -------------------------------------------------------------------


class FakeExtractor(ContentExtractor):
    """Extraction tier that returns a canned result or raises a canned error."""

    def __init__(self, name, method, result=None, error=None):
        self.name = name
        self.method = method
        self.result = result
        self.error = error
        self.calls: list[str] = []

    async def extract(self, url: str) -> ExtractedContent:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.result


class FakeLLMClient(BaseAIClient):
    """Records prompts; answers with a fixed reply or a fixed list of fragments."""

    provider = "fake"

    def __init__(self, reply="OK", fragments=None, error=None, fail_after=None):
        super().__init__(api_key="test-key", model_name="fake-model")
        self.reply = reply
        self.fragments = list(fragments) if fragments is not None else ["O", "K"]
        self.error = error
        self.fail_after = fail_after
        self.prompts: list[str] = []
        self.closed = False

    def get_completion(self, prompt: str, **kwargs) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply

    def iter_completion(self, prompt: str, **kwargs):
        self.prompts.append(prompt)
        try:
            for index, fragment in enumerate(self.fragments):
                if self.error is not None and self.fail_after == index:
                    raise self.error
                yield fragment
            if self.error is not None and self.fail_after is None:
                raise self.error
        finally:
            self.closed = True


class FailingBackend:
    """Cache backend whose every call raises, like an unreachable Redis."""

    def get(self, key):
        raise ConnectionError("cache unreachable")

    def set(self, key, value, ttl_seconds):
        raise ConnectionError("cache unreachable")

    def delete(self, key):
        raise ConnectionError("cache unreachable")


# -------------------------------------------------------------------
# Pytest fixtures
# -------------------------------------------------------------------


@pytest.fixture(autouse=True)
def no_api_keys(monkeypatch):
    """Endpoints are open unless a test configures API_KEYS itself."""
    monkeypatch.delenv("API_KEYS", raising=False)


@pytest.fixture
def backend():
    return InMemoryTTLCache()


@pytest.fixture
def cache(backend):
    return AcquisitionCache(backend)


@pytest.fixture
def static_tier():
    return FakeExtractor("static", ExtractionMethod.STATIC, result=make_content())


@pytest.fixture
def rendered_tier():
    return FakeExtractor(
        "rendered",
        ExtractionMethod.RENDERED,
        result=make_content(main_content=LONG_TEXT + " Rendered after scripts ran."),
    )


@pytest.fixture
def mock_env(monkeypatch):
    """Fixture to mock environment variables for testing."""
    env_vars = {
        "GROQ_API_KEY": "test-api-key",
        "CACHE_BACKEND": "memory",
        "DEFAULT_MODEL": "llama-3.1-8b-instant",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars
