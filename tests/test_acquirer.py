import asyncio

import pytest
from conftest import LONG_TEXT, FailingBackend, FakeExtractor, make_content

from models.errors import AcquisitionError, FetchError, InvalidUrlError, RenderError
from tools.web.acquirer import ContentAcquirer, validate_url
from tools.web.cache import AcquisitionCache, make_cache_key
from tools.web.contracts import ExtractionMethod

pytestmark = pytest.mark.unit

URL = "https://example.com/a"


def _acquire(acquirer, url=URL):
    return asyncio.run(acquirer.acquire(url))


# -------------------------------------------------------------------
# URL validation
# -------------------------------------------------------------------


@pytest.mark.parametrize("url", ["https://example.com", "http://example.com/a?b=c#d"])
def test_validate_url_accepts_absolute_http(url):
    assert validate_url(url) == url


@pytest.mark.parametrize(
    "url",
    [
        "",
        "example.com",
        "ftp://example.com/file",
        "https://",
        "not a url",
        "https://example.com:abc/",
        "http://:80/page",
        "https://example.com:99999/",
    ],
)
def test_validate_url_rejects_everything_else(url):
    with pytest.raises(InvalidUrlError):
        validate_url(url)


def test_invalid_url_is_raised_before_any_tier_runs(cache, static_tier, rendered_tier):
    acquirer = ContentAcquirer(cache, [static_tier, rendered_tier])

    with pytest.raises(InvalidUrlError):
        _acquire(acquirer, "https://")

    assert static_tier.calls == []
    assert rendered_tier.calls == []


def test_requires_at_least_one_extractor(cache):
    with pytest.raises(ValueError):
        ContentAcquirer(cache, [])


# -------------------------------------------------------------------
# Tier selection
# -------------------------------------------------------------------


def test_valid_static_result_skips_rendered_tier(cache, static_tier, rendered_tier):
    outcome = _acquire(ContentAcquirer(cache, [static_tier, rendered_tier]))

    assert outcome.from_cache is False
    assert outcome.content.extraction_method is ExtractionMethod.STATIC
    assert outcome.content.main_content == LONG_TEXT
    assert static_tier.calls == [URL]
    assert rendered_tier.calls == []


def test_thin_static_result_falls_back_to_rendered_once(cache, rendered_tier):
    static_tier = FakeExtractor(
        "static", ExtractionMethod.STATIC, result=make_content(main_content="x" * 50)
    )
    outcome = _acquire(ContentAcquirer(cache, [static_tier, rendered_tier]))

    assert outcome.content.extraction_method is ExtractionMethod.RENDERED
    assert outcome.content.main_content.endswith("Rendered after scripts ran.")
    assert len(static_tier.calls) == 1
    assert len(rendered_tier.calls) == 1


def test_static_fetch_error_falls_back_to_rendered(cache, rendered_tier):
    static_tier = FakeExtractor(
        "static", ExtractionMethod.STATIC, error=FetchError("HTTP error! status: 403", 403)
    )
    outcome = _acquire(ContentAcquirer(cache, [static_tier, rendered_tier]))

    assert outcome.content.extraction_method is ExtractionMethod.RENDERED
    assert rendered_tier.calls == [URL]


def test_unexpected_static_error_also_falls_back(cache, rendered_tier):
    static_tier = FakeExtractor("static", ExtractionMethod.STATIC, error=RuntimeError("parser bug"))
    outcome = _acquire(ContentAcquirer(cache, [static_tier, rendered_tier]))

    assert outcome.content.extraction_method is ExtractionMethod.RENDERED


def test_slow_static_tier_times_out_into_rendered(cache, rendered_tier):
    class SlowExtractor(FakeExtractor):
        async def extract(self, url):
            self.calls.append(url)
            await asyncio.sleep(3600)

    static_tier = SlowExtractor("static", ExtractionMethod.STATIC)
    acquirer = ContentAcquirer(cache, [static_tier, rendered_tier], static_timeout_s=0.01)

    outcome = _acquire(acquirer)
    assert outcome.content.extraction_method is ExtractionMethod.RENDERED


def test_rendered_failure_surfaces_as_acquisition_error(cache):
    static_tier = FakeExtractor("static", ExtractionMethod.STATIC, error=FetchError("boom"))
    rendered_tier = FakeExtractor(
        "rendered", ExtractionMethod.RENDERED, error=RenderError("Timeout 30000ms exceeded.")
    )

    with pytest.raises(AcquisitionError) as exc_info:
        _acquire(ContentAcquirer(cache, [static_tier, rendered_tier]))

    assert exc_info.value.url == URL
    assert "Timeout 30000ms exceeded." in exc_info.value.message
    assert isinstance(exc_info.value.__cause__, RenderError)
    # nothing was cached
    assert cache.get(URL) is None


def test_rendered_result_is_used_even_when_thin(cache):
    static_tier = FakeExtractor("static", ExtractionMethod.STATIC, error=FetchError("boom"))
    rendered_tier = FakeExtractor(
        "rendered", ExtractionMethod.RENDERED, result=make_content(main_content="Only a little.")
    )

    outcome = _acquire(ContentAcquirer(cache, [static_tier, rendered_tier]))

    assert outcome.content.main_content == "Only a little."
    # thin content is returned but never cached
    assert cache.get(URL) is None


def test_empty_rendered_result_is_an_acquisition_error(cache):
    static_tier = FakeExtractor("static", ExtractionMethod.STATIC, error=FetchError("boom"))
    rendered_tier = FakeExtractor(
        "rendered", ExtractionMethod.RENDERED, result=make_content(main_content="")
    )

    with pytest.raises(AcquisitionError):
        _acquire(ContentAcquirer(cache, [static_tier, rendered_tier]))


def test_first_completed_tier_wins_over_longer_later_tier(cache):
    static_tier = FakeExtractor("static", ExtractionMethod.STATIC, result=make_content())
    rendered_tier = FakeExtractor(
        "rendered", ExtractionMethod.RENDERED, result=make_content(main_content=LONG_TEXT * 10)
    )

    outcome = _acquire(ContentAcquirer(cache, [static_tier, rendered_tier]))

    assert outcome.content.main_content == LONG_TEXT
    assert rendered_tier.calls == []


def test_missing_url_on_result_is_filled_in(cache):
    static_tier = FakeExtractor("static", ExtractionMethod.STATIC, result=make_content(url=""))
    outcome = _acquire(ContentAcquirer(cache, [static_tier]))

    assert outcome.content.url == URL


# -------------------------------------------------------------------
# Cache interaction
# -------------------------------------------------------------------


def test_cache_hit_skips_every_tier(cache, static_tier, rendered_tier):
    cache.put(URL, make_content().with_method(ExtractionMethod.RENDERED))
    acquirer = ContentAcquirer(cache, [static_tier, rendered_tier])

    outcome = _acquire(acquirer)

    assert outcome.from_cache is True
    assert outcome.content.extraction_method is ExtractionMethod.RENDERED
    assert static_tier.calls == []
    assert rendered_tier.calls == []


def test_second_call_is_served_from_cache(cache, static_tier, rendered_tier):
    acquirer = ContentAcquirer(cache, [static_tier, rendered_tier])

    first = _acquire(acquirer)
    second = _acquire(acquirer)

    assert first.from_cache is False
    assert second.from_cache is True
    assert second.content.main_content == first.content.main_content
    assert second.content.extraction_method is first.content.extraction_method
    assert static_tier.calls == [URL]


def test_successful_acquisition_is_written_to_cache(backend, cache, static_tier):
    _acquire(ContentAcquirer(cache, [static_tier]))

    assert backend.get(make_cache_key(URL)) is not None


def test_oversized_result_is_returned_but_not_cached(backend, static_tier):
    cache = AcquisitionCache(backend, max_entry_bytes=200)
    acquirer = ContentAcquirer(cache, [static_tier])

    outcome = _acquire(acquirer)

    assert outcome.content.main_content == LONG_TEXT
    assert len(backend) == 0


def test_unreachable_cache_does_not_block_acquisition(static_tier):
    cache = AcquisitionCache(FailingBackend())

    outcome = _acquire(ContentAcquirer(cache, [static_tier]))

    assert outcome.from_cache is False
    assert outcome.content.main_content == LONG_TEXT


def test_bad_port_fails_fast_without_running_tiers(cache, static_tier, rendered_tier):
    acquirer = ContentAcquirer(cache, [static_tier, rendered_tier])

    with pytest.raises(InvalidUrlError):
        _acquire(acquirer, "https://example.com:abc/")

    assert static_tier.calls == []
    assert rendered_tier.calls == []
