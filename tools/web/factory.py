"""Factories wiring the acquisition pipeline from configuration."""

from config.config import CacheBackendType, Config
from utils.logger import get_logger

from .acquirer import ContentAcquirer
from .cache import AcquisitionCache, CacheBackend, InMemoryTTLCache, RedisCacheBackend
from .rendered_extractor import RenderedExtractor
from .static_extractor import StaticExtractor

logger = get_logger(__name__)


def create_cache_backend(config: Config) -> CacheBackend:
    """
    Build the cache backend named by CACHE_BACKEND.

    Raises:
        ValueError: If CACHE_BACKEND is not a supported backend
    """
    if config.CACHE_BACKEND == CacheBackendType.REDIS.value:
        logger.info("Using Redis scrape cache", extra={"extra_fields": {"backend": "redis"}})
        return RedisCacheBackend(config.REDIS_URL)
    if config.CACHE_BACKEND == CacheBackendType.MEMORY.value:
        logger.info("Using in-memory scrape cache", extra={"extra_fields": {"backend": "memory"}})
        return InMemoryTTLCache()
    raise ValueError(f"Unsupported CACHE_BACKEND: {config.CACHE_BACKEND}")


def create_acquirer(config: Config, backend: CacheBackend | None = None) -> ContentAcquirer:
    """
    Create the content acquirer: cache -> static tier -> rendered tier.

    Args:
        config: Loaded configuration
        backend: Optional pre-built cache backend (defaults to create_cache_backend)
    """
    cache = AcquisitionCache(
        backend if backend is not None else create_cache_backend(config),
        ttl_seconds=config.SCRAPE_CACHE_TTL_SECONDS,
        max_entry_bytes=config.SCRAPE_CACHE_MAX_BYTES,
    )
    extractors = [
        StaticExtractor(
            user_agent=config.SCRAPER_USER_AGENT,
            timeout_s=config.STATIC_FETCH_TIMEOUT_S,
        ),
        RenderedExtractor(
            user_agent=config.SCRAPER_USER_AGENT,
            timeout_ms=config.RENDER_TIMEOUT_MS,
        ),
    ]
    return ContentAcquirer(cache, extractors)
