"""Read-through cache for extracted page content."""

import json
import threading
import time
from datetime import datetime, timedelta, timezone
from typing import Protocol

import redis

from utils.logger import get_logger

from .contracts import ExtractedContent
from .validator import is_content_valid, is_valid_cached_record

logger = get_logger(__name__)

CACHE_KEY_PREFIX = "scrape:"
MAX_KEY_URL_CHARS = 200
DEFAULT_TTL_SECONDS = 7 * 24 * 60 * 60  # 7 days
DEFAULT_MAX_ENTRY_BYTES = 1024000  # ~1MB of serialized JSON


class CacheBackend(Protocol):
    """Key/value store with per-entry TTL. Any call may raise."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str, ttl_seconds: int) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryTTLCache:
    """
    Thread-safe in-memory backend with TTL (Time To Live).

    Used when no Redis is configured and in tests. Expired entries are
    dropped lazily on read.
    """

    def __init__(self):
        self._cache: dict[str, tuple[str, datetime]] = {}
        self._lock = threading.Lock()  # Required for FastAPI concurrency

    def get(self, key: str) -> str | None:
        with self._lock:
            if key in self._cache:
                value, expiry = self._cache[key]
                if datetime.now(timezone.utc) < expiry:
                    return value
                # Expired - remove it
                del self._cache[key]
            return None

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._lock:
            expiry = datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds)
            self._cache[key] = (value, expiry)

    def delete(self, key: str) -> None:
        with self._lock:
            self._cache.pop(key, None)

    def clear(self):
        """Clear all cached entries."""
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)


class RedisCacheBackend:
    """Redis backend; atomicity of concurrent writes is Redis's, not ours."""

    def __init__(self, url: str, socket_timeout: float = 5.0):
        self._client = redis.Redis.from_url(
            url,
            decode_responses=True,  # return str, not bytes
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )

    def get(self, key: str) -> str | None:
        return self._client.get(key)

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._client.set(key, value, ex=ttl_seconds)

    def delete(self, key: str) -> None:
        self._client.delete(key)


def make_cache_key(url: str) -> str:
    """Normalized, length-bounded key for a URL."""
    return f"{CACHE_KEY_PREFIX}{url.strip()[:MAX_KEY_URL_CHARS]}"


class AcquisitionCache:
    """
    Fail-open cache in front of both extraction tiers.

    ``get`` never raises: backend errors and corrupt entries are misses.
    ``put`` never raises: invalid or oversized records are skipped, backend
    errors are logged.
    """

    def __init__(
        self,
        backend: CacheBackend,
        *,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        max_entry_bytes: int = DEFAULT_MAX_ENTRY_BYTES,
    ):
        self.backend = backend
        self.ttl_seconds = ttl_seconds
        self.max_entry_bytes = max_entry_bytes

    def get(self, url: str) -> ExtractedContent | None:
        key = make_cache_key(url)
        try:
            cached = self.backend.get(key)
        except Exception as e:
            logger.warning(
                "Cache retrieval error",
                extra={"extra_fields": {"url": url, "error": str(e)}},
            )
            return None

        if not cached:
            logger.debug("Cache miss", extra={"extra_fields": {"url": url}})
            return None

        try:
            parsed = json.loads(cached)
            if is_valid_cached_record(parsed):
                content = ExtractedContent.from_dict(parsed)
                logger.info("Cache hit", extra={"extra_fields": {"url": url}})
                return content
        except (ValueError, TypeError, KeyError) as e:
            logger.warning(
                "Cache entry unreadable",
                extra={"extra_fields": {"url": url, "error": str(e)}},
            )

        self._evict(key, url)
        return None

    def _evict(self, key: str, url: str) -> None:
        logger.info("Evicting invalid cache entry", extra={"extra_fields": {"url": url}})
        try:
            self.backend.delete(key)
        except Exception as e:
            logger.warning(
                "Cache delete error",
                extra={"extra_fields": {"url": url, "error": str(e)}},
            )

    def put(self, url: str, content: ExtractedContent) -> ExtractedContent | None:
        """
        Store ``content`` under ``url``.

        Returns:
            The stamped record that was written, or None if the write was skipped
            or failed.
        """
        if not is_content_valid(content) or not is_valid_cached_record(content.to_dict()):
            logger.info("Invalid content, skipping cache", extra={"extra_fields": {"url": url}})
            return None

        stamped = content.with_cached_at(int(time.time() * 1000))
        serialized = json.dumps(stamped.to_dict(), ensure_ascii=False)

        size = len(serialized.encode("utf-8"))
        if size > self.max_entry_bytes:
            logger.info(
                "Content too large for cache",
                extra={"extra_fields": {"url": url, "size": size}},
            )
            return None

        try:
            self.backend.set(make_cache_key(url), serialized, self.ttl_seconds)
        except Exception as e:
            logger.warning(
                "Cache storage error",
                extra={"extra_fields": {"url": url, "error": str(e)}},
            )
            return None

        logger.info("Cached content", extra={"extra_fields": {"url": url}})
        return stamped
