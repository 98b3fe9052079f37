"""Cache backends - optional Redis store behind a small get/set/delete interface."""
import logging
from abc import ABC, abstractmethod
from typing import Optional
from urllib.parse import urlparse

from redis import Redis, RedisError

from core.config_loader import CacheConfig
from core.errors import CacheUnavailableError

logger = logging.getLogger(__name__)


def _sanitize_url(url: str) -> str:
    """Remove credentials from URL for safe logging."""
    parsed = urlparse(url)
    if parsed.password:
        sanitized = parsed._replace(
            netloc=f"{parsed.username or ''}:*@{parsed.hostname}:{parsed.port or 6379}"
        )
        return sanitized.geturl()
    return url


class CacheBackend(ABC):
    """
    Byte-level key/value store with per-key TTL.

    Implementations raise CacheUnavailableError on I/O failure; callers go
    through CacheAside, which absorbs it.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        pass

    @abstractmethod
    def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        pass

    @abstractmethod
    def delete(self, *keys: str) -> int:
        pass

    @property
    @abstractmethod
    def is_available(self) -> bool:
        pass


class NullCache(CacheBackend):
    """Cache-disabled backend: every read misses, every write is dropped."""

    def get(self, key: str) -> Optional[bytes]:
        return None

    def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        return None

    def delete(self, *keys: str) -> int:
        return 0

    @property
    def is_available(self) -> bool:
        return False


class RedisCache(CacheBackend):
    """
    Redis-backed cache.

    Connection problems at construction are not fatal: build_cache() probes
    with ping() and falls back to NullCache.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        password: Optional[str] = None,
        socket_timeout: float = 3.0,
        connect_timeout: float = 5.0,
        client: Optional[Redis] = None
    ):
        self.redis_url = redis_url
        self._redis = client or Redis.from_url(
            redis_url,
            password=password,
            socket_connect_timeout=connect_timeout,
            socket_timeout=socket_timeout
        )

    @property
    def client(self) -> Redis:
        return self._redis

    @property
    def is_available(self) -> bool:
        try:
            return bool(self._redis.ping())
        except RedisError:
            return False

    def get(self, key: str) -> Optional[bytes]:
        try:
            return self._redis.get(key)
        except RedisError as e:
            raise CacheUnavailableError(f"GET {key} failed: {e}") from e

    def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        try:
            self._redis.setex(key, ttl_seconds, value)
        except RedisError as e:
            raise CacheUnavailableError(f"SETEX {key} failed: {e}") from e

    def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        try:
            return self._redis.delete(*keys)
        except RedisError as e:
            raise CacheUnavailableError(f"DEL {len(keys)} keys failed: {e}") from e


def build_cache(config: CacheConfig) -> CacheBackend:
    """Select the backend once at startup."""
    if not config.enabled:
        logger.info("Cache disabled by configuration, using NullCache")
        return NullCache()

    cache = RedisCache(
        config.redis_url,
        password=config.password,
        socket_timeout=config.socket_timeout_seconds,
        connect_timeout=config.connect_timeout_seconds
    )
    if not cache.is_available:
        logger.warning(f"Cache Redis unavailable at {_sanitize_url(config.redis_url)}, using NullCache")
        return NullCache()

    logger.info(f"Cache connected to Redis at {_sanitize_url(config.redis_url)}")
    return cache
