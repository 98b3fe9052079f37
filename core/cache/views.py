"""Cache-aside views - JSON payloads over a CacheBackend, failures downgraded to misses."""
import json
import logging
from typing import Any, Dict, Optional

from core.cache import keys as cache_keys
from core.cache.backend import CacheBackend, NullCache
from core.config_loader import CacheConfig
from core.errors import CacheUnavailableError

logger = logging.getLogger(__name__)


class CacheAside:
    """
    Namespaced JSON get/set/delete for service read paths.

    No method raises on cache trouble: unavailability and undecodable
    entries log a WARNING and behave as a miss (reads) or a no-op (writes).
    """

    def __init__(self, backend: Optional[CacheBackend] = None, config: Optional[CacheConfig] = None):
        self.backend = backend or NullCache()
        self.config = config or CacheConfig()

    def key(self, org_id: Any, namespace: str, discriminator: Any) -> str:
        return cache_keys.cache_key(org_id, namespace, discriminator, self.config.key_prefix)

    def get_json(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            raw = self.backend.get(key)
        except CacheUnavailableError as e:
            logger.warning(f"Cache read failed, computing live: {e}")
            return None

        if raw is None:
            logger.debug(f"Cache miss for {key}")
            return None

        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning(f"Discarding undecodable cache entry {key}: {e}")
            return None

    def set_json(self, key: str, payload: Dict[str, Any], ttl_seconds: int) -> bool:
        try:
            self.backend.set(key, json.dumps(payload, sort_keys=True).encode("utf-8"), ttl_seconds)
            logger.debug(f"Cached {key} (TTL: {ttl_seconds}s)")
            return True
        except CacheUnavailableError as e:
            logger.warning(f"Cache write failed for {key}: {e}")
            return False

    def delete(self, *keys: str) -> int:
        """Delete keys; raises CacheUnavailableError so the write path can log the miss."""
        return self.backend.delete(*keys)

    def ttl(self, namespace: str) -> int:
        return cache_keys.ttl_for(namespace, self.config)
