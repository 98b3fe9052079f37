"""Cache Module - optional cache-aside layer for computed views."""
from core.cache.backend import (
    CacheBackend,
    RedisCache,
    NullCache,
    build_cache
)
from core.cache.views import CacheAside

__all__ = [
    'CacheBackend',
    'RedisCache',
    'NullCache',
    'build_cache',
    'CacheAside'
]
