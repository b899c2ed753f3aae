"""Cache Module - Caching services."""
from core.cache.result_cache import (
    ResultCacheService,
    get_result_cache,
    init_result_cache,
    make_cache_key,
    CACHE_TTL_SECONDS
)

__all__ = [
    'ResultCacheService',
    'get_result_cache',
    'init_result_cache',
    'make_cache_key',
    'CACHE_TTL_SECONDS'
]
