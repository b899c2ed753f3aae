"""Result Cache Service - Redis caching for discovery result pages."""
import json
import logging
from typing import Optional, Dict, Any, Mapping
from datetime import datetime, timezone
from urllib.parse import urlparse, quote

from redis import Redis

logger = logging.getLogger(__name__)

# Short relative to how often profiles and jobs change; staleness only
# affects ranking freshness.
CACHE_TTL_SECONDS = 300

KEY_PREFIX = "discovery"


def _sanitize_url(url: str) -> str:
    """Remove credentials from URL for safe logging."""
    try:
        parsed = urlparse(url)
        if parsed.password:
            sanitized = parsed._replace(
                netloc=f"{parsed.username or ''}:*@{parsed.hostname}:{parsed.port or 6379}"
            )
            return sanitized.geturl()
        return url
    except ValueError:
        return url


def make_cache_key(view: str, subject_id: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Structural cache key: view, subject, then query params sorted by name.

    >>> make_cache_key("candidate_jobs", "c1", {"size": 10, "page": 2})
    'discovery:candidate_jobs:c1:page=2&size=10'
    """
    parts = [
        f"{quote(str(name), safe='')}={quote(str(value), safe='')}"
        for name, value in sorted((params or {}).items())
    ]
    return f"{KEY_PREFIX}:{view}:{quote(str(subject_id), safe='')}:{'&'.join(parts)}"


class ResultCacheService:
    """
    Read-through cache for expensive discovery calls.

    Pages are stored as JSON with a short TTL and are never written through.
    If Redis cannot be reached every call simply misses.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        password: Optional[str] = None,
        ttl_seconds: int = CACHE_TTL_SECONDS
    ):
        self.redis_url = redis_url
        self.password = password
        self.ttl_seconds = ttl_seconds
        self._redis: Optional[Redis] = None
        self._available = False

        try:
            self._redis = Redis.from_url(
                redis_url,
                password=password,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5
            )
            self._redis.ping()
            self._available = True
            logger.info(f"Result cache connected to Redis at {_sanitize_url(redis_url)}")
        except Exception as e:
            logger.warning(f"Result cache Redis unavailable: {e}")
            self._redis = None
            self._available = False

    @property
    def is_available(self) -> bool:
        """Check if cache is available."""
        return self._available and self._redis is not None

    def get_page(
        self,
        view: str,
        subject_id: str,
        params: Optional[Mapping[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        """Get a cached page payload, or None on miss or error."""
        if not self.is_available:
            return None

        key = make_cache_key(view, subject_id, params)
        try:
            data = self._redis.get(key)
            if data:
                cache_entry = json.loads(data)
                logger.debug(f"Cache hit for {key}")
                return cache_entry.get("data")
            logger.debug(f"Cache miss for {key}")
            return None

        except Exception as e:
            logger.warning(f"Error reading from result cache: {e}")
            return None

    def set_page(
        self,
        view: str,
        subject_id: str,
        params: Optional[Mapping[str, Any]],
        page_data: Dict[str, Any],
        ttl_seconds: Optional[int] = None
    ) -> bool:
        """Cache a page payload with TTL."""
        if not self.is_available:
            return False

        key = make_cache_key(view, subject_id, params)
        try:
            ttl = ttl_seconds or self.ttl_seconds

            cache_entry = {
                "data": page_data,
                "cached_at": datetime.now(timezone.utc).isoformat(),
                "ttl_seconds": ttl
            }

            self._redis.setex(key, ttl, json.dumps(cache_entry))
            logger.debug(f"Cached {key} (TTL: {ttl}s)")
            return True

        except Exception as e:
            logger.warning(f"Error writing to result cache: {e}")
            return False

    def clear_view(self, view: str) -> int:
        """Delete every cached page of one view. Returns the number of keys removed."""
        if not self.is_available:
            return 0

        try:
            pattern = f"{KEY_PREFIX}:{view}:*"
            cursor = 0
            deleted = 0

            while True:
                cursor, keys = self._redis.scan(cursor=cursor, match=pattern, count=100)
                if keys:
                    self._redis.delete(*keys)
                    deleted += len(keys)
                if cursor == 0:
                    break

            logger.info(f"Cleared {deleted} cached pages for view {view}")
            return deleted

        except Exception as e:
            logger.warning(f"Error clearing result cache: {e}")
            return 0


# Global instance for application use
_result_cache: Optional[ResultCacheService] = None


def get_result_cache() -> Optional[ResultCacheService]:
    """Get global result cache instance."""
    return _result_cache


def init_result_cache(
    redis_url: str,
    password: Optional[str] = None,
    ttl_seconds: int = CACHE_TTL_SECONDS
) -> ResultCacheService:
    """Initialize global result cache."""
    global _result_cache
    _result_cache = ResultCacheService(redis_url, password, ttl_seconds)
    return _result_cache
