"""Result caches for expensive engine calls.

Caches are passed into the engine explicitly. Values are stored as JSON
strings so a hit deserializes to exactly what a fresh calculation returns.
"""

import hashlib
import json
import logging
import threading
import time
from typing import Any, Optional

import redis

from ma_retirement.config import settings

logger = logging.getLogger(__name__)


def compute_fingerprint(payload: Any, namespace: str = "calc") -> str:
    """SHA-256 fingerprint of a JSON-serializable payload, used as cache key."""
    if isinstance(payload, (bytes, str)):
        raw = payload if isinstance(payload, str) else payload.decode()
    else:
        raw = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    digest = hashlib.sha256(raw.encode()).hexdigest()
    return f"ma_retirement:{namespace}:{digest}"


class CalculationCache:
    """Interface for engine result caches."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        raise NotImplementedError

    def invalidate(self, key: str) -> bool:
        raise NotImplementedError


class NullCache(CalculationCache):
    """Cache that never stores anything."""

    def get(self, key: str) -> Optional[str]:
        return None

    def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        return False

    def invalidate(self, key: str) -> bool:
        return False


class InMemoryCache(CalculationCache):
    """Thread-safe in-process cache with per-entry expiry."""

    def __init__(self, default_ttl: Optional[int] = None, clock=time.monotonic):
        self._default_ttl = default_ttl if default_ttl is not None else settings.CACHE_TTL_SECONDS
        self._clock = clock
        self._entries: dict[str, tuple[float, str]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        ttl = ttl if ttl is not None else self._default_ttl
        with self._lock:
            now = self._clock()
            expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
            for k in expired:
                del self._entries[k]
            self._entries[key] = (now + ttl, value)
        return True

    def invalidate(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class RedisCache(CalculationCache):
    """Redis-backed cache. Backend errors are logged and treated as misses."""

    def __init__(self, client: Optional["redis.Redis"] = None, url: Optional[str] = None,
                 default_ttl: Optional[int] = None):
        if client is None:
            client = redis.from_url(url or settings.REDIS_URL, encoding="utf-8", decode_responses=True)
        self._client = client
        self._default_ttl = default_ttl if default_ttl is not None else settings.CACHE_TTL_SECONDS

    def get(self, key: str) -> Optional[str]:
        try:
            value = self._client.get(key)
        except redis.RedisError as e:
            logger.error(f"Cache get error: {e}")
            return None
        if value is None:
            return None
        return value.decode() if isinstance(value, bytes) else value

    def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        try:
            self._client.setex(key, ttl if ttl is not None else self._default_ttl, value)
            return True
        except redis.RedisError as e:
            logger.error(f"Cache set error: {e}")
            return False

    def invalidate(self, key: str) -> bool:
        try:
            return bool(self._client.delete(key))
        except redis.RedisError as e:
            logger.error(f"Cache delete error: {e}")
            return False


def get_cache() -> CalculationCache:
    """Build the cache backend named by CACHE_BACKEND."""
    if settings.CACHE_BACKEND == "memory":
        return InMemoryCache()
    if settings.CACHE_BACKEND == "redis":
        if not settings.REDIS_URL:
            logger.warning("CACHE_BACKEND=redis but REDIS_URL is unset; caching disabled")
            return NullCache()
        return RedisCache(url=settings.REDIS_URL)
    return NullCache()
