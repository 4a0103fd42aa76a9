"""
Read-through key-value cache for the feed and meta read paths.

Keys encode every parameter that shapes a result (``feeds_<type>_<page>_<limit>``,
``feed_<id-or-alias>``, ``search_<keyword>``, ``meta_...``), so invalidation
is either an exact delete or a literal prefix sweep.
"""
import json
import logging
import threading
import time
from typing import Any, Callable, Optional

from cachetools import TTLCache

from config import Config
from db import get_connection

logger = logging.getLogger(__name__)


class MemoryCacheBackend:
    """Process-local backend on a cachetools TTLCache"""

    def __init__(self, maxsize: int, ttl: int):
        self._store = TTLCache(maxsize=maxsize, ttl=ttl)
        # TTLCache is not thread safe; the lock only guards the dict itself
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._store.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._store[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def delete_prefix(self, prefix: str) -> int:
        with self._lock:
            keys = [key for key in list(self._store.keys()) if key.startswith(prefix)]
            for key in keys:
                self._store.pop(key, None)
        return len(keys)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()


class DatabaseCacheBackend:
    """Persisted backend on the cache_entries table; values are stored as JSON"""

    def __init__(self, ttl: int):
        self.ttl = ttl

    def get(self, key: str, default: Any = None) -> Any:
        with get_connection() as conn:
            cur = conn.cursor()
            cur.execute('SELECT value, expires_at FROM cache_entries WHERE key = %s', (key,))
            row = cur.fetchone()
            if not row:
                return default
            if row['expires_at'] is not None and row['expires_at'] < time.time():
                cur.execute('DELETE FROM cache_entries WHERE key = %s', (key,))
                return default
        return json.loads(row['value'])

    def set(self, key: str, value: Any) -> None:
        expires_at = time.time() + self.ttl if self.ttl else None
        with get_connection() as conn:
            cur = conn.cursor()
            cur.execute('DELETE FROM cache_entries WHERE key = %s', (key,))
            cur.execute(
                'INSERT INTO cache_entries (key, value, expires_at) VALUES (%s, %s, %s)',
                (key, json.dumps(value), expires_at)
            )

    def delete(self, key: str) -> None:
        with get_connection() as conn:
            cur = conn.cursor()
            cur.execute('DELETE FROM cache_entries WHERE key = %s', (key,))

    def delete_prefix(self, prefix: str) -> int:
        # LIKE wildcards inside the prefix must match literally
        pattern = prefix.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_') + '%'
        with get_connection() as conn:
            cur = conn.cursor()
            cur.execute("DELETE FROM cache_entries WHERE key LIKE %s ESCAPE '\\'", (pattern,))
            return cur.rowcount

    def clear(self) -> None:
        with get_connection() as conn:
            cur = conn.cursor()
            cur.execute('DELETE FROM cache_entries')


class CacheService:
    """Cache facade used by the services; the backend decides where values live"""

    def __init__(self, backend):
        self.backend = backend

    def get(self, key: str, default: Any = None) -> Any:
        return self.backend.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.backend.set(key, value)

    def get_or_set(self, key: str, compute: Callable[[], Any]) -> Any:
        """Return the cached value, computing and storing it on a miss.

        There is no lock around the miss: two concurrent callers may both
        compute, and the last write wins. None results are returned but
        never stored.
        """
        value = self.backend.get(key)
        if value is not None:
            return value
        logger.debug("Cache miss: %s", key)
        value = compute()
        if value is not None:
            self.backend.set(key, value)
        return value

    def delete(self, key: str) -> None:
        self.backend.delete(key)

    def delete_prefix(self, prefix: str) -> int:
        removed = self.backend.delete_prefix(prefix)
        logger.debug("Cache prefix sweep '%s' removed %s entries", prefix, removed)
        return removed

    def clear(self) -> None:
        self.backend.clear()


_cache: Optional[CacheService] = None


def create_cache(backend_name: Optional[str] = None) -> CacheService:
    backend_name = backend_name or Config.CACHE_BACKEND
    if backend_name == 'memory':
        return CacheService(MemoryCacheBackend(Config.CACHE_MAX_SIZE, Config.CACHE_TTL))
    if backend_name == 'database':
        return CacheService(DatabaseCacheBackend(Config.CACHE_TTL))
    raise ValueError(f"Unsupported cache backend: {backend_name}")


def get_cache() -> CacheService:
    """Process-wide cache instance, built on first use"""
    global _cache
    if _cache is None:
        _cache = create_cache()
        logger.info("Cache initialized: %s backend", Config.CACHE_BACKEND)
    return _cache


def clear_feed_cache(feed_id, alias=None, new_alias=None):
    """Invalidate every cache entry a feed mutation can make stale.

    All listing, search and meta aggregates go by prefix; detail entries go
    by id and by the old and new alias (once when they are equal).
    """
    cache = get_cache()
    cache.delete_prefix('feeds_')
    cache.delete_prefix('search_')
    cache.delete_prefix('meta_')
    cache.delete(f'feed_{feed_id}')
    logger.info("Cleared feed caches for feed %s", feed_id)
    if alias:
        cache.delete(f'feed_{alias}')
    if new_alias and new_alias != alias:
        cache.delete(f'feed_{new_alias}')
