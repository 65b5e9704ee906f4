"""
Response cache module.

Provides a small TTL cache placed in front of the metadata service, with at
most one in-flight fetch per key.
"""

import logging
import threading
from dataclasses import dataclass, field
from time import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass
class CachedResponse:
    """缓存的响应条目。"""
    value: Any
    timestamp: float


@dataclass
class _KeyLock:
    """按键的请求锁，记录持有或等待该锁的线程数。"""
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class ResponseCache:
    """
    元数据响应缓存，支持过期时间和按键加锁。

    同一个键同时只会有一个请求在进行，其余线程等待该请求完成后直接读取缓存。
    按键的锁在没有线程使用后释放，过期条目在写入时定期清理。
    缓存的值在多个解析流程之间共享，调用方不得修改。

    Example:
        >>> cache = ResponseCache(ttl=3600)
        >>> data = cache.get_or_fetch(('subject', 975), lambda: fetch_subject(975))
    """

    def __init__(self, ttl: int = 3600):
        """
        初始化 ResponseCache。

        Args:
            ttl: 缓存过期时间（秒），0 表示禁用缓存。
        """
        self._ttl = ttl
        self._entries: Dict[Hashable, CachedResponse] = {}
        self._key_locks: Dict[Hashable, _KeyLock] = {}
        self._lock = threading.Lock()
        self._last_prune = time()

    @property
    def enabled(self) -> bool:
        """Check if caching is enabled."""
        return self._ttl > 0

    def get_or_fetch(self, key: Hashable, fetcher: Callable[[], Any]) -> Any:
        """
        Return the cached value for a key, fetching it when missing.

        ``None`` results and exceptions are never cached.

        Args:
            key: Cache key.
            fetcher: Callable producing the value.

        Returns:
            The cached or freshly fetched value.
        """
        if not self.enabled:
            return fetcher()

        hit, value = self._lookup(key)
        if hit:
            logger.debug(f'💾 缓存命中: {key}')
            return value

        key_lock = self._acquire_key_lock(key)
        try:
            with key_lock.lock:
                # 等待期间其他线程可能已经完成了请求
                hit, value = self._lookup(key)
                if hit:
                    logger.debug(f'💾 缓存命中（等待后）: {key}')
                    return value

                value = fetcher()
                if value is not None:
                    self._store(key, value)
                return value
        finally:
            self._release_key_lock(key, key_lock)

    def invalidate(self, key: Hashable) -> None:
        """Remove a single entry."""
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Remove all entries."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _lookup(self, key: Hashable) -> Tuple[bool, Optional[Any]]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False, None
            if time() - entry.timestamp > self._ttl:
                del self._entries[key]
                return False, None
            return True, entry.value

    def _store(self, key: Hashable, value: Any) -> None:
        now = time()
        with self._lock:
            self._entries[key] = CachedResponse(value=value, timestamp=now)
            if now - self._last_prune < self._ttl:
                return
            expired = [k for k, entry in self._entries.items() if now - entry.timestamp > self._ttl]
            for expired_key in expired:
                del self._entries[expired_key]
            self._last_prune = now
        if expired:
            logger.debug(f'🧹 清理过期缓存 {len(expired)} 条')

    def _acquire_key_lock(self, key: Hashable) -> _KeyLock:
        with self._lock:
            key_lock = self._key_locks.get(key)
            if key_lock is None:
                key_lock = _KeyLock()
                self._key_locks[key] = key_lock
            key_lock.users += 1
            return key_lock

    def _release_key_lock(self, key: Hashable, key_lock: _KeyLock) -> None:
        with self._lock:
            key_lock.users -= 1
            if key_lock.users == 0 and self._key_locks.get(key) is key_lock:
                del self._key_locks[key]
