"""Small key-value cache for scope lookups.

Redis is used when ``REDIS_URL`` is configured so every API worker sees
the same cached Victim lookups and the same invalidations.  Without Redis,
or when Redis stops answering, values live in a process-local LRU map with
per-entry expiry.  Values are serialised with *orjson*.
"""

from __future__ import annotations

import asyncio
import contextlib
import time
from collections import OrderedDict
from typing import Any

import orjson
import structlog

logger = structlog.get_logger(__name__)


class LocalTTLCache:
    """Bounded LRU map whose entries expire after their own TTL."""

    __slots__ = ("_entries", "_lock", "_max_size")

    def __init__(self, *, max_size: int = 5_000) -> None:
        self._max_size = max_size
        self._entries: OrderedDict[str, tuple[bytes, float | None]] = OrderedDict()
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> bytes | None:
        async with self._lock:
            item = self._entries.get(key)
            if item is None:
                return None
            value, expires_at = item
            if expires_at is not None and time.monotonic() > expires_at:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return value

    async def set(self, key: str, value: bytes, ttl_seconds: int | None = None) -> None:
        expires_at = time.monotonic() + ttl_seconds if ttl_seconds is not None else None
        async with self._lock:
            self._entries.pop(key, None)
            while len(self._entries) >= self._max_size:
                self._entries.popitem(last=False)
            self._entries[key] = (value, expires_at)

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._entries.pop(key, None)

    @property
    def size(self) -> int:
        return len(self._entries)


class CacheManager:
    """Namespaced cache with Redis primary and :class:`LocalTTLCache` fallback.

    Parameters
    ----------
    redis_url:
        Redis connection string, or *None* / empty for local-only caching.
    namespace:
        Prefix added to every key, e.g. ``"scope:"``.
    """

    __slots__ = ("_local", "_namespace", "_redis")

    def __init__(self, *, redis_url: str | None = None, namespace: str = "") -> None:
        self._namespace = namespace
        self._local = LocalTTLCache()
        self._redis: Any = None

        if redis_url:
            try:
                import redis.asyncio as aioredis

                self._redis = aioredis.Redis.from_url(redis_url, decode_responses=False)
            except Exception:
                logger.warning("cache.redis_init_failed", redis_url=redis_url)
                self._redis = None

    def _key(self, key: str) -> str:
        return f"{self._namespace}{key}"

    def _drop_redis(self, op: str, key: str) -> None:
        logger.warning("cache.redis_op_failed", op=op, key=key)
        self._redis = None

    async def get(self, key: str, default: Any = None) -> Any:
        full_key = self._key(key)
        raw: bytes | None = None
        if self._redis is not None:
            try:
                raw = await self._redis.get(full_key)
            except Exception:
                self._drop_redis("get", full_key)
        if self._redis is None:
            raw = await self._local.get(full_key)
        if raw is None:
            return default
        try:
            return orjson.loads(raw)
        except orjson.JSONDecodeError:
            return default

    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        full_key = self._key(key)
        raw = orjson.dumps(value)
        if self._redis is not None:
            try:
                await self._redis.set(full_key, raw, ex=ttl_seconds)
                return
            except Exception:
                self._drop_redis("set", full_key)
        await self._local.set(full_key, raw, ttl_seconds)

    async def delete(self, key: str) -> None:
        full_key = self._key(key)
        if self._redis is not None:
            try:
                await self._redis.delete(full_key)
            except Exception:
                self._drop_redis("delete", full_key)
        await self._local.delete(full_key)

    async def close(self) -> None:
        if self._redis is not None:
            with contextlib.suppress(Exception):
                await self._redis.aclose()
