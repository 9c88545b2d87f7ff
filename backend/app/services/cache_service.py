"""
Redis caching service for trip listings.

CACHING STRATEGY
================

What we cache:
  - Public trip listing pages (paginated, JSON-serialized)
  - Cache key pattern: "trips:list:page={page}&size={size}"

Why:
  - Browsing the listing is by far the most frequent read
  - Serving from Redis: ~1ms vs a joined PostgreSQL query: ~15-50ms

What we never cache:
  - Seat counters used by the booking transaction. Every capacity check
    re-reads the trip row under lock; the cached `remaining_seats` on a
    listing page is display-only and may lag by up to one invalidation.

Invalidation strategy:
  - On booking create/cancel: delete all listing keys (remaining seats changed)
  - TTL-based expiry as safety net (5 minutes)

  All listing keys share the "trips:list:" prefix so we can SCAN and delete
  them. SCAN is O(N) on the keyspace but the number of cached pages is small.

Failure mode:
  Redis is advisory. Any Redis error is logged and the caller falls back to
  the database.
"""

import json
from typing import Optional

import redis.asyncio as redis
from app.core.config import get_settings
from app.core.logging import get_logger
from app.core.metrics import record_cache_operation

logger = get_logger(__name__)
settings = get_settings()

LIST_KEY_PREFIX = "trips:list:"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        try:
            _redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            await _redis_client.ping()
            logger.info("redis_connected", url=settings.REDIS_URL)
        except Exception as e:
            logger.error("redis_connection_failed", error=str(e))
            _redis_client = None
            return None

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def _make_trip_list_key(page: int, page_size: int) -> str:
    return f"{LIST_KEY_PREFIX}page={page}&size={page_size}"


async def get_cached_trips(page: int, page_size: int) -> Optional[dict]:
    """Retrieve a cached trip listing page."""
    client = await get_redis()
    if not client:
        return None

    key = _make_trip_list_key(page, page_size)
    try:
        data = await client.get(key)
        record_cache_operation("get", hit=bool(data))
        if data:
            logger.debug("cache_hit", key=key)
            return json.loads(data)
        logger.debug("cache_miss", key=key)
    except Exception as e:
        logger.error("cache_get_error", key=key, error=str(e))

    return None


async def set_cached_trips(page: int, page_size: int, data: dict) -> None:
    """Cache a trip listing page with TTL."""
    client = await get_redis()
    if not client:
        return

    key = _make_trip_list_key(page, page_size)
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        record_cache_operation("set", hit=False)
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except Exception as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_trip_cache() -> None:
    """Invalidate all cached trip listing pages."""
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{LIST_KEY_PREFIX}*", count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", keys_deleted=deleted)
    except Exception as e:
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except Exception as e:
        return {"status": "error", "error": str(e)}
