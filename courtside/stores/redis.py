"""Redis store for caching.

Handles:
- Caching with TTL policies
- Timestamped cache entries whose freshness is checked by the reader

TTL policies:
- Upstream standings snapshot per division: 1 hour
- Composite /analyze responses: 1 hour

Entries are stored as {"timestamp": epoch_ms, "payload": ..., "gender": ...}.
Redis expires keys on its own, but readers must still reject entries whose
embedded timestamp is older than MAX_ENTRY_AGE_MS.
"""

import json
import logging
import time
from typing import Any

import redis.asyncio as redis

from courtside.schemas.common import Gender
from courtside.settings import get_settings

# Freshness window for timestamped entries (milliseconds)
MAX_ENTRY_AGE_MS = 3_600_000  # 1 hour

# Key prefixes
PREFIX_STANDINGS = "ncaa:standings:"
PREFIX_ANALYZE = "ncaa:analyze:"

# Redis client (initialized on startup)
_redis: redis.Redis | None = None
logger = logging.getLogger("uvicorn.error")


async def init_redis() -> None:
    """Initialize Redis connection."""
    global _redis
    settings = get_settings()
    _redis = redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    await _redis.ping()
    logger.info("Redis connected")


async def close_redis() -> None:
    """Close Redis connection."""
    global _redis
    if _redis:
        await _redis.aclose()
        _redis = None


def _get_redis() -> redis.Redis:
    """Get Redis client instance."""
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis


# ============================================================
# Generic cache operations
# ============================================================


async def cache_get(key: str) -> str | None:
    return await _get_redis().get(key)


async def cache_set(key: str, value: str, ttl: int) -> None:
    """Set value with a TTL in seconds."""
    await _get_redis().setex(key, ttl, value)


async def cache_get_json(key: str) -> Any | None:
    value = await cache_get(key)
    if value:
        return json.loads(value)
    return None


async def cache_set_json(key: str, value: Any, ttl: int) -> None:
    await cache_set(key, json.dumps(value), ttl)


# ============================================================
# Timestamped entries
# ============================================================


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def is_fresh_entry(entry: Any, *, now: int, max_age_ms: int = MAX_ENTRY_AGE_MS) -> bool:
    """True if `entry` is a timestamped cache entry younger than `max_age_ms`."""
    if not isinstance(entry, dict) or "payload" not in entry:
        return False
    timestamp = entry.get("timestamp")
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        return False
    return now - timestamp < max_age_ms


async def get_fresh_entry(key: str, *, now: int | None = None) -> Any | None:
    """Get the payload of a timestamped entry, or None when absent or stale."""
    entry = await cache_get_json(key)
    if entry is None:
        return None
    if not is_fresh_entry(entry, now=now_ms() if now is None else now):
        return None
    return entry["payload"]


async def set_entry(key: str, payload: Any, *, gender: Gender, timestamp: int | None = None) -> None:
    """Store a timestamped entry with the configured Redis expiration."""
    entry = {
        "timestamp": now_ms() if timestamp is None else timestamp,
        "payload": payload,
        "gender": gender.value,
    }
    await cache_set_json(key, entry, get_settings().cache_ttl_seconds)


def standings_cache_key(gender: Gender) -> str:
    return f"{PREFIX_STANDINGS}{gender.value}"


def analyze_cache_key(gender: Gender, fingerprint: str) -> str:
    return f"{PREFIX_ANALYZE}{gender.value}:{fingerprint}"
