"""
Feed Cache Service

Short-lived cache for rows fetched from the external feeds:
  - Google Sheets CSV exports (30–60 s)
  - Airtable category tables (5 min)

Backed by Redis when REDIS_URL is a redis:// URL, otherwise by an
in-process dict.  Values are JSON-encoded so both backends return the
same types.  Every key lives under ``feed:`` so flushing the cache never
touches the rate limiter's keys when both share one Redis.
"""

import fnmatch
import json
import logging
import os
import time

logger = logging.getLogger(__name__)

KEY_PREFIX = "feed"

# Per-feed TTLs (seconds)
HR_TTL = 60
PROJECT_STATS_TTL = 60
PXT_TTL = 30
BUILDING_INFO_TTL = 60
AIRTABLE_TTL = 300
DEFAULT_TTL = 60


class _MemoryBackend:
    """Process-local stand-in exposing the subset of the Redis API used here."""

    def __init__(self):
        self._entries = {}  # key → (json text, expires at)

    def get(self, key):
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if time.time() >= expires_at:
            del self._entries[key]
            return None
        return value

    def setex(self, key, ttl_seconds, value):
        self._entries[key] = (value, time.time() + ttl_seconds)

    def delete(self, *keys):
        for key in keys:
            self._entries.pop(key, None)

    def scan_iter(self, match="*"):
        return [key for key in list(self._entries) if fnmatch.fnmatchcase(key, match)]

    def ping(self):
        return True


_backend = None


def _get_backend():
    """Connect to Redis on first use; fall back to memory when it is absent or down."""
    global _backend
    if _backend is not None:
        return _backend

    redis_url = os.getenv("REDIS_URL", "")
    if redis_url.startswith(("redis://", "rediss://")):
        import redis

        try:
            client = redis.from_url(redis_url, decode_responses=True, socket_timeout=2)
            client.ping()
            _backend = client
            logger.info("Feed cache: Redis at %s", redis_url.rsplit("@", 1)[-1])
        except redis.RedisError as exc:
            logger.warning("Redis unavailable (%s); feed cache falls back to memory", exc)
            _backend = _MemoryBackend()
    else:
        _backend = _MemoryBackend()
    return _backend


def feed_key(source, *parts):
    """``feed:<source>:<part>…``, e.g. ``feed:sheets:<sheet id>:gid=0``."""
    return ":".join([KEY_PREFIX, source, *(str(p) for p in parts)])


def get_cached(key):
    """Cached value, or None on a miss or an undecodable entry."""
    raw = _get_backend().get(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.warning("Dropping undecodable cache entry %s", key)
        return None


def set_cached(key, value, ttl=DEFAULT_TTL):
    _get_backend().setex(key, ttl, json.dumps(value))


def _delete_matching(pattern):
    backend = _get_backend()
    keys = list(backend.scan_iter(match=pattern))
    if keys:
        backend.delete(*keys)
    return len(keys)


def invalidate_feed(source):
    """Drop every entry cached for *source*; returns how many were removed."""
    return _delete_matching(feed_key(source, "*"))


def clear_all():
    """Drop every feed entry."""
    return _delete_matching(f"{KEY_PREFIX}:*")


def health_check():
    """Backend name and ping result for the readiness probe."""
    backend = _get_backend()
    name = "memory" if isinstance(backend, _MemoryBackend) else "redis"
    try:
        backend.ping()
    except Exception as exc:
        return {"status": "error", "backend": name, "detail": str(exc)}
    return {"status": "ok", "backend": name}
