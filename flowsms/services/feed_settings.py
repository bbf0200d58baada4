"""Per-request feed settings read from the Flask config."""

from datetime import datetime, timezone

from flask import current_app


def feed_timeout() -> int:
    return int(current_app.config.get("FEED_TIMEOUT_SECONDS", 15))


def cache_ttl(ttl: int) -> int | None:
    """Return *ttl* when feed caching is enabled, else None (no cache)."""
    if not current_app.config.get("FEED_CACHE_ENABLED", True):
        return None
    return ttl


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
