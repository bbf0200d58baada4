"""
Google Sheets CSV export gateway.

All reads of published spreadsheet tabs go through this class.  Two URL
shapes are supported:

  - by tab gid:   /spreadsheets/d/<id>/export?format=csv&gid=<gid>
  - by tab name:  /spreadsheets/d/<id>/gviz/tq?tqx=out:csv&sheet=<name>

Failure policy: a network error or non-200 response never raises.  The
caller gets a ``FeedResult`` with ``ok=False`` and no rows, and decides how
to surface that (feed services report ``feed_status: "unavailable"``).
There is no retry; the next request (or cache expiry) is the retry.

Successful responses are cached as parsed rows through ``cache_service``
when the caller passes ``cache_ttl``; failures are never cached.

Testability: pass a mock `session` to SheetsGateway() in tests, or
patch.object the module-level ``sheets_gateway`` singleton.
"""

from __future__ import annotations

import logging
import time

import requests

from flowsms.ingest.csv_parser import parse_csv
from flowsms.services import cache_service

logger = logging.getLogger(__name__)

SHEETS_BASE_URL = "https://docs.google.com/spreadsheets/d"

_DEFAULT_TIMEOUT = 15


class FeedResult:
    """Structured return value from feed gateway calls.

    Attributes:
        ok:           True when the source answered 2xx (or came from cache).
        rows:         Parsed CSV rows (header included) or raw records.
        status_code:  HTTP status code (None on network-level failure / cache hit).
        error:        Human-readable error message or None.
        duration_ms:  Round-trip latency in milliseconds.
        from_cache:   True when served from the feed cache.
    """

    def __init__(
        self,
        ok: bool,
        rows: list,
        status_code: int | None = None,
        error: str | None = None,
        duration_ms: int = 0,
        from_cache: bool = False,
    ) -> None:
        self.ok = ok
        self.rows = rows
        self.status_code = status_code
        self.error = error
        self.duration_ms = duration_ms
        self.from_cache = from_cache

    @property
    def feed_status(self) -> str:
        return "ok" if self.ok else "unavailable"

    def __repr__(self):
        return (
            f"<FeedResult ok={self.ok} rows={len(self.rows)} "
            f"status={self.status_code} cache={self.from_cache}>"
        )


class SheetsGateway:
    """Google Sheets CSV export gateway.

    Usage:
        from flowsms.integrations.sheets_gateway import sheets_gateway
        result = sheets_gateway.fetch_csv_by_gid(sheet_id, gid, cache_ttl=60)
        if result.ok:
            rows = result.rows
    """

    def __init__(self, session: requests.Session | None = None) -> None:
        # Inject custom session for testing; create real one lazily otherwise.
        self._session: requests.Session | None = session

    # ── HTTP session ─────────────────────────────────────────────────────────

    @property
    def session(self) -> requests.Session:
        """Return (or lazily create) the requests.Session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    # ── URL builders ─────────────────────────────────────────────────────────

    @staticmethod
    def export_url(sheet_id: str) -> str:
        return f"{SHEETS_BASE_URL}/{sheet_id}/export"

    @staticmethod
    def gviz_url(sheet_id: str) -> str:
        return f"{SHEETS_BASE_URL}/{sheet_id}/gviz/tq"

    # ── Public operations ────────────────────────────────────────────────────

    def fetch_csv_by_gid(
        self,
        sheet_id: str,
        gid: str,
        *,
        timeout: int = _DEFAULT_TIMEOUT,
        cache_ttl: int | None = None,
    ) -> FeedResult:
        """Fetch and parse one tab addressed by its numeric gid."""
        return self._fetch(
            self.export_url(sheet_id),
            {"format": "csv", "gid": gid},
            cache_key=cache_service.feed_key("sheets", sheet_id, f"gid={gid}"),
            timeout=timeout,
            cache_ttl=cache_ttl,
        )

    def fetch_csv_by_name(
        self,
        sheet_id: str,
        sheet_name: str,
        *,
        timeout: int = _DEFAULT_TIMEOUT,
        cache_ttl: int | None = None,
    ) -> FeedResult:
        """Fetch and parse one tab addressed by its tab name (gviz endpoint)."""
        return self._fetch(
            self.gviz_url(sheet_id),
            {"tqx": "out:csv", "sheet": sheet_name},
            cache_key=cache_service.feed_key("sheets", sheet_id, f"sheet={sheet_name}"),
            timeout=timeout,
            cache_ttl=cache_ttl,
        )

    # ── Core fetch ───────────────────────────────────────────────────────────

    def _fetch(
        self,
        url: str,
        params: dict,
        *,
        cache_key: str,
        timeout: int,
        cache_ttl: int | None,
    ) -> FeedResult:
        if cache_ttl:
            cached = cache_service.get_cached(cache_key)
            if cached is not None:
                return FeedResult(ok=True, rows=cached, from_cache=True)

        t0 = time.perf_counter()
        try:
            resp = self.session.get(url, params=params, timeout=timeout)
        except requests.RequestException as exc:
            duration_ms = int((time.perf_counter() - t0) * 1000)
            logger.warning(
                "Sheet fetch failed url=%s params=%s error=%s", url, params, exc,
                extra={"feed": "sheets", "feed_status": "unavailable"},
            )
            return FeedResult(
                ok=False, rows=[], error=str(exc)[:500], duration_ms=duration_ms,
            )
        duration_ms = int((time.perf_counter() - t0) * 1000)

        if resp.status_code != 200:
            logger.warning(
                "Sheet fetch failed url=%s params=%s status=%d", url, params, resp.status_code,
                extra={"feed": "sheets", "feed_status": "unavailable", "status": resp.status_code},
            )
            return FeedResult(
                ok=False,
                rows=[],
                status_code=resp.status_code,
                error=f"HTTP {resp.status_code}",
                duration_ms=duration_ms,
            )

        rows = parse_csv(resp.text)
        logger.debug("Sheet fetched url=%s rows=%d (%dms)", url, len(rows), duration_ms)
        if cache_ttl:
            cache_service.set_cached(cache_key, rows, ttl=cache_ttl)
        return FeedResult(
            ok=True, rows=rows, status_code=resp.status_code, duration_ms=duration_ms,
        )


# Module-level singleton
sheets_gateway = SheetsGateway()
