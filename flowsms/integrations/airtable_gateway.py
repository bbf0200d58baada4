"""
Airtable REST gateway (read-only).

Tables are read page by page (``pageSize=100``) following the ``offset``
cursor until Airtable stops returning one.  A non-200 page or a network
error ends the loop: the records gathered so far are returned with
``ok=False`` so the caller can still show a partial table.

Testability: pass a mock `session` to AirtableGateway() in tests, or
patch.object the module-level ``airtable_gateway`` singleton.
"""

from __future__ import annotations

import logging
import time
from urllib.parse import quote

import requests

from flowsms.integrations.sheets_gateway import FeedResult

logger = logging.getLogger(__name__)

AIRTABLE_API_URL = "https://api.airtable.com/v0"
PAGE_SIZE = 100

# Hard stop against a misbehaving offset cursor (100 pages = 10k records)
_MAX_PAGES = 100
_DEFAULT_TIMEOUT = 15


class AirtableGateway:
    """Airtable table reader.

    Usage:
        from flowsms.integrations.airtable_gateway import airtable_gateway
        result = airtable_gateway.fetch_table(token, base_id, "01 SURFACE")
        for record in result.rows:
            record["fields"]
    """

    def __init__(self, session: requests.Session | None = None) -> None:
        self._session: requests.Session | None = session

    @property
    def session(self) -> requests.Session:
        """Return (or lazily create) the requests.Session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    @staticmethod
    def table_url(base_id: str, table_name: str) -> str:
        return f"{AIRTABLE_API_URL}/{base_id}/{quote(table_name, safe='')}"

    def fetch_table(
        self,
        token: str,
        base_id: str,
        table_name: str,
        *,
        timeout: int = _DEFAULT_TIMEOUT,
    ) -> FeedResult:
        """Read every record of *table_name*, following the offset cursor.

        Returns:
            FeedResult whose ``rows`` are raw Airtable records
            (``{"id": ..., "fields": {...}}``).  ``ok`` is False when any
            page failed; ``rows`` then holds the pages read before it.
        """
        url = self.table_url(base_id, table_name)
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        records: list[dict] = []
        offset: str | None = None
        t0 = time.perf_counter()

        for _page in range(_MAX_PAGES):
            params = {"pageSize": PAGE_SIZE}
            if offset:
                params["offset"] = offset

            try:
                resp = self.session.get(url, headers=headers, params=params, timeout=timeout)
            except requests.RequestException as exc:
                logger.warning(
                    "Airtable fetch failed table=%r error=%s", table_name, exc,
                    extra={"feed": "airtable", "feed_status": "unavailable"},
                )
                return FeedResult(
                    ok=False,
                    rows=records,
                    error=str(exc)[:500],
                    duration_ms=int((time.perf_counter() - t0) * 1000),
                )

            if resp.status_code != 200:
                logger.warning(
                    "Airtable fetch failed table=%r status=%d", table_name, resp.status_code,
                    extra={"feed": "airtable", "feed_status": "unavailable", "status": resp.status_code},
                )
                return FeedResult(
                    ok=False,
                    rows=records,
                    status_code=resp.status_code,
                    error=f"HTTP {resp.status_code}",
                    duration_ms=int((time.perf_counter() - t0) * 1000),
                )

            try:
                body = resp.json()
            except ValueError:
                logger.warning("Airtable returned non-JSON body table=%r", table_name)
                return FeedResult(
                    ok=False,
                    rows=records,
                    status_code=resp.status_code,
                    error="Invalid JSON response",
                    duration_ms=int((time.perf_counter() - t0) * 1000),
                )

            records.extend(body.get("records") or [])
            offset = body.get("offset")
            if not offset:
                break
        else:
            logger.warning("Airtable pagination stopped after %d pages table=%r", _MAX_PAGES, table_name)

        return FeedResult(
            ok=True,
            rows=records,
            status_code=200,
            duration_ms=int((time.perf_counter() - t0) * 1000),
        )


# Module-level singleton
airtable_gateway = AirtableGateway()
