"""
Monday.com GraphQL gateway.

Every call is a single ``POST https://api.monday.com/v2`` with the raw API
token in ``Authorization`` (Monday does not use the Bearer prefix) and a
pinned ``API-Version`` header.

Unlike the spreadsheet feeds, Monday failures raise: board metrics are
requested for one project on demand, and a silent empty board would read
as "0 % complete".

  - no token             → FeedNotConfiguredError
  - non-2xx / network    → UpstreamError
  - GraphQL ``errors``   → UpstreamError (first message)

Testability: pass a mock `session` to MondayGateway() in tests, or
patch.object the module-level ``monday_gateway`` singleton.
"""

from __future__ import annotations

import logging

import requests

from flowsms.core.exceptions import FeedNotConfiguredError, UpstreamError

logger = logging.getLogger(__name__)

MONDAY_API_URL = "https://api.monday.com/v2"
MONDAY_API_VERSION = "2024-01"
ITEMS_PAGE_LIMIT = 500

_DEFAULT_TIMEOUT = 30

BOARD_QUERY = """
query GetBoard($boardId: [ID!]) {
  boards(ids: $boardId) {
    id
    name
    description
    state
    columns {
      id
      title
      type
    }
    items_page(limit: %d) {
      cursor
      items {
        id
        name
        state
        column_values {
          id
          text
          value
          type
        }
      }
    }
  }
}
""" % ITEMS_PAGE_LIMIT


class MondayGateway:
    """Monday.com GraphQL client.

    Usage:
        from flowsms.integrations.monday_gateway import monday_gateway
        board = monday_gateway.get_board(token, "1234567890")
    """

    def __init__(self, session: requests.Session | None = None) -> None:
        self._session: requests.Session | None = session

    @property
    def session(self) -> requests.Session:
        """Return (or lazily create) the requests.Session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def query(
        self,
        token: str | None,
        query: str,
        variables: dict | None = None,
        *,
        timeout: int = _DEFAULT_TIMEOUT,
    ) -> dict:
        """Run a GraphQL query and return its ``data`` object."""
        if not token:
            raise FeedNotConfiguredError("monday", "MONDAY_API_TOKEN")

        headers = {
            "Content-Type": "application/json",
            "Authorization": token,
            "API-Version": MONDAY_API_VERSION,
        }
        try:
            resp = self.session.post(
                MONDAY_API_URL,
                json={"query": query, "variables": variables or {}},
                headers=headers,
                timeout=timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Monday request failed error=%s", exc)
            raise UpstreamError("monday", str(exc)[:500]) from exc

        if not resp.ok:
            logger.warning("Monday request failed status=%d", resp.status_code)
            raise UpstreamError(
                "monday", f"API error: {resp.status_code} {resp.reason}", resp.status_code,
            )

        try:
            body = resp.json()
        except ValueError as exc:
            raise UpstreamError("monday", "Invalid JSON response", resp.status_code) from exc

        errors = body.get("errors") or []
        if errors:
            message = errors[0].get("message", "unknown error") if isinstance(errors[0], dict) else str(errors[0])
            logger.warning("Monday GraphQL error: %s", message)
            raise UpstreamError("monday", f"GraphQL error: {message}", resp.status_code)

        return body.get("data") or {}

    def get_board(self, token: str | None, board_id: str) -> dict | None:
        """Fetch one board with its columns and up to 500 items, or None."""
        data = self.query(token, BOARD_QUERY, {"boardId": [str(board_id)]})
        boards = data.get("boards") or []
        return boards[0] if boards else None


# Module-level singleton
monday_gateway = MondayGateway()
