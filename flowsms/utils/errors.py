"""JSON error bodies shared by every blueprint.

    from flowsms.utils.errors import E, api_error

    return api_error(E.NOT_FOUND, "Task not found")
    return api_error(E.FEED_NOT_CONFIGURED, "Airtable token missing",
                     details={"feed": "airtable"})

Body shape: ``{"error": <message>, "code": <E.*>, "details": {...}}``;
``details`` is omitted when empty.
"""

from __future__ import annotations

from flask import jsonify


class E:
    """Error codes returned in the ``code`` field."""

    VALIDATION_REQUIRED = "ERR_VALIDATION_REQUIRED"
    VALIDATION_INVALID = "ERR_VALIDATION_INVALID"
    UNAUTHORIZED = "ERR_UNAUTHORIZED"
    FORBIDDEN = "ERR_FORBIDDEN"
    NOT_FOUND = "ERR_NOT_FOUND"
    CONFLICT_DUPLICATE = "ERR_CONFLICT_DUPLICATE"
    UPSTREAM = "ERR_UPSTREAM"
    FEED_NOT_CONFIGURED = "ERR_FEED_NOT_CONFIGURED"
    DATABASE = "ERR_DATABASE"
    INTERNAL = "ERR_INTERNAL"


# HTTP status used when api_error() is not given one
STATUS_FOR_CODE: dict[str, int] = {
    E.VALIDATION_REQUIRED: 400,
    E.VALIDATION_INVALID: 400,
    E.UNAUTHORIZED: 401,
    E.FORBIDDEN: 403,
    E.NOT_FOUND: 404,
    E.CONFLICT_DUPLICATE: 409,
    E.UPSTREAM: 502,
    E.FEED_NOT_CONFIGURED: 503,
    E.DATABASE: 500,
    E.INTERNAL: 500,
}


def api_error(code: str, message: str, *, status: int | None = None, details: dict | None = None):
    """``(response, status)`` tuple for a Flask view.

    *status* overrides the code's default; unknown codes fall back to 400.
    """
    body: dict = {"error": message, "code": code}
    if details:
        body["details"] = details
    return jsonify(body), status or STATUS_FOR_CODE.get(code, 400)
