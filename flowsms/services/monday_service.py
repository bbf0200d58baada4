"""
Monday.com board metrics and PXT ↔ board mappings.

A PXT register project (by Sr. No.) can be linked to one Monday.com board.
Board items are classified by their status label into completed / stuck /
in progress / not started, and the timeline column gives the overall
start/end window.
"""

import json
import logging
from datetime import datetime, timezone

from flask import current_app

from flowsms.core.exceptions import NotFoundError, UpstreamError, ValidationError
from flowsms.ingest.csv_parser import round_half_up
from flowsms.integrations.monday_gateway import monday_gateway
from flowsms.models import db
from flowsms.models.monday import MondayBoardMapping
from flowsms.services.feed_settings import utc_now_iso

logger = logging.getLogger(__name__)

DEFAULT_STATUS = "Not Started"
DEFAULT_STATUS_COLOR = "#c4c4c4"

STATUS_COLUMN_TYPES = ("status", "color")
TIMELINE_COLUMN_TYPE = "timeline"

# Checked in order: a label matching several buckets lands in the first
STATUS_BUCKETS = (
    ("completed", ("done", "complete")),
    ("stuck", ("stuck", "block")),
    ("in_progress", ("progress", "working")),
)


def is_configured():
    return bool(current_app.config.get("MONDAY_API_TOKEN"))


# ── Metrics (pure) ───────────────────────────────────────────────────────


def _find_column(columns, types):
    for column in columns or []:
        if column.get("type") in types:
            return column
    return None


def _column_value(item, column):
    if column is None:
        return None
    for value in item.get("column_values") or []:
        if value.get("id") == column.get("id"):
            return value
    return None


def _load_json(raw):
    if not raw:
        return None
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return None
    return parsed if isinstance(parsed, dict) else None


def parse_status(column_value):
    """(label, colour) for one status cell."""
    if not column_value or not column_value.get("value"):
        return DEFAULT_STATUS, DEFAULT_STATUS_COLOR
    parsed = _load_json(column_value["value"])
    if parsed is None:
        return column_value.get("text") or DEFAULT_STATUS, DEFAULT_STATUS_COLOR
    label = column_value.get("text") or parsed.get("label") or DEFAULT_STATUS
    return label, parsed.get("color") or DEFAULT_STATUS_COLOR


def parse_timeline(column_value):
    """``{"from", "to"}`` for one timeline cell, or None."""
    if not column_value:
        return None
    parsed = _load_json(column_value.get("value"))
    if parsed and parsed.get("from") and parsed.get("to"):
        return {"from": parsed["from"], "to": parsed["to"]}
    return None


def classify_status(label):
    lowered = (label or "").lower()
    for bucket, needles in STATUS_BUCKETS:
        if any(n in lowered for n in needles):
            return bucket
    return "not_started"


def compute_project_metrics(board):
    """Completion summary for a board payload returned by the gateway."""
    columns = board.get("columns") or []
    status_column = _find_column(columns, STATUS_COLUMN_TYPES)
    timeline_column = _find_column(columns, (TIMELINE_COLUMN_TYPE,))
    raw_items = (board.get("items_page") or {}).get("items") or []

    items = []
    counts = {"completed": 0, "in_progress": 0, "stuck": 0, "not_started": 0}
    earliest_start = None
    latest_end = None

    for item in raw_items:
        status, color = parse_status(_column_value(item, status_column))
        timeline = parse_timeline(_column_value(item, timeline_column))
        counts[classify_status(status)] += 1
        if timeline:
            # ISO dates compare correctly as strings
            if earliest_start is None or timeline["from"] < earliest_start:
                earliest_start = timeline["from"]
            if latest_end is None or timeline["to"] > latest_end:
                latest_end = timeline["to"]
        items.append({
            "id": item.get("id"),
            "name": item.get("name"),
            "status": status,
            "status_color": color,
            "timeline": timeline,
        })

    total = len(items)
    return {
        "board_id": board.get("id"),
        "board_name": board.get("name"),
        "total_items": total,
        "completed_items": counts["completed"],
        "in_progress_items": counts["in_progress"],
        "stuck_items": counts["stuck"],
        "not_started_items": counts["not_started"],
        "completion_percentage": round_half_up(counts["completed"] / total * 100) if total else 0,
        "timeline": {"earliest_start": earliest_start, "latest_end": latest_end},
        "items": items,
        "last_fetched": utc_now_iso(),
    }


def get_project_metrics(board_id):
    board = monday_gateway.get_board(current_app.config.get("MONDAY_API_TOKEN"), board_id)
    if board is None:
        raise UpstreamError("monday", f"Board not found: {board_id}")
    return compute_project_metrics(board)


def get_project_board(sr_no):
    """Board metrics for a PXT project, or a ``has_board: False`` payload."""
    if not is_configured():
        return {"error": "Monday.com integration not configured", "has_board": False}

    mapping = MondayBoardMapping.query.filter_by(pxt_project_sr_no=sr_no).first()
    if mapping is None:
        return {"has_board": False, "message": "No Monday.com board linked to this project"}

    metrics = get_project_metrics(mapping.monday_board_id)
    mapping.last_synced_at = datetime.now(timezone.utc)
    mapping.board_name = metrics["board_name"]
    db.session.flush()
    logger.info("Synced Monday board %s for PXT project %s", mapping.monday_board_id, sr_no)
    return {"has_board": True, "metrics": metrics}


# ── Board mappings ───────────────────────────────────────────────────────


def list_mappings():
    return (
        MondayBoardMapping.query
        .order_by(MondayBoardMapping.created_at.desc(), MondayBoardMapping.id.desc())
        .all()
    )


def upsert_mapping(data):
    """Create or update the mapping for a Sr. No.  Returns (mapping, created)."""
    sr_no = str(data.get("pxt_project_sr_no") or "").strip()
    board_id = str(data.get("monday_board_id") or "").strip()
    if not sr_no or not board_id:
        raise ValidationError("pxt_project_sr_no and monday_board_id are required")

    mapping = MondayBoardMapping.query.filter_by(pxt_project_sr_no=sr_no).first()
    created = mapping is None
    if created:
        mapping = MondayBoardMapping(pxt_project_sr_no=sr_no)
        db.session.add(mapping)
    mapping.monday_board_id = board_id
    if "board_name" in data:
        mapping.board_name = data.get("board_name")
    db.session.flush()
    return mapping, created


def delete_mapping(sr_no):
    if not sr_no:
        raise ValidationError("pxt_project_sr_no query parameter is required")
    mapping = MondayBoardMapping.query.filter_by(pxt_project_sr_no=sr_no).first()
    if mapping is None:
        raise NotFoundError(resource="Board mapping", resource_id=sr_no)
    db.session.delete(mapping)
