"""
PXT plot register feed.

Source: the MASTER tab of the PXT Google Sheet, read through the gviz CSV
endpoint (every cell arrives quoted).

Columns used:
    [0] Sr. No.      [1] Plot name     [2] Project name   [3] Plot area (text)
    [5] Location (MIA | RYD)           [6] Status (PIT | POT | PHT, blank → PIT)
    [7..13]  unit mix: studio, 1BR, 2BR, 3BR, 4BR, liner, total
    [14..16] GFA: residential, commercial, total
    [17..19] sellable area: residential, commercial, total

Rows need both a Sr. No. and a project name.
"""

import logging

from flask import current_app

from flowsms.ingest.csv_parser import NUMBER, cell, data_rows, map_row
from flowsms.integrations.sheets_gateway import sheets_gateway
from flowsms.services import cache_service
from flowsms.services.feed_settings import cache_ttl, feed_timeout, utc_now_iso

logger = logging.getLogger(__name__)

STATUSES = ("PIT", "POT", "PHT")
LOCATIONS = ("MIA", "RYD")
DEFAULT_STATUS = "PIT"

UNIT_MIX_LAYOUT = (
    (7, "studio", NUMBER),
    (8, "one_br", NUMBER),
    (9, "two_br", NUMBER),
    (10, "three_br", NUMBER),
    (11, "four_br", NUMBER),
    (12, "liner", NUMBER),
    (13, "total", NUMBER),
)
GFA_LAYOUT = (
    (14, "residential", NUMBER),
    (15, "commercial", NUMBER),
    (16, "total", NUMBER),
)
SELLABLE_LAYOUT = (
    (17, "residential", NUMBER),
    (18, "commercial", NUMBER),
    (19, "total", NUMBER),
)


def _parse_project(row):
    return {
        "sr_no": cell(row, 0),
        "plot_name": cell(row, 1),
        "project_name": cell(row, 2),
        "plot_area": cell(row, 3),
        "location": cell(row, 5),
        "status": cell(row, 6) or DEFAULT_STATUS,
        "unit_mix": map_row(row, UNIT_MIX_LAYOUT),
        "gfa": map_row(row, GFA_LAYOUT),
        "sellable_area": map_row(row, SELLABLE_LAYOUT),
    }


def parse_pxt_projects(rows):
    """Register rows (header first) → project dicts."""
    return [
        _parse_project(row)
        for row in data_rows(rows)
        if cell(row, 0) and cell(row, 2)
    ]


def filter_projects(projects, status=None, location=None):
    """Apply status/location filters; unrecognised values are ignored."""
    status = (status or "").upper()
    location = (location or "").upper()
    if status in STATUSES:
        projects = [p for p in projects if p["status"] == status]
    if location in LOCATIONS:
        projects = [p for p in projects if p["location"] == location]
    return projects


def calculate_pxt_stats(projects):
    """Register-wide counts and totals (always over the unfiltered list)."""
    return {
        "total": len(projects),
        "pit": sum(1 for p in projects if p["status"] == "PIT"),
        "pot": sum(1 for p in projects if p["status"] == "POT"),
        "pht": sum(1 for p in projects if p["status"] == "PHT"),
        "by_location": {
            "miami": sum(1 for p in projects if p["location"] == "MIA"),
            "riyadh": sum(1 for p in projects if p["location"] == "RYD"),
        },
        "total_units": sum(p["unit_mix"]["total"] for p in projects),
        "total_gfa": sum(p["gfa"]["total"] for p in projects),
    }


def group_by_status(projects):
    return {s.lower(): [p for p in projects if p["status"] == s] for s in STATUSES}


def debug_layout(rows):
    """Numbered header and first data row, for checking the column mapping."""
    header = rows[0] if rows else []
    first_row = rows[1] if len(rows) > 1 else []
    return {
        "headers": [f"[{i}] {h}" for i, h in enumerate(header)],
        "first_row": [f"[{i}] {v}" for i, v in enumerate(first_row)],
        "total_rows": max(len(rows) - 1, 0),
    }


def _fetch_rows():
    cfg = current_app.config
    return sheets_gateway.fetch_csv_by_name(
        cfg["PXT_SHEET_ID"],
        cfg["PXT_SHEET_NAME"],
        timeout=feed_timeout(),
        cache_ttl=cache_ttl(cache_service.PXT_TTL),
    )


def get_pxt_register(status=None, location=None, debug=False):
    """Register payload: filtered projects, status groups and stats."""
    result = _fetch_rows()
    if debug:
        payload = debug_layout(result.rows)
        payload["feed_status"] = result.feed_status
        return payload

    projects = parse_pxt_projects(result.rows)
    return {
        "projects": filter_projects(projects, status, location),
        "grouped": group_by_status(projects),
        "stats": calculate_pxt_stats(projects),
        "feed_status": result.feed_status,
        "last_updated": utc_now_iso(),
    }


def find_project(sr_no):
    """Look up one register project by Sr. No. (None when absent)."""
    for project in parse_pxt_projects(_fetch_rows().rows):
        if project["sr_no"] == str(sr_no):
            return project
    return None
