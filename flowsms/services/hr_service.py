"""
HR roster feed.

Source: the employee LIST tab of the HR Google Sheet.

Columns (header in row 1):
    [0] Sr. No.   [1] Name   [2] Title   [3] Status ("On-Board" | "TBJ")
    [4] Office ("MIA" | "KSA" | "DXB")   [5] Reports To   [6] Remarks

A row is an employee only when its Sr. No. starts with a number and its
name does not look like an embedded header or subtotal line.
"""

import logging

from flask import current_app

from flowsms.ingest.csv_parser import TEXT, cell, data_rows, has_serial_number, map_row
from flowsms.integrations.sheets_gateway import sheets_gateway
from flowsms.services import cache_service
from flowsms.services.feed_settings import cache_ttl, feed_timeout, utc_now_iso

logger = logging.getLogger(__name__)

OFFICES = ("MIA", "KSA", "DXB")

STATUS_ON_BOARD = "on-board"
STATUS_TBJ = "tbj"

# Substrings marking header / subtotal rows inside the roster
SUMMARY_KEYWORDS = ("total", "overall", "sr.", "s.no", "grand")

EMPLOYEE_LAYOUT = (
    (0, "sr_no", TEXT),
    (1, "name", TEXT),
    (2, "title", TEXT),
    (3, "status", TEXT),
    (4, "office", TEXT),
    (5, "reports_to", TEXT),
    (6, "remarks", TEXT),
)


def is_summary_name(name):
    """True when *name* contains a header/subtotal keyword (case-insensitive)."""
    lowered = (name or "").lower()
    return any(keyword in lowered for keyword in SUMMARY_KEYWORDS)


def parse_employees(rows):
    """Employee dicts from roster rows (header first)."""
    employees = []
    for row in data_rows(rows):
        if not has_serial_number(cell(row, 0)):
            continue
        if is_summary_name(cell(row, 1)):
            logger.debug("Skipping summary row sr_no=%s name=%r", cell(row, 0), cell(row, 1))
            continue
        employees.append(map_row(row, EMPLOYEE_LAYOUT))
    return employees


def _has_status(employee, status):
    return employee["status"].lower() == status


def calculate_office_summaries(employees):
    """OVERALL first, then one ``"<OFFICE> OFFICE"`` summary per known office."""
    summaries = []
    for office in OFFICES:
        in_office = [e for e in employees if e["office"].upper() == office]
        on_board = sum(1 for e in in_office if _has_status(e, STATUS_ON_BOARD))
        tbj = sum(1 for e in in_office if _has_status(e, STATUS_TBJ))
        summaries.append({
            "office": f"{office} OFFICE",
            "total_employees": on_board + tbj,
            "on_board": on_board,
            "to_be_joined": tbj,
        })

    total_on_board = sum(1 for e in employees if _has_status(e, STATUS_ON_BOARD))
    total_tbj = sum(1 for e in employees if _has_status(e, STATUS_TBJ))
    summaries.insert(0, {
        "office": "OVERALL",
        "total_employees": total_on_board + total_tbj,
        "on_board": total_on_board,
        "to_be_joined": total_tbj,
    })
    return summaries


def build_hr_overview(employees):
    """Split the roster into on-board team and TBJ pipeline with headline stats."""
    team = [e for e in employees if _has_status(e, STATUS_ON_BOARD)]
    tbj = [e for e in employees if _has_status(e, STATUS_TBJ)]

    by_office: dict[str, int] = {}
    for e in team:
        if e["office"]:
            by_office[e["office"]] = by_office.get(e["office"], 0) + 1

    return {
        "team": team,
        "tbj": tbj,
        "stats": {
            "total_employees": len(team),
            "total_tbj": len(tbj),
            "by_office": by_office,
        },
        "office_summaries": calculate_office_summaries(employees),
    }


def get_hr_overview():
    """Fetch the roster tab and build the HR overview payload."""
    cfg = current_app.config
    result = sheets_gateway.fetch_csv_by_gid(
        cfg["HR_SHEET_ID"],
        cfg["HR_LIST_GID"],
        timeout=feed_timeout(),
        cache_ttl=cache_ttl(cache_service.HR_TTL),
    )
    overview = build_hr_overview(parse_employees(result.rows))
    overview["feed_status"] = result.feed_status
    overview["last_updated"] = utc_now_iso()
    return overview
