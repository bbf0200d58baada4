"""Canned Google Sheets rows shared by the feed service and feed API tests.

Each block mirrors the column layout of one live sheet tab: header row
first, then data rows including the edge cases the parsers must skip.
"""

from flowsms.integrations.sheets_gateway import FeedResult
from flowsms.services import building_info_service


def ok(rows):
    return FeedResult(ok=True, rows=rows, status_code=200)


def down():
    return FeedResult(ok=False, rows=[], status_code=503, error="HTTP 503")


# ── Project stats ────────────────────────────────────────────────────────


def _stats_row(plot, project, plot_area, gfa_allowed, gfa_achieved, units, efficiency):
    row = [""] * 33
    row[0], row[1], row[2] = plot, project, plot_area
    row[7], row[10] = gfa_allowed, gfa_achieved
    row[14] = efficiency
    row[17], row[18] = "10", "20"
    row[21] = units
    row[22], row[23], row[24] = "100", "90", "90%"
    row[27] = "4"
    return row


STATS_ROWS = [
    ["Plot #", "Project"] + [""] * 31,
    _stats_row("P-1", "Tower", "1,000", "10,000", "8,000", "120", "80%"),
    _stats_row("P-2", "Villas", "2,000", "10,000", "9,000", "80", "70%"),
    _stats_row("", "No plot", "5", "5", "5", "5", "5"),
]


# ── HR roster ────────────────────────────────────────────────────────────

HR_ROWS = [
    ["Sr. No.", "Name", "Title", "Status", "Office", "Reports To", "Remarks"],
    ["1", "Sarah Hassan", "Architect", "On-Board", "KSA", "Ahmed", ""],
    ["2", "Omar Faisal", "Designer", "on-board", "DXB", "Sarah", ""],
    ["3", "Lina Odeh", "Engineer", "TBJ", "KSA", "Ahmed", "Joins in May"],
    ["", "KSA Total", "", "", "", "", ""],
    ["4", "Grand Total", "", "", "", "", ""],
    ["Sr. No.", "Name", "", "", "", "", ""],
    ["5", "Maya Ruiz", "Planner", "On-Board", "MIA", "Sarah", ""],
]


# ── PXT register ─────────────────────────────────────────────────────────

def _pxt_row(sr_no, project, location, status, total_units, total_gfa):
    row = [""] * 20
    row[0], row[1], row[2], row[3] = sr_no, f"Plot {sr_no}", project, "12,000 sq ft"
    row[5], row[6] = location, status
    row[8] = "10"
    row[13] = total_units
    row[16] = total_gfa
    return row


PXT_ROWS = [
    ["Sr. No.", "Plot", "Project"] + [""] * 17,
    _pxt_row("1", "Brickell One", "MIA", "PIT", "100", "50,000"),
    _pxt_row("2", "Olaya Heights", "RYD", "POT", "60", "30,000"),
    _pxt_row("3", "Wynwood Lofts", "MIA", "", "40", "20,000"),
    _pxt_row("4", "", "RYD", "PHT", "10", "10"),
]


# ── Building information ─────────────────────────────────────────────────

def _column(group, field):
    for index, g, f, _kind in building_info_service.BUILDING_LAYOUT:
        if (g, f) == (group, field):
            return index
    raise KeyError((group, field))


def _building_row(values):
    row = [""] * building_info_service.COLUMN_COUNT
    for (group, field), value in values.items():
        row[_column(group, field)] = value
    return row


def _building(plot, name, dm, location, status, gfa, bua, passenger, service, leasable="-"):
    return _building_row({
        ("identity", "plot_no"): plot,
        ("identity", "marketing_name"): name,
        ("identity", "design_manager"): dm,
        ("identity", "location"): location,
        ("identity", "status"): status,
        ("identity", "far"): "4",
        ("gfa", "total_proposed_gfa_ft2"): gfa,
        ("residential_sellable", "leasable_ft2"): leasable,
        ("total_sellable", "total_sellable_ft2"): "1,000",
        ("total_sellable", "efficiency_sa_gfa"): "80%",
        ("unit_counts", "total"): "50",
        ("rental_condo_split", "studio.rental"): "6",
        ("lifts_height", "passenger_count"): passenger,
        ("lifts_height", "service_count"): service,
        ("parking_facade", "parking_proposed"): "30",
        ("bua", "bua_ft2"): bua,
    })


BUILDING_ROWS = [
    ["Plot No."] + [""] * (building_info_service.COLUMN_COUNT - 1),
    _building("MIA-01", "Brickell One", "Sarah", "MIA", "PIT", "20,000", "25,000", "4", "2", leasable="3,000"),
    _building("RYD-07", "Olaya Heights", "Sarah", "RYD", "POT", "10,000", "0", "2", "1"),
    _building("", "No plot", "Omar", "MIA", "PHT", "1", "1", "1", "1"),
]

