"""
Project Statistics feed — design-stage area/unit/parking figures per plot.

Source: the "Project Stats" tab of the statistics Google Sheet (one row per
plot, columns A–AG, header in row 1).  Rows without a plot number are
skipped.  Aggregates are recomputed from the parsed rows on every call.
"""

import logging

from flask import current_app

from flowsms.ingest.csv_parser import NUMBER, TEXT, cell, data_rows, map_row
from flowsms.integrations.sheets_gateway import sheets_gateway
from flowsms.services import cache_service
from flowsms.services.feed_settings import cache_ttl, feed_timeout, utc_now_iso

logger = logging.getLogger(__name__)

# Column A..AG, in sheet order
_FIELDS = (
    ("plot_number", TEXT),               # A  Plot #
    ("project", TEXT),                   # B  Project
    ("plot_area", NUMBER),               # C  Plot Area (m²)
    ("far", NUMBER),                     # D  FAR
    ("configuration", TEXT),             # E  Configuration
    ("residential_gfa_allowed", NUMBER), # F
    ("commercial_gfa_allowed", NUMBER),  # G
    ("total_gfa_allowed", NUMBER),       # H
    ("residential_gfa_achieved", NUMBER),  # I
    ("commercial_gfa_achieved", NUMBER), # J
    ("total_gfa_achieved", NUMBER),      # K
    ("suite_sellable", NUMBER),          # L
    ("balcony_sellable", NUMBER),        # M
    ("total_sellable", NUMBER),          # N
    ("sellable_efficiency", NUMBER),     # O  (%)
    ("amenities", NUMBER),               # P
    ("efficiency_amenities", NUMBER),    # Q  (%)
    ("units_1bd", NUMBER),               # R
    ("units_2bd", NUMBER),               # S
    ("units_3bd", NUMBER),               # T
    ("units_4bd", NUMBER),               # U
    ("total_units", NUMBER),             # V
    ("parking_required", NUMBER),        # W
    ("parking_proposed", NUMBER),        # X
    ("parking_efficiency", NUMBER),      # Y  (%)
    ("passenger_lifts", NUMBER),         # Z
    ("service_lifts", NUMBER),           # AA
    ("total_lifts", NUMBER),             # AB
    ("bua", NUMBER),                     # AC BUA (m²)
    ("gfa_bua_ratio", NUMBER),           # AD
    ("dmd", NUMBER),                     # AE DMD (m)
    ("ols", NUMBER),                     # AF OLS (m)
    ("height", NUMBER),                  # AG Height (m)
)
PROJECT_STATS_LAYOUT = tuple((i, field, kind) for i, (field, kind) in enumerate(_FIELDS))


def parse_project_stats(rows):
    """Map sheet rows (header first) to project-stat dicts."""
    return [
        map_row(row, PROJECT_STATS_LAYOUT)
        for row in data_rows(rows)
        if cell(row, 0).strip()
    ]


def _sum(projects, field):
    return sum(p[field] for p in projects)


def _avg(projects, field):
    return _sum(projects, field) / len(projects) if projects else 0


def calculate_aggregated_stats(projects):
    """Portfolio totals and simple averages over parsed project rows."""
    total_gfa_allowed = _sum(projects, "total_gfa_allowed")
    total_gfa_achieved = _sum(projects, "total_gfa_achieved")
    return {
        "total_projects": len(projects),
        "total_plot_area": _sum(projects, "plot_area"),
        "total_gfa_allowed": total_gfa_allowed,
        "total_gfa_achieved": total_gfa_achieved,
        "gfa_utilization": (
            total_gfa_achieved / total_gfa_allowed * 100 if total_gfa_allowed > 0 else 0
        ),
        "total_sellable": _sum(projects, "total_sellable"),
        "avg_sellable_efficiency": _avg(projects, "sellable_efficiency"),
        "total_units": _sum(projects, "total_units"),
        "unit_mix": {
            "bd1": _sum(projects, "units_1bd"),
            "bd2": _sum(projects, "units_2bd"),
            "bd3": _sum(projects, "units_3bd"),
            "bd4": _sum(projects, "units_4bd"),
        },
        "total_parking_required": _sum(projects, "parking_required"),
        "total_parking_proposed": _sum(projects, "parking_proposed"),
        "avg_parking_efficiency": _avg(projects, "parking_efficiency"),
        "total_lifts": _sum(projects, "total_lifts"),
    }


def get_project_stats():
    """Fetch, parse and aggregate the project statistics tab."""
    cfg = current_app.config
    result = sheets_gateway.fetch_csv_by_gid(
        cfg["PROJECT_STATS_SHEET_ID"],
        cfg["PROJECT_STATS_GID"],
        timeout=feed_timeout(),
        cache_ttl=cache_ttl(cache_service.PROJECT_STATS_TTL),
    )
    projects = parse_project_stats(result.rows)
    logger.debug("Project stats parsed: %d plots (feed %s)", len(projects), result.feed_status)
    return {
        "projects": projects,
        "aggregated": calculate_aggregated_stats(projects),
        "feed_status": result.feed_status,
        "last_updated": utc_now_iso(),
    }
