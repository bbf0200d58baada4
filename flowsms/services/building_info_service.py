"""
Building Information Summary feed — the 96-column design schema per plot.

Source: the building-info tab configured by ``BUILDING_INFO_SHEET_ID`` /
``BUILDING_INFO_GID``.  Each row is one plot; columns are mapped purely by
position into fifteen groups (identity, GFA, residential / commercial /
total sellable, AMI, unit counts, unit-mix %, balcony %, rental/condo
split, retail & grid, MEP loads, parking & facade, lifts & height, BUA).

Two fields are derived rather than read:
    lifts_height.total_lifts = passenger_count + service_count
    bua.gfa_over_bua         = gfa.total_proposed_gfa_ft2 / bua.bua_ft2 (0 when BUA is 0)

``leasable_ft2`` is nullable: blank or ``-`` means "no leasable area
reported", not zero.
"""

import logging

from flask import current_app

from flowsms.core.exceptions import FeedNotConfiguredError, NotFoundError
from flowsms.ingest.csv_parser import NULLABLE, NUMBER, TEXT, cell, data_rows, read_cell
from flowsms.integrations.sheets_gateway import sheets_gateway
from flowsms.services import cache_service
from flowsms.services.feed_settings import cache_ttl, feed_timeout, utc_now_iso

logger = logging.getLogger(__name__)

_UNIT_TYPES = ("studio", "one_bed", "two_bed", "three_bed", "four_bed", "liner")

_SELLABLE_FIELDS = (
    ("suite_sellable_ft2", NUMBER),
    ("suite_sellable_ratio", NUMBER),
    ("balcony_sa_ft2", NUMBER),
    ("leasable_ft2", NULLABLE),
    ("balcony_ratio", NUMBER),
    ("total_sellable_ft2", NUMBER),
    ("non_sellable_ft2", NUMBER),
    ("non_sellable_ratio", NUMBER),
    ("efficiency_sa_gfa", NUMBER),
)

# (group, fields) in sheet column order
_GROUPS = (
    ("identity", (
        ("plot_no", TEXT),
        ("marketing_name", TEXT),
        ("design_manager", TEXT),
        ("location", TEXT),
        ("status", TEXT),
        ("number_of_buildings", NUMBER),
        ("plot_area_ft2", NUMBER),
        ("far", NUMBER),
    )),
    ("gfa", (
        ("res_proposed_gfa_ft2", NUMBER),
        ("res_proposed_gfa_pct", NUMBER),
        ("com_proposed_gfa_ft2", NUMBER),
        ("com_proposed_gfa_pct", NUMBER),
        ("total_proposed_gfa_ft2", NUMBER),
    )),
    ("residential_sellable", _SELLABLE_FIELDS),
    ("commercial_sellable", _SELLABLE_FIELDS),
    ("total_sellable", tuple(f for f in _SELLABLE_FIELDS if f[0] != "leasable_ft2")),
    ("ami", (
        ("area_ft2", NUMBER),
        ("pct", NUMBER),
    )),
    ("unit_counts", tuple((u, NUMBER) for u in _UNIT_TYPES) + (("total", NUMBER),)),
    ("unit_mix_pct", tuple((u, NUMBER) for u in _UNIT_TYPES)),
    ("balcony_pct", tuple((u, NUMBER) for u in _UNIT_TYPES)),
    ("rental_condo_split", tuple(
        (f"{u}.{tenure}", NUMBER) for u in _UNIT_TYPES for tenure in ("rental", "condo")
    )),
    ("retail_grid", (
        ("grid_ft", NUMBER),
        ("retail_small_qty", NUMBER),
        ("retail_corner_qty", NUMBER),
        ("retail_regular_qty", NUMBER),
    )),
    ("mep", (
        ("electrical_load_kw", NUMBER),
        ("cooling_load_tr", NUMBER),
        ("water_demand_ft3_day", NUMBER),
        ("sewerage_demand_ft3_day", NUMBER),
        ("gas_demand_ft3_hr", NUMBER),
    )),
    ("parking_facade", (
        ("parking_required", NUMBER),
        ("parking_proposed", NUMBER),
        ("parking_efficiency_ft2_car", NUMBER),
        ("additional_parking", NUMBER),
        ("ev_parking_lots", NUMBER),
        ("facade_glazing_pct", NUMBER),
        ("facade_spandrel_pct", NUMBER),
        ("facade_solid_pct", NUMBER),
    )),
    ("lifts_height", (
        ("passenger_count", NUMBER),
        ("passenger_capacity", NUMBER),
        ("service_count", NUMBER),
        ("service_capacity", NUMBER),
        ("height_ft", NUMBER),
        ("building_configuration", TEXT),
    )),
    ("bua", (
        ("bua_ft2", NUMBER),
    )),
)

# Flat (index, group, field, kind) table, one entry per sheet column
BUILDING_LAYOUT = tuple(
    (index, group, field, kind)
    for index, (group, field, kind) in enumerate(
        (group, field, kind) for group, fields in _GROUPS for field, kind in fields
    )
)
COLUMN_COUNT = len(BUILDING_LAYOUT)


def _set(target, dotted, value):
    """Assign into nested dicts for ``"studio.rental"``-style field names."""
    *parents, leaf = dotted.split(".")
    for key in parents:
        target = target.setdefault(key, {})
    target[leaf] = value


def parse_building_row(row):
    """Map one 96-column row into the grouped building record."""
    building = {group: {} for group, _fields in _GROUPS}
    for index, group, field, kind in BUILDING_LAYOUT:
        _set(building[group], field, read_cell(row, index, kind))

    lifts = building["lifts_height"]
    lifts["total_lifts"] = lifts["passenger_count"] + lifts["service_count"]

    bua = building["bua"]
    total_gfa = building["gfa"]["total_proposed_gfa_ft2"]
    bua["gfa_over_bua"] = total_gfa / bua["bua_ft2"] if bua["bua_ft2"] else 0
    return building


def parse_buildings(rows):
    """Building records from sheet rows (header first); plot no. required."""
    return [parse_building_row(row) for row in data_rows(rows) if cell(row, 0).strip()]


def _mean(values):
    values = list(values)
    return sum(values) / len(values) if values else 0


def calculate_building_stats(buildings):
    """Portfolio summary over parsed building records."""
    by_design_manager: dict[str, int] = {}
    for b in buildings:
        dm = b["identity"]["design_manager"]
        if dm:
            by_design_manager[dm] = by_design_manager.get(dm, 0) + 1

    def _count(field, value):
        return sum(1 for b in buildings if b["identity"][field].upper() == value)

    return {
        "total_buildings": len(buildings),
        "total_units": sum(b["unit_counts"]["total"] for b in buildings),
        "total_gfa_ft2": sum(b["gfa"]["total_proposed_gfa_ft2"] for b in buildings),
        "total_sellable_ft2": sum(b["total_sellable"]["total_sellable_ft2"] for b in buildings),
        "avg_efficiency": _mean(b["total_sellable"]["efficiency_sa_gfa"] for b in buildings),
        "avg_far": _mean(b["identity"]["far"] for b in buildings),
        "total_parking": sum(b["parking_facade"]["parking_proposed"] for b in buildings),
        "by_design_manager": by_design_manager,
        "by_location": {
            "miami": _count("location", "MIA"),
            "riyadh": _count("location", "RYD"),
        },
        "by_status": {
            "pit": _count("status", "PIT"),
            "pot": _count("status", "POT"),
            "pht": _count("status", "PHT"),
        },
    }


def _fetch_buildings():
    cfg = current_app.config
    sheet_id = cfg.get("BUILDING_INFO_SHEET_ID")
    if not sheet_id:
        raise FeedNotConfiguredError("building-info", "BUILDING_INFO_SHEET_ID")
    result = sheets_gateway.fetch_csv_by_gid(
        sheet_id,
        cfg.get("BUILDING_INFO_GID", "0"),
        timeout=feed_timeout(),
        cache_ttl=cache_ttl(cache_service.BUILDING_INFO_TTL),
    )
    return parse_buildings(result.rows), result.feed_status


def get_building_info():
    buildings, feed_status = _fetch_buildings()
    return {
        "buildings": buildings,
        "stats": calculate_building_stats(buildings),
        "feed_status": feed_status,
        "last_updated": utc_now_iso(),
    }


def get_building(plot_key):
    """One building by plot no. or marketing name (case-insensitive)."""
    key = (plot_key or "").strip().lower()
    buildings, _feed_status = _fetch_buildings()
    for b in buildings:
        identity = b["identity"]
        if key in (identity["plot_no"].lower(), identity["marketing_name"].lower()):
            return b
    raise NotFoundError(resource="Building", resource_id=plot_key)
