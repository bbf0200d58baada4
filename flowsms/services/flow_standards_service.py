"""
Flow Standards SKU library (Airtable).

Twelve fixed categories, one Airtable table each (``"<id> <NAME>"``).  The
overview reads every table concurrently and reports per-category SKU,
status, type/material and asset-completeness counts.  A table that fails
to load contributes empty stats instead of failing the whole overview.

Field names vary between tables, so each SKU attribute is resolved from
the first non-empty field among a list of candidates.
"""

import logging
from concurrent.futures import ThreadPoolExecutor

from flask import current_app

from flowsms.core.exceptions import FeedNotConfiguredError, NotFoundError
from flowsms.integrations.airtable_gateway import airtable_gateway
from flowsms.services import cache_service
from flowsms.services.feed_settings import cache_ttl, feed_timeout, utc_now_iso

logger = logging.getLogger(__name__)

CATEGORIES = (
    {"id": "01", "name": "SURFACE", "code": "SRF", "icon": "square.3.layers.3d.top.filled"},
    {"id": "02", "name": "LIGHTING", "code": "LGT", "icon": "lightbulb.fill"},
    {"id": "03", "name": "ELECTRICAL FITTINGS", "code": "EFI", "icon": "powerplug.fill"},
    {"id": "04", "name": "SANITARY FITTINGS", "code": "SNF", "icon": "drop.fill"},
    {"id": "05", "name": "FURNITURE", "code": "FUR", "icon": "sofa.fill"},
    {"id": "06", "name": "RUGS", "code": "RUG", "icon": "rectangle.pattern.checkered"},
    {"id": "07", "name": "APPLIANCES", "code": "APP", "icon": "refrigerator.fill"},
    {"id": "08", "name": "HARDWARE", "code": "HRD", "icon": "wrench.and.screwdriver.fill"},
    {"id": "09", "name": "ACCESSORIES", "code": "ACC", "icon": "star.fill"},
    {"id": "10", "name": "JOINERY", "code": "JON", "icon": "cabinet.fill"},
    {"id": "11", "name": "ARTWORK", "code": "ART", "icon": "photo.artframe"},
    {"id": "12", "name": "FABRIC", "code": "FAB", "icon": "rectangle.split.2x2.fill"},
)

# Artwork is split over two tables; the overview reads the primary one
_OVERVIEW_TABLE_OVERRIDES = {"11": "11 ARTWORK (ART)"}

_MAX_WORKERS = 6

# attribute → candidate Airtable field names, first non-empty wins
_TEXT_FIELDS = {
    "name": ("Name", "SKU Name"),
    "type": ("Type", "Category"),
    "material": ("Material", "Finish"),
}
_ASSET_FIELDS = {
    "has_image": ("Image", "Images", "Photo"),
    "has_spec_sheet": ("Spec Sheet", "Specifications", "Data Sheet"),
    "has_revit_file": ("Revit", "Revit File", "BIM"),
}


def get_category(category_id):
    for category in CATEGORIES:
        if category["id"] == category_id:
            return category
    return None


def table_name(category, overview=False):
    if overview and category["id"] in _OVERVIEW_TABLE_OVERRIDES:
        return _OVERVIEW_TABLE_OVERRIDES[category["id"]]
    return f"{category['id']} {category['name']}"


def _first_value(fields, candidates):
    for name in candidates:
        value = fields.get(name)
        if value:
            return value
    return None


def _as_text(value):
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ",".join(_as_text(v) for v in value)
    return value if isinstance(value, str) else str(value)


def parse_records_to_skus(records, category_id):
    """Airtable records → SKU dicts with resolved field fallbacks."""
    skus = []
    for record in records:
        fields = record.get("fields") or {}
        sku = {"id": record.get("id", "")}
        for attr, candidates in _TEXT_FIELDS.items():
            sku[attr] = _as_text(_first_value(fields, candidates))
        sku["status"] = _as_text(fields.get("Status")) or "Active"
        for attr, candidates in _ASSET_FIELDS.items():
            sku[attr] = _first_value(fields, candidates) is not None
        sku["category"] = category_id
        skus.append(sku)
    return skus


def _completeness(skus, attr):
    complete = sum(1 for s in skus if s[attr])
    return {"complete": complete, "missing": len(skus) - complete}


def _tally(skus, attr):
    counts: dict[str, int] = {}
    for sku in skus:
        value = sku[attr]
        if value:
            counts[value] = counts.get(value, 0) + 1
    return counts


def calculate_category_stats(skus, category):
    active = sum(1 for s in skus if s["status"].lower() == "active")
    return {
        **category,
        "total_skus": len(skus),
        "active": active,
        "inactive": len(skus) - active,
        "types": _tally(skus, "type"),
        "materials": _tally(skus, "material"),
        "assets": {
            "images": _completeness(skus, "has_image"),
            "spec_sheets": _completeness(skus, "has_spec_sheet"),
            "revit_files": _completeness(skus, "has_revit_file"),
        },
    }


def empty_category_stats(category):
    return calculate_category_stats([], category)


# ── Fetching ─────────────────────────────────────────────────────────────


def _airtable_settings():
    cfg = current_app.config
    token = cfg.get("AIRTABLE_TOKEN")
    if not token:
        raise FeedNotConfiguredError("airtable", "AIRTABLE_TOKEN")
    return {
        "token": token,
        "base_id": cfg["AIRTABLE_BASE_ID"],
        "timeout": feed_timeout(),
        "ttl": cache_ttl(cache_service.AIRTABLE_TTL),
    }


def _load_records(settings, name):
    """Records for one table, through the feed cache.  Returns (records, ok)."""
    key = cache_service.feed_key("airtable", settings["base_id"], name)
    if settings["ttl"]:
        cached = cache_service.get_cached(key)
        if cached is not None:
            return cached, True

    result = airtable_gateway.fetch_table(
        settings["token"], settings["base_id"], name, timeout=settings["timeout"],
    )
    if result.ok and settings["ttl"]:
        cache_service.set_cached(key, result.rows, ttl=settings["ttl"])
    return result.rows, result.ok


def get_category_detail(category_id):
    """Stats plus every SKU for one category."""
    category = get_category(category_id)
    if category is None:
        raise NotFoundError(resource="Category", resource_id=category_id)

    settings = _airtable_settings()
    records, ok = _load_records(settings, table_name(category))
    skus = parse_records_to_skus(records, category["id"])
    return {
        "category": calculate_category_stats(skus, category),
        "skus": skus,
        "feed_status": "ok" if ok else "unavailable",
    }


def _category_overview(settings, category):
    try:
        records, ok = _load_records(settings, table_name(category, overview=True))
        skus = parse_records_to_skus(records, category["id"])
        return calculate_category_stats(skus, category), ok
    except Exception:
        logger.exception("Flow Standards category %s failed", category["name"])
        return empty_category_stats(category), False


def get_overview():
    """Library-wide overview; categories are fetched concurrently."""
    settings = _airtable_settings()
    with ThreadPoolExecutor(max_workers=_MAX_WORKERS) as pool:
        results = list(pool.map(lambda c: _category_overview(settings, c), CATEGORIES))

    categories = [stats for stats, _ok in results]
    failed = [stats["id"] for stats, ok in results if not ok]
    if failed:
        logger.warning("Flow Standards overview incomplete: categories %s unavailable", failed)

    return {
        "overview": {
            "total_categories": len(CATEGORIES),
            "total_skus": sum(c["total_skus"] for c in categories),
            "total_active": sum(c["active"] for c in categories),
            "total_inactive": sum(c["inactive"] for c in categories),
        },
        "categories": categories,
        "feed_status": "ok" if not failed else ("unavailable" if len(failed) == len(CATEGORIES) else "partial"),
        "unavailable_categories": failed,
        "last_updated": utc_now_iso(),
    }
