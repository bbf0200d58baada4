"""Flow Standards SKU library — record mapping, per-category stats and the
concurrent overview (airtable_gateway patched)."""

from unittest.mock import patch

import pytest

from flowsms.core.exceptions import FeedNotConfiguredError, NotFoundError
from flowsms.integrations.airtable_gateway import airtable_gateway
from flowsms.integrations.sheets_gateway import FeedResult
from flowsms.services import flow_standards_service as fs


RECORDS = [
    {"id": "rec1", "fields": {
        "Name": "Travertine Slab", "Type": "Stone", "Material": "Travertine",
        "Status": "Active", "Image": [{"url": "x"}], "Spec Sheet": [{"url": "y"}],
    }},
    {"id": "rec2", "fields": {
        "SKU Name": "Oak Veneer", "Category": "Wood", "Finish": "Matte",
        "Status": "Discontinued", "Revit File": [{"url": "z"}],
    }},
    {"id": "rec3", "fields": {"Name": "Terrazzo", "Type": "Stone"}},
]


def test_parse_records_resolves_field_fallbacks():
    skus = fs.parse_records_to_skus(RECORDS, "01")
    assert skus[1]["name"] == "Oak Veneer"
    assert skus[1]["type"] == "Wood"
    assert skus[1]["material"] == "Matte"
    assert skus[1]["has_revit_file"] is True
    assert skus[1]["has_image"] is False
    # status defaults to Active
    assert skus[2]["status"] == "Active"
    assert all(s["category"] == "01" for s in skus)


def test_category_stats():
    category = fs.get_category("01")
    stats = fs.calculate_category_stats(fs.parse_records_to_skus(RECORDS, "01"), category)
    assert stats["code"] == "SRF"
    assert stats["total_skus"] == 3
    assert stats["active"] == 2
    assert stats["inactive"] == 1
    assert stats["types"] == {"Stone": 2, "Wood": 1}
    assert stats["assets"]["images"] == {"complete": 1, "missing": 2}
    assert stats["assets"]["revit_files"] == {"complete": 1, "missing": 2}


def test_multi_select_fields_join_with_commas():
    records = [{"id": "rec9", "fields": {"Name": "Basin Set", "Type": ["Tap", "Mixer"], "Material": ("Brass",)}}]
    skus = fs.parse_records_to_skus(records, "01")
    assert skus[0]["type"] == "Tap,Mixer"
    assert skus[0]["material"] == "Brass"

    stats = fs.calculate_category_stats(skus, fs.get_category("01"))
    assert stats["types"] == {"Tap,Mixer": 1}


def test_table_names():
    artwork = fs.get_category("11")
    assert fs.table_name(artwork) == "11 ARTWORK"
    assert fs.table_name(artwork, overview=True) == "11 ARTWORK (ART)"
    assert fs.table_name(fs.get_category("03")) == "03 ELECTRICAL FITTINGS"


def test_category_detail():
    with patch.object(airtable_gateway, "fetch_table", return_value=FeedResult(ok=True, rows=RECORDS)) as fetch:
        payload = fs.get_category_detail("01")
    assert payload["feed_status"] == "ok"
    assert payload["category"]["total_skus"] == 3
    assert len(payload["skus"]) == 3
    assert fetch.call_args.args[2] == "01 SURFACE"


def test_unknown_category():
    with pytest.raises(NotFoundError):
        fs.get_category_detail("99")


def test_overview_with_one_failing_table():
    def _fetch(token, base_id, table, timeout):
        if table.startswith("02 "):
            return FeedResult(ok=False, rows=[], status_code=500, error="HTTP 500")
        if table.startswith("01 "):
            return FeedResult(ok=True, rows=RECORDS)
        return FeedResult(ok=True, rows=[])

    with patch.object(airtable_gateway, "fetch_table", side_effect=_fetch):
        payload = fs.get_overview()

    assert payload["overview"]["total_categories"] == 12
    assert payload["overview"]["total_skus"] == 3
    assert payload["overview"]["total_active"] == 2
    assert [c["id"] for c in payload["categories"]] == [c["id"] for c in fs.CATEGORIES]
    assert payload["feed_status"] == "partial"
    assert payload["unavailable_categories"] == ["02"]


def test_overview_all_tables_down():
    down = FeedResult(ok=False, rows=[], error="HTTP 503")
    with patch.object(airtable_gateway, "fetch_table", return_value=down):
        payload = fs.get_overview()
    assert payload["feed_status"] == "unavailable"
    assert payload["overview"]["total_skus"] == 0


def test_missing_token(app):
    app.config["AIRTABLE_TOKEN"] = ""
    try:
        with pytest.raises(FeedNotConfiguredError):
            fs.get_overview()
    finally:
        app.config["AIRTABLE_TOKEN"] = "test-airtable-token"
