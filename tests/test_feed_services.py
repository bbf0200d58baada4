"""
Spreadsheet feed services — parsing, aggregation and the fetch path.

Test strategy
-------------
Parsers and aggregators are pure and tested directly on row lists.  The
``get_*`` entry points are exercised with patch.object on the
module-level ``sheets_gateway`` singleton so no Google Sheet is needed.
"""

from unittest.mock import patch

import pytest

from feed_rows import BUILDING_ROWS, HR_ROWS, PXT_ROWS, STATS_ROWS, down as _down, ok as _ok
from flowsms.core.exceptions import FeedNotConfiguredError, NotFoundError
from flowsms.integrations.sheets_gateway import sheets_gateway
from flowsms.services import (
    building_info_service,
    hr_service,
    project_stats_service,
    pxt_service,
)


# ═══════════════════════════════════════════════════════════════
# PROJECT STATS
# ═══════════════════════════════════════════════════════════════

class TestProjectStats:
    def test_rows_without_plot_are_skipped(self):
        projects = project_stats_service.parse_project_stats(STATS_ROWS)
        assert [p["plot_number"] for p in projects] == ["P-1", "P-2"]
        assert projects[0]["plot_area"] == 1000
        assert projects[0]["sellable_efficiency"] == 80

    def test_aggregates(self):
        projects = project_stats_service.parse_project_stats(STATS_ROWS)
        agg = project_stats_service.calculate_aggregated_stats(projects)
        assert agg["total_projects"] == 2
        assert agg["total_plot_area"] == 3000
        assert agg["total_gfa_achieved"] == 17000
        assert agg["gfa_utilization"] == pytest.approx(85.0)
        assert agg["avg_sellable_efficiency"] == pytest.approx(75.0)
        assert agg["total_units"] == 200
        assert agg["unit_mix"] == {"bd1": 20, "bd2": 40, "bd3": 0, "bd4": 0}
        assert agg["total_lifts"] == 8

    def test_aggregation_is_repeatable(self):
        projects = project_stats_service.parse_project_stats(STATS_ROWS)
        first = project_stats_service.calculate_aggregated_stats(projects)
        second = project_stats_service.calculate_aggregated_stats(projects)
        assert first == second

    def test_empty_portfolio_has_zero_ratios(self):
        agg = project_stats_service.calculate_aggregated_stats([])
        assert agg["gfa_utilization"] == 0
        assert agg["avg_parking_efficiency"] == 0

    def test_get_project_stats_reports_ok(self):
        with patch.object(sheets_gateway, "fetch_csv_by_gid", return_value=_ok(STATS_ROWS)) as fetch:
            payload = project_stats_service.get_project_stats()
        assert payload["feed_status"] == "ok"
        assert payload["aggregated"]["total_projects"] == 2
        assert fetch.call_args.kwargs["cache_ttl"] is None  # cache disabled under testing

    def test_get_project_stats_degrades_to_empty(self):
        with patch.object(sheets_gateway, "fetch_csv_by_gid", return_value=_down()):
            payload = project_stats_service.get_project_stats()
        assert payload["projects"] == []
        assert payload["aggregated"]["total_projects"] == 0
        assert payload["feed_status"] == "unavailable"


# ═══════════════════════════════════════════════════════════════
# HR
# ═══════════════════════════════════════════════════════════════


class TestHr:
    def test_summary_and_unnumbered_rows_are_excluded(self):
        employees = hr_service.parse_employees(HR_ROWS)
        assert [e["name"] for e in employees] == ["Sarah Hassan", "Omar Faisal", "Lina Odeh", "Maya Ruiz"]

    @pytest.mark.parametrize("name", ["Total", "OVERALL staff", "S.No", "grand"])
    def test_is_summary_name(self, name):
        assert hr_service.is_summary_name(name)

    def test_overview_splits_team_and_pipeline(self):
        overview = hr_service.build_hr_overview(hr_service.parse_employees(HR_ROWS))
        assert [e["name"] for e in overview["tbj"]] == ["Lina Odeh"]
        assert overview["stats"] == {
            "total_employees": 3,
            "total_tbj": 1,
            "by_office": {"KSA": 1, "DXB": 1, "MIA": 1},
        }

    def test_office_summaries(self):
        summaries = hr_service.calculate_office_summaries(hr_service.parse_employees(HR_ROWS))
        assert [s["office"] for s in summaries] == ["OVERALL", "MIA OFFICE", "KSA OFFICE", "DXB OFFICE"]
        assert summaries[0] == {"office": "OVERALL", "total_employees": 4, "on_board": 3, "to_be_joined": 1}
        ksa = summaries[2]
        assert ksa["on_board"] == 1 and ksa["to_be_joined"] == 1

    def test_get_hr_overview(self):
        with patch.object(sheets_gateway, "fetch_csv_by_gid", return_value=_ok(HR_ROWS)):
            payload = hr_service.get_hr_overview()
        assert payload["feed_status"] == "ok"
        assert len(payload["team"]) == 3
        assert "last_updated" in payload


# ═══════════════════════════════════════════════════════════════
# PXT REGISTER
# ═══════════════════════════════════════════════════════════════


class TestPxt:
    def test_parse_defaults_blank_status_to_pit(self):
        projects = pxt_service.parse_pxt_projects(PXT_ROWS)
        assert [p["sr_no"] for p in projects] == ["1", "2", "3"]
        assert projects[2]["status"] == "PIT"
        assert projects[0]["plot_area"] == "12,000 sq ft"
        assert projects[0]["unit_mix"]["one_br"] == 10
        assert projects[0]["gfa"]["total"] == 50000

    def test_filters(self):
        projects = pxt_service.parse_pxt_projects(PXT_ROWS)
        assert len(pxt_service.filter_projects(projects, status="pit")) == 2
        assert len(pxt_service.filter_projects(projects, location="RYD")) == 1
        assert len(pxt_service.filter_projects(projects, status="PIT", location="MIA")) == 2
        # unknown filter values are ignored
        assert len(pxt_service.filter_projects(projects, status="XYZ")) == 3

    def test_stats_are_over_unfiltered_register(self):
        with patch.object(sheets_gateway, "fetch_csv_by_name", return_value=_ok(PXT_ROWS)):
            payload = pxt_service.get_pxt_register(status="POT")
        assert [p["sr_no"] for p in payload["projects"]] == ["2"]
        stats = payload["stats"]
        assert stats["total"] == 3
        assert (stats["pit"], stats["pot"], stats["pht"]) == (2, 1, 0)
        assert stats["by_location"] == {"miami": 2, "riyadh": 1}
        assert stats["total_units"] == 200
        assert stats["total_gfa"] == 100000
        assert [p["sr_no"] for p in payload["grouped"]["pit"]] == ["1", "3"]

    def test_debug_layout(self):
        with patch.object(sheets_gateway, "fetch_csv_by_name", return_value=_ok(PXT_ROWS)):
            payload = pxt_service.get_pxt_register(debug=True)
        assert payload["headers"][0] == "[0] Sr. No."
        assert payload["first_row"][2] == "[2] Brickell One"
        assert payload["total_rows"] == 4

    def test_find_project(self):
        with patch.object(sheets_gateway, "fetch_csv_by_name", return_value=_ok(PXT_ROWS)):
            assert pxt_service.find_project("2")["project_name"] == "Olaya Heights"
            assert pxt_service.find_project("99") is None


# ═══════════════════════════════════════════════════════════════
# BUILDING INFORMATION
# ═══════════════════════════════════════════════════════════════


class TestBuildingInfo:
    def test_layout_covers_96_columns(self):
        assert building_info_service.COLUMN_COUNT == 96
        indexes = [entry[0] for entry in building_info_service.BUILDING_LAYOUT]
        assert indexes == list(range(96))

    def test_parse_derives_lifts_and_ratio(self):
        buildings = building_info_service.parse_buildings(BUILDING_ROWS)
        assert len(buildings) == 2
        first, second = buildings
        assert first["lifts_height"]["total_lifts"] == 6
        assert first["bua"]["gfa_over_bua"] == pytest.approx(0.8)
        assert second["bua"]["gfa_over_bua"] == 0
        assert first["rental_condo_split"]["studio"] == {"rental": 6, "condo": 0}

    def test_leasable_area_is_nullable(self):
        first, second = building_info_service.parse_buildings(BUILDING_ROWS)
        assert first["residential_sellable"]["leasable_ft2"] == 3000
        assert second["residential_sellable"]["leasable_ft2"] is None
        assert "leasable_ft2" not in first["total_sellable"]

    def test_stats(self):
        stats = building_info_service.calculate_building_stats(
            building_info_service.parse_buildings(BUILDING_ROWS)
        )
        assert stats["total_buildings"] == 2
        assert stats["total_units"] == 100
        assert stats["total_gfa_ft2"] == 30000
        assert stats["avg_efficiency"] == 80
        assert stats["avg_far"] == 4
        assert stats["total_parking"] == 60
        assert stats["by_design_manager"] == {"Sarah": 2}
        assert stats["by_location"] == {"miami": 1, "riyadh": 1}
        assert stats["by_status"] == {"pit": 1, "pot": 1, "pht": 0}

    def test_get_building_by_marketing_name(self):
        with patch.object(sheets_gateway, "fetch_csv_by_gid", return_value=_ok(BUILDING_ROWS)):
            building = building_info_service.get_building("olaya heights")
        assert building["identity"]["plot_no"] == "RYD-07"

    def test_get_building_missing_raises(self):
        with patch.object(sheets_gateway, "fetch_csv_by_gid", return_value=_ok(BUILDING_ROWS)):
            with pytest.raises(NotFoundError):
                building_info_service.get_building("nowhere")

    def test_unconfigured_sheet_raises(self, app):
        app.config["BUILDING_INFO_SHEET_ID"] = ""
        try:
            with pytest.raises(FeedNotConfiguredError):
                building_info_service.get_building_info()
        finally:
            app.config["BUILDING_INFO_SHEET_ID"] = "test-building-sheet"
