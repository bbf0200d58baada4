"""
Spreadsheet CSV ingestion tests.

Covers the quote-toggle row splitter, lenient numeric parsing (default-0
and nullable variants), serial-number detection, positional row mapping
and an end-to-end parse through the project-stats layout.
"""

import pytest

from flowsms.ingest.csv_parser import (
    NULLABLE,
    NUMBER,
    TEXT,
    cell,
    data_rows,
    has_serial_number,
    map_row,
    parse_csv,
    parse_nullable_number,
    parse_number,
    read_cell,
    round_half_up,
    split_csv_row,
)
from flowsms.services.project_stats_service import parse_project_stats


# ═══════════════════════════════════════════════════════════════
# ROW SPLITTING
# ═══════════════════════════════════════════════════════════════


class TestSplitCsvRow:
    def test_plain_fields_are_trimmed(self):
        assert split_csv_row(" a , b,c ") == ["a", "b", "c"]

    def test_quoted_field_with_commas_is_one_value(self):
        assert split_csv_row('1,"Tower A, Phase 1, North",x') == ["1", "Tower A, Phase 1, North", "x"]

    def test_quotes_are_dropped(self):
        assert split_csv_row('"12","PIT"') == ["12", "PIT"]

    def test_quote_inside_word_toggles_state(self):
        # An odd quote keeps the rest of the line inside one field
        assert split_csv_row('ab"c,d') == ["abc,d"]

    def test_empty_line_is_single_empty_field(self):
        assert split_csv_row("") == [""]

    def test_trailing_comma_yields_trailing_empty_field(self):
        assert split_csv_row("a,b,") == ["a", "b", ""]


class TestParseCsv:
    def test_empty_text(self):
        assert parse_csv("") == []

    def test_splits_lines_and_strips_carriage_returns(self):
        rows = parse_csv("h1,h2\r\n1,2\r\n")
        assert rows[0] == ["h1", "h2"]
        assert rows[1] == ["1", "2"]

    def test_data_rows_skips_header(self):
        assert list(data_rows([["h"], ["1"], ["2"]])) == [["1"], ["2"]]

    def test_data_rows_of_empty_input(self):
        assert list(data_rows([])) == []

    def test_cell_reads_missing_trailing_cells_as_blank(self):
        assert cell(["a"], 0) == "a"
        assert cell(["a"], 5) == ""


# ═══════════════════════════════════════════════════════════════
# NUMERIC PARSING
# ═══════════════════════════════════════════════════════════════


class TestNumbers:
    @pytest.mark.parametrize("raw, expected", [
        ("1,234", 1234.0),
        ("56%", 56.0),
        ("1,500.75", 1500.75),
        ("12 units", 12.0),
        ("-3.5", -3.5),
        (".5", 0.5),
        ('"2,000"', 2000.0),
    ])
    def test_parse_number(self, raw, expected):
        assert parse_number(raw) == expected

    @pytest.mark.parametrize("raw", ["", "-", None, "n/a", "   "])
    def test_blank_or_unparseable_defaults_to_zero(self, raw):
        assert parse_number(raw) == 0

    @pytest.mark.parametrize("raw", ["", "-", None, "n/a"])
    def test_nullable_variant_returns_none(self, raw):
        assert parse_nullable_number(raw) is None

    def test_nullable_variant_parses_numbers(self):
        assert parse_nullable_number("4,200") == 4200.0

    def test_native_numbers_pass_through(self):
        assert parse_number(7) == 7.0
        assert parse_nullable_number(2.5) == 2.5

    @pytest.mark.parametrize("raw, expected", [
        ("12", True),
        ("7a", True),
        (" 3", True),
        ("Sr. No.", False),
        ("", False),
        (None, False),
    ])
    def test_has_serial_number(self, raw, expected):
        assert has_serial_number(raw) is expected

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(66.666) == 67
        assert round_half_up(-2.5) == -2


# ═══════════════════════════════════════════════════════════════
# POSITIONAL MAPPING
# ═══════════════════════════════════════════════════════════════


class TestMapRow:
    LAYOUT = ((0, "name", TEXT), (1, "area", NUMBER), (2, "leasable", NULLABLE))

    def test_maps_by_index(self):
        assert map_row(["Plot 7", "1,000", "-"], self.LAYOUT) == {
            "name": "Plot 7",
            "area": 1000.0,
            "leasable": None,
        }

    def test_short_row_fills_defaults(self):
        assert map_row(["Plot 7"], self.LAYOUT) == {"name": "Plot 7", "area": 0.0, "leasable": None}

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValueError):
            read_cell(["x"], 0, "date")


# ═══════════════════════════════════════════════════════════════
# END TO END
# ═══════════════════════════════════════════════════════════════


def test_three_row_sheet_yields_two_records():
    text = (
        "Plot #,Project,Plot Area\n"
        'P-101,"Tower A, Phase 1, North","1,500"\n'
        ",Orphan row,900\n"
        "P-102,Desert Bloom,2000\n"
    )
    records = parse_project_stats(parse_csv(text))

    assert len(records) == 2
    assert records[0]["plot_number"] == "P-101"
    assert records[0]["project"] == "Tower A, Phase 1, North"
    assert records[0]["plot_area"] == 1500
    assert records[1]["plot_number"] == "P-102"
    assert records[1]["plot_area"] == 2000
    # Columns beyond the row read as 0
    assert records[1]["height"] == 0
