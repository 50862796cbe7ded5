"""Tests for SketchUp cutlist CSV import."""

from __future__ import annotations

from pathlib import Path

import pytest

from nesting.application.csv_import import (
    detect_delimiter,
    map_columns,
    parse_csv_content,
    parse_csv_file,
    parse_dimension,
)
from nesting.domain.value_objects import GrainDirection

CSV_PATH = Path(__file__).parent.parent / "fixtures" / "csv" / "cutlist.csv"


class TestParseDimension:
    """Tests for parse_dimension()."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("720 mm", 720.0),
            ("564,5 mm", 564.5),
            ("1 200,5 mm", 1200.5),
            ("1 200 mm", 1200.0),
            ("16", 16.0),
            ("", 0.0),
            ("abc", 0.0),
            ("-5 mm", 0.0),
            ("inf", 0.0),
        ],
    )
    def test_values(self, value: str, expected: float) -> None:
        assert parse_dimension(value) == expected


class TestColumns:
    """Tests for delimiter detection and column mapping."""

    def test_semicolon_default(self) -> None:
        assert detect_delimiter("No.;Designation;Quantity") == ";"

    def test_comma_when_more_commas(self) -> None:
        assert detect_delimiter("No.,Designation,Quantity") == ","

    def test_map_columns(self) -> None:
        mapping, unmapped = map_columns(["Length - raw", "Width", "Quantity", "Colour"])

        assert mapping == {"length": 0, "width": 1, "quantity": 2}
        assert unmapped == ["Colour"]

    def test_first_duplicate_wins(self) -> None:
        mapping, _ = map_columns(["Length", "Length - raw"])
        assert mapping["length"] == 0


class TestParseCsvContent:
    """Tests for parse_csv_content()."""

    def test_fixture_file(self) -> None:
        result = parse_csv_file(CSV_PATH)

        assert result.errors == []
        assert len(result.rows) == 4
        assert [r.designation for r in result.sheet_goods_rows] == ["Side", "Shelf", "Back"]

    def test_to_parts_skips_invalid_rows(self) -> None:
        parts = parse_csv_file(CSV_PATH).to_parts()

        assert [p.label for p in parts] == ["Side", "Shelf"]
        side, shelf = parts
        assert side.quantity == 2
        assert side.grain == GrainDirection.LENGTH
        assert side.band_edges.top and not side.band_edges.bottom
        assert shelf.length == 564.5
        assert shelf.band_edges.top and shelf.band_edges.bottom

    def test_invalid_row_errors(self) -> None:
        back = parse_csv_file(CSV_PATH).sheet_goods_rows[2]
        assert back.errors == ["Invalid or missing length"]

    def test_empty_content(self) -> None:
        result = parse_csv_content("\n\n")
        assert result.errors == ["CSV file is empty"]

    def test_missing_required_columns(self) -> None:
        result = parse_csv_content("Designation;Length\nSide;720\n")
        assert result.errors == ["Missing required columns: width, quantity"]

    def test_byte_order_mark_stripped(self) -> None:
        result = parse_csv_content("\ufeffLength;Width;Quantity\n720;560;1\n")
        assert result.errors == []
        assert result.rows[0].length == 720.0

    def test_no_sheet_goods_uses_all_rows(self) -> None:
        content = "Length;Width;Quantity;Material type\n720;560;1;Solid Wood\n"
        result = parse_csv_content(content)

        assert len(result.sheet_goods_rows) == 1
        assert any("Sheet Goods" in w for w in result.warnings)

    def test_unlabelled_row_gets_row_label(self) -> None:
        parts = parse_csv_content("Length,Width,Quantity\n720,560,2\n").to_parts()
        assert parts[0].label == "Row 1"

    def test_bad_quantity_defaults_to_one(self) -> None:
        parts = parse_csv_content("Length;Width;Quantity\n720;560;lots\n").to_parts()
        assert parts[0].quantity == 1

    def test_bad_quantity_is_flagged(self) -> None:
        row = parse_csv_content("Length;Width;Quantity\n720;560;lots\n").rows[0]
        assert row.warnings[-1] == "Unreadable quantity 'lots', using 1"

    @pytest.mark.parametrize(
        "quantity, expected",
        [("2.0", 2), ("2,0", 2), ("3.7", 3), ("", 1), ("0", 1)],
    )
    def test_decimal_quantities(self, quantity: str, expected: int) -> None:
        row = parse_csv_content(f"Length;Width;Quantity\n720;560;{quantity}\n").rows[0]

        assert row.quantity == expected
        assert not any("quantity" in w for w in row.warnings)
