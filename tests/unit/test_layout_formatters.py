"""Tests for text and JSON layout output."""

from __future__ import annotations

import json

import pytest

from nesting.application.packing_service import MaterialLayout, PackingReport
from nesting.domain.services.board_calculator import (
    BoardCalculation,
    BoardType,
    PartGroup,
    expand_groups,
)
from nesting.domain.services.packer import pack
from nesting.domain.value_objects import (
    BandEdges,
    LayoutResult,
    PackingOptions,
    PackingStats,
    PartSpec,
    StockSheetSpec,
)
from nesting.infrastructure import JsonExporter, LayoutReportFormatter


@pytest.fixture
def result() -> LayoutResult:
    parts = [
        PartSpec(length=600, width=400, quantity=2, label="Panel", band_edges=BandEdges(top=True)),
        PartSpec(length=1500, width=1500, label="Table"),
    ]
    sheet = StockSheetSpec(length=1000, width=1000, label="Square")
    return pack(parts, [sheet], PackingOptions(kerf_mm=3))


@pytest.fixture
def calculation() -> BoardCalculation:
    top = PartSpec(
        length=1000, width=400, quantity=2, label="Top", band_edges=BandEdges(top=True, left=True)
    )
    return expand_groups([PartGroup("Desk", BoardType.WITH_BACKER_32MM, (top,))])


class TestLayoutReportFormatter:
    """Tests for LayoutReportFormatter."""

    def test_sections(self, result: LayoutResult) -> None:
        text = LayoutReportFormatter().format(result)

        assert text.startswith("CUTTING LAYOUT")
        assert "Sheet 1: Square (1000 x 1000 mm) - 2 pieces" in text
        assert "SUMMARY" in text
        assert "Pieces placed:    2" in text
        assert "Edging 16mm: 0.80 m" in text

    def test_warnings_list_unplaced(self, result: LayoutResult) -> None:
        text = LayoutReportFormatter().format(result)

        assert "WARNINGS" in text
        assert "Not placed: 'Table' (1500x1500) does not fit on any sheet type" in text

    def test_placements_can_be_hidden(self, result: LayoutResult) -> None:
        text = LayoutReportFormatter(show_placements=False).format(result)
        assert "Panel #1" not in text

    def test_placements_listed(self, result: LayoutResult) -> None:
        text = LayoutReportFormatter().format(result)
        assert "Panel #1" in text
        assert "Panel #2" in text

    def test_empty_result(self) -> None:
        text = LayoutReportFormatter().format(LayoutResult(sheets=(), stats=PackingStats()))
        assert "No parts to cut." in text

    def test_report_titles_each_material(self, result: LayoutResult) -> None:
        report = PackingReport(
            layouts=(
                MaterialLayout(material=None, result=result),
                MaterialLayout(material="oak", result=result),
                MaterialLayout(material="chipboard", result=result, is_backer=True),
            )
        )
        text = LayoutReportFormatter().format_report(report)

        assert text.startswith("CUTTING LAYOUT\n")
        assert "CUTTING LAYOUT - oak" in text
        assert "BACKER LAYOUT - chipboard" in text
        assert "BOARD GROUPS" not in text

    def test_report_shows_board_groups(
        self, result: LayoutResult, calculation: BoardCalculation
    ) -> None:
        report = PackingReport(
            layouts=(MaterialLayout(material=None, result=result),),
            board_calculation=calculation,
        )
        text = LayoutReportFormatter().format_report(report)

        assert "BOARD GROUPS" in text
        assert "Desk: 32mm With Backer (2 primary, 2 backer pieces)" in text
        assert "Primary board on a backer board, only top visible" in text
        assert "Estimated edging 32mm: 2.80 m" in text


class TestJsonExporter:
    """Tests for JsonExporter."""

    def test_round_trips_through_json(self, result: LayoutResult) -> None:
        data = json.loads(JsonExporter().export(result))

        assert list(data) == ["sheets", "stats", "unplaceable", "sheet_exhausted", "offcuts"]
        assert data["sheets"][0]["sheet_type"]["label"] == "Square"
        assert len(data["sheets"][0]["placements"]) == 2
        assert data["unplaceable"][0]["reason"] == "too_large_for_sheet"

    def test_cut_runs_use_axis_names(self, result: LayoutResult) -> None:
        data = JsonExporter().to_dict(result)
        axes = {run["axis"] for run in data["sheets"][0]["cut_runs"]}
        assert axes <= {"horizontal", "vertical"}

    def test_output_is_stable(self, result: LayoutResult) -> None:
        exporter = JsonExporter()
        assert exporter.export(result) == exporter.export(result)

    def test_export_report(self, result: LayoutResult, calculation: BoardCalculation) -> None:
        report = PackingReport(
            layouts=(
                MaterialLayout(material="oak", result=result),
                MaterialLayout(material="chipboard", result=result, is_backer=True),
            ),
            board_calculation=calculation,
        )
        data = json.loads(JsonExporter().export_report(report))

        assert [(lay["material"], lay["is_backer"]) for lay in data["layouts"]] == [
            ("oak", False),
            ("chipboard", True),
        ]
        assert data["layouts"][0]["result"]["stats"]["cut_count"] == result.stats.cut_count
        summary = data["board_summary"]
        assert summary["groups"][0]["display_name"] == "32mm With Backer"
        assert summary["groups"][0]["board_type"] == "32mm-backer"
        assert summary["edging_by_thickness"] == {"16mm": 0.0, "32mm": 2800.0}

    def test_export_report_without_groups(self, result: LayoutResult) -> None:
        report = PackingReport(layouts=(MaterialLayout(material=None, result=result),))
        assert JsonExporter().report_to_dict(report)["board_summary"] is None
