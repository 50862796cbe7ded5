"""Tests for PackingService."""

from __future__ import annotations

import logging

import pytest

from nesting.application import PackingService
from nesting.application.config import load_request_from_dict, request_to_domain
from nesting.domain.errors import InvalidInputError


def _run(data: dict):
    return PackingService().run(request_to_domain(load_request_from_dict(data)))


@pytest.fixture
def backer_request() -> dict:
    return {
        "schema_version": "1.1",
        "groups": [
            {
                "name": "Desk",
                "board_type": "32mm-backer",
                "parts": [{"label": "Top", "length": 1400, "width": 700, "quantity": 2}],
            }
        ],
        "stock": [{"label": "Oak", "length": 2750, "width": 1830, "quantity_available": 1}],
        "options": {
            "laminate_backer_sheet": {"label": "Chipboard", "length": 2800, "width": 2070}
        },
    }


@pytest.fixture
def material_request() -> dict:
    return {
        "schema_version": "1.1",
        "parts": [{"label": "Plinth", "length": 2000, "width": 100}],
        "groups": [
            {
                "name": "Doors",
                "primary_material": "oak",
                "parts": [{"label": "Door", "length": 716, "width": 596, "quantity": 2}],
            },
            {
                "name": "Carcass",
                "primary_material": "white",
                "parts": [{"label": "Side", "length": 720, "width": 560, "quantity": 2}],
            },
        ],
        "stock": [
            {"label": "Plain", "length": 2750, "width": 1830},
            {"label": "Oak", "length": 2800, "width": 2070, "material": "oak"},
            {"label": "White", "length": 2800, "width": 2070, "material": "white"},
        ],
    }


class TestPackingService:
    """Tests for PackingService.run()."""

    def test_plain_request_has_one_layout(self) -> None:
        report = _run(
            {
                "parts": [{"length": 500, "width": 500}],
                "stock": [{"length": 1000, "width": 1000}],
            }
        )
        assert len(report.layouts) == 1
        assert report.layouts[0].material is None
        assert report.backer_layouts == ()
        assert report.board_calculation is None
        assert report.unplaceable_count == 0

    def test_empty_request_still_reports_a_layout(self) -> None:
        report = _run({})
        assert len(report.layouts) == 1
        assert report.layouts[0].result.total_sheets == 0

    def test_backer_parts_packed_on_backer_sheet(self, backer_request: dict) -> None:
        report = _run(backer_request)

        (backer,) = report.backer_layouts
        assert backer.result.total_pieces_placed == 2
        assert {s.sheet_type.label for s in backer.result.sheets} == {"Chipboard"}
        labels = sorted(p.unit_label for s in backer.result.sheets for p in s.placements)
        assert labels == ["Top-backer #1", "Top-backer #2"]

    def test_backer_fraction_reported(self, backer_request: dict) -> None:
        report = _run(backer_request)

        expected = 2 * 1400 * 700 / (2800 * 2070)
        stats = report.primary_layouts[0].result.stats
        assert stats.backer_sheets_fraction == pytest.approx(expected)

    def test_missing_backer_sheet_logs_warning(
        self, backer_request: dict, caplog: pytest.LogCaptureFixture
    ) -> None:
        del backer_request["options"]["laminate_backer_sheet"]

        with caplog.at_level(logging.WARNING, logger="nesting"):
            report = _run(backer_request)

        assert report.backer_layouts == ()
        assert "no backer sheet configured" in caplog.text

    def test_unplaceable_counted_across_layouts(self, backer_request: dict) -> None:
        backer_request["groups"][0]["parts"][0]["quantity"] = 5
        report = _run(backer_request)

        primary = report.primary_layouts[0].result
        assert primary.unplaceable
        assert report.unplaceable_count == len(primary.unplaceable)
        assert report.backer_layouts[0].result.is_complete

    def test_invalid_request_raises(self) -> None:
        with pytest.raises(InvalidInputError):
            _run(
                {
                    "parts": [{"length": 40, "width": 20}],
                    "stock": [{"length": 100, "width": 50, "kerf": 60}],
                }
            )

    def test_board_calculation_passed_through(self, backer_request: dict) -> None:
        report = _run(backer_request)
        assert report.board_calculation.groups[0].name == "Desk"


class TestMaterialRuns:
    """Tests for packing each material separately."""

    def test_one_layout_per_material(self, material_request: dict) -> None:
        report = _run(material_request)

        assert [layout.material for layout in report.layouts] == [None, "oak", "white"]

    def test_materials_never_share_sheets(self, material_request: dict) -> None:
        report = _run(material_request)
        by_material = {layout.material: layout.result for layout in report.layouts}

        def sheet_labels(material):
            return {s.sheet_type.label for s in by_material[material].sheets}

        def part_labels(material):
            return {p.part_label for s in by_material[material].sheets for p in s.placements}

        assert sheet_labels(None) == {"Plain"}
        assert part_labels(None) == {"Plinth"}
        assert sheet_labels("oak") == {"Oak"}
        assert part_labels("oak") == {"Door"}
        assert sheet_labels("white") == {"White"}
        assert part_labels("white") == {"Side"}

    def test_sheet_type_index_refers_to_full_stock(self, material_request: dict) -> None:
        report = _run(material_request)
        white = report.layouts[2].result

        assert {s.sheet_type_index for s in white.sheets} == {2}

    def test_untagged_sheets_shared_between_runs(self) -> None:
        """Runs falling back to the same sheets draw from one supply."""
        report = _run(
            {
                "schema_version": "1.1",
                "parts": [{"label": "A", "length": 900, "width": 900}],
                "groups": [
                    {
                        "primary_material": "birch",
                        "parts": [{"label": "B", "length": 900, "width": 900}],
                    }
                ],
                "stock": [{"length": 1000, "width": 1000, "quantity_available": 1}],
            }
        )
        plain, birch = report.layouts

        assert plain.result.total_sheets == 1
        assert birch.result.total_sheets == 0
        assert birch.result.unplaceable[0].reason.value == "insufficient_sheet_capacity"

    def test_material_with_no_sheet_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="walnut"):
            _run(
                {
                    "schema_version": "1.1",
                    "groups": [
                        {
                            "primary_material": "walnut",
                            "parts": [{"length": 500, "width": 500}],
                        }
                    ],
                    "stock": [{"length": 1000, "width": 1000, "material": "oak"}],
                }
            )

    def test_backer_materials_packed_separately(self) -> None:
        report = _run(
            {
                "schema_version": "1.1",
                "groups": [
                    {
                        "board_type": "32mm-backer",
                        "primary_material": "oak",
                        "backer_material": "chipboard",
                        "parts": [{"label": "Top", "length": 1400, "width": 700}],
                    },
                    {
                        "board_type": "32mm-backer",
                        "primary_material": "oak",
                        "backer_material": "mdf",
                        "parts": [{"label": "Shelf", "length": 1000, "width": 300}],
                    },
                ],
                "stock": [{"length": 2800, "width": 2070, "material": "oak"}],
                "options": {"laminate_backer_sheet": {"length": 2800, "width": 2070}},
            }
        )

        assert [layout.material for layout in report.backer_layouts] == ["chipboard", "mdf"]
        assert report.backer_layouts[1].result.sheets[0].placements[0].part_label == (
            "Shelf-backer"
        )
