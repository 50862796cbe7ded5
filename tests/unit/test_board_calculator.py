"""Tests for board-type group expansion."""

from __future__ import annotations

import pytest

from nesting.domain.services.board_calculator import (
    BoardType,
    PartGroup,
    edge_length,
    expand_groups,
    sheets_for_material,
)
from nesting.domain.value_objects import BandEdges, PartSpec, StockSheetSpec


def _part(**kwargs) -> PartSpec:
    defaults = {"length": 800.0, "width": 400.0, "quantity": 2, "label": "Top"}
    defaults.update(kwargs)
    return PartSpec(**defaults)


class TestBoardType:
    """Tests for BoardType enum."""

    def test_values(self) -> None:
        assert BoardType("32mm-backer") == BoardType.WITH_BACKER_32MM

    def test_display_name_and_description(self) -> None:
        assert BoardType.BOTH_SIDES_32MM.display_name == "32mm Both Sides"
        assert "backer" in BoardType.WITH_BACKER_32MM.description


class TestEdgeLength:
    """Tests for edge_length()."""

    def test_no_edges(self) -> None:
        assert edge_length(_part()) == 0.0

    def test_long_and_short_edges(self) -> None:
        part = _part(band_edges=BandEdges(top=True, left=True))
        assert edge_length(part) == 400.0 + 800.0


class TestExpandGroups:
    """Tests for expand_groups()."""

    def test_single_board_group(self) -> None:
        group = PartGroup(
            name="Carcass",
            board_type=BoardType.SINGLE_16MM,
            parts=(_part(band_edges=BandEdges(top=True)),),
            primary_material="white",
        )
        calc = expand_groups([group])

        assert calc.total_primary_parts == 2
        assert calc.total_backer_parts == 0
        assert calc.primary_sets[0].material == "white"
        assert not calc.primary_sets[0].parts[0].laminate
        assert calc.edging_by_thickness == {"16mm": 800.0, "32mm": 0.0}

    def test_both_sides_doubles_quantity(self) -> None:
        group = PartGroup(
            name="Worktop",
            board_type=BoardType.BOTH_SIDES_32MM,
            parts=(_part(band_edges=BandEdges(left=True)),),
        )
        calc = expand_groups([group])

        parts = calc.primary_sets[0].parts
        assert parts[0].quantity == 4
        assert parts[0].laminate
        assert calc.total_primary_parts == 4
        # Edging is per finished panel, not per board
        assert calc.edging_by_thickness["32mm"] == 1600.0

    def test_backer_group_splits_materials(self) -> None:
        group = PartGroup(
            name="Desk",
            board_type=BoardType.WITH_BACKER_32MM,
            parts=(_part(),),
            primary_material="oak",
            backer_material="chipboard",
        )
        calc = expand_groups([group])

        assert [p.label for p in calc.primary_sets[0].parts] == ["Top"]
        assert [p.label for p in calc.backer_sets[0].parts] == ["Top-backer"]
        assert calc.backer_sets[0].material == "chipboard"
        assert calc.backer_sets[0].is_backer
        assert calc.total_backer_parts == 2

    def test_backer_material_defaults_to_primary(self) -> None:
        group = PartGroup(
            name="Desk",
            board_type=BoardType.WITH_BACKER_32MM,
            parts=(_part(),),
            primary_material="oak",
        )
        assert expand_groups([group]).backer_sets[0].material == "oak"

    def test_unassigned_material(self) -> None:
        group = PartGroup(name="Misc", board_type=BoardType.SINGLE_16MM, parts=(_part(),))
        assert expand_groups([group]).primary_sets[0].material is None

    def test_groups_share_material_sets(self) -> None:
        groups = [
            PartGroup("A", BoardType.SINGLE_16MM, (_part(label="a"),), primary_material="oak"),
            PartGroup("B", BoardType.SINGLE_16MM, (_part(label="b"),), primary_material="oak"),
        ]
        calc = expand_groups(groups)

        assert len(calc.primary_sets) == 1
        assert [p.label for p in calc.primary_sets[0].parts] == ["a", "b"]
        assert calc.groups_processed == 2

    def test_empty(self) -> None:
        calc = expand_groups([])
        assert calc.primary_sets == ()
        assert calc.total_primary_parts == 0

    def test_group_summaries(self) -> None:
        groups = [
            PartGroup("Carcass", BoardType.SINGLE_16MM, (_part(quantity=3),)),
            PartGroup("Worktop", BoardType.BOTH_SIDES_32MM, (_part(),)),
            PartGroup("Desk", BoardType.WITH_BACKER_32MM, (_part(quantity=1),)),
        ]
        calc = expand_groups(groups)

        assert [(g.name, g.primary_pieces, g.backer_pieces) for g in calc.groups] == [
            ("Carcass", 3, 0),
            ("Worktop", 4, 0),
            ("Desk", 1, 1),
        ]
        assert calc.groups[1].board_type == BoardType.BOTH_SIDES_32MM
        assert calc.total_primary_parts == 8
        assert calc.total_backer_parts == 1


class TestSheetsForMaterial:
    """Tests for sheets_for_material()."""

    @pytest.fixture
    def stock(self) -> list[StockSheetSpec]:
        return [
            StockSheetSpec(length=2750, width=1830, label="Plain"),
            StockSheetSpec(length=2800, width=2070, label="Oak", material="oak"),
            StockSheetSpec(length=2800, width=2070, label="Walnut", material="walnut"),
        ]

    def test_tagged_sheets_win(self, stock: list[StockSheetSpec]) -> None:
        assert sheets_for_material(stock, "oak") == [1]

    def test_unknown_material_uses_untagged_sheets(self, stock: list[StockSheetSpec]) -> None:
        assert sheets_for_material(stock, "birch") == [0]

    def test_no_material_uses_untagged_sheets(self, stock: list[StockSheetSpec]) -> None:
        assert sheets_for_material(stock, None) == [0]

    def test_no_material_falls_back_to_every_sheet(self, stock: list[StockSheetSpec]) -> None:
        tagged = stock[1:]
        assert sheets_for_material(tagged, None) == [0, 1]

    def test_unknown_material_without_untagged_sheets(
        self, stock: list[StockSheetSpec]
    ) -> None:
        assert sheets_for_material(stock[1:], "birch") == []
