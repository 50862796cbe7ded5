"""Randomized invariant checks for the packer.

Each case draws a reproducible request from a fixed seed and checks the
properties every layout must have, whatever the heuristic decides.
"""

from __future__ import annotations

import random

import pytest

from nesting.domain.geometry import EPSILON, Rect, intersects_area
from nesting.domain.services.packer import pack
from nesting.domain.value_objects import (
    BandEdges,
    GrainDirection,
    LayoutResult,
    PackingOptions,
    PartSpec,
    ScoreWeights,
    StockSheetSpec,
)

SEEDS = list(range(12))


def _random_request(seed: int) -> tuple[list[PartSpec], list[StockSheetSpec], PackingOptions]:
    rng = random.Random(seed)
    parts = [
        PartSpec(
            length=float(rng.randint(50, 1400)),
            width=float(rng.randint(50, 900)),
            quantity=rng.randint(1, 4),
            grain=rng.choice(list(GrainDirection)),
            band_edges=BandEdges(top=rng.random() < 0.5, left=rng.random() < 0.5),
            laminate=rng.random() < 0.2,
            label=f"P{i}",
        )
        for i in range(rng.randint(1, 14))
    ]
    stock = [
        StockSheetSpec(length=2750.0, width=1830.0, quantity_available=rng.choice([None, 2, 4]), label="Board"),
        StockSheetSpec(length=1220.0, width=1000.0, quantity_available=None, label="Small"),
    ]
    options = PackingOptions(
        kerf_mm=rng.choice([0.0, 3.0, 4.2]),
        allow_rotation=rng.random() < 0.8,
    )
    return parts, stock, options


def _rect(placement) -> Rect:
    return Rect(placement.x, placement.y, placement.placed_width, placement.placed_height)


@pytest.fixture(params=SEEDS)
def case(request) -> tuple[list[PartSpec], list[StockSheetSpec], PackingOptions, LayoutResult]:
    parts, stock, options = _random_request(request.param)
    return parts, stock, options, pack(parts, stock, options)


@pytest.mark.slow
class TestPackingInvariants:
    """Invariants of every layout."""

    def test_every_unit_accounted_for(self, case) -> None:
        parts, _, _, result = case
        total = sum(p.quantity for p in parts)
        assert result.total_pieces_placed + len(result.unplaceable) == total

    def test_placements_inside_sheet(self, case) -> None:
        _, _, _, result = case
        for sheet in result.sheets:
            for p in sheet.placements:
                assert p.x >= 0 and p.y >= 0
                assert p.right_edge <= sheet.sheet_type.width + EPSILON
                assert p.bottom_edge <= sheet.sheet_type.length + EPSILON

    def test_no_overlapping_placements(self, case) -> None:
        _, _, _, result = case
        for sheet in result.sheets:
            rects = [_rect(p) for p in sheet.placements]
            for i, a in enumerate(rects):
                for b in rects[i + 1 :]:
                    assert intersects_area(a, b) == 0.0

    def test_free_rects_disjoint_from_placements(self, case) -> None:
        _, _, _, result = case
        for sheet in result.sheets:
            for free in sheet.free_rects:
                for p in sheet.placements:
                    assert intersects_area(free, _rect(p)) == 0.0

    def test_area_conservation(self, case) -> None:
        _, _, _, result = case
        sheet_area = sum(s.sheet_area for s in result.sheets)
        assert result.stats.used_area + result.stats.waste_area == pytest.approx(sheet_area)

    def test_grain_respected(self, case) -> None:
        parts, _, _, result = case
        grain = {p.label: p.grain for p in parts}
        for sheet in result.sheets:
            for p in sheet.placements:
                if grain[p.part_label] == GrainDirection.LENGTH:
                    assert not p.rotated
                elif grain[p.part_label] == GrainDirection.WIDTH:
                    assert p.rotated

    def test_rotation_gate(self, case) -> None:
        _, _, options, result = case
        if options.allow_rotation:
            return
        assert not any(p.rotated for s in result.sheets for p in s.placements)

    def test_cut_length_bounded_by_perimeters(self, case) -> None:
        _, _, _, result = case
        for sheet in result.sheets:
            perimeters = sum(p.perimeter for p in sheet.placements)
            assert sheet.total_cut_length <= perimeters + EPSILON

    def test_sheet_quantities_respected(self, case) -> None:
        _, stock, _, result = case
        for type_index, spec in enumerate(stock):
            if spec.quantity_available is None:
                continue
            opened = sum(1 for s in result.sheets if s.sheet_type_index == type_index)
            assert opened <= spec.quantity_available

    def test_deterministic(self, case) -> None:
        parts, stock, options, result = case
        assert pack(parts, stock, options) == result


# =============================================================================
# Score weights
# =============================================================================


@pytest.mark.slow
class TestFutureFitWeight:
    """The future-fit term pays off across many requests."""

    def test_future_fit_does_not_increase_total_waste(self) -> None:
        stock = [StockSheetSpec(length=2750.0, width=1830.0, label="Board")]
        default_options = PackingOptions(kerf_mm=3.0)
        without_future_fit = PackingOptions(kerf_mm=3.0, weights=ScoreWeights(future_fit=0.0))

        default_waste = 0.0
        zero_weight_waste = 0.0
        for seed in range(200):
            parts, _, _ = _random_request(seed)
            default_waste += pack(parts, stock, default_options).stats.waste_area
            zero_weight_waste += pack(parts, stock, without_future_fit).stats.waste_area

        assert zero_weight_waste >= default_waste
