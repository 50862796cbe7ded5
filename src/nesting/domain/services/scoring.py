"""Composite placement scoring.

A candidate placement (free rectangle plus orientation) is scored by a
fixed set of terms, each in square millimetres so the weights in
``ScoreWeights`` are directly comparable:

- leftover: free area left in the chosen rectangle;
- fragmentation: surcharge for residuals narrower than the minimum offcut;
- aspect: how far the placement is from filling its rectangle evenly in
  both directions, scaled by the placed area;
- future fit: residual area that none of the remaining units could use,
  estimated from a histogram of their footprints;
- cut length: marginal saw length the placement would add.

Lower totals win.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from nesting.domain.geometry import EPSILON, Rect, SplitResult
from nesting.domain.value_objects import ScoreWeights


@dataclass(frozen=True)
class ScoreBreakdown:
    """Weighted terms of one candidate's score."""

    leftover: float
    fragmentation: float
    aspect: float
    future_fit: float
    cut_length: float

    @property
    def total(self) -> float:
        return (
            self.leftover
            + self.fragmentation
            + self.aspect
            + self.future_fit
            + self.cut_length
        )


class FootprintHistogram:
    """Counts of the ``(short, long)`` footprints of units still to place."""

    def __init__(self, footprints: list[tuple[float, float]] | None = None) -> None:
        self._counts: Counter[tuple[float, float]] = Counter(footprints or [])
        self._remaining = sum(self._counts.values())

    @property
    def remaining(self) -> int:
        return self._remaining

    def remove(self, footprint: tuple[float, float]) -> None:
        """Take one unit out of the histogram."""
        if self._counts[footprint] <= 0:
            raise KeyError(f"Footprint {footprint} not in histogram")
        self._counts[footprint] -= 1
        self._remaining -= 1
        if self._counts[footprint] == 0:
            del self._counts[footprint]

    def unusable_fraction(self, rect: Rect) -> float:
        """Share of remaining units that could not fit in ``rect`` either way."""
        if self._remaining == 0:
            return 0.0
        fitting = sum(
            count
            for (short, long), count in self._counts.items()
            if short <= rect.short_side + EPSILON and long <= rect.long_side + EPSILON
        )
        return 1.0 - fitting / self._remaining


def score_placement(
    free: Rect,
    split: SplitResult,
    placed_width: float,
    placed_height: float,
    marginal_cut: float,
    histogram: FootprintHistogram,
    min_offcut_mm: float,
    weights: ScoreWeights,
) -> ScoreBreakdown:
    """Score one candidate placement.

    Args:
        free: The free rectangle the part would go in.
        split: The split the placement would cause.
        placed_width: Extent of the part along X.
        placed_height: Extent of the part along Y.
        marginal_cut: Cut length the placement would add to the sheet.
        histogram: Footprints of units that are still to be placed.
        min_offcut_mm: Residuals with a shorter side are slivers.
        weights: Term weights.

    Returns:
        ScoreBreakdown with every weighted term.
    """
    placed_area = placed_width * placed_height

    fragmentation = 0.0
    future_fit = 0.0
    for residual in split.residuals:
        if residual.short_side < min_offcut_mm:
            fragmentation += weights.sliver_penalty + weights.sliver_area * residual.area
        future_fit += residual.area * histogram.unusable_fraction(residual)

    fill_x = placed_width / free.width
    fill_y = placed_height / free.height
    aspect_ratio = max(fill_x, fill_y) / min(fill_x, fill_y)

    return ScoreBreakdown(
        leftover=weights.leftover * (free.area - placed_area),
        fragmentation=fragmentation,
        aspect=weights.aspect * (aspect_ratio - 1.0) * placed_area,
        future_fit=weights.future_fit * future_fit,
        cut_length=weights.cut_length * marginal_cut,
    )
