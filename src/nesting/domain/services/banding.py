"""Edge banding and lamination totals for a finished layout.

Banding flags are given in the part's unrotated frame. A part placed at
90 degrees presents its sides on the sheet as follows::

    top -> left, right -> top, bottom -> right, left -> bottom

On the sheet, top and bottom sides are ``placed_width`` long and left and
right sides are ``placed_height`` long.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from nesting.domain.value_objects import (
    PackingOptions,
    PartSpec,
    Placement,
    Side,
)

logger = logging.getLogger(__name__)

ROTATED_SIDE = {
    Side.TOP: Side.LEFT,
    Side.RIGHT: Side.TOP,
    Side.BOTTOM: Side.RIGHT,
    Side.LEFT: Side.BOTTOM,
}


@dataclass(frozen=True)
class BandingSummary:
    """Banding and lamination totals.

    Attributes:
        by_thickness: Banded length per thickness class (e.g. "16mm").
        by_side: Banded length per sheet-local side.
        laminated_area: Placed area of laminated parts.
        backer_sheets_fraction: Laminated area over backer sheet area, or
            None when no backer sheet is configured.
    """

    by_thickness: dict[str, float]
    by_side: dict[str, float]
    laminated_area: float
    backer_sheets_fraction: float | None


def sheet_side(side: Side, rotated: bool) -> Side:
    """Map a side from the part's frame to the sheet's frame."""
    return ROTATED_SIDE[side] if rotated else side


def side_length(side: Side, placement: Placement) -> float:
    """On-sheet length of a sheet-local side of a placement."""
    if side in (Side.TOP, Side.BOTTOM):
        return placement.placed_width
    return placement.placed_height


def thickness_class(laminate: bool, board_thickness_mm: float) -> str:
    """Bucket name for a part's banding, e.g. "16mm" or "32mm"."""
    thickness = board_thickness_mm * (2 if laminate else 1)
    return f"{thickness:g}mm"


def compute_banding(
    placed: Iterable[tuple[Placement, PartSpec]],
    options: PackingOptions,
) -> BandingSummary:
    """Sum banded edge lengths and the backer sheet fraction.

    Args:
        placed: Every placement paired with its source part.
        options: Packing options (board thickness, backer sheet).

    Returns:
        BandingSummary for the layout.
    """
    by_thickness = {
        thickness_class(False, options.board_thickness_mm): 0.0,
        thickness_class(True, options.board_thickness_mm): 0.0,
    }
    by_side = {side.value: 0.0 for side in Side}
    laminated_area = 0.0

    for placement, part in placed:
        if part.laminate:
            laminated_area += placement.area
        bucket = thickness_class(part.laminate, options.board_thickness_mm)
        for local_side in part.band_edges.banded_sides():
            side = sheet_side(local_side, placement.rotated)
            length = side_length(side, placement)
            by_thickness[bucket] += length
            by_side[side.value] += length

    backer = options.laminate_backer_sheet
    backer_fraction: float | None = None
    if backer is not None:
        backer_fraction = laminated_area / backer.area
    elif laminated_area > 0:
        logger.warning(
            "Laminated parts placed but no backer sheet configured; "
            "backer sheet fraction not computed"
        )

    return BandingSummary(
        by_thickness=by_thickness,
        by_side=by_side,
        laminated_area=laminated_area,
        backer_sheets_fraction=backer_fraction,
    )
