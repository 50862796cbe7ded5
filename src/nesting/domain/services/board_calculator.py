"""Expansion of board-type groups into part specifications.

Thick panels are made by laminating boards together. A group of parts
declares how its panels are built:

- ``16mm``: a single board, parts packed as-is;
- ``32mm-both``: two identical boards laminated, both faces visible, so
  every part is cut twice from the primary material;
- ``32mm-backer``: a visible primary board laminated onto a cheaper
  backer board, so every part is cut once from each material.

Parts are grouped by material, and each material is packed separately on
the sheets made of it. Edging is estimated here from the unplaced parts;
packing reports the final banded lengths per placement.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Sequence

from nesting.domain.value_objects import PartSpec, StockSheetSpec

logger = logging.getLogger(__name__)

UNASSIGNED = "unassigned"


class BoardType(str, Enum):
    """How the panels of a group are built."""

    SINGLE_16MM = "16mm"
    BOTH_SIDES_32MM = "32mm-both"
    WITH_BACKER_32MM = "32mm-backer"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DISPLAY_NAMES = {
    BoardType.SINGLE_16MM: "16mm Single",
    BoardType.BOTH_SIDES_32MM: "32mm Both Sides",
    BoardType.WITH_BACKER_32MM: "32mm With Backer",
}

_DESCRIPTIONS = {
    BoardType.SINGLE_16MM: "Standard single board, 16mm edging",
    BoardType.BOTH_SIDES_32MM: "Two identical boards laminated, both sides visible",
    BoardType.WITH_BACKER_32MM: "Primary board on a backer board, only top visible",
}


@dataclass(frozen=True)
class PartGroup:
    """A group of parts sharing a board type and materials.

    Attributes:
        name: Display name of the group.
        board_type: How the group's panels are built.
        parts: Parts of the group, one entry per distinct part.
        primary_material: Identifier of the visible material.
        backer_material: Identifier of the backer material (backer groups).
    """

    name: str
    board_type: BoardType
    parts: tuple[PartSpec, ...] = ()
    primary_material: str | None = None
    backer_material: str | None = None


@dataclass(frozen=True)
class MaterialPartSet:
    """Parts to be cut from one material.

    Attributes:
        material: Material identifier, or None when unassigned.
        parts: Part specifications ready for packing.
        is_backer: True for backer material sets.
    """

    material: str | None
    parts: tuple[PartSpec, ...]
    is_backer: bool = False


@dataclass(frozen=True)
class GroupSummary:
    """Pieces one group contributes to the cut.

    Attributes:
        name: Group name.
        board_type: How the group's panels are built.
        primary_pieces: Pieces cut from the primary material.
        backer_pieces: Pieces cut from the backer material.
    """

    name: str
    board_type: BoardType
    primary_pieces: int
    backer_pieces: int


@dataclass(frozen=True)
class BoardCalculation:
    """Result of expanding groups by board type.

    Attributes:
        primary_sets: Primary parts grouped by material, first-seen order.
        backer_sets: Backer parts grouped by material.
        edging_by_thickness: Estimated edging per thickness class.
        groups: Per-group piece counts, in request order.
        total_primary_parts: Number of primary pieces.
        total_backer_parts: Number of backer pieces.
    """

    primary_sets: tuple[MaterialPartSet, ...]
    backer_sets: tuple[MaterialPartSet, ...]
    edging_by_thickness: dict[str, float] = field(default_factory=dict)
    groups: tuple[GroupSummary, ...] = ()
    total_primary_parts: int = 0
    total_backer_parts: int = 0

    @property
    def groups_processed(self) -> int:
        return len(self.groups)


def edge_length(part: PartSpec) -> float:
    """Banded perimeter of one piece of a part."""
    edges = part.band_edges
    length = 0.0
    if edges.top:
        length += part.width
    if edges.bottom:
        length += part.width
    if edges.left:
        length += part.length
    if edges.right:
        length += part.length
    return length


def expand_groups(groups: list[PartGroup]) -> BoardCalculation:
    """Expand part groups into per-material part lists.

    Args:
        groups: Part groups with their board types.

    Returns:
        BoardCalculation with primary and backer part sets, per-group piece
        counts and edging estimates.
    """
    primary: dict[str, list[PartSpec]] = {}
    backer: dict[str, list[PartSpec]] = {}
    edging = {"16mm": 0.0, "32mm": 0.0}
    summaries: list[GroupSummary] = []

    for group in groups:
        primary_key = group.primary_material or UNASSIGNED
        backer_key = group.backer_material or group.primary_material or UNASSIGNED
        primary_pieces = 0
        backer_pieces = 0

        for part in group.parts:
            edging_total = edge_length(part) * part.quantity

            if group.board_type == BoardType.SINGLE_16MM:
                primary.setdefault(primary_key, []).append(replace(part, laminate=False))
                edging["16mm"] += edging_total
                primary_pieces += part.quantity

            elif group.board_type == BoardType.BOTH_SIDES_32MM:
                doubled = replace(part, quantity=part.quantity * 2, laminate=True)
                primary.setdefault(primary_key, []).append(doubled)
                edging["32mm"] += edging_total
                primary_pieces += doubled.quantity

            else:
                primary.setdefault(primary_key, []).append(replace(part, laminate=True))
                backer.setdefault(backer_key, []).append(
                    replace(part, laminate=True, label=f"{part.label}-backer")
                )
                edging["32mm"] += edging_total
                primary_pieces += part.quantity
                backer_pieces += part.quantity

        summaries.append(
            GroupSummary(
                name=group.name,
                board_type=group.board_type,
                primary_pieces=primary_pieces,
                backer_pieces=backer_pieces,
            )
        )

    total_primary = sum(s.primary_pieces for s in summaries)
    total_backer = sum(s.backer_pieces for s in summaries)
    logger.debug(
        "Expanded %d groups into %d primary and %d backer pieces",
        len(groups),
        total_primary,
        total_backer,
    )

    return BoardCalculation(
        primary_sets=tuple(
            MaterialPartSet(
                material=None if key == UNASSIGNED else key,
                parts=tuple(parts),
            )
            for key, parts in primary.items()
        ),
        backer_sets=tuple(
            MaterialPartSet(
                material=None if key == UNASSIGNED else key,
                parts=tuple(parts),
                is_backer=True,
            )
            for key, parts in backer.items()
        ),
        edging_by_thickness=edging,
        groups=tuple(summaries),
        total_primary_parts=total_primary,
        total_backer_parts=total_backer,
    )


def sheets_for_material(
    stock: Sequence[StockSheetSpec], material: str | None
) -> list[int]:
    """Indices of the stock sheets a material's parts are cut from.

    Sheets tagged with the material are used when there are any, otherwise
    the untagged sheets. Parts without a material use the untagged sheets,
    or every sheet when all of them are tagged.
    """
    untagged = [i for i, sheet in enumerate(stock) if sheet.material is None]
    if material is None:
        return untagged or list(range(len(stock)))
    tagged = [i for i, sheet in enumerate(stock) if sheet.material == material]
    return tagged or untagged
