"""Expansion of part specifications into individually placeable units."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from nesting.domain.value_objects import GrainDirection, PartSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Orientation:
    """One legal way of laying a unit on a sheet.

    Attributes:
        rotated: True for 90 degrees.
        width: Extent along the sheet X axis.
        height: Extent along the sheet Y axis.
    """

    rotated: bool
    width: float
    height: float


@dataclass(frozen=True)
class Unit:
    """One physical piece of a part.

    Attributes:
        part: The source part specification.
        part_index: Position of the part in the request.
        index: Quantity-expansion order across the whole request.
        label: Label of this piece (``label #n`` when quantity > 1).
        orientations: Legal orientations, 0 degrees first. Empty when the
            grain constraint cannot be honoured.
    """

    part: PartSpec
    part_index: int
    index: int
    label: str
    orientations: tuple[Orientation, ...]

    @property
    def area(self) -> float:
        return self.part.area

    @property
    def min_footprint(self) -> tuple[float, float]:
        """``(short, long)`` sides, used for future-fit bookkeeping."""
        return (
            min(self.part.length, self.part.width),
            max(self.part.length, self.part.width),
        )


@dataclass(frozen=True)
class NormalizedParts:
    """Result of normalizing a request's parts.

    Attributes:
        units: Placeable units in packing order.
        grain_locked: Units with no legal orientation, in expansion order.
    """

    units: tuple[Unit, ...]
    grain_locked: tuple[Unit, ...]


def legal_orientations(part: PartSpec, allow_rotation: bool) -> tuple[Orientation, ...]:
    """Resolve which orientations a part may take on a sheet.

    At 0 degrees the part width runs along X and its length along Y.

    Args:
        part: Part specification.
        allow_rotation: Global rotation gate.

    Returns:
        Legal orientations with 0 degrees first; empty when the part's
        grain demands a rotation that is disabled.
    """
    upright = Orientation(rotated=False, width=part.width, height=part.length)
    turned = Orientation(rotated=True, width=part.length, height=part.width)

    if part.grain == GrainDirection.LENGTH:
        return (upright,)
    if part.grain == GrainDirection.WIDTH:
        return (turned,) if allow_rotation else ()

    # Square parts gain nothing from turning
    if not allow_rotation or part.length == part.width:
        return (upright,)
    return (upright, turned)


def normalize_parts(
    parts: Sequence[PartSpec], allow_rotation: bool = True
) -> NormalizedParts:
    """Expand parts into units and order them for packing.

    Each part with quantity N becomes N units. Units are sorted by area
    descending, then longest edge descending, then expansion index
    ascending, which gives a total order independent of sort stability.

    Args:
        parts: Part specifications in request order.
        allow_rotation: Global rotation gate.

    Returns:
        NormalizedParts with the placeable units and the grain locked ones.
    """
    placeable: list[Unit] = []
    locked: list[Unit] = []
    index = 0

    for part_index, part in enumerate(parts):
        orientations = legal_orientations(part, allow_rotation)
        for i in range(part.quantity):
            label = part.label if part.quantity == 1 else f"{part.label} #{i + 1}"
            unit = Unit(
                part=part,
                part_index=part_index,
                index=index,
                label=label,
                orientations=orientations,
            )
            index += 1
            if orientations:
                placeable.append(unit)
            else:
                locked.append(unit)

    if locked:
        logger.debug("%d units are grain locked with rotation disabled", len(locked))

    ordered = sorted(
        placeable,
        key=lambda u: (-u.area, -u.part.longest_edge, u.index),
    )
    return NormalizedParts(units=tuple(ordered), grain_locked=tuple(locked))
