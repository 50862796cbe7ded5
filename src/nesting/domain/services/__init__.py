"""Domain services for sheet nesting.

This package provides the packing pipeline:
- Part normalization into placeable units
- Free rectangle tracking and cut run accumulation
- Composite scoring and the guillotine packer
- Edge banding totals and board-type expansion
"""

from .banding import BandingSummary, compute_banding
from .board_calculator import (
    BoardCalculation,
    BoardType,
    GroupSummary,
    MaterialPartSet,
    PartGroup,
    expand_groups,
    sheets_for_material,
)
from .cut_segments import CutAccumulator
from .free_rects import FreeRectTracker
from .normalizer import NormalizedParts, Orientation, Unit, normalize_parts
from .packer import GuillotinePacker, Placed, Unplaceable, pack, validate_inputs
from .scoring import FootprintHistogram, ScoreBreakdown, score_placement

__all__ = [
    "BandingSummary",
    "BoardCalculation",
    "BoardType",
    "CutAccumulator",
    "FootprintHistogram",
    "FreeRectTracker",
    "GroupSummary",
    "GuillotinePacker",
    "MaterialPartSet",
    "NormalizedParts",
    "Orientation",
    "PartGroup",
    "Placed",
    "ScoreBreakdown",
    "Unit",
    "Unplaceable",
    "compute_banding",
    "expand_groups",
    "normalize_parts",
    "pack",
    "score_placement",
    "sheets_for_material",
    "validate_inputs",
]
