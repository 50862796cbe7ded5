"""Domain layer - packing engine and its value objects."""

from .errors import (
    InputIssue,
    InvalidInputError,
    PackingError,
    SheetExhausted,
    UnplaceablePart,
    UnplaceableReason,
)
from .geometry import CutAxis, CutSegment, Rect
from .value_objects import (
    BandEdges,
    GrainDirection,
    LayoutResult,
    Offcut,
    PackingOptions,
    PackingStats,
    PartSpec,
    Placement,
    ScoreWeights,
    SheetLayout,
    Side,
    StockSheetSpec,
)

__all__ = [
    "BandEdges",
    "CutAxis",
    "CutSegment",
    "GrainDirection",
    "InputIssue",
    "InvalidInputError",
    "LayoutResult",
    "Offcut",
    "PackingError",
    "PackingOptions",
    "PackingStats",
    "PartSpec",
    "Placement",
    "Rect",
    "ScoreWeights",
    "SheetExhausted",
    "SheetLayout",
    "Side",
    "StockSheetSpec",
    "UnplaceablePart",
    "UnplaceableReason",
]
