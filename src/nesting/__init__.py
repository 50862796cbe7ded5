"""Sheet nesting: guillotine packing of rectangular parts onto stock sheets."""

from nesting.domain.errors import InvalidInputError, PackingError
from nesting.domain.services.packer import pack
from nesting.domain.value_objects import (
    BandEdges,
    GrainDirection,
    LayoutResult,
    PackingOptions,
    PartSpec,
    StockSheetSpec,
)

__version__ = "0.1.0"

__all__ = [
    "BandEdges",
    "GrainDirection",
    "InvalidInputError",
    "LayoutResult",
    "PackingError",
    "PackingOptions",
    "PartSpec",
    "StockSheetSpec",
    "pack",
]
