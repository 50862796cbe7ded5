"""Value objects for the nesting domain.

Part and stock sheet specifications are deliberately permissive on
construction: ``pack()`` validates a whole request at once so that every
problem is reported together as an ``InvalidInputError``. Objects created by
the engine itself (placements, offcuts) validate eagerly.

All dataclasses are frozen (immutable) so a request can be shared between
concurrent packing runs without copying.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from nesting.domain.errors import SheetExhausted, UnplaceablePart
from nesting.domain.geometry import CutSegment, Rect


class GrainDirection(str, Enum):
    """Grain orientation constraint for a part.

    Attributes:
        ANY: Part may be placed at 0 or 90 degrees.
        LENGTH: Part length stays aligned with the sheet length (0 degrees).
        WIDTH: Part length runs across the sheet width (90 degrees only).
    """

    ANY = "any"
    LENGTH = "length"
    WIDTH = "width"


class Side(str, Enum):
    """A side of a rectangle, in whatever frame the caller is using."""

    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"


@dataclass(frozen=True)
class BandEdges:
    """Edge banding flags in the part's unrotated local frame.

    Top and bottom run along the part width; left and right run along the
    part length.
    """

    top: bool = False
    right: bool = False
    bottom: bool = False
    left: bool = False

    def banded_sides(self) -> tuple[Side, ...]:
        """Banded sides in a fixed top/right/bottom/left order."""
        flags = (
            (Side.TOP, self.top),
            (Side.RIGHT, self.right),
            (Side.BOTTOM, self.bottom),
            (Side.LEFT, self.left),
        )
        return tuple(side for side, banded in flags if banded)

    @property
    def any(self) -> bool:
        return self.top or self.right or self.bottom or self.left


@dataclass(frozen=True)
class PartSpec:
    """One distinct cuttable item type.

    Attributes:
        length: Length in mm (runs along the sheet length at 0 degrees).
        width: Width in mm (runs along the sheet width at 0 degrees).
        quantity: Number of identical pieces required.
        grain: Grain orientation constraint.
        band_edges: Edge banding flags in the unrotated frame.
        laminate: Whether the part is laminated (selects the banding class).
        label: Opaque identifier for traceability.
    """

    length: float
    width: float
    quantity: int = 1
    grain: GrainDirection = GrainDirection.ANY
    band_edges: BandEdges = field(default_factory=BandEdges)
    laminate: bool = False
    label: str = ""

    @property
    def area(self) -> float:
        """Area of a single piece in square millimetres."""
        return self.length * self.width

    @property
    def longest_edge(self) -> float:
        return max(self.length, self.width)


@dataclass(frozen=True)
class StockSheetSpec:
    """One type of stock sheet.

    Attributes:
        length: Sheet length in mm (Y axis).
        width: Sheet width in mm (X axis).
        quantity_available: Sheets on hand, or None for unbounded.
        kerf: Saw kerf for this sheet type; None falls back to the
            packing options.
        label: Identifier used in reports and per-type statistics.
        material: Material the sheet is made of; None for untagged sheets.
    """

    length: float
    width: float
    quantity_available: int | None = None
    kerf: float | None = None
    label: str = ""
    material: str | None = None

    @property
    def area(self) -> float:
        return self.length * self.width

    @property
    def name(self) -> str:
        """Label, or a ``length x width`` description when unlabelled."""
        return self.label or f"{self.length:g}x{self.width:g}"


@dataclass(frozen=True)
class ScoreWeights:
    """Weights of the composite placement score.

    Every term is expressed in square millimetres so the weights are
    directly comparable. Lower composite scores win.

    Attributes:
        leftover: Multiplier on free area left over in the chosen rectangle.
        sliver_penalty: Flat surcharge for each residual below the minimum
            offcut dimension.
        sliver_area: Multiplier on the area of each sliver residual.
        aspect: Multiplier on the aspect deviation of the placement within
            its free rectangle, scaled by the placed area.
        future_fit: Multiplier on residual area no remaining unit can use.
        cut_length: Square millimetres charged per millimetre of new cut.
    """

    leftover: float = 1.0
    sliver_penalty: float = 10_000.0
    sliver_area: float = 2.0
    aspect: float = 0.05
    future_fit: float = 0.5
    cut_length: float = 10.0

    def __post_init__(self) -> None:
        for name in (
            "leftover",
            "sliver_penalty",
            "sliver_area",
            "aspect",
            "future_fit",
            "cut_length",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"Score weight '{name}' must be non-negative")


@dataclass(frozen=True)
class PackingOptions:
    """Options for one packing run.

    Attributes:
        kerf_mm: Default saw kerf; a sheet-level kerf takes precedence.
        allow_rotation: Global gate on 90 degree placements.
        single_sheet_only: Feasibility mode, never open a second sheet.
        min_offcut_mm: Residuals with a side below this are slivers.
        min_offcut_area_mm2: Minimum area for a reusable offcut.
        board_thickness_mm: Thickness of one board; laminated parts use
            twice this for their banding class.
        laminate_backer_sheet: Sheet used for the backer sheet fraction.
        weights: Composite score weights.
    """

    kerf_mm: float = 0.0
    allow_rotation: bool = True
    single_sheet_only: bool = False
    min_offcut_mm: float = 150.0
    min_offcut_area_mm2: float = 100_000.0
    board_thickness_mm: float = 16.0
    laminate_backer_sheet: StockSheetSpec | None = None
    weights: ScoreWeights = field(default_factory=ScoreWeights)

    def kerf_for(self, sheet: StockSheetSpec) -> float:
        """Effective kerf for a sheet type."""
        return sheet.kerf if sheet.kerf is not None else self.kerf_mm


@dataclass(frozen=True)
class Placement:
    """A unit placed on a sheet.

    Attributes:
        part_label: Label of the source part.
        unit_label: Label of this physical piece (``label #n``).
        x: Left edge, sheet-local.
        y: Top edge, sheet-local.
        placed_width: On-sheet extent along X (kerf exclusive).
        placed_height: On-sheet extent along Y (kerf exclusive).
        rotated: True when placed at 90 degrees.
    """

    part_label: str
    unit_label: str
    x: float
    y: float
    placed_width: float
    placed_height: float
    rotated: bool = False

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise ValueError("Position coordinates must be non-negative")
        if self.placed_width <= 0 or self.placed_height <= 0:
            raise ValueError("Placed dimensions must be positive")

    @property
    def area(self) -> float:
        return self.placed_width * self.placed_height

    @property
    def right_edge(self) -> float:
        return self.x + self.placed_width

    @property
    def bottom_edge(self) -> float:
        return self.y + self.placed_height

    @property
    def perimeter(self) -> float:
        return 2 * (self.placed_width + self.placed_height)


@dataclass(frozen=True)
class Offcut:
    """A reusable leftover region on a sheet.

    Attributes:
        sheet_index: Index of the sheet the offcut belongs to.
        x: Left edge, sheet-local.
        y: Top edge, sheet-local.
        width: Extent along X.
        height: Extent along Y.
    """

    sheet_index: int
    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Offcut dimensions must be positive")
        if self.sheet_index < 0:
            raise ValueError("Sheet index must be non-negative")

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(frozen=True)
class SheetLayout:
    """Layout of placements on one physical sheet.

    Attributes:
        sheet_index: Zero-based index of the sheet in the result.
        sheet_type: Specification of the sheet.
        sheet_type_index: Index of the sheet type in the stock list.
        placements: Placements in commit order.
        free_rects: Free rectangles left after packing.
        cut_runs: Merged saw runs on this sheet.
    """

    sheet_index: int
    sheet_type: StockSheetSpec
    sheet_type_index: int
    placements: tuple[Placement, ...]
    free_rects: tuple[Rect, ...] = ()
    cut_runs: tuple[CutSegment, ...] = ()

    def __post_init__(self) -> None:
        if self.sheet_index < 0:
            raise ValueError("Sheet index must be non-negative")

    @property
    def sheet_area(self) -> float:
        return self.sheet_type.area

    @property
    def used_area(self) -> float:
        """Total area covered by placements in square millimetres."""
        return sum(p.area for p in self.placements)

    @property
    def waste_area(self) -> float:
        return self.sheet_area - self.used_area

    @property
    def waste_percentage(self) -> float:
        """Percentage of the sheet that is not covered by placements."""
        if self.sheet_area == 0:
            return 0.0
        return self.waste_area / self.sheet_area * 100

    @property
    def piece_count(self) -> int:
        return len(self.placements)

    @property
    def cut_count(self) -> int:
        return len(self.cut_runs)

    @property
    def total_cut_length(self) -> float:
        return sum(run.length for run in self.cut_runs)


@dataclass(frozen=True)
class PackingStats:
    """Aggregate statistics of a packing run.

    Attributes:
        used_area: Area covered by placements over all sheets.
        waste_area: Sheet area not covered by placements.
        cut_count: Number of merged saw runs.
        total_cut_length: Length of all merged saw runs.
        banding_length_by_thickness: Banded length per thickness class.
        banding_length_by_side: Banded length per sheet-local side.
        fractional_sheets_used_by_type: Used area over sheet area, per type.
        sheets_opened_by_type: Whole sheets opened, per type.
        backer_sheets_fraction: Laminated area over backer sheet area, or
            None when no backer sheet is configured.
        total_waste_percentage: Waste over total sheet area, in percent.
    """

    used_area: float = 0.0
    waste_area: float = 0.0
    cut_count: int = 0
    total_cut_length: float = 0.0
    banding_length_by_thickness: dict[str, float] = field(default_factory=dict)
    banding_length_by_side: dict[str, float] = field(default_factory=dict)
    fractional_sheets_used_by_type: dict[str, float] = field(default_factory=dict)
    sheets_opened_by_type: dict[str, int] = field(default_factory=dict)
    backer_sheets_fraction: float | None = None
    total_waste_percentage: float = 0.0


@dataclass(frozen=True)
class LayoutResult:
    """Complete result of a packing run.

    Attributes:
        sheets: Sheet layouts in the order they were opened.
        stats: Aggregate statistics.
        unplaceable: Units that could not be placed, in packing order.
        sheet_exhausted: Notices of sheet types that ran out.
        offcuts: Reusable leftover regions.
    """

    sheets: tuple[SheetLayout, ...]
    stats: PackingStats
    unplaceable: tuple[UnplaceablePart, ...] = ()
    sheet_exhausted: tuple[SheetExhausted, ...] = ()
    offcuts: tuple[Offcut, ...] = ()

    @property
    def total_sheets(self) -> int:
        return len(self.sheets)

    @property
    def total_pieces_placed(self) -> int:
        return sum(sheet.piece_count for sheet in self.sheets)

    @property
    def is_complete(self) -> bool:
        """True when every unit was placed."""
        return not self.unplaceable

    def unplaceable_by_part(self) -> dict[str, int]:
        """Number of unplaced units per part label, in first-seen order."""
        counts: dict[str, int] = {}
        for item in self.unplaceable:
            counts[item.part_label] = counts.get(item.part_label, 0) + 1
        return counts
