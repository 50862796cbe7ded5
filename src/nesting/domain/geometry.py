"""Rectangle geometry used by the guillotine packer.

Coordinates use a top-left origin: ``x`` grows along the sheet width and
``y`` grows along the sheet length. All comparisons go through ``EPSILON``
so that kerf arithmetic on millimetre values does not create phantom
slivers.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

EPSILON = 1e-6


class CutAxis(str, Enum):
    """Orientation of a straight saw cut.

    Attributes:
        HORIZONTAL: Cut runs along X at a fixed Y coordinate.
        VERTICAL: Cut runs along Y at a fixed X coordinate.
    """

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle with a top-left origin.

    Attributes:
        x: Left edge.
        y: Top edge.
        width: Extent along X.
        height: Extent along Y.
    """

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("Rectangle dimensions must be non-negative")

    @property
    def right(self) -> float:
        """X coordinate of the right edge."""
        return self.x + self.width

    @property
    def bottom(self) -> float:
        """Y coordinate of the bottom edge."""
        return self.y + self.height

    @property
    def area(self) -> float:
        """Area in square millimetres."""
        return self.width * self.height

    @property
    def short_side(self) -> float:
        return min(self.width, self.height)

    @property
    def long_side(self) -> float:
        return max(self.width, self.height)

    def is_degenerate(self) -> bool:
        """True when either dimension is effectively zero."""
        return self.width <= EPSILON or self.height <= EPSILON

    def can_hold(self, width: float, height: float) -> bool:
        """Check whether a ``width`` x ``height`` footprint fits unrotated."""
        return width <= self.width + EPSILON and height <= self.height + EPSILON


@dataclass(frozen=True)
class CutSegment:
    """A straight stretch of saw cut on one sheet.

    Attributes:
        axis: Orientation of the cut.
        position: Fixed coordinate (Y for horizontal cuts, X for vertical).
        start: Start of the extent along the cut direction.
        end: End of the extent along the cut direction.
    """

    axis: CutAxis
    position: float
    start: float
    end: float

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError("Cut segment end must not precede its start")

    @property
    def length(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class SplitResult:
    """Outcome of carving a placement out of a free rectangle.

    Attributes:
        residuals: Zero, one or two non-degenerate free rectangles.
        horizontal_first: True when the full-width cut was chosen.
    """

    residuals: tuple[Rect, ...]
    horizontal_first: bool


def contains(a: Rect, b: Rect) -> bool:
    """Return True iff ``b`` lies entirely within ``a``."""
    return (
        b.x >= a.x - EPSILON
        and b.y >= a.y - EPSILON
        and b.right <= a.right + EPSILON
        and b.bottom <= a.bottom + EPSILON
    )


def intersects_area(a: Rect, b: Rect) -> float:
    """Return the area of the intersection of two rectangles (0 if disjoint)."""
    overlap_w = min(a.right, b.right) - max(a.x, b.x)
    overlap_h = min(a.bottom, b.bottom) - max(a.y, b.y)
    if overlap_w <= EPSILON or overlap_h <= EPSILON:
        return 0.0
    return overlap_w * overlap_h


def merge_adjacent(a: Rect, b: Rect) -> Rect | None:
    """Merge two rectangles that share one full edge.

    Args:
        a: First rectangle.
        b: Second rectangle.

    Returns:
        The union rectangle, or None when the two do not share a full edge.
    """
    same_row = abs(a.y - b.y) <= EPSILON and abs(a.height - b.height) <= EPSILON
    if same_row:
        if abs(a.right - b.x) <= EPSILON:
            return Rect(a.x, a.y, a.width + b.width, a.height)
        if abs(b.right - a.x) <= EPSILON:
            return Rect(b.x, a.y, a.width + b.width, a.height)

    same_column = abs(a.x - b.x) <= EPSILON and abs(a.width - b.width) <= EPSILON
    if same_column:
        if abs(a.bottom - b.y) <= EPSILON:
            return Rect(a.x, a.y, a.width, a.height + b.height)
        if abs(b.bottom - a.y) <= EPSILON:
            return Rect(a.x, b.y, a.width, a.height + b.height)

    return None


def _residual(x: float, y: float, width: float, height: float) -> Rect | None:
    if width <= EPSILON or height <= EPSILON:
        return None
    return Rect(x, y, width, height)


def split_after_placement(
    free: Rect,
    placed_width: float,
    placed_height: float,
    kerf: float = 0.0,
) -> SplitResult:
    """Split a free rectangle after placing a part in its top-left corner.

    Two guillotine splits are possible:

    - horizontal first: a full-width cut below the part leaves a bottom
      residual spanning the whole free width, and a right residual as tall
      as the part;
    - vertical first: a full-height cut right of the part leaves a right
      residual spanning the whole free height, and a bottom residual as wide
      as the part.

    The split whose larger residual has the larger area is chosen (ties go
    to the horizontal split). One kerf width is consumed between the part
    and each residual.

    Args:
        free: The free rectangle being consumed.
        placed_width: Kerf-exclusive width of the placed part.
        placed_height: Kerf-exclusive height of the placed part.
        kerf: Saw blade width.

    Returns:
        SplitResult with the residual free rectangles.

    Raises:
        ValueError: If the placement does not fit inside ``free``.
    """
    if not free.can_hold(placed_width, placed_height):
        raise ValueError(
            f"Placement {placed_width}x{placed_height} does not fit in "
            f"free rectangle {free.width}x{free.height}"
        )

    rem_w = free.width - placed_width - kerf
    rem_h = free.height - placed_height - kerf

    area_if_horizontal = free.width * max(0.0, rem_h)
    area_if_vertical = max(0.0, rem_w) * free.height
    horizontal_first = area_if_horizontal >= area_if_vertical

    if horizontal_first:
        right = _residual(free.x + placed_width + kerf, free.y, rem_w, placed_height)
        bottom = _residual(free.x, free.y + placed_height + kerf, free.width, rem_h)
    else:
        right = _residual(free.x + placed_width + kerf, free.y, rem_w, free.height)
        bottom = _residual(free.x, free.y + placed_height + kerf, placed_width, rem_h)

    residuals = tuple(r for r in (right, bottom) if r is not None)
    return SplitResult(residuals=residuals, horizontal_first=horizontal_first)


def placement_cuts(
    part: Rect,
    sheet_width: float,
    sheet_height: float,
    kerf: float = 0.0,
) -> tuple[CutSegment, ...]:
    """Saw cuts that free a placed part from the rest of its sheet.

    Every edge of the part that does not lie on the sheet boundary needs a
    cut over the part's extent. Right and bottom edges sit on the part
    edge; left and top edges sit one kerf further out, on the line where
    the neighbouring part's right or bottom cut falls, so both sides of one
    saw pass land on the same line.

    Args:
        part: Footprint of the placed part.
        sheet_width: Sheet extent along X.
        sheet_height: Sheet extent along Y.
        kerf: Saw blade width.

    Returns:
        Cut segments, horizontal before vertical, top/left before
        bottom/right.
    """
    horizontal: list[CutSegment] = []
    vertical: list[CutSegment] = []
    if part.y > EPSILON:
        horizontal.append(
            CutSegment(CutAxis.HORIZONTAL, max(0.0, part.y - kerf), part.x, part.right)
        )
    if part.bottom < sheet_height - EPSILON:
        horizontal.append(CutSegment(CutAxis.HORIZONTAL, part.bottom, part.x, part.right))
    if part.x > EPSILON:
        vertical.append(
            CutSegment(CutAxis.VERTICAL, max(0.0, part.x - kerf), part.y, part.bottom)
        )
    if part.right < sheet_width - EPSILON:
        vertical.append(CutSegment(CutAxis.VERTICAL, part.right, part.y, part.bottom))
    return tuple(horizontal + vertical)
