"""Per-sheet bookkeeping of free rectangles."""

from __future__ import annotations

import logging

from nesting.domain.geometry import (
    Rect,
    SplitResult,
    contains,
    merge_adjacent,
    split_after_placement,
)

logger = logging.getLogger(__name__)


class FreeRectTracker:
    """Ordered list of free rectangles on one sheet.

    The list starts with the whole sheet. Placing a part replaces the
    consumed rectangle, in place, with the residuals of its split, so the
    index order of the list only depends on the sequence of placements.

    Attributes:
        rects: Current free rectangles (read-only view).
    """

    def __init__(self, width: float, height: float) -> None:
        self._rects: list[Rect] = [Rect(0.0, 0.0, width, height)]

    @property
    def rects(self) -> tuple[Rect, ...]:
        return tuple(self._rects)

    @property
    def free_area(self) -> float:
        return sum(r.area for r in self._rects)

    def __len__(self) -> int:
        return len(self._rects)

    def place(
        self, rect_index: int, width: float, height: float, kerf: float = 0.0
    ) -> SplitResult:
        """Carve a placement out of the top-left corner of a free rectangle.

        Args:
            rect_index: Index of the free rectangle being consumed.
            width: Placed width along X.
            height: Placed height along Y.
            kerf: Saw kerf consumed between the part and each residual.

        Returns:
            The split that was applied.

        Raises:
            IndexError: If ``rect_index`` is out of range.
            ValueError: If the placement does not fit.
        """
        free = self._rects[rect_index]
        split = split_after_placement(free, width, height, kerf)
        self._rects[rect_index : rect_index + 1] = list(split.residuals)
        self.prune()
        self.merge()
        return split

    def prune(self) -> None:
        """Drop degenerate rectangles and rectangles contained in another.

        Of two identical rectangles the earlier one is kept.
        """
        survivors: list[Rect] = []
        rects = [r for r in self._rects if not r.is_degenerate()]
        for i, rect in enumerate(rects):
            swallowed = any(
                contains(other, rect) and (not contains(rect, other) or j < i)
                for j, other in enumerate(rects)
                if j != i
            )
            if not swallowed:
                survivors.append(rect)
        self._rects = survivors

    def merge(self) -> None:
        """Merge pairs of rectangles that share a full edge until none do.

        The merged rectangle takes the position of the earlier of the two.
        """
        merged_any = True
        while merged_any:
            merged_any = False
            for i in range(len(self._rects)):
                for j in range(i + 1, len(self._rects)):
                    union = merge_adjacent(self._rects[i], self._rects[j])
                    if union is not None:
                        logger.debug(
                            "Merged free rects %d and %d into %.1fx%.1f",
                            i,
                            j,
                            union.width,
                            union.height,
                        )
                        self._rects[i] = union
                        del self._rects[j]
                        merged_any = True
                        break
                if merged_any:
                    break
