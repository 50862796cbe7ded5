"""Guillotine packing of rectangular parts onto stock sheets.

The packer walks the units produced by the normalizer in their fixed order.
For each unit it scores every (open sheet, free rectangle, legal
orientation) candidate and commits the lowest score. When nothing fits, it
opens the smallest suitable sheet type (preferring a type already in use)
and places the unit there. Units that cannot be placed are recorded on the
result and packing carries on with the rest.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Sequence, Union

from nesting.domain.errors import (
    InputIssue,
    InvalidInputError,
    SheetExhausted,
    UnplaceablePart,
    UnplaceableReason,
)
from nesting.domain.geometry import (
    EPSILON,
    CutSegment,
    Rect,
    SplitResult,
    placement_cuts,
    split_after_placement,
)
from nesting.domain.services.banding import compute_banding
from nesting.domain.services.cut_segments import CutAccumulator
from nesting.domain.services.free_rects import FreeRectTracker
from nesting.domain.services.normalizer import Orientation, Unit, normalize_parts
from nesting.domain.services.scoring import (
    FootprintHistogram,
    ScoreBreakdown,
    score_placement,
)
from nesting.domain.value_objects import (
    LayoutResult,
    Offcut,
    PackingOptions,
    PackingStats,
    PartSpec,
    Placement,
    SheetLayout,
    StockSheetSpec,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placed:
    """Outcome of a unit that was placed."""

    placement: Placement
    sheet_index: int


@dataclass(frozen=True)
class Unplaceable:
    """Outcome of a unit that could not be placed."""

    reason: UnplaceableReason


UnitOutcome = Union[Placed, Unplaceable]


@dataclass
class _OpenSheet:
    """Internal state of one sheet during packing.

    Attributes:
        index: Sheet index (0-based, in opening order).
        type_index: Index of the sheet type in the stock list.
        spec: Sheet type specification.
        kerf: Effective kerf for this sheet.
        tracker: Free rectangles on the sheet.
        cuts: Merged cut runs on the sheet.
        placements: Placements in commit order.
    """

    index: int
    type_index: int
    spec: StockSheetSpec
    kerf: float
    tracker: FreeRectTracker
    cuts: CutAccumulator = field(default_factory=CutAccumulator)
    placements: list[Placement] = field(default_factory=list)


@dataclass(frozen=True)
class _Candidate:
    sheet: _OpenSheet
    rect_index: int
    orientation: Orientation
    split: SplitResult
    score: ScoreBreakdown

    @property
    def key(self) -> tuple[float, int, int, bool]:
        return (
            self.score.total,
            self.sheet.index,
            self.rect_index,
            self.orientation.rotated,
        )


def _is_positive(value: object) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value > 0
    )


def _is_non_negative(value: object) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value >= 0
    )


def validate_inputs(
    parts: Sequence[PartSpec],
    stock: Sequence[StockSheetSpec],
    options: PackingOptions,
) -> list[InputIssue]:
    """Collect every problem that makes a packing request invalid.

    Args:
        parts: Part specifications.
        stock: Stock sheet specifications.
        options: Packing options.

    Returns:
        List of issues; empty when the request can be packed.
    """
    issues: list[InputIssue] = []

    for i, part in enumerate(parts):
        path = f"parts[{i}]"
        if not _is_positive(part.length):
            issues.append(InputIssue(f"{path}.length", "must be a positive number"))
        if not _is_positive(part.width):
            issues.append(InputIssue(f"{path}.width", "must be a positive number"))
        if isinstance(part.quantity, bool) or not isinstance(part.quantity, int):
            issues.append(InputIssue(f"{path}.quantity", "must be an integer"))
        elif part.quantity <= 0:
            issues.append(InputIssue(f"{path}.quantity", "must be greater than 0"))

    if parts and not stock:
        issues.append(InputIssue("stock", "at least one stock sheet is required"))

    if not _is_non_negative(options.kerf_mm):
        issues.append(InputIssue("options.kerf_mm", "must be non-negative"))

    for i, sheet in enumerate(stock):
        path = f"stock[{i}]"
        dims_ok = True
        if not _is_positive(sheet.length):
            issues.append(InputIssue(f"{path}.length", "must be a positive number"))
            dims_ok = False
        if not _is_positive(sheet.width):
            issues.append(InputIssue(f"{path}.width", "must be a positive number"))
            dims_ok = False
        if sheet.quantity_available is not None and (
            isinstance(sheet.quantity_available, bool)
            or not isinstance(sheet.quantity_available, int)
            or sheet.quantity_available < 0
        ):
            issues.append(
                InputIssue(f"{path}.quantity_available", "must be a non-negative integer")
            )
        if sheet.kerf is not None and not _is_non_negative(sheet.kerf):
            issues.append(InputIssue(f"{path}.kerf", "must be non-negative"))
        else:
            kerf = options.kerf_for(sheet)
            smallest = min(sheet.length, sheet.width) if dims_ok else None
            if smallest is not None and _is_non_negative(kerf) and kerf > smallest:
                issues.append(
                    InputIssue(
                        f"{path}.kerf",
                        f"kerf {kerf:g} exceeds the smallest sheet dimension {smallest:g}",
                    )
                )

    backer = options.laminate_backer_sheet
    if backer is not None:
        if not _is_positive(backer.length) or not _is_positive(backer.width):
            issues.append(
                InputIssue(
                    "options.laminate_backer_sheet",
                    "backer sheet dimensions must be positive",
                )
            )

    if not _is_non_negative(options.min_offcut_mm):
        issues.append(InputIssue("options.min_offcut_mm", "must be non-negative"))
    if not _is_non_negative(options.min_offcut_area_mm2):
        issues.append(InputIssue("options.min_offcut_area_mm2", "must be non-negative"))
    if not _is_positive(options.board_thickness_mm):
        issues.append(InputIssue("options.board_thickness_mm", "must be positive"))

    return issues


def _type_keys(stock: Sequence[StockSheetSpec]) -> list[str]:
    """Statistic keys for sheet types, disambiguated when names repeat."""
    names = [sheet.name for sheet in stock]
    return [
        name if names.count(name) == 1 else f"{name} [{i}]"
        for i, name in enumerate(names)
    ]


class GuillotinePacker:
    """Guillotine packer with composite scoring over free rectangles.

    Attributes:
        stock: Offered sheet types.
        options: Packing options.
    """

    def __init__(
        self,
        stock: Sequence[StockSheetSpec],
        options: PackingOptions | None = None,
    ) -> None:
        """Initialize the packer.

        Args:
            stock: Offered sheet types. Assumed valid; ``pack()`` checks them.
            options: Packing options (defaults when omitted).
        """
        self.stock = tuple(stock)
        self.options = options or PackingOptions()

    def pack(self, parts: Sequence[PartSpec]) -> LayoutResult:
        """Pack parts onto sheets.

        Args:
            parts: Part specifications, quantities not yet expanded.

        Returns:
            LayoutResult with layouts, unplaceable units and statistics.
        """
        normalized = normalize_parts(parts, self.options.allow_rotation)
        histogram = FootprintHistogram([u.min_footprint for u in normalized.units])

        sheets: list[_OpenSheet] = []
        remaining: list[int | None] = [s.quantity_available for s in self.stock]
        placed: list[tuple[Placement, PartSpec]] = []
        unplaceable: list[UnplaceablePart] = []
        notices: list[SheetExhausted] = []

        for unit in normalized.grain_locked:
            unplaceable.append(self._unplaceable(unit, UnplaceableReason.GRAIN_LOCKED))

        logger.debug(
            "Packing %d units onto %d sheet types", len(normalized.units), len(self.stock)
        )

        for unit in normalized.units:
            histogram.remove(unit.min_footprint)
            outcome = self._place_unit(unit, sheets, remaining, histogram, notices)
            if isinstance(outcome, Placed):
                placed.append((outcome.placement, unit.part))
            else:
                unplaceable.append(self._unplaceable(unit, outcome.reason))

        result = self._build_result(sheets, placed, unplaceable, notices)
        logger.info(
            "Packed %d of %d units on %d sheets (%.1f%% waste, %d unplaceable)",
            result.total_pieces_placed,
            result.total_pieces_placed + len(unplaceable),
            result.total_sheets,
            result.stats.total_waste_percentage,
            len(unplaceable),
        )
        return result

    def _unplaceable(self, unit: Unit, reason: UnplaceableReason) -> UnplaceablePart:
        item = UnplaceablePart(
            part_label=unit.part.label,
            unit_label=unit.label,
            length=unit.part.length,
            width=unit.part.width,
            reason=reason,
        )
        logger.warning("Unplaceable: %s", item.message)
        return item

    def _place_unit(
        self,
        unit: Unit,
        sheets: list[_OpenSheet],
        remaining: list[int | None],
        histogram: FootprintHistogram,
        notices: list[SheetExhausted],
    ) -> UnitOutcome:
        """Place one unit on an open sheet or a newly opened one."""
        best = self._best_candidate(unit, sheets, histogram)
        if best is None:
            opened = self._open_sheet(unit, sheets, remaining, notices)
            if isinstance(opened, UnplaceableReason):
                return Unplaceable(opened)
            sheets.append(opened)
            best = self._best_candidate(unit, [opened], histogram)
            if best is None:
                raise RuntimeError(
                    f"Unit '{unit.label}' does not fit the sheet opened for it"
                )
        return Placed(self._commit(unit, best), best.sheet.index)

    def _best_candidate(
        self,
        unit: Unit,
        sheets: Sequence[_OpenSheet],
        histogram: FootprintHistogram,
    ) -> _Candidate | None:
        best: _Candidate | None = None
        for sheet in sheets:
            for rect_index, free in enumerate(sheet.tracker.rects):
                for orientation in unit.orientations:
                    if not free.can_hold(orientation.width, orientation.height):
                        continue
                    split = split_after_placement(
                        free, orientation.width, orientation.height, sheet.kerf
                    )
                    score = score_placement(
                        free=free,
                        split=split,
                        placed_width=orientation.width,
                        placed_height=orientation.height,
                        marginal_cut=sheet.cuts.marginal_length(
                            self._cuts_for(sheet, free, orientation)
                        ),
                        histogram=histogram,
                        min_offcut_mm=self.options.min_offcut_mm,
                        weights=self.options.weights,
                    )
                    candidate = _Candidate(sheet, rect_index, orientation, split, score)
                    if best is None or candidate.key < best.key:
                        best = candidate
        return best

    @staticmethod
    def _cuts_for(
        sheet: _OpenSheet, free: Rect, orientation: Orientation
    ) -> tuple[CutSegment, ...]:
        footprint = Rect(free.x, free.y, orientation.width, orientation.height)
        return placement_cuts(footprint, sheet.spec.width, sheet.spec.length, sheet.kerf)

    def _fits_sheet(self, unit: Unit, spec: StockSheetSpec) -> bool:
        return any(
            o.width <= spec.width + EPSILON and o.height <= spec.length + EPSILON
            for o in unit.orientations
        )

    def _open_sheet(
        self,
        unit: Unit,
        sheets: list[_OpenSheet],
        remaining: list[int | None],
        notices: list[SheetExhausted],
    ) -> _OpenSheet | UnplaceableReason:
        """Open the best sheet type for a unit, or say why none can be opened.

        The smallest suitable type wins, preferring a type already open;
        ties go to the earlier type in the stock list.
        """
        suitable = [
            i for i, spec in enumerate(self.stock) if self._fits_sheet(unit, spec)
        ]
        if not suitable:
            return UnplaceableReason.TOO_LARGE_FOR_SHEET
        if self.options.single_sheet_only and sheets:
            return UnplaceableReason.SINGLE_SHEET_LIMIT

        available = [i for i in suitable if remaining[i] is None or remaining[i] > 0]
        noticed = {n.sheet_type_index for n in notices}
        for i in suitable:
            if i not in available and i not in noticed:
                notices.append(
                    SheetExhausted(
                        sheet_label=self.stock[i].name,
                        sheet_type_index=i,
                        unit_label=unit.label,
                    )
                )
                logger.info("Sheet type '%s' exhausted", self.stock[i].name)
        if not available:
            return UnplaceableReason.INSUFFICIENT_SHEET_CAPACITY

        open_types = {sheet.type_index for sheet in sheets}
        type_index = min(
            available,
            key=lambda i: (i not in open_types, self.stock[i].area, i),
        )
        count = remaining[type_index]
        if count is not None:
            remaining[type_index] = count - 1

        spec = self.stock[type_index]
        logger.debug("Opening sheet %d of type '%s'", len(sheets), spec.name)
        return _OpenSheet(
            index=len(sheets),
            type_index=type_index,
            spec=spec,
            kerf=self.options.kerf_for(spec),
            tracker=FreeRectTracker(spec.width, spec.length),
        )

    def _commit(self, unit: Unit, candidate: _Candidate) -> Placement:
        sheet = candidate.sheet
        free = sheet.tracker.rects[candidate.rect_index]
        orientation = candidate.orientation
        sheet.tracker.place(
            candidate.rect_index, orientation.width, orientation.height, sheet.kerf
        )
        sheet.cuts.add_all(self._cuts_for(sheet, free, orientation))
        placement = Placement(
            part_label=unit.part.label,
            unit_label=unit.label,
            x=free.x,
            y=free.y,
            placed_width=orientation.width,
            placed_height=orientation.height,
            rotated=orientation.rotated,
        )
        sheet.placements.append(placement)
        logger.debug(
            "Placed '%s' on sheet %d at (%.1f, %.1f)%s, score %.1f",
            unit.label,
            sheet.index,
            free.x,
            free.y,
            " rotated" if orientation.rotated else "",
            candidate.score.total,
        )
        return placement

    def _extract_offcuts(self, sheets: Sequence[_OpenSheet]) -> list[Offcut]:
        """Collect free rectangles large enough to be reused."""
        offcuts: list[Offcut] = []
        for sheet in sheets:
            for rect in sheet.tracker.rects:
                if (
                    rect.short_side >= self.options.min_offcut_mm
                    and rect.area >= self.options.min_offcut_area_mm2
                ):
                    offcuts.append(
                        Offcut(
                            sheet_index=sheet.index,
                            x=rect.x,
                            y=rect.y,
                            width=rect.width,
                            height=rect.height,
                        )
                    )
        return offcuts

    def _build_result(
        self,
        sheets: Sequence[_OpenSheet],
        placed: Sequence[tuple[Placement, PartSpec]],
        unplaceable: Sequence[UnplaceablePart],
        notices: Sequence[SheetExhausted],
    ) -> LayoutResult:
        layouts = tuple(
            SheetLayout(
                sheet_index=sheet.index,
                sheet_type=sheet.spec,
                sheet_type_index=sheet.type_index,
                placements=tuple(sheet.placements),
                free_rects=sheet.tracker.rects,
                cut_runs=sheet.cuts.runs(),
            )
            for sheet in sheets
        )

        keys = _type_keys(self.stock)
        used_by_type: dict[str, float] = {}
        opened_by_type: dict[str, int] = {}
        for layout in layouts:
            key = keys[layout.sheet_type_index]
            used_by_type[key] = used_by_type.get(key, 0.0) + layout.used_area
            opened_by_type[key] = opened_by_type.get(key, 0) + 1
        fractional = {
            keys[i]: used_by_type[keys[i]] / spec.area
            for i, spec in enumerate(self.stock)
            if keys[i] in used_by_type
        }

        banding = compute_banding(placed, self.options)
        used_area = sum(layout.used_area for layout in layouts)
        sheet_area = sum(layout.sheet_area for layout in layouts)
        waste_area = sheet_area - used_area

        stats = PackingStats(
            used_area=used_area,
            waste_area=waste_area,
            cut_count=sum(layout.cut_count for layout in layouts),
            total_cut_length=sum(layout.total_cut_length for layout in layouts),
            banding_length_by_thickness=banding.by_thickness,
            banding_length_by_side=banding.by_side,
            fractional_sheets_used_by_type=fractional,
            sheets_opened_by_type={
                keys[i]: opened_by_type[keys[i]]
                for i in range(len(self.stock))
                if keys[i] in opened_by_type
            },
            backer_sheets_fraction=banding.backer_sheets_fraction,
            total_waste_percentage=(waste_area / sheet_area * 100) if sheet_area else 0.0,
        )

        return LayoutResult(
            sheets=layouts,
            stats=stats,
            unplaceable=tuple(unplaceable),
            sheet_exhausted=tuple(notices),
            offcuts=tuple(self._extract_offcuts(sheets)),
        )


def pack(
    parts: Sequence[PartSpec],
    stock: Sequence[StockSheetSpec],
    options: PackingOptions | None = None,
) -> LayoutResult:
    """Pack parts onto stock sheets.

    Args:
        parts: Part specifications.
        stock: Offered stock sheet types.
        options: Packing options (defaults when omitted).

    Returns:
        LayoutResult for the request.

    Raises:
        InvalidInputError: If any part, sheet or option is invalid. No
            packing is attempted in that case.
    """
    options = options or PackingOptions()
    issues = validate_inputs(parts, stock, options)
    if issues:
        raise InvalidInputError(issues)
    return GuillotinePacker(stock, options).pack(parts)
