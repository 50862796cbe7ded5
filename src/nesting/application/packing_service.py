"""Packing of a whole request, one run per material."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Sequence

from nesting.application.config.adapter import PackingRequest
from nesting.domain.errors import InvalidInputError
from nesting.domain.services.board_calculator import (
    BoardCalculation,
    MaterialPartSet,
    sheets_for_material,
)
from nesting.domain.services.packer import GuillotinePacker, pack
from nesting.domain.value_objects import LayoutResult, StockSheetSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MaterialLayout:
    """Layout of the pieces cut from one material.

    Attributes:
        material: Material identifier, or None for parts without one.
        result: Result of the packing run.
        is_backer: True for backer boards cut from the backer sheet.
    """

    material: str | None
    result: LayoutResult
    is_backer: bool = False


@dataclass(frozen=True)
class PackingReport:
    """Layouts for one request.

    Attributes:
        layouts: Primary layouts (parts without a material first), then
            backer layouts.
        board_calculation: Group expansion details, when groups were given.
    """

    layouts: tuple[MaterialLayout, ...]
    board_calculation: BoardCalculation | None = None

    @property
    def primary_layouts(self) -> tuple[MaterialLayout, ...]:
        return tuple(layout for layout in self.layouts if not layout.is_backer)

    @property
    def backer_layouts(self) -> tuple[MaterialLayout, ...]:
        return tuple(layout for layout in self.layouts if layout.is_backer)

    @property
    def unplaceable_count(self) -> int:
        return sum(len(layout.result.unplaceable) for layout in self.layouts)


def _restore_stock_indices(
    result: LayoutResult,
    indices: Sequence[int],
    stock: Sequence[StockSheetSpec],
) -> LayoutResult:
    """Point sheet type references of a run back at the full stock list."""
    sheets = tuple(
        replace(
            sheet,
            sheet_type=stock[indices[sheet.sheet_type_index]],
            sheet_type_index=indices[sheet.sheet_type_index],
        )
        for sheet in result.sheets
    )
    notices = tuple(
        replace(notice, sheet_type_index=indices[notice.sheet_type_index])
        for notice in result.sheet_exhausted
    )
    return replace(result, sheets=sheets, sheet_exhausted=notices)


class PackingService:
    """Runs the packer once per material.

    Primary parts are packed on the stock sheets of their material (see
    ``sheets_for_material``). Sheet quantities are shared, so a run only
    sees the sheets earlier runs left over. Backer pieces are cut from a
    different board than the visible faces, so each backer material is
    packed in its own run on the configured backer sheet, with an unbounded
    supply.
    """

    def run(self, request: PackingRequest) -> PackingReport:
        """Pack a converted request.

        Args:
            request: Domain request from ``request_to_domain``.

        Returns:
            PackingReport with one layout per material.

        Raises:
            InvalidInputError: If the request is rejected by the engine.
        """
        issues = request.input_issues()
        if issues:
            raise InvalidInputError(issues)

        remaining = [sheet.quantity_available for sheet in request.stock]
        layouts: list[MaterialLayout] = []
        for part_set in request.primary_sets:
            result = self._pack_primary(part_set, request, remaining)
            layouts.append(MaterialLayout(material=part_set.material, result=result))
        layouts.extend(self._pack_backers(request))

        return PackingReport(
            layouts=tuple(layouts),
            board_calculation=request.board_calculation,
        )

    def _pack_primary(
        self,
        part_set: MaterialPartSet,
        request: PackingRequest,
        remaining: list[int | None],
    ) -> LayoutResult:
        indices = sheets_for_material(request.stock, part_set.material)
        stock = [
            replace(request.stock[i], quantity_available=remaining[i]) for i in indices
        ]
        if part_set.material is not None:
            logger.info(
                "Packing %d part types of '%s' on %d sheet types",
                len(part_set.parts),
                part_set.material,
                len(stock),
            )

        result = GuillotinePacker(stock, request.options).pack(part_set.parts)
        for sheet in result.sheets:
            i = indices[sheet.sheet_type_index]
            count = remaining[i]
            if count is not None:
                remaining[i] = count - 1
        return _restore_stock_indices(result, indices, request.stock)

    def _pack_backers(self, request: PackingRequest) -> list[MaterialLayout]:
        backer_sets = [s for s in request.backer_sets if s.parts]
        if not backer_sets:
            return []

        backer_sheet = request.options.laminate_backer_sheet
        if backer_sheet is None:
            logger.warning(
                "%d backer pieces not packed: no backer sheet configured",
                sum(p.quantity for s in backer_sets for p in s.parts),
            )
            return []

        backer_stock = [replace(backer_sheet, quantity_available=None)]
        backer_options = replace(request.options, single_sheet_only=False)
        layouts = []
        for part_set in backer_sets:
            logger.info(
                "Packing %d backer part types of '%s' on '%s'",
                len(part_set.parts),
                part_set.material or "unassigned",
                backer_sheet.name,
            )
            result = pack(part_set.parts, backer_stock, backer_options)
            layouts.append(
                MaterialLayout(material=part_set.material, result=result, is_backer=True)
            )
        return layouts
