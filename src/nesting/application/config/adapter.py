"""Conversion of validated request schemas into domain objects."""

from __future__ import annotations

from dataclasses import dataclass, field

from nesting.application.config.schemas import (
    PackingOptionsSchema,
    PackingRequestSchema,
    PartGroupSchema,
    PartSchema,
    StockSheetSchema,
)
from nesting.domain.errors import InputIssue
from nesting.domain.services.board_calculator import (
    BoardCalculation,
    MaterialPartSet,
    PartGroup,
    expand_groups,
    sheets_for_material,
)
from nesting.domain.services.packer import validate_inputs
from nesting.domain.value_objects import (
    BandEdges,
    PackingOptions,
    PartSpec,
    ScoreWeights,
    StockSheetSpec,
)


@dataclass(frozen=True)
class PackingRequest:
    """A request converted to domain objects.

    Attributes:
        parts: Parts without a material: the request's plain parts and the
            primaries of groups that name none.
        stock: Stock sheet types.
        options: Packing options.
        material_sets: Group parts of named primary materials, followed by
            the backer parts of every material.
        board_calculation: Group expansion details, when groups were given.
    """

    parts: tuple[PartSpec, ...]
    stock: tuple[StockSheetSpec, ...]
    options: PackingOptions
    material_sets: tuple[MaterialPartSet, ...] = ()
    board_calculation: BoardCalculation | None = field(default=None, compare=False)

    @property
    def primary_sets(self) -> tuple[MaterialPartSet, ...]:
        """Primary parts per material, parts without a material first."""
        named = [s for s in self.material_sets if not s.is_backer]
        if self.parts or not named:
            named.insert(0, MaterialPartSet(material=None, parts=self.parts))
        return tuple(named)

    @property
    def backer_sets(self) -> tuple[MaterialPartSet, ...]:
        return tuple(s for s in self.material_sets if s.is_backer)

    def input_issues(self) -> list[InputIssue]:
        """Problems that keep the engine from packing this request."""
        primary_parts = [part for s in self.primary_sets for part in s.parts]
        issues = validate_inputs(primary_parts, self.stock, self.options)
        if issues:
            return issues

        for part_set in self.primary_sets:
            if part_set.parts and not sheets_for_material(self.stock, part_set.material):
                issues.append(
                    InputIssue(
                        "stock",
                        f"no stock sheet for material '{part_set.material}'",
                    )
                )
        return issues


def part_to_domain(part: PartSchema) -> PartSpec:
    return PartSpec(
        length=part.length,
        width=part.width,
        quantity=part.quantity,
        grain=part.grain,
        band_edges=BandEdges(
            top=part.band_edges.top,
            right=part.band_edges.right,
            bottom=part.band_edges.bottom,
            left=part.band_edges.left,
        ),
        laminate=part.laminate,
        label=part.label,
    )


def stock_to_domain(sheet: StockSheetSchema) -> StockSheetSpec:
    return StockSheetSpec(
        length=sheet.length,
        width=sheet.width,
        quantity_available=sheet.quantity_available,
        kerf=sheet.kerf,
        label=sheet.label,
        material=sheet.material,
    )


def group_to_domain(group: PartGroupSchema) -> PartGroup:
    return PartGroup(
        name=group.name,
        board_type=group.board_type,
        parts=tuple(part_to_domain(p) for p in group.parts),
        primary_material=group.primary_material,
        backer_material=group.backer_material,
    )


def options_to_domain(options: PackingOptionsSchema) -> PackingOptions:
    """Convert Pydantic packing options to the domain dataclass."""
    backer = None
    if options.laminate_backer_sheet is not None:
        backer = StockSheetSpec(
            length=options.laminate_backer_sheet.length,
            width=options.laminate_backer_sheet.width,
            label=options.laminate_backer_sheet.label,
        )

    return PackingOptions(
        kerf_mm=options.kerf_mm,
        allow_rotation=options.allow_rotation,
        single_sheet_only=options.single_sheet_only,
        min_offcut_mm=options.min_offcut_mm,
        min_offcut_area_mm2=options.min_offcut_area_mm2,
        board_thickness_mm=options.board_thickness_mm,
        laminate_backer_sheet=backer,
        weights=ScoreWeights(**options.weights.model_dump()),
    )


def request_to_domain(request: PackingRequestSchema) -> PackingRequest:
    """Convert a validated request to domain objects.

    Groups are expanded by board type. Primaries of groups without a
    material join the request's plain parts; every other material gets its
    own part set.

    Args:
        request: Validated request schema.

    Returns:
        PackingRequest ready for packing.
    """
    parts = [part_to_domain(p) for p in request.parts]
    material_sets: list[MaterialPartSet] = []
    calculation = None

    if request.groups:
        calculation = expand_groups([group_to_domain(g) for g in request.groups])
        for part_set in calculation.primary_sets:
            if part_set.material is None:
                parts.extend(part_set.parts)
            else:
                material_sets.append(part_set)
        material_sets.extend(calculation.backer_sets)

    return PackingRequest(
        parts=tuple(parts),
        stock=tuple(stock_to_domain(s) for s in request.stock),
        options=options_to_domain(request.options),
        material_sets=tuple(material_sets),
        board_calculation=calculation,
    )
