"""Pydantic schemas for the REST API."""

from nesting.web.schemas.requests import PackRequest, RequestValidateRequest
from nesting.web.schemas.responses import (
    BoardSummarySchema,
    CutRunSchema,
    ErrorDetailSchema,
    ErrorResponseSchema,
    FreeRectSchema,
    GroupSummarySchema,
    LayoutResultSchema,
    MaterialLayoutSchema,
    OffcutSchema,
    PackResponseSchema,
    PackingStatsSchema,
    PlacementSchema,
    SheetExhaustedSchema,
    SheetLayoutSchema,
    SheetTypeSchema,
    UnplaceableSchema,
    ValidationIssueSchema,
    ValidationResultSchema,
)

__all__ = [
    # Requests
    "PackRequest",
    "RequestValidateRequest",
    # Responses
    "BoardSummarySchema",
    "CutRunSchema",
    "ErrorDetailSchema",
    "ErrorResponseSchema",
    "FreeRectSchema",
    "GroupSummarySchema",
    "LayoutResultSchema",
    "MaterialLayoutSchema",
    "OffcutSchema",
    "PackResponseSchema",
    "PackingStatsSchema",
    "PlacementSchema",
    "SheetExhaustedSchema",
    "SheetLayoutSchema",
    "SheetTypeSchema",
    "UnplaceableSchema",
    "ValidationIssueSchema",
    "ValidationResultSchema",
]
