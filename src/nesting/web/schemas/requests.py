"""Pydantic request schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field


class PackRequest(BaseModel):
    """Request for packing parts onto stock sheets."""

    request: dict[str, Any] = Field(..., description="Full packing request JSON")
    show_free_rects: bool = Field(
        default=True, description="Include the remaining free rectangles per sheet"
    )


class RequestValidateRequest(BaseModel):
    """Request for validating a packing request."""

    request: dict[str, Any] = Field(..., description="Packing request to validate")
