"""Packing endpoints."""

from fastapi import APIRouter

from nesting.application.config import load_request_from_dict, request_to_domain
from nesting.infrastructure.formatters import JsonExporter
from nesting.web.dependencies import PackingServiceDep
from nesting.web.schemas.requests import PackRequest
from nesting.web.schemas.responses import ErrorResponseSchema, PackResponseSchema

router = APIRouter(prefix="/pack", tags=["pack"])


@router.post(
    "",
    response_model=PackResponseSchema,
    responses={422: {"model": ErrorResponseSchema}},
)
def pack_layout(request: PackRequest, service: PackingServiceDep) -> PackResponseSchema:
    """Pack the parts of a request onto its stock sheets.

    Packing is CPU bound, so this is a plain function and runs in the
    threadpool rather than on the event loop.

    Args:
        request: Request containing the packing request JSON.
        service: Injected packing service.

    Returns:
        One layout per material, the board group summary, and completeness.

    Raises:
        ConfigError: If the request fails schema validation (422).
        InvalidInputError: If the engine rejects the request (422).
    """
    schema = load_request_from_dict(request.request)
    report = service.run(request_to_domain(schema))

    response = PackResponseSchema.model_validate(
        {
            "is_complete": report.unplaceable_count == 0,
            **JsonExporter().report_to_dict(report),
        }
    )
    if not request.show_free_rects:
        for layout in response.layouts:
            for sheet in layout.result.sheets:
                sheet.free_rects = []
    return response
