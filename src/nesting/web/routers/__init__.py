"""API routers for the REST API."""

from nesting.web.routers.pack import router as pack_router
from nesting.web.routers.validate import router as validate_router

__all__ = [
    "pack_router",
    "validate_router",
]
