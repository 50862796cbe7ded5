"""FastAPI dependency injection for nesting services."""

from typing import Annotated

from fastapi import Depends

from nesting.application.packing_service import PackingService


def get_packing_service() -> PackingService:
    """Dependency for PackingService."""
    return PackingService()


PackingServiceDep = Annotated[PackingService, Depends(get_packing_service)]
