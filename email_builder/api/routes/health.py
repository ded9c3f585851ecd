"""
Health Routes
=============

FastAPI routes for health check endpoints.
"""

from fastapi import APIRouter, Depends

from email_builder.api.dependencies import get_catalog
from email_builder.config.database import check_database_health
from email_builder.config.settings import get_settings
from email_builder.core.catalog import ComponentCatalog
from email_builder.models.schemas import HealthStatus

router = APIRouter(prefix="/api/v1", tags=["Health"])


@router.get("/health", response_model=HealthStatus)
async def health_check(catalog: ComponentCatalog = Depends(get_catalog)) -> HealthStatus:
    """Basic health check endpoint."""
    settings = get_settings()
    databases = await check_database_health()

    return HealthStatus(
        status="healthy" if all(databases.values()) else "degraded",
        version=settings.app_version,
        storage_backend=settings.storage_backend,
        redis=databases["redis"],
        components=len(catalog),
    )
