"""
Render Routes
=============

FastAPI route rendering a document supplied in the request body.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from email_builder.api.dependencies import get_catalog
from email_builder.core.catalog import ComponentCatalog
from email_builder.core.rendering import render_template
from email_builder.models.schemas import RenderResult

router = APIRouter(prefix="/api/v1", tags=["Rendering"])


@router.post("/render", response_model=RenderResult)
async def render_document(
    payload: Dict[str, Any] = Body(...),
    catalog: ComponentCatalog = Depends(get_catalog),
) -> RenderResult:
    """Render a canonical or legacy-shaped document without storing it."""
    return render_template(payload, catalog)
