"""
Component Routes
================

FastAPI routes exposing the component catalog.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from email_builder.api.dependencies import get_catalog
from email_builder.core.catalog import ComponentCatalog
from email_builder.models.schemas import ComponentDefinition

router = APIRouter(prefix="/api/v1", tags=["Components"])


@router.get("/components", response_model=List[ComponentDefinition])
async def list_components(
    catalog: ComponentCatalog = Depends(get_catalog),
) -> List[ComponentDefinition]:
    """List catalog components in display order."""
    return catalog.list()


@router.get("/components/{component_id}", response_model=ComponentDefinition)
async def get_component(
    component_id: str, catalog: ComponentCatalog = Depends(get_catalog)
) -> ComponentDefinition:
    """Get one catalog component."""
    definition = catalog.get(component_id)
    if definition is None:
        raise HTTPException(status_code=404, detail="Component not found")
    return definition
