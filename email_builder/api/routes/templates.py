"""
Template Routes
===============

FastAPI routes for stored templates: CRUD, editing, rendering and export.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from email_builder.api.dependencies import get_catalog, get_store
from email_builder.config.logging import get_logger
from email_builder.core.catalog import ComponentCatalog
from email_builder.core.documents import (
    DocumentShapeValidator,
    add_instance,
    coerce_setting_value,
    normalize_document,
    rename_document,
    set_setting,
)
from email_builder.core.rendering import export_template, render_template
from email_builder.core.storage import TemplateStore
from email_builder.models.schemas import (
    AddInstanceRequest,
    CreateTemplateRequest,
    RenameTemplateRequest,
    RenderResult,
    SetSettingRequest,
    TemplateDocument,
    TemplateListItem,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Templates"])

shape_validator = DocumentShapeValidator()


async def load_template(store: TemplateStore, template_id: str) -> TemplateDocument:
    """
    Load a template or fail with 404.

    Args:
        store: Template store
        template_id: Template identifier

    Returns:
        Stored TemplateDocument

    Raises:
        HTTPException: If the template does not exist
    """
    document = await store.get(template_id)
    if document is None:
        raise HTTPException(status_code=404, detail="Template not found")
    return document


@router.get("/templates", response_model=List[TemplateListItem])
async def list_templates(store: TemplateStore = Depends(get_store)) -> List[TemplateListItem]:
    """List stored templates, most recently saved first."""
    return await store.list()


@router.post("/templates", response_model=TemplateDocument, status_code=status.HTTP_201_CREATED)
async def create_template(
    request: Optional[CreateTemplateRequest] = None,
    store: TemplateStore = Depends(get_store),
) -> TemplateDocument:
    """Create an empty template."""
    return await store.create(request.name if request else None)


@router.get("/templates/{template_id}", response_model=TemplateDocument)
async def get_template(
    template_id: str, store: TemplateStore = Depends(get_store)
) -> TemplateDocument:
    """Get a template in canonical shape."""
    return await load_template(store, template_id)


@router.put("/templates/{template_id}", response_model=TemplateDocument)
async def replace_template(
    template_id: str,
    payload: Dict[str, Any] = Body(...),
    store: TemplateStore = Depends(get_store),
) -> TemplateDocument:
    """Replace a template; legacy-shaped bodies are normalized before saving."""
    payload = {**payload, "id": template_id}
    errors = shape_validator.validate(payload)
    if errors:
        raise HTTPException(
            status_code=422, detail=f"Invalid template document: {'; '.join(errors)}"
        )

    document = normalize_document(payload)
    await store.save(document)
    return document


@router.delete("/templates/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(template_id: str, store: TemplateStore = Depends(get_store)) -> Response:
    """Delete a template."""
    await load_template(store, template_id)
    await store.remove(template_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/templates/{template_id}/name", response_model=TemplateDocument)
async def rename_template(
    template_id: str,
    request: RenameTemplateRequest,
    store: TemplateStore = Depends(get_store),
) -> TemplateDocument:
    """Rename a template."""
    document = rename_document(await load_template(store, template_id), request.name)
    await store.save(document)
    return document


@router.post(
    "/templates/{template_id}/instances",
    response_model=TemplateDocument,
    status_code=status.HTTP_201_CREATED,
)
async def append_instance(
    template_id: str,
    request: AddInstanceRequest,
    store: TemplateStore = Depends(get_store),
    catalog: ComponentCatalog = Depends(get_catalog),
) -> TemplateDocument:
    """Append an instance of a catalog component."""
    document = await load_template(store, template_id)
    if catalog.get(request.component_id) is None:
        raise HTTPException(status_code=404, detail="Component not found")

    document, instance = add_instance(document, request.component_id)
    await store.save(document)
    logger.info(
        "Instance appended",
        template_id=template_id,
        instance_id=instance.id,
        component_id=request.component_id,
    )
    return document


@router.put(
    "/templates/{template_id}/instances/{instance_id}/settings/{key}",
    response_model=TemplateDocument,
)
async def change_setting(
    template_id: str,
    instance_id: str,
    key: str,
    request: SetSettingRequest,
    store: TemplateStore = Depends(get_store),
    catalog: ComponentCatalog = Depends(get_catalog),
) -> TemplateDocument:
    """Change one setting of an instance."""
    document = await load_template(store, template_id)
    instance = document.find_instance(instance_id)
    if instance is None:
        raise HTTPException(status_code=404, detail="Instance not found")

    definition = catalog.get(instance.component_id)
    if definition is None:
        raise HTTPException(status_code=404, detail="Component not found")

    setting = definition.setting_map().get(key)
    value = coerce_setting_value(setting, request.value) if setting else request.value

    document = set_setting(document, instance_id, key, value, catalog)
    await store.save(document)
    return document


@router.get("/templates/{template_id}/render", response_model=RenderResult)
async def render_stored_template(
    template_id: str,
    store: TemplateStore = Depends(get_store),
    catalog: ComponentCatalog = Depends(get_catalog),
) -> RenderResult:
    """Render a stored template."""
    return render_template(await load_template(store, template_id), catalog)


@router.get("/templates/{template_id}/export")
async def export_stored_template(
    template_id: str,
    store: TemplateStore = Depends(get_store),
    catalog: ComponentCatalog = Depends(get_catalog),
) -> Response:
    """Download a stored template as an HTML file."""
    result = export_template(await load_template(store, template_id), catalog)
    return Response(
        content=result.html,
        media_type="text/html",
        headers={
            "Content-Disposition": f'attachment; filename="{result.file_name}"',
            "X-Render-Warnings": str(len(result.warnings)),
        },
    )
