"""
Document Editor
===============

Pure editing operations on template documents. Every operation returns a new
TemplateDocument; instances and override maps are replaced, never mutated.
"""

from typing import Any, Dict, Optional, Tuple
import uuid

from email_builder.config.logging import get_logger
from email_builder.config.settings import get_settings
from email_builder.core.catalog import ComponentCatalog
from email_builder.models.schemas import (
    ComponentSetting,
    SettingKind,
    TemplateDocument,
    TemplateInstance,
)

logger = get_logger(__name__)

TRUTHY_STRINGS = frozenset({"true", "1", "yes", "on"})


def generate_id() -> str:
    """Generate a new document or instance identifier."""
    return str(uuid.uuid4())


def create_document(name: Optional[str] = None, document_id: Optional[str] = None) -> TemplateDocument:
    """
    Create an empty document.

    Args:
        name: Display name; blank names fall back to the configured default
        document_id: Identifier to use instead of a generated one

    Returns:
        New TemplateDocument without instances
    """
    cleaned = (name or "").strip()
    return TemplateDocument(
        id=document_id or generate_id(),
        name=cleaned or get_settings().default_template_name,
        instances=[],
    )


def rename_document(document: TemplateDocument, name: str) -> TemplateDocument:
    return document.model_copy(update={"name": name})


def add_instance(
    document: TemplateDocument, component_id: str, instance_id: Optional[str] = None
) -> Tuple[TemplateDocument, TemplateInstance]:
    """
    Append a new instance of a component with no overrides.

    Args:
        document: Document to extend
        component_id: Catalog component id
        instance_id: Identifier to use instead of a generated one

    Returns:
        Tuple of (new document, appended instance)
    """
    instance = TemplateInstance(
        id=instance_id or generate_id(), component_id=component_id, overrides={}
    )
    updated = document.model_copy(update={"instances": [*document.instances, instance]})
    logger.debug(
        "Instance added", document_id=document.id, instance_id=instance.id, component_id=component_id
    )
    return updated, instance


def values_equal(left: Any, right: Any) -> bool:
    """
    Strict value equality: booleans never equal numbers, strings never equal numbers.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    return type(left) is type(right) and left == right


def set_setting(
    document: TemplateDocument,
    instance_id: str,
    key: str,
    value: Any,
    catalog: ComponentCatalog,
) -> TemplateDocument:
    """
    Change one setting of an instance, keeping overrides sparse.

    A value equal to the effective default removes the override instead of
    storing it. Unknown instances or components leave the document unchanged.

    Args:
        document: Document to edit
        instance_id: Target instance id
        key: Setting key
        value: New value
        catalog: Catalog used to resolve effective defaults

    Returns:
        New TemplateDocument (or the same one when nothing applies)
    """
    index = next(
        (i for i, instance in enumerate(document.instances) if instance.id == instance_id), None
    )
    if index is None:
        logger.debug("Setting change for unknown instance ignored", instance_id=instance_id)
        return document

    instance = document.instances[index]
    definition = catalog.get(instance.component_id)
    if definition is None:
        logger.debug(
            "Setting change for unknown component ignored",
            instance_id=instance_id,
            component_id=instance.component_id,
        )
        return document

    overrides: Dict[str, Any] = dict(instance.overrides)
    defaults = definition.effective_defaults()
    if values_equal(value, defaults.get(key)):
        overrides.pop(key, None)
    else:
        overrides[key] = value

    instances = list(document.instances)
    instances[index] = instance.model_copy(update={"overrides": overrides})
    return document.model_copy(update={"instances": instances})


def coerce_setting_value(setting: ComponentSetting, value: Any) -> Any:
    """
    Convert raw input (e.g. form or query strings) to the value kind of a setting.

    Args:
        setting: Setting descriptor
        value: Raw value

    Returns:
        Value of the setting's kind; unparsable numbers become 0
    """
    if setting.type is SettingKind.BOOLEAN:
        if isinstance(value, str):
            return value.strip().lower() in TRUTHY_STRINGS
        return bool(value)

    if setting.type is SettingKind.NUMBER:
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, (int, float)):
            return value
        text = str(value).strip() if value is not None else ""
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return 0
        # NaN and infinities are not usable in CSS
        if number != number or number in (float("inf"), float("-inf")):
            return 0
        return number

    return "" if value is None else str(value)
