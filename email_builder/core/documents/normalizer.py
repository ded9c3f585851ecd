"""
Document Normalizer
===================

Single input boundary for template documents. Older documents store the
instance list under ``root`` and name instance fields ``componentType`` and
``props``; everything downstream of this module only sees the canonical
``TemplateDocument`` model.

Two entry points:
- normalize_document: lenient, total conversion used before rendering
- DocumentShapeValidator: strict Cerberus shape check used on persisted data
"""

from typing import Any, Dict, List, Mapping, Optional, Union
from cerberus import Validator  # type: ignore[import-untyped]

from email_builder.config.logging import get_logger
from email_builder.models.schemas import TemplateDocument, TemplateInstance

logger = get_logger(__name__)

DocumentInput = Union[TemplateDocument, Mapping[str, Any]]


def _first_present(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _string_or_empty(value: Any) -> str:
    return value if isinstance(value, str) else ""


def normalize_component_id(value: Any) -> str:
    """Return the component reference, or an empty string when it is unusable."""
    if not isinstance(value, str) or not value.strip():
        return ""
    return value


def normalize_instance(data: Mapping[str, Any], index: int = 0) -> TemplateInstance:
    """
    Convert canonical or legacy instance data to a TemplateInstance.

    Args:
        data: Raw instance mapping
        index: Position in the document, used for logging only

    Returns:
        Canonical TemplateInstance
    """
    overrides = _first_present(data, "overrides", "props")
    if not isinstance(overrides, Mapping):
        overrides = {}

    if data.get("children"):
        logger.debug("Dropping nested children of legacy instance", index=index)

    return TemplateInstance(
        id=_string_or_empty(data.get("id")),
        component_id=normalize_component_id(_first_present(data, "componentId", "componentType")),
        overrides={str(key): value for key, value in overrides.items()},
    )


def normalize_document(data: DocumentInput) -> TemplateDocument:
    """
    Convert canonical or legacy document data to a TemplateDocument.

    Never raises for malformed values: unusable instance entries are dropped,
    unusable fields fall back to empty values.

    Args:
        data: TemplateDocument or raw document mapping

    Returns:
        Canonical TemplateDocument
    """
    if isinstance(data, TemplateDocument):
        return data
    if not isinstance(data, Mapping):
        logger.debug("Normalizing non-mapping document data", data_type=type(data).__name__)
        return TemplateDocument()

    raw_instances = data.get("instances")
    if not isinstance(raw_instances, list):
        raw_instances = data.get("root")
    if not isinstance(raw_instances, list):
        raw_instances = []

    instances: List[TemplateInstance] = [
        normalize_instance(entry, index)
        for index, entry in enumerate(raw_instances)
        if isinstance(entry, Mapping)
    ]

    return TemplateDocument(
        id=_string_or_empty(data.get("id")),
        name=_string_or_empty(data.get("name")),
        instances=instances,
    )


class DocumentShapeValidator:
    """Strict shape validation of persisted documents using Cerberus schemas."""

    def __init__(self) -> None:
        self._setup_schemas()

    def _setup_schemas(self) -> None:
        """Setup validation schemas."""
        self.instance_schema: Dict[str, Any] = {
            "id": {"type": "string", "required": True},
            "componentId": {"type": "string", "required": True},
            "overrides": {"type": "dict", "required": True},
        }

        legacy_instance_base: Dict[str, Any] = {
            "id": {"type": "string", "required": True},
            "componentType": {"type": "string", "required": True},
            "props": {"type": "dict", "required": True},
        }
        # Nested children are only checked one level deep; they are never rendered
        self.legacy_instance_schema = legacy_instance_base.copy()
        self.legacy_instance_schema["children"] = {
            "type": "list",
            "schema": {"type": "dict", "schema": legacy_instance_base},
        }

        self.document_schema: Dict[str, Any] = {
            "id": {"type": "string", "required": True},
            "name": {"type": "string", "required": True},
            "instances": {
                "type": "list",
                "required": True,
                "schema": {"type": "dict", "schema": self.instance_schema},
            },
        }

        self.legacy_document_schema: Dict[str, Any] = {
            "id": {"type": "string", "required": True},
            "name": {"type": "string", "required": True},
            "root": {
                "type": "list",
                "required": True,
                "schema": {"type": "dict", "schema": self.legacy_instance_schema},
            },
        }

    def _validate(self, schema: Dict[str, Any], data: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        validator = Validator(schema)  # type: ignore[misc]
        validator.allow_unknown = True  # type: ignore[attr-defined]
        if validator.validate(dict(data)):  # type: ignore[misc]
            return None
        return validator.errors  # type: ignore[attr-defined,no-any-return]

    def validate(self, data: Any) -> List[str]:
        """
        Validate persisted document data.

        Args:
            data: Parsed JSON data

        Returns:
            Formatted errors; empty when the data matches the canonical or legacy shape
        """
        if not isinstance(data, Mapping):
            return [f"Document must be an object, got {type(data).__name__}"]

        canonical_errors = self._validate(self.document_schema, data)
        if canonical_errors is None:
            return []
        if self._validate(self.legacy_document_schema, data) is None:
            return []
        return self._format_validation_errors(canonical_errors)

    def is_valid(self, data: Any) -> bool:
        return not self.validate(data)

    def _format_validation_errors(self, errors: Any, path: str = "") -> List[str]:
        """Format Cerberus validation errors into readable messages."""
        formatted_errors: List[str] = []

        for field, error_info in errors.items():
            current_path = f"{path}.{field}" if path else str(field)

            if isinstance(error_info, list):
                for error in error_info:
                    if isinstance(error, dict):
                        formatted_errors.extend(self._format_validation_errors(error, current_path))
                    else:
                        formatted_errors.append(f"{current_path}: {error}")
            elif isinstance(error_info, dict):
                formatted_errors.extend(self._format_validation_errors(error_info, current_path))

        return formatted_errors
