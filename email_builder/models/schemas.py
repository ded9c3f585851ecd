"""
Pydantic Models and Schemas
===========================

Core data models for component definitions, template documents, render results
and API requests/responses.

Field names follow the persisted (camelCase) shape through aliases; models accept
both the alias and the Python attribute name.
"""

from typing import Optional, List, Dict, Any, Union, Literal
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.types import StrictStr, StrictInt, StrictFloat, StrictBool


SettingValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr]


# Enums
class SettingKind(str, Enum):
    """Value kinds a component setting can hold."""

    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    COLOR = "color"
    URL = "url"
    CHOICE = "select"
    IMAGE = "image"

    @property
    def escapes_html(self) -> bool:
        """Only free text comes from an unconstrained input surface."""
        return self is SettingKind.TEXT


# Catalog Models
class SettingOption(BaseModel):
    """One selectable value of a choice setting."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(..., description="Display label")
    value: str = Field(..., description="Stored value")


class ComponentSetting(BaseModel):
    """Descriptor of a single configurable setting of a component."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str = Field(..., min_length=1, description="Setting key used in placeholders")
    label: str = Field(..., description="Display label")
    type: SettingKind = Field(..., description="Value kind")
    default_value: Optional[SettingValue] = Field(
        None, alias="defaultValue", description="Setting-level default"
    )
    options: Optional[List[SettingOption]] = Field(None, description="Choices for select settings")


class ComponentDefinition(BaseModel):
    """Static description of a placeable block type."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, description="Stable component identifier")
    name: str = Field("", description="Display name")
    description: str = Field("", description="Short description for component pickers")
    template: str = Field("", description="HTML fragment with {{key}} placeholders")
    settings: List[ComponentSetting] = Field(default_factory=list, description="Settings schema")
    defaults: Dict[str, Any] = Field(default_factory=dict, description="Baseline values")

    @model_validator(mode="after")
    def validate_unique_setting_keys(self) -> "ComponentDefinition":
        """Setting keys must be unique within one definition."""
        seen: set[str] = set()
        for setting in self.settings:
            if setting.key in seen:
                raise ValueError(f"Duplicate setting key '{setting.key}' in component '{self.id}'")
            seen.add(setting.key)
        return self

    def setting_map(self) -> Dict[str, ComponentSetting]:
        """Map each setting key to its descriptor."""
        return {setting.key: setting for setting in self.settings}

    def effective_defaults(self) -> Dict[str, Any]:
        """
        Compute the value used for every key an instance does not override.

        ``defaults`` wins over a setting's own ``defaultValue``, even when its
        entry is null; keys with neither are absent from the result.
        """
        output: Dict[str, Any] = dict(self.defaults)
        for setting in self.settings:
            if setting.key not in output and setting.default_value is not None:
                output[setting.key] = setting.default_value
        return output


# Document Models
class TemplateInstance(BaseModel):
    """One placed component within a document."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field("", description="Instance identifier, unique within the document")
    component_id: str = Field("", alias="componentId", description="Catalog component id")
    overrides: Dict[str, Any] = Field(
        default_factory=dict, description="Values differing from the effective defaults"
    )


class TemplateDocument(BaseModel):
    """The artifact a user edits: an ordered list of component instances."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field("", description="Document identifier")
    name: str = Field("", description="Display name")
    instances: List[TemplateInstance] = Field(
        default_factory=list, description="Instances in render order"
    )

    def find_instance(self, instance_id: str) -> Optional[TemplateInstance]:
        """Return the instance with the given id, if any."""
        for instance in self.instances:
            if instance.id == instance_id:
                return instance
        return None

    def to_storage(self) -> Dict[str, Any]:
        """Canonical persisted shape."""
        return self.model_dump(mode="json", by_alias=True)


class TemplateListItem(BaseModel):
    """Summary entry of the template store index."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Document identifier")
    name: str = Field(..., description="Document name at save time")
    updated_at: str = Field(..., alias="updatedAt", description="ISO-8601 save timestamp")

    def updated_at_datetime(self) -> datetime:
        """Parsed save timestamp; unparsable values sort last."""
        try:
            parsed = datetime.fromisoformat(self.updated_at.replace("Z", "+00:00"))
        except ValueError:
            return datetime.min.replace(tzinfo=timezone.utc)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed


# Rendering Results
class RenderResult(BaseModel):
    """Result of rendering a document."""

    html: str = Field(..., description="Complete HTML document")
    warnings: List[str] = Field(default_factory=list, description="Non-fatal diagnostics")


class ExportResult(BaseModel):
    """Rendered document ready to be saved as a file."""

    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(..., alias="fileName", description="Suggested .html file name")
    html: str = Field(..., description="Complete HTML document")
    warnings: List[str] = Field(default_factory=list, description="Non-fatal diagnostics")


# API Request Models
class CreateTemplateRequest(BaseModel):
    """Request model for creating a template."""

    name: Optional[str] = Field(None, description="Template name")


class RenameTemplateRequest(BaseModel):
    """Request model for renaming a template."""

    name: str = Field(..., description="New template name")


class AddInstanceRequest(BaseModel):
    """Request model for appending a component instance."""

    model_config = ConfigDict(populate_by_name=True)

    component_id: str = Field(..., min_length=1, alias="componentId", description="Component id")


class SetSettingRequest(BaseModel):
    """Request model for changing one setting of an instance."""

    value: Any = Field(None, description="New setting value")


# Health Check Models
class HealthStatus(BaseModel):
    """Health check status."""

    status: Literal["healthy", "unhealthy", "degraded"] = Field(..., description="Overall status")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), description="Check timestamp"
    )
    version: str = Field(..., description="Application version")
    storage_backend: str = Field(..., description="Configured template store backend")
    redis: bool = Field(..., description="Redis connectivity")
    components: int = Field(0, ge=0, description="Number of catalog components")


# Error Models
class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: Any = Field(..., description="Error message")
    error_code: Optional[str] = Field(None, description="Error code")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), description="Error timestamp"
    )
    request_id: Optional[str] = Field(None, description="Request identifier for tracking")
