"""
Template Renderer
=================

Render a template document against a component catalog into static HTML.

Rendering is pure and total: malformed input never raises, it degrades to
omitted output plus warnings. Each instance's final settings are the
definition's effective defaults with the instance overrides layered on top,
substituted into the definition's ``{{key}}`` placeholders.
"""

from typing import Any, Dict, List, Optional
from pathlib import Path
import re
import jinja2

from email_builder.config.logging import get_logger
from email_builder.core.catalog import ComponentCatalog
from email_builder.core.documents.normalizer import DocumentInput, normalize_document
from email_builder.models.schemas import (
    ComponentDefinition,
    ComponentSetting,
    RenderResult,
    TemplateInstance,
)

logger = get_logger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"{{\s*([A-Za-z0-9_-]+)\s*}}")

INTEGRAL_FLOAT_LIMIT = 1e21

HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
)

_environment = jinja2.Environment(
    loader=jinja2.FileSystemLoader(str(Path(__file__).parent / "templates")),
    autoescape=jinja2.select_autoescape(["html", "xml"]),
)


def escape_html(text: str) -> str:
    """Escape HTML special characters."""
    for character, entity in HTML_ESCAPES:
        text = text.replace(character, entity)
    return text


def stringify_value(value: Any) -> str:
    """
    String form of a setting value as it appears in rendered HTML.

    Booleans render as ``true``/``false`` and integral floats without a
    fractional part, so values read back from JSON render the same way.
    Magnitudes from 1e21 up keep exponent notation (``1e+21``).
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer() and abs(value) < INTEGRAL_FLOAT_LIMIT:
        return str(int(value))
    return str(value)


def format_setting_value(value: Any, setting: Optional[ComponentSetting]) -> str:
    """
    Placeholder replacement for one value.

    Only free-text settings are escaped; every other kind comes from a
    constrained input and is inserted verbatim.
    """
    if value is None:
        return ""
    text = stringify_value(value)
    if setting is not None and setting.type.escapes_html:
        return escape_html(text)
    return text


def find_placeholders(template: str) -> List[str]:
    """Distinct placeholder keys of a template, in first-occurrence order."""
    return list(dict.fromkeys(PLACEHOLDER_PATTERN.findall(template)))


class TemplateRenderer:
    """Render documents against one component catalog."""

    def __init__(self, catalog: ComponentCatalog) -> None:
        self.catalog = catalog
        self.logger: Any = logger.bind(component="renderer")  # structlog.BoundLoggerBase

    def render(self, document: DocumentInput) -> RenderResult:
        """
        Render a document to HTML.

        Args:
            document: TemplateDocument or raw (canonical or legacy) document data

        Returns:
            RenderResult with the complete HTML document and warnings in discovery order
        """
        doc = normalize_document(document)
        warnings: List[str] = []
        fragments: List[str] = []

        for index, instance in enumerate(doc.instances):
            fragment = self._render_instance(index, instance, warnings)
            if fragment is not None:
                fragments.append(fragment)

        html = _environment.get_template("document.html").render(body="".join(fragments))

        self.logger.debug(
            "Template rendered",
            document_id=doc.id,
            instances=len(doc.instances),
            fragments=len(fragments),
            warnings=len(warnings),
        )
        return RenderResult(html=html, warnings=warnings)

    def _render_instance(
        self, index: int, instance: TemplateInstance, warnings: List[str]
    ) -> Optional[str]:
        """
        Render one instance, appending its warnings.

        Returns:
            HTML fragment, or None when the instance contributes no output
        """
        component_id = instance.component_id
        if not component_id.strip():
            warnings.append(f"Instance at index {index} is missing componentId.")
            return None

        definition = self.catalog.get(component_id)
        if definition is None:
            # Component types removed from the catalog are tolerated silently
            return None

        setting_map = definition.setting_map()

        for key in instance.overrides:
            if key not in setting_map:
                warnings.append(
                    f'Instance for component "{component_id}" has override "{key}" '
                    "with no matching setting key."
                )

        final_settings = definition.effective_defaults()
        final_settings.update(instance.overrides)

        return self._substitute(definition, final_settings, setting_map, warnings)

    def _substitute(
        self,
        definition: ComponentDefinition,
        final_settings: Dict[str, Any],
        setting_map: Dict[str, ComponentSetting],
        warnings: List[str],
    ) -> str:
        """Replace every placeholder of the definition's template."""
        for key in find_placeholders(definition.template):
            if key not in setting_map:
                warnings.append(
                    f'Component "{definition.id}" contains placeholder "{{{{{key}}}}}" '
                    "with no matching setting key."
                )

        def replace(match: "re.Match[str]") -> str:
            key = match.group(1)
            return format_setting_value(final_settings.get(key), setting_map.get(key))

        return PLACEHOLDER_PATTERN.sub(replace, definition.template)


def render_template(document: DocumentInput, catalog: ComponentCatalog) -> RenderResult:
    """
    Render a document against a catalog.

    Args:
        document: TemplateDocument or raw (canonical or legacy) document data
        catalog: Component catalog

    Returns:
        RenderResult with HTML and warnings
    """
    return TemplateRenderer(catalog).render(document)
