"""
Component Catalog
=================

Closed, ordered set of component definitions available to the editor and the
renderer. A catalog is built once, never mutated, and passed explicitly to the
code that needs it.
"""

from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union
from pathlib import Path
import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from email_builder.config.logging import get_logger
from email_builder.config.settings import get_settings
from email_builder.models.schemas import ComponentDefinition

logger = get_logger(__name__)

BUILTIN_CATALOG_PATH = Path(__file__).parent / "components.yaml"


class CatalogError(Exception):
    """Exception raised when a catalog cannot be built or loaded."""

    pass


class ComponentCatalog:
    """Immutable, ordered collection of component definitions."""

    def __init__(self, definitions: Iterable[ComponentDefinition]) -> None:
        self._definitions: Tuple[ComponentDefinition, ...] = tuple(definitions)
        self._by_id: Dict[str, ComponentDefinition] = {}
        for definition in self._definitions:
            if definition.id in self._by_id:
                raise CatalogError(f"Duplicate component id: {definition.id}")
            self._by_id[definition.id] = definition

    def list(self) -> List[ComponentDefinition]:
        """Return all definitions in display order."""
        return list(self._definitions)

    def get(self, component_id: str) -> Optional[ComponentDefinition]:
        """
        Look up a definition by id.

        Args:
            component_id: Component identifier

        Returns:
            The definition, or None when the catalog has no such component
        """
        return self._by_id.get(component_id)

    def __contains__(self, component_id: object) -> bool:
        return component_id in self._by_id

    def __iter__(self) -> Iterator[ComponentDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    @classmethod
    def from_data(cls, data: Any) -> "ComponentCatalog":
        """
        Build a catalog from raw data.

        Accepts either a list of definitions or a mapping with a ``components`` list.

        Raises:
            CatalogError: If the data does not describe a valid catalog
        """
        if isinstance(data, dict):
            data = data.get("components")
        if not isinstance(data, list):
            raise CatalogError("Catalog data must contain a list of components")

        definitions: List[ComponentDefinition] = []
        for index, entry in enumerate(data):
            try:
                definitions.append(ComponentDefinition.model_validate(entry))
            except ValidationError as e:
                raise CatalogError(f"Invalid component at index {index}: {e}") from e
        return cls(definitions)


def load_catalog(path: Union[str, Path]) -> ComponentCatalog:
    """
    Load a component catalog from a YAML file.

    Args:
        path: Path to the YAML catalog file

    Returns:
        ComponentCatalog instance

    Raises:
        CatalogError: If the file cannot be read or is not a valid catalog
    """
    catalog_path = Path(path)
    try:
        with catalog_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load component catalog", path=str(catalog_path), error=str(e))
        raise CatalogError(f"Cannot load catalog {catalog_path}: {e}") from e

    catalog = ComponentCatalog.from_data(data)
    logger.info("Component catalog loaded", path=str(catalog_path), components=len(catalog))
    return catalog


# Global catalog instance - loaded when first needed
_default_catalog: Optional[ComponentCatalog] = None


def get_default_catalog() -> ComponentCatalog:
    """Get the process-wide catalog (built-in unless overridden in settings)."""
    global _default_catalog
    if _default_catalog is None:
        path = get_settings().catalog_path or BUILTIN_CATALOG_PATH
        _default_catalog = load_catalog(path)
    return _default_catalog
