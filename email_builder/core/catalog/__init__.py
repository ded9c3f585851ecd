"""
Component Catalog Module
========================

Immutable, ordered catalog of component definitions.

Components:
- catalog: ComponentCatalog, YAML loading and the built-in catalog
- components.yaml: Built-in text, button, divider and image components
"""

from .catalog import CatalogError, ComponentCatalog, get_default_catalog, load_catalog

__all__ = ["CatalogError", "ComponentCatalog", "get_default_catalog", "load_catalog"]
