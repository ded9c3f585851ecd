"""
API Dependencies
================

FastAPI dependency providers for the catalog and the template store.
Tests replace them through ``app.dependency_overrides``.
"""

from email_builder.core.catalog import ComponentCatalog, get_default_catalog
from email_builder.core.storage import TemplateStore, get_template_store


def get_catalog() -> ComponentCatalog:
    return get_default_catalog()


def get_store() -> TemplateStore:
    return get_template_store()
