"""
Test Configuration
==================

Pytest configuration with fixtures shared by unit and integration tests.
Provides catalogs, in-memory template stores and a FastAPI test client.
"""

import os

os.environ.setdefault("EMAIL_BUILDER_ENVIRONMENT", "testing")
os.environ.setdefault("EMAIL_BUILDER_STORAGE_BACKEND", "memory")
os.environ.setdefault("EMAIL_BUILDER_LOG_LEVEL", "DEBUG")

import itertools
from datetime import datetime, timedelta, timezone
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient

from email_builder.api.dependencies import get_catalog, get_store
from email_builder.api.main import create_app
from email_builder.core.catalog import ComponentCatalog, get_default_catalog
from email_builder.core.storage import KeyValueTemplateStore, MemoryKeyValueBackend

from tests.utils.data_generators import CatalogDataGenerator


@pytest.fixture
def catalog() -> ComponentCatalog:
    """Built-in component catalog."""
    return get_default_catalog()


@pytest.fixture
def text_catalog() -> ComponentCatalog:
    """Catalog with a single `<p>{{text}}</p>` component defaulting to "Hello"."""
    return CatalogDataGenerator.generate_text_catalog()


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock advancing one minute per call from a fixed instant."""
    start = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
    ticks = itertools.count()
    return lambda: start + timedelta(minutes=next(ticks))


@pytest.fixture
def memory_backend() -> MemoryKeyValueBackend:
    return MemoryKeyValueBackend()


@pytest.fixture
def store(
    memory_backend: MemoryKeyValueBackend, fixed_clock: Callable[[], datetime]
) -> KeyValueTemplateStore:
    """Template store over an empty in-memory backend."""
    return KeyValueTemplateStore(memory_backend, key_prefix="oeb", clock=fixed_clock)


@pytest.fixture
def client(
    store: KeyValueTemplateStore, catalog: ComponentCatalog
) -> Generator[TestClient, None, None]:
    """FastAPI test client bound to the test store and catalog."""
    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_catalog] = lambda: catalog
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
